import os
from typing import List
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _parse_origins(value: str) -> List[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


class Settings:
    def __init__(self):
        self.database_url: str = os.getenv("DATABASE_URL", "")
        self.db_sslmode: str = os.getenv("DB_SSLMODE", "prefer")
        self.debug: bool = os.getenv("DEBUG", "False").lower() == "true"
        self.environment: str = os.getenv("ENVIRONMENT", "development").lower()
        self.auto_create_tables: bool = os.getenv("AUTO_CREATE_TABLES", "False").lower() == "true"

        self.frontend_url: str = os.getenv("FRONTEND_URL", "http://localhost:3000")
        self.cors_origins: List[str] = _parse_origins(
            os.getenv("CORS_ORIGINS", self.frontend_url)
        ) or ["http://localhost:3000"]

        # JWT
        # Set JWT_SECRET_KEY in production. The fallback is only for local development.
        self.jwt_secret_key: str = os.getenv("JWT_SECRET_KEY", "fallback-secret")
        self.jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
        self.jwt_expire_minutes: int = int(os.getenv("JWT_EXPIRE_MINUTES", 60 * 24 * 7))  # 7 days by default

        # Uploads
        self.upload_dir: str = os.getenv("UPLOAD_DIR", "uploads")
        self.max_file_size: int = int(os.getenv("MAX_FILE_SIZE", 10 * 1024 * 1024))

        # Upper bound for a single allocation transaction (PostgreSQL statement_timeout)
        self.allocation_timeout_ms: int = int(os.getenv("ALLOCATION_TIMEOUT_MS", 5000))

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


settings = Settings()

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, declarative_base
from core.config import settings

DATABASE_URL = settings.database_url

if not DATABASE_URL:
    raise ValueError("DATABASE_URL is not set (check your .env file)")


def build_engine(url: str):
    """Engine with connection pooling for PostgreSQL, plain engine for SQLite."""
    if url.startswith("sqlite"):
        return create_engine(
            url,
            echo=settings.debug,
            connect_args={"check_same_thread": False},
        )
    return create_engine(
        url,
        echo=settings.debug,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
        pool_recycle=3600,
        connect_args={
            "sslmode": settings.db_sslmode,
            "connect_timeout": 10
        }
    )


engine = build_engine(DATABASE_URL)

Base = declarative_base()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def test_connection():
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
            print("✅ Database connection OK")
    except Exception as e:
        print("❌ Database connection failed:")
        print(e)


if __name__ == "__main__":
    test_connection()

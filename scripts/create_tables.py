"""
Create all database tables directly (local development only, production uses alembic)
Run with: python3 -m scripts.create_tables
"""
from sqlalchemy import inspect

from db import Base, engine

# Import all models so they are registered with Base.metadata
from models.user import User  # noqa: F401
from models.tournament import Tournament  # noqa: F401
from models.pond import Pond  # noqa: F401
from models.zone import Zone  # noqa: F401
from models.area import Area  # noqa: F401
from models.registration import Registration  # noqa: F401
from models.area_selection import AreaSelection  # noqa: F401
from models.catch import Catch  # noqa: F401

if __name__ == "__main__":
    print("🔨 Creating all tables...")
    Base.metadata.create_all(bind=engine)
    print("✅ All tables created successfully!")

    tables = inspect(engine).get_table_names()
    print(f"\n📋 Tables ({len(tables)}):")
    for table in sorted(tables):
        print(f"   - {table}")

from logging.config import fileConfig

from alembic import context

from db import Base, engine
from core.config import settings

# Register every model on Base.metadata
from models.user import User  # noqa: F401
from models.tournament import Tournament  # noqa: F401
from models.pond import Pond  # noqa: F401
from models.zone import Zone  # noqa: F401
from models.area import Area  # noqa: F401
from models.registration import Registration  # noqa: F401
from models.area_selection import AreaSelection  # noqa: F401
from models.catch import Catch  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL to stdout without a database connection"""
    context.configure(
        url=settings.database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

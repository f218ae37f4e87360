"""
Alembic environment - runs migrations against ``DATABASE_URL``.
"""
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from clinic_api.config import settings
from clinic_api.database import Base
# Import all models so autogenerate sees every table
from clinic_api.auth.models import User, PasswordResetToken  # noqa: F401
from clinic_api.services.models import Service  # noqa: F401
from clinic_api.appointments.models import Appointment  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", settings.database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL to the script output instead of a live connection."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations on a live connection."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context

from workout_engine.config import SQLALCHEMY_DATABASE_URL
from workout_engine.database import Base
import workout_engine.models  # noqa: F401  registers exercises, blueprints and generation requests

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# `alembic -x db_url=...` targets another database than the configured one
db_url = context.get_x_argument(as_dictionary=True).get("db_url", SQLALCHEMY_DATABASE_URL)
config.set_main_option("sqlalchemy.url", db_url)

# SQLite cannot ALTER most columns in place
render_as_batch = db_url.startswith("sqlite")


def run_migrations_offline() -> None:
    """Emit the migration SQL without connecting."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=render_as_batch,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=render_as_batch,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

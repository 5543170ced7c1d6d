import logging
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from workout_engine.config import SQLALCHEMY_DATABASE_URL

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create every table known to the models (tests and local development)."""
    import workout_engine.models  # noqa: F401  registers the models on Base

    Base.metadata.create_all(bind=bind or engine)


def run_migrations(ini_path: str = None):
    """Apply pending Alembic migrations up to head."""
    from alembic import command
    from alembic.config import Config

    ini_path = ini_path or str(Path(__file__).resolve().parent.parent / "alembic.ini")
    alembic_cfg = Config(ini_path)
    command.upgrade(alembic_cfg, "head")
    logger.info("[Alembic] Migrations applied successfully")

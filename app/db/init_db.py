"""
Table creation and plan seeding for local and test setups.

Production databases are managed through Alembic (see app.db.migrate).
"""
import logging

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.db.base import Base
import app.db.models  # noqa: F401  (registers models on Base.metadata)
from app.services.plan_catalog import seed_default_plans

logger = logging.getLogger(__name__)


def create_tables(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")


def seed_plans(session_factory: sessionmaker) -> int:
    db = session_factory()
    try:
        return seed_default_plans(db)
    finally:
        db.close()

"""
Database engine and session factory

PostgreSQL in production. SQLite URLs are accepted for local runs;
row locks (SELECT ... FOR UPDATE) are then a no-op.
"""
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from rightsdesk.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def _engine_options(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
    }


engine = create_engine(
    settings.database_url,
    echo=settings.debug,
    **_engine_options(settings.database_url),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """
    Request-scoped session dependency.

    Services commit their own units of work; the session is only closed here.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create missing tables for every registered model"""
    import rightsdesk.models  # noqa
    Base.metadata.create_all(bind=engine)
    logger.info(f"Database schema ready on {engine.dialect.name}")

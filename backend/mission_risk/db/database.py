"""
Database setup with SQLAlchemy.

Stores assessment history, labeled training samples and the risk factor
registry. The default URL is an in-memory SQLite database shared by all
sessions of the process.
"""
from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from mission_risk.config import get_settings
import logging

logger = logging.getLogger(__name__)

settings = get_settings()


def _engine_kwargs(url: str) -> dict:
    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}  # Needed for SQLite
        if url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise each session gets its own empty database
            kwargs["poolclass"] = StaticPool
    return kwargs


engine = create_engine(settings.database_url, **_engine_kwargs(settings.database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Session:
    """
    Dependency function to get database session.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Initialize database tables."""
    try:
        from mission_risk.models import assessment, risk_factor, training_sample  # noqa: F401

        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")

        tables = inspect(engine).get_table_names()
        logger.info(f"Database tables: {tables}")

    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


def reset_db():
    """Drop and recreate all tables (use with caution!)."""
    try:
        from mission_risk.models import assessment, risk_factor, training_sample  # noqa: F401

        Base.metadata.drop_all(bind=engine)
        logger.info("Database tables dropped")

        Base.metadata.create_all(bind=engine)
        logger.info("Database tables recreated")

    except Exception as e:
        logger.error(f"Failed to reset database: {e}")
        raise

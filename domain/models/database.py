"""
Database configuration and session management.
"""

import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from app.config import settings

logger = logging.getLogger("calorietracker.database")

# Create SQLAlchemy Base
Base = declarative_base()


def _engine_options(url: str) -> dict:
    options = {"echo": settings.db_echo, "future": True}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        # In-memory SQLite must share a single connection to keep its tables
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
    return options


# Create engine
engine = create_engine(settings.database_url, **_engine_options(settings.database_url))

# Create session factory
SessionLocal = sessionmaker(bind=engine, future=True)


def init_database():
    """Initialize database schema"""
    with engine.begin() as conn:
        Base.metadata.create_all(bind=conn)
    logger.info("Database tables created successfully")


def get_db_session():
    """Get database session (for FastAPI dependency injection)"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

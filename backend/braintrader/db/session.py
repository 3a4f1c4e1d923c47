"""
Database session manager for Braintrader

This module creates and manages SQLAlchemy database connections and sessions,
plus the Redis client used for token revocation and change notifications.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
import redis

from braintrader.core.config import settings


def build_engine(database_uri: str, echo: bool = False):
    """
    Create an engine for the given URI

    In-memory SQLite needs a single shared connection, otherwise every
    session would see its own empty database.
    """
    if database_uri.startswith("sqlite"):
        return create_engine(
            database_uri,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        )
    return create_engine(database_uri, pool_pre_ping=True, echo=echo)


# Create SQLAlchemy engine
engine = build_engine(settings.sqlalchemy_database_uri, echo=settings.debug)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Redis connection (connects lazily on first command)
redis_client = redis.Redis(
    host=settings.redis_host,
    port=settings.redis_port,
    db=settings.redis_db,
    password=settings.redis_password,
    decode_responses=True
)


def get_db():
    """
    Get a database session

    Yields:
        Session: A SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

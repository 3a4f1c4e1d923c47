"""
Configuration for pytest

This module contains fixtures and configuration for pytest.
"""

import os

# Settings are read at import time; these must be set before the app loads.
os.environ["SECRET_KEY"] = "test-secret-key-for-braintrader"
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["LOG_TO_FILE"] = "false"
os.environ["REDIS_ENABLED"] = "false"
os.environ["PUBLISH_CHANGES"] = "false"

from typing import Dict, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from braintrader.api.deps import get_identity_registry, get_record_feed, get_token_denylist
from braintrader.db.base import Base
from braintrader.db.session import SessionLocal, engine
from braintrader.main import app
from braintrader.models.user import User
from braintrader.services.auth import MemoryTokenDenylist
from braintrader.services.record_feed import RecordFeed
from braintrader.services.session import IdentityRegistry

from tests.factories import create_user, login


@pytest.fixture(scope="function")
def db_engine():
    """Create a clean database for each test"""
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db(db_engine) -> Generator[Session, None, None]:
    """Get a database session for testing"""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def feed(db_engine) -> RecordFeed:
    """A record feed bound to the test database"""
    return RecordFeed(SessionLocal)


@pytest.fixture(scope="function")
def denylist() -> MemoryTokenDenylist:
    return MemoryTokenDenylist()


@pytest.fixture(scope="function")
def identities() -> IdentityRegistry:
    return IdentityRegistry()


@pytest.fixture(scope="function")
def client(feed, denylist, identities) -> Generator[TestClient, None, None]:
    """Get a TestClient for testing"""
    app.dependency_overrides[get_record_feed] = lambda: feed
    app.dependency_overrides[get_token_denylist] = lambda: denylist
    app.dependency_overrides[get_identity_registry] = lambda: identities
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def user(db) -> User:
    return create_user(db)


@pytest.fixture(scope="function")
def token(client, user) -> str:
    return login(client)


@pytest.fixture(scope="function")
def auth_headers(token) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}

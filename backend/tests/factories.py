"""
Test data helpers shared by the test modules
"""

from datetime import date
from types import SimpleNamespace

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from braintrader.analytics.profit import recorded_at_for
from braintrader.models.user import User
from braintrader.repositories.user import UserRepository
from braintrader.schemas.journal import TradeRecordCreate
from braintrader.schemas.user import UserCreate

TEST_EMAIL = "trader@example.com"
TEST_PASSWORD = "s3cret-password"


def create_user(db: Session, email: str = TEST_EMAIL, password: str = TEST_PASSWORD,
                full_name: str = "Test Trader", is_active: bool = True) -> User:
    user = UserRepository(db).create(
        obj_in=UserCreate(email=email, password=password, full_name=full_name)
    )
    if not is_active:
        user.is_active = False
        db.commit()
        db.refresh(user)
    return user


def login(client: TestClient, email: str = TEST_EMAIL, password: str = TEST_PASSWORD) -> str:
    response = client.post("/api/auth/login", data={"username": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["access_token"]


def make_trade(occurred_on: date = None, **overrides) -> TradeRecordCreate:
    """Build a valid trade submission"""
    data = {
        "occurred_on": occurred_on or date.today(),
        "instrument": "XAUUSD",
        "direction": "LONG",
        "order_kind": "MARKET",
        "size": 1,
        "entry_price": 100,
        "exit_price": 110,
        "strategy_label": "Breakout",
        "rationale": "Clean break of the Asian range",
        "followed_rules": True,
        "was_disciplined": True,
        "confidence_rating": 4,
    }
    data.update(overrides)
    return TradeRecordCreate(**data)


def record(profit, recorded_at=0, occurred_on=None, instrument="EURUSD",
           was_disciplined=True, followed_rules=True, confidence_rating=5):
    """Lightweight stand-in for a stored record, for the pure analytics"""
    if occurred_on is None:
        occurred_on = date(1970, 1, 1)
    return SimpleNamespace(
        profit=profit,
        recorded_at=recorded_at,
        occurred_on=occurred_on,
        instrument=instrument,
        was_disciplined=was_disciplined,
        followed_rules=followed_rules,
        confidence_rating=confidence_rating,
    )


def record_on(day: date, profit=0, **kwargs):
    return record(profit, recorded_at=recorded_at_for(day), occurred_on=day, **kwargs)

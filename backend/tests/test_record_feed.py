"""
Tests for the record feed
"""

from datetime import date, timedelta
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from braintrader.core.errors import PermissionDeniedError, StoreUnavailableError
from braintrader.db.session import SessionLocal
from braintrader.services.record_feed import RecordFeed

from tests.factories import create_user, make_trade


def test_subscribe_delivers_current_snapshot(feed, user):
    feed.append(user.id, make_trade())
    received = []

    feed.subscribe(user.id, received.append)

    assert len(received) == 1
    assert len(received[0]) == 1
    assert received[0][0].owner_id == user.id


def test_append_computes_profit_and_timestamp(feed, user):
    created = feed.append(
        user.id, make_trade(date(2024, 3, 1), direction="SHORT", entry_price=100, exit_price=90, size=0.5)
    )

    assert created.id is not None
    assert created.profit == 500.0
    assert created.recorded_at == 1709251200000
    assert created.occurred_on == date(2024, 3, 1)


def test_append_publishes_whole_snapshot_newest_first(feed, user):
    snapshots = []
    feed.subscribe(user.id, snapshots.append)

    today = date.today()
    feed.append(user.id, make_trade(today - timedelta(days=3)))
    feed.append(user.id, make_trade(today))
    feed.append(user.id, make_trade(today - timedelta(days=5)))

    assert len(snapshots) == 4
    latest = snapshots[-1]
    assert [r.occurred_on for r in latest] == [
        today, today - timedelta(days=3), today - timedelta(days=5)
    ]


def test_snapshots_are_scoped_to_owner(feed, db, user):
    other = create_user(db, email="other@example.com")
    mine, theirs = [], []
    feed.subscribe(user.id, mine.append)
    feed.subscribe(other.id, theirs.append)

    feed.append(other.id, make_trade())

    assert len(mine) == 1
    assert len(theirs) == 2
    assert mine[-1] == ()
    assert feed.snapshot(user.id) == ()


def test_unsubscribe_stops_delivery(feed, user):
    received = []
    subscription = feed.subscribe(user.id, received.append)
    assert feed.subscriber_count(user.id) == 1

    subscription.unsubscribe()
    subscription.unsubscribe()
    feed.append(user.id, make_trade())

    assert len(received) == 1
    assert feed.subscriber_count(user.id) == 0
    assert not subscription.active


def test_broken_listener_does_not_block_others(feed, user):
    received = []
    feed.subscribe(user.id, received.append)
    feed.subscribe(user.id, MagicMock(side_effect=RuntimeError("boom")))

    feed.append(user.id, make_trade())

    assert len(received) == 2


def test_inactive_owner_is_denied(feed, db):
    inactive = create_user(db, email="inactive@example.com", is_active=False)

    with pytest.raises(PermissionDeniedError):
        feed.append(inactive.id, make_trade())

    errors = []
    feed.subscribe(inactive.id, MagicMock(), errors.append)
    assert len(errors) == 1
    assert isinstance(errors[0], PermissionDeniedError)


def test_unknown_owner_is_denied(feed, db_engine):
    with pytest.raises(PermissionDeniedError):
        feed.snapshot(9999)


def test_store_failure_maps_to_unavailable():
    session = MagicMock()
    session.__enter__.return_value.query.side_effect = OperationalError("SELECT", {}, Exception("down"))
    broken = RecordFeed(MagicMock(return_value=session))

    with pytest.raises(StoreUnavailableError):
        broken.snapshot(1)

    errors = []
    broken.subscribe(1, MagicMock(), errors.append)
    assert isinstance(errors[0], StoreUnavailableError)


def test_notifier_called_after_append(db, user):
    notifier = MagicMock()
    feed = RecordFeed(SessionLocal, notifier=notifier)

    created = feed.append(user.id, make_trade())

    notifier.notify.assert_called_once_with(user.id, created.id)


def test_custom_multiplier(db, user):
    feed = RecordFeed(SessionLocal, multiplier=10)
    created = feed.append(user.id, make_trade(entry_price=100, exit_price=110, size=1))

    assert created.profit == 100.0

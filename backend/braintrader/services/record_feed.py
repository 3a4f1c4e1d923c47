"""
Record feed for Braintrader

The feed is the store boundary used by sessions and endpoints. It appends
records for an owner and pushes the owner's complete, newest-first list to
every subscriber after each change. Snapshots are always delivered whole;
subscribers replace what they hold rather than patching it.
"""

import logging
import threading
from typing import Callable, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from braintrader.analytics.profit import CONTRACT_MULTIPLIER, calculate_profit, recorded_at_for
from braintrader.core.errors import JournalError, PermissionDeniedError, StoreUnavailableError
from braintrader.repositories.journal import TradeRecordRepository
from braintrader.repositories.user import UserRepository
from braintrader.schemas.journal import TradeRecord, TradeRecordCreate

logger = logging.getLogger(__name__)

Snapshot = Tuple[TradeRecord, ...]
SnapshotCallback = Callable[[Snapshot], None]
ErrorCallback = Callable[[JournalError], None]


class Subscription:
    """Handle returned by :meth:`RecordFeed.subscribe`"""

    def __init__(self, feed: "RecordFeed", owner_id: int,
                 on_snapshot: SnapshotCallback, on_error: Optional[ErrorCallback]):
        self._feed = feed
        self.owner_id = owner_id
        self._on_snapshot = on_snapshot
        self._on_error = on_error
        self.active = True

    def unsubscribe(self) -> None:
        """Stop receiving snapshots. Safe to call more than once."""
        if self.active:
            self.active = False
            self._feed._remove(self)

    def _emit(self, snapshot: Snapshot) -> None:
        if self.active:
            self._on_snapshot(snapshot)

    def _fail(self, error: JournalError) -> None:
        if self.active and self._on_error is not None:
            self._on_error(error)


class RecordFeed:
    """
    Append-only trade record store with per-owner change subscriptions.

    Args:
        session_factory: Callable returning a new SQLAlchemy session
        notifier: Optional cross-process notifier with a ``notify(owner_id, record_id)`` method
        multiplier: Contract multiplier used for profit calculation
    """

    def __init__(self, session_factory: sessionmaker, notifier=None, multiplier=CONTRACT_MULTIPLIER):
        self._session_factory = session_factory
        self._notifier = notifier
        self.multiplier = multiplier
        self._subscribers: Dict[int, List[Subscription]] = {}
        self._lock = threading.Lock()

    def subscribe(self, owner_id: int, on_snapshot: SnapshotCallback,
                  on_error: Optional[ErrorCallback] = None) -> Subscription:
        """
        Register for an owner's snapshots.

        The current snapshot (or the error reading it) is delivered before
        this method returns.
        """
        subscription = Subscription(self, owner_id, on_snapshot, on_error)
        with self._lock:
            self._subscribers.setdefault(owner_id, []).append(subscription)
        logger.debug(f"Subscribed to records of owner {owner_id}")
        self._deliver(owner_id, [subscription])
        return subscription

    def subscriber_count(self, owner_id: int) -> int:
        with self._lock:
            return len(self._subscribers.get(owner_id, ()))

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            subs = self._subscribers.get(subscription.owner_id, [])
            if subscription in subs:
                subs.remove(subscription)
            if not subs:
                self._subscribers.pop(subscription.owner_id, None)
        logger.debug(f"Unsubscribed from records of owner {subscription.owner_id}")

    def snapshot(self, owner_id: int) -> Snapshot:
        """Read an owner's records, newest first"""
        try:
            with self._session_factory() as db:
                self._check_owner(db, owner_id)
                rows = TradeRecordRepository(db).list_for_owner(owner_id)
                return tuple(TradeRecord.model_validate(row) for row in rows)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read records for owner {owner_id}: {e}")
            raise StoreUnavailableError() from e

    def append(self, owner_id: int, record_in: TradeRecordCreate) -> TradeRecord:
        """
        Store a new record and publish the owner's updated snapshot.

        Profit and ``recorded_at`` are computed here, once, and never again.

        Raises:
            PermissionDeniedError: The owner does not exist or is inactive
            StoreUnavailableError: The database rejected or failed the write
        """
        data = record_in.model_dump()
        data["direction"] = record_in.direction.value
        data["order_kind"] = record_in.order_kind.value
        data["profit"] = calculate_profit(
            record_in.direction,
            record_in.entry_price,
            record_in.exit_price,
            record_in.size,
            self.multiplier,
        )
        data["recorded_at"] = recorded_at_for(record_in.occurred_on)

        try:
            with self._session_factory() as db:
                self._check_owner(db, owner_id)
                try:
                    row = TradeRecordRepository(db).append(owner_id=owner_id, record_data=data)
                except SQLAlchemyError:
                    db.rollback()
                    raise
                created = TradeRecord.model_validate(row)
        except SQLAlchemyError as e:
            logger.error(f"Failed to append record for owner {owner_id}: {e}")
            raise StoreUnavailableError() from e

        logger.info(
            f"Recorded trade {created.id} for owner {owner_id}: "
            f"{created.direction.value} {created.instrument} P/L {created.profit}"
        )
        self.publish(owner_id)
        if self._notifier is not None:
            self._notifier.notify(owner_id, created.id)
        return created

    def publish(self, owner_id: int) -> None:
        """Push the current snapshot to every subscriber of ``owner_id``"""
        with self._lock:
            subs = list(self._subscribers.get(owner_id, ()))
        if subs:
            self._deliver(owner_id, subs)

    def _deliver(self, owner_id: int, subs: List[Subscription]) -> None:
        try:
            snapshot = self.snapshot(owner_id)
        except JournalError as e:
            for sub in subs:
                sub._fail(e)
            return

        for sub in subs:
            try:
                sub._emit(snapshot)
            except Exception:
                # One broken listener must not starve the others
                logger.exception(f"Snapshot listener failed for owner {owner_id}")

    @staticmethod
    def _check_owner(db: Session, owner_id: int) -> None:
        user = UserRepository(db).get(id=owner_id)
        if user is None or not user.is_active:
            raise PermissionDeniedError()

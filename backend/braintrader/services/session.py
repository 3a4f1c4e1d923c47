"""
Journal session for Braintrader

A ``JournalSession`` is the explicit per-user context behind a dashboard
connection: it holds the signed-in identity, the selected windows and the
latest snapshot of the owner's records, and recomputes every derived value
whenever either changes.
"""

import logging
import threading
import time
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple

from braintrader.analytics import (
    JournalFilter,
    Report,
    ReportPeriod,
    Summary,
    build_report,
    filter_by_calendar,
    summarize,
)
from braintrader.core.errors import JournalError, PermissionDeniedError, SAVE_FAILED_MESSAGE, describe_error
from braintrader.schemas import report as report_schemas
from braintrader.schemas.journal import TradeRecord, TradeRecordCreate
from braintrader.services.record_feed import RecordFeed, Subscription

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Identity:
    """The signed-in user as seen by the journal"""
    owner_id: int
    email: str
    display_name: str

    @classmethod
    def from_user(cls, user) -> "Identity":
        return cls(owner_id=user.id, email=user.email, display_name=user.display_name)


IdentityCallback = Callable[[Optional[Identity]], None]


class IdentityWatcher:
    """
    Explicit registration point for identity changes.

    Callbacks receive the current identity on registration and again on
    every sign-in or sign-out.
    """

    def __init__(self):
        self._callbacks: List[IdentityCallback] = []
        self._current: Optional[Identity] = None
        self._lock = threading.Lock()

    @property
    def current(self) -> Optional[Identity]:
        return self._current

    def on_identity_change(self, callback: IdentityCallback) -> Callable[[], None]:
        """Register ``callback``; returns a function that unregisters it"""
        with self._lock:
            self._callbacks.append(callback)
            current = self._current
        callback(current)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._callbacks)

    def publish(self, identity: Optional[Identity]) -> None:
        with self._lock:
            self._current = identity
            callbacks = list(self._callbacks)
        for callback in callbacks:
            callback(identity)


class IdentityRegistry:
    """
    Identity watchers of live connections, keyed by access token ID.

    Signing out a token publishes ``None`` on its watcher, which ends every
    connection that was opened with that token.
    """

    def __init__(self):
        self._watchers: Dict[str, IdentityWatcher] = {}
        self._lock = threading.Lock()

    def watcher_for(self, token_id: str, identity: Identity) -> IdentityWatcher:
        with self._lock:
            watcher = self._watchers.get(token_id)
            if watcher is None:
                watcher = IdentityWatcher()
                watcher.publish(identity)
                self._watchers[token_id] = watcher
            return watcher

    def release(self, token_id: str) -> None:
        """Forget the watcher once no connection listens to it"""
        with self._lock:
            watcher = self._watchers.get(token_id)
            if watcher is not None and watcher.listener_count == 0:
                del self._watchers[token_id]

    def sign_out(self, token_id: str) -> None:
        with self._lock:
            watcher = self._watchers.pop(token_id, None)
        if watcher is not None:
            watcher.publish(None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._watchers)


class JournalSession:
    """
    Per-user view state over the record feed.

    Args:
        feed: Record store to subscribe to and append through
        identity: Signed-in user
        period: Initial rolling report window
        journal_filter: Initial calendar filter for the record list
        clock: Returns "now" in ms since epoch
        on_change: Called with the session after every recomputation
    """

    def __init__(
        self,
        feed: RecordFeed,
        identity: Identity,
        *,
        period: ReportPeriod = ReportPeriod.MONTHLY,
        journal_filter: JournalFilter = JournalFilter.ALL,
        clock: Callable[[], int] = now_ms,
        on_change: Optional[Callable[["JournalSession"], None]] = None,
    ):
        self._feed = feed
        self.identity: Optional[Identity] = identity
        self.period = ReportPeriod(period)
        self.journal_filter = JournalFilter(journal_filter)
        self._clock = clock
        self._on_change = on_change
        self._subscription: Optional[Subscription] = None
        self._lock = threading.RLock()

        self._records: Tuple[TradeRecord, ...] = ()
        self.visible_records: List[TradeRecord] = []
        self.overview: Summary = summarize(())
        self.report: Report = build_report((), self.period, clock())
        self.error: Optional[str] = None
        self.submitting = False

    @property
    def records(self) -> Tuple[TradeRecord, ...]:
        return self._records

    @property
    def is_open(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def open(self) -> "JournalSession":
        if self.identity is None:
            raise PermissionDeniedError()
        if not self.is_open:
            self._subscription = self._feed.subscribe(
                self.identity.owner_id, self._on_snapshot, self._on_error
            )
        return self

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def __enter__(self) -> "JournalSession":
        return self.open()

    def __exit__(self, *exc) -> None:
        self.close()

    def change_period(self, period: ReportPeriod) -> None:
        with self._lock:
            self.period = ReportPeriod(period)
            self._recompute()
        self._notify()

    def change_filter(self, journal_filter: JournalFilter) -> None:
        with self._lock:
            self.journal_filter = JournalFilter(journal_filter)
            self._recompute()
        self._notify()

    def create_record(self, record_in: TradeRecordCreate) -> Optional[TradeRecord]:
        """
        Append a record for the signed-in owner.

        Returns the stored record, or ``None`` when the store refused it; in
        that case :attr:`error` holds the message to show. Submissions made
        while one is already in flight are ignored.
        """
        with self._lock:
            identity = self.identity
            if identity is None:
                self.error = PermissionDeniedError.default_message
                return None
            if self.submitting:
                return None
            self.submitting = True

        try:
            return self._feed.append(identity.owner_id, record_in)
        except JournalError as e:
            logger.warning(f"Failed to save trade for owner {identity.owner_id}: {e}")
            with self._lock:
                self.error = SAVE_FAILED_MESSAGE if not isinstance(e, PermissionDeniedError) else e.user_message
            self._notify()
            return None
        finally:
            with self._lock:
                self.submitting = False

    def sign_out(self, watcher: Optional[IdentityWatcher] = None) -> None:
        self.close()
        with self._lock:
            self.identity = None
            self._records = ()
            self._recompute()
        if watcher is not None:
            watcher.publish(None)

    def state(self) -> report_schemas.JournalSnapshot:
        """Serializable view of the current state"""
        with self._lock:
            return report_schemas.JournalSnapshot(
                records=list(self.visible_records),
                overview=report_schemas.Summary.model_validate(self.overview),
                report=report_schemas.Report.model_validate(self.report),
                error=self.error,
            )

    def _on_snapshot(self, records: Tuple[TradeRecord, ...]) -> None:
        with self._lock:
            self._records = tuple(records)
            self.error = None
            self._recompute()
        self._notify()

    def _on_error(self, error: JournalError) -> None:
        logger.error(f"Record stream error: {error}")
        with self._lock:
            self.error = describe_error(error)
        self._notify()

    def _recompute(self) -> None:
        now = self._clock()
        today = date.fromtimestamp(now / 1000)
        records = self._records
        self.visible_records = filter_by_calendar(records, self.journal_filter, today)
        self.overview = summarize(records)
        self.report = build_report(records, self.period, now)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)

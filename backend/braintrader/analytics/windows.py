"""
Time windows for journal views

Two independent windowing policies exist:

* ``ReportPeriod`` - rolling lookbacks measured back from "now" in whole
  days and compared against ``recorded_at``. Used by reports.
* ``JournalFilter`` - calendar periods (today, this week starting Sunday,
  this month) compared against ``occurred_on``. Used by the record list.

They intentionally disagree at the edges, e.g. ``weekly`` is the last seven
days while ``this-week`` starts on the most recent Sunday.
"""

from datetime import date, timedelta
from enum import Enum
from typing import Iterable, List, TypeVar

T = TypeVar("T")

DAY_MS = 24 * 60 * 60 * 1000


class ReportPeriod(str, Enum):
    """Rolling report windows"""
    ALL = "all"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    THREE_MONTH = "3month"
    SIX_MONTH = "6month"
    YEAR = "year"


_LOOKBACK_DAYS = {
    ReportPeriod.DAILY: 1,
    ReportPeriod.WEEKLY: 7,
    ReportPeriod.MONTHLY: 30,
    ReportPeriod.THREE_MONTH: 90,
    ReportPeriod.SIX_MONTH: 180,
    ReportPeriod.YEAR: 365,
}


class JournalFilter(str, Enum):
    """Calendar filters for the record list"""
    ALL = "all"
    TODAY = "today"
    THIS_WEEK = "this-week"
    THIS_MONTH = "this-month"


def window_cutoff(period: ReportPeriod, now_ms: int) -> int:
    """Earliest ``recorded_at`` (inclusive) that falls inside ``period``"""
    period = ReportPeriod(period)
    if period is ReportPeriod.ALL:
        return 0
    return now_ms - _LOOKBACK_DAYS[period] * DAY_MS


def filter_by_period(records: Iterable[T], period: ReportPeriod, now_ms: int) -> List[T]:
    cutoff = window_cutoff(period, now_ms)
    return [r for r in records if r.recorded_at >= cutoff]


def start_of_week(today: date) -> date:
    """Most recent Sunday on or before ``today``"""
    # date.weekday(): Monday == 0 ... Sunday == 6
    return today - timedelta(days=(today.weekday() + 1) % 7)


def in_calendar_period(occurred_on: date, journal_filter: JournalFilter, today: date) -> bool:
    journal_filter = JournalFilter(journal_filter)
    if journal_filter is JournalFilter.TODAY:
        return occurred_on >= today
    if journal_filter is JournalFilter.THIS_WEEK:
        return occurred_on >= start_of_week(today)
    if journal_filter is JournalFilter.THIS_MONTH:
        return occurred_on.month == today.month and occurred_on.year == today.year
    return True


def filter_by_calendar(records: Iterable[T], journal_filter: JournalFilter, today: date) -> List[T]:
    return [r for r in records if in_calendar_period(r.occurred_on, journal_filter, today)]

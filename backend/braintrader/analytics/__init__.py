"""
Braintrader analytics

Pure functions over in-memory trade records: window filtering, profit
calculation, summary statistics and equity curves. Nothing here performs I/O.
"""

from braintrader.analytics.aggregation import Summary, summarize
from braintrader.analytics.equity import EquityPoint, Report, build_equity_curve, build_report, max_drawdown
from braintrader.analytics.profit import CONTRACT_MULTIPLIER, calculate_profit, recorded_at_for
from braintrader.analytics.windows import (
    JournalFilter,
    ReportPeriod,
    filter_by_calendar,
    filter_by_period,
    window_cutoff,
)

__all__ = [
    "CONTRACT_MULTIPLIER",
    "EquityPoint",
    "JournalFilter",
    "Report",
    "ReportPeriod",
    "Summary",
    "build_equity_curve",
    "build_report",
    "calculate_profit",
    "filter_by_calendar",
    "filter_by_period",
    "max_drawdown",
    "recorded_at_for",
    "summarize",
    "window_cutoff",
]

"""Equity curve construction and report assembly."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List

from braintrader.analytics.aggregation import Summary, summarize
from braintrader.analytics.profit import to_decimal
from braintrader.analytics.windows import ReportPeriod, filter_by_period, window_cutoff


__all__ = [
    "EquityPoint",
    "Report",
    "build_equity_curve",
    "build_report",
    "format_point_label",
    "max_drawdown",
]


@dataclass(frozen=True)
class EquityPoint:
    """One step of the cumulative profit series."""
    label: str
    recorded_at: int
    point_profit: float
    equity: float
    instrument: str


@dataclass(frozen=True)
class Report:
    """Statistics and equity curve for one rolling period."""
    period: str
    cutoff: int
    summary: Summary
    equity_curve: List[EquityPoint] = field(default_factory=list)
    max_drawdown: float = 0.0


def format_point_label(recorded_at: int) -> str:
    """Short local date, e.g. ``"Oct 19"``"""
    moment = datetime.fromtimestamp(recorded_at / 1000)
    return f"{moment:%b} {moment.day}"


def build_equity_curve(records: Iterable) -> List[EquityPoint]:
    """
    Cumulative profit series in chronological order.

    Records are sorted by ``recorded_at``; the sort is stable so records
    sharing a timestamp keep their incoming relative order.
    """
    ordered = sorted(records, key=lambda r: r.recorded_at)
    cumulative = Decimal(0)
    curve: List[EquityPoint] = []
    for r in ordered:
        profit = to_decimal(r.profit)
        cumulative += profit
        curve.append(
            EquityPoint(
                label=format_point_label(r.recorded_at),
                recorded_at=r.recorded_at,
                point_profit=float(profit),
                equity=float(cumulative),
                instrument=r.instrument,
            )
        )
    return curve


def max_drawdown(curve: List[EquityPoint]) -> float:
    """Largest peak-to-trough fall of the equity series (<= 0)."""
    peak = 0.0  # equity starts from zero before the first trade
    mdd = 0.0
    for point in curve:
        peak = max(peak, point.equity)
        mdd = min(mdd, point.equity - peak)
    return float(mdd)


def build_report(records: Iterable, period: ReportPeriod, now_ms: int) -> Report:
    period = ReportPeriod(period)
    windowed = filter_by_period(records, period, now_ms)
    curve = build_equity_curve(windowed)
    return Report(
        period=period.value,
        cutoff=window_cutoff(period, now_ms),
        summary=summarize(windowed),
        equity_curve=curve,
        max_drawdown=max_drawdown(curve),
    )

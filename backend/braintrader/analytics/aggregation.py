"""Summary statistics over trade records."""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from braintrader.analytics.profit import to_decimal


__all__ = ["Summary", "summarize"]


@dataclass(frozen=True)
class Summary:
    """Aggregated statistics for a set of trade records."""
    total_count: int = 0
    win_count: int = 0
    loss_count: int = 0
    win_rate: float = 0.0
    net_profit: float = 0.0
    discipline_rate: float = 0.0
    rules_followed_rate: float = 0.0
    profit_factor: Optional[float] = None
    avg_win: float = 0.0
    avg_loss: float = 0.0  # absolute value
    average_confidence: float = 0.0


def _rate(count: int, total: int) -> float:
    return 100.0 * count / total if total else 0.0


def _profit_factor(gross_win: Decimal, gross_loss_abs: Decimal) -> Optional[float]:
    # No losses to divide by: report gross win as the factor.
    factor = gross_win if gross_loss_abs == 0 else gross_win / gross_loss_abs
    factor = float(factor)
    return factor if math.isfinite(factor) else None


def summarize(records: Iterable) -> Summary:
    """
    Reduce records to a :class:`Summary`.

    Records need ``profit``, ``was_disciplined``, ``followed_rules`` and
    ``confidence_rating`` attributes. An empty input gives all zeros and no
    profit factor.
    """
    records = list(records)
    total = len(records)
    if not total:
        return Summary()

    profits = [to_decimal(r.profit) for r in records]
    wins = [p for p in profits if p > 0]
    losses = [p for p in profits if p < 0]

    gross_win = sum(wins, Decimal(0))
    gross_loss_abs = abs(sum(losses, Decimal(0)))

    return Summary(
        total_count=total,
        win_count=len(wins),
        loss_count=len(losses),
        win_rate=_rate(len(wins), total),
        net_profit=float(sum(profits, Decimal(0))),
        discipline_rate=_rate(sum(1 for r in records if r.was_disciplined), total),
        rules_followed_rate=_rate(sum(1 for r in records if r.followed_rules), total),
        profit_factor=_profit_factor(gross_win, gross_loss_abs),
        avg_win=float(gross_win / len(wins)) if wins else 0.0,
        avg_loss=float(gross_loss_abs / len(losses)) if losses else 0.0,
        average_confidence=sum(r.confidence_rating for r in records) / total,
    )

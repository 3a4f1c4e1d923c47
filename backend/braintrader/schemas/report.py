"""
Report schemas for Braintrader API

This module defines Pydantic models for aggregated statistics and equity curves.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict

from braintrader.schemas.journal import TradeRecord


class Summary(BaseModel):
    """Aggregated statistics over a set of records"""
    model_config = ConfigDict(from_attributes=True)

    total_count: int = 0
    win_count: int = 0
    loss_count: int = 0
    win_rate: float = 0.0
    net_profit: float = 0.0
    discipline_rate: float = 0.0
    rules_followed_rate: float = 0.0
    profit_factor: Optional[float] = None
    avg_win: float = 0.0
    avg_loss: float = 0.0
    average_confidence: float = 0.0


class EquityPoint(BaseModel):
    """One point of the equity curve"""
    model_config = ConfigDict(from_attributes=True)

    label: str
    recorded_at: int
    point_profit: float
    equity: float
    instrument: str


class Report(BaseModel):
    """Summary and equity curve for one report period"""
    model_config = ConfigDict(from_attributes=True)

    period: str
    cutoff: int
    summary: Summary
    equity_curve: List[EquityPoint]
    max_drawdown: float


class JournalSnapshot(BaseModel):
    """Payload pushed to stream subscribers on every change"""
    records: List[TradeRecord]
    overview: Summary
    report: Report
    error: Optional[str] = None


class MindsetTip(BaseModel):
    """Psychology tip and daily mantra"""
    title: str
    body: str
    mantra: str

"""
Journal schemas for Braintrader API

This module defines Pydantic models for trade records.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Direction(str, Enum):
    """Trade directions"""
    LONG = "LONG"
    SHORT = "SHORT"


class OrderKind(str, Enum):
    """Order kinds (descriptive only)"""
    MARKET = "MARKET"
    LIMIT = "LIMIT"
    STOP = "STOP"


class TradeRecordBase(BaseModel):
    """Base schema for a trade record"""
    occurred_on: date
    instrument: str = Field(..., min_length=1, max_length=32)
    direction: Direction
    order_kind: OrderKind = OrderKind.MARKET
    size: float = Field(..., gt=0)
    entry_price: float
    exit_price: float
    stop_loss: float = 0.0
    take_profit: float = 0.0
    strategy_label: str = ""
    rationale: str = ""
    assumptions: str = ""
    followed_rules: bool = True
    was_disciplined: bool = True
    confidence_rating: int = Field(5, ge=1, le=5)


class TradeRecordCreate(TradeRecordBase):
    """Schema for creating a trade record; profit and timestamps are assigned by the store"""
    model_config = ConfigDict(extra="forbid")


class TradeRecord(TradeRecordBase):
    """Schema for trade record from database"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    recorded_at: int
    profit: float
    created_at: Optional[datetime] = None

"""
Database models for Braintrader
"""

from braintrader.models.user import User
from braintrader.models.trade_record import TradeRecord

__all__ = ["User", "TradeRecord"]

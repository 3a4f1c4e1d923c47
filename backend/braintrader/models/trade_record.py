"""
Trade record model for Braintrader

This module defines the TradeRecord model: one logged trade with its
self-assessment fields. Records are append-only.
"""

import sqlalchemy as sa
from sqlalchemy.orm import relationship, validates

from braintrader.db.base import Base


class TradeRecord(Base):
    """Model for journaled trades"""
    __tablename__ = "trade_records"

    id = sa.Column(sa.Integer, primary_key=True, index=True)
    owner_id = sa.Column(sa.Integer, sa.ForeignKey("users.id"), index=True, nullable=False)
    occurred_on = sa.Column(sa.Date, nullable=False)
    recorded_at = sa.Column(sa.BigInteger, index=True, nullable=False)  # ms since epoch
    instrument = sa.Column(sa.String(32), nullable=False)
    direction = sa.Column(sa.String(5), nullable=False)  # 'LONG' or 'SHORT'
    order_kind = sa.Column(sa.String(6), nullable=False)  # 'MARKET', 'LIMIT', 'STOP'
    size = sa.Column(sa.Numeric(16, 4), nullable=False)
    entry_price = sa.Column(sa.Numeric(18, 6), nullable=False)
    exit_price = sa.Column(sa.Numeric(18, 6), nullable=False)
    stop_loss = sa.Column(sa.Numeric(18, 6), default=0)
    take_profit = sa.Column(sa.Numeric(18, 6), default=0)
    profit = sa.Column(sa.Numeric(16, 2), nullable=False)  # frozen at creation
    strategy_label = sa.Column(sa.String(100), default="")
    rationale = sa.Column(sa.Text, default="")
    assumptions = sa.Column(sa.Text, default="")
    followed_rules = sa.Column(sa.Boolean, default=True)
    was_disciplined = sa.Column(sa.Boolean, default=True)
    confidence_rating = sa.Column(sa.Integer, default=5)

    # Relationships
    owner = relationship("User", back_populates="trade_records")

    @validates("owner_id", "recorded_at", "profit")
    def _write_once(self, key, value):
        if getattr(self, key) is not None:
            raise ValueError(f"{key} is immutable once set")
        return value

    def __repr__(self):
        return f"<TradeRecord {self.id}: {self.direction} {self.size} {self.instrument} P/L {self.profit}>"

"""
Account model for Braintrader

An account owns trade records; every read and write of the journal is
scoped to one account.
"""

import sqlalchemy as sa
from sqlalchemy.orm import relationship

from braintrader.db.base import Base


class User(Base):
    """Journal owner"""
    __tablename__ = "users"

    id = sa.Column(sa.Integer, primary_key=True, index=True)
    email = sa.Column(sa.String(100), unique=True, index=True, nullable=False)
    hashed_password = sa.Column(sa.String(100), nullable=False)
    full_name = sa.Column(sa.String(100))
    mobile = sa.Column(sa.String(30))
    is_active = sa.Column(sa.Boolean, default=True, nullable=False)

    # Relationships
    trade_records = relationship("TradeRecord", back_populates="owner")

    @property
    def display_name(self) -> str:
        """Full name, falling back to the local part of the email"""
        return self.full_name or self.email.split("@")[0]

    def __repr__(self):
        return f"<User {self.id}: {self.email}>"

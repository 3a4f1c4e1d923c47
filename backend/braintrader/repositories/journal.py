"""
Journal repository for Braintrader

This module provides the append-only repository for trade records.
"""

from typing import Any, Dict, List
from sqlalchemy import desc
from sqlalchemy.orm import Session

from braintrader.models.trade_record import TradeRecord
from braintrader.schemas.journal import TradeRecordCreate
from braintrader.repositories.base import BaseRepository


class TradeRecordRepository(BaseRepository[TradeRecord, TradeRecordCreate]):
    """Repository for trade record operations"""

    def __init__(self, db: Session):
        super().__init__(TradeRecord, db)

    def append(self, *, owner_id: int, record_data: Dict[str, Any]) -> TradeRecord:
        """
        Insert a new record for an owner

        Args:
            owner_id: Owning user ID
            record_data: Column values, including the computed profit and recorded_at

        Returns:
            TradeRecord: Created record with its store-assigned ID
        """
        return self.create(obj_in={**record_data, "owner_id": owner_id})

    def list_for_owner(self, owner_id: int) -> List[TradeRecord]:
        """
        All records of an owner, newest first

        Args:
            owner_id: Owning user ID

        Returns:
            List[TradeRecord]: Records ordered by recorded_at descending
        """
        return (
            self.db.query(TradeRecord)
            .filter(TradeRecord.owner_id == owner_id)
            .order_by(desc(TradeRecord.recorded_at), desc(TradeRecord.id))
            .all()
        )

"""
Generic repository for Braintrader

Journal data is append-only, so repositories only look up and insert rows.
"""

from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy.orm import Session

from braintrader.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)


class BaseRepository(Generic[ModelType, CreateSchemaType]):
    """
    Lookup and insert for one model

    Args:
        model: SQLAlchemy model class
        db: Database session owned by the caller
    """

    def __init__(self, model: Type[ModelType], db: Session):
        self.model = model
        self.db = db

    def get(self, id: Any) -> Optional[ModelType]:
        """Row with primary key ``id``, or None"""
        return self.db.get(self.model, id)

    def create(self, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        """
        Insert a row and commit

        Args:
            obj_in: Column values, as a schema or a plain dict

        Returns:
            The stored row, refreshed with its generated ID
        """
        values = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        row = self.model(**values)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

"""
Declarative base for Braintrader models

Every table carries audit timestamps maintained by the database.
"""

from typing import Any

import sqlalchemy as sa
from sqlalchemy.orm import as_declarative


@as_declarative()
class Base:
    """Declarative base; subclasses name their own ``__tablename__``"""
    id: Any

    created_at = sa.Column(sa.DateTime, server_default=sa.func.now())
    updated_at = sa.Column(sa.DateTime, server_default=sa.func.now(), onupdate=sa.func.now())

"""
Access token schemas for Braintrader
"""

from typing import Optional
from pydantic import BaseModel


class Token(BaseModel):
    """OAuth2 bearer token response"""
    access_token: str
    token_type: str = "bearer"


class TokenPayload(BaseModel):
    """Decoded claims: owner ID, revocation ID and expiry (epoch seconds)"""
    sub: Optional[int] = None
    jti: Optional[str] = None
    exp: Optional[int] = None

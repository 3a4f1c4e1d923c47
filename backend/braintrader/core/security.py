"""
Token and password primitives for Braintrader

Access tokens are HS256 JWTs carrying the owner ID (``sub``), a unique token
ID (``jti``) used for revocation, and an expiry. Passwords are bcrypt hashed.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt
from passlib.context import CryptContext

from braintrader.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def create_access_token(subject: Any, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue a signed access token

    Args:
        subject: Owner ID the token authenticates
        expires_delta: Lifetime; defaults to ``access_token_expire_minutes``

    Returns:
        str: Encoded JWT
    """
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {
        "sub": str(subject),
        "jti": uuid.uuid4().hex,
        "exp": datetime.now(timezone.utc) + lifetime,
    }
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify a token and return its claims

    Raises:
        jose.JWTError: Bad signature, malformed token or expired
    """
    return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

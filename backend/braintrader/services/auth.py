"""
Authentication service for Braintrader

Implements registration, sign-in, sign-out and token resolution on top of
the user repository. Sign-out revokes the token's ``jti`` in a denylist so a
stolen token stops working before it expires.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Dict, Optional

import redis
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from braintrader.core.config import settings
from braintrader.core.errors import (
    AuthMisconfiguredError,
    DuplicateAccountError,
    InvalidCredentialsError,
    InvalidTokenError,
    PermissionDeniedError,
    StoreUnavailableError,
)
from braintrader.core.security import create_access_token, decode_access_token
from braintrader.models.user import User
from braintrader.repositories.user import UserRepository
from braintrader.schemas.token import Token, TokenPayload
from braintrader.schemas.user import UserCreate
from braintrader.services.session import IdentityRegistry

logger = logging.getLogger(__name__)


class TokenDenylist(ABC):
    """Set of revoked token ids"""

    @abstractmethod
    def revoke(self, jti: str, ttl_seconds: int) -> None:
        pass

    @abstractmethod
    def is_revoked(self, jti: str) -> bool:
        pass


class MemoryTokenDenylist(TokenDenylist):
    """Process-local denylist, used when Redis is disabled"""

    def __init__(self):
        self._expiry: Dict[str, float] = {}
        self._lock = threading.Lock()

    def revoke(self, jti: str, ttl_seconds: int) -> None:
        with self._lock:
            self._expiry[jti] = time.monotonic() + max(ttl_seconds, 0)

    def is_revoked(self, jti: str) -> bool:
        with self._lock:
            expires = self._expiry.get(jti)
            if expires is None:
                return False
            if expires <= time.monotonic():
                del self._expiry[jti]
                return False
            return True


class RedisTokenDenylist(TokenDenylist):
    """Denylist shared between API processes through Redis"""

    def __init__(self, client: redis.Redis, prefix: str = "braintrader:revoked"):
        self.client = client
        self.prefix = prefix

    def _key(self, jti: str) -> str:
        return f"{self.prefix}:{jti}"

    def revoke(self, jti: str, ttl_seconds: int) -> None:
        try:
            self.client.setex(self._key(jti), max(ttl_seconds, 1), "1")
        except redis.RedisError as e:
            logger.error(f"Failed to revoke token: {e}")
            raise StoreUnavailableError() from e

    def is_revoked(self, jti: str) -> bool:
        try:
            return bool(self.client.exists(self._key(jti)))
        except redis.RedisError as e:
            logger.error(f"Failed to check token revocation: {e}")
            raise StoreUnavailableError() from e


class AuthService:
    """
    Authentication operations

    Args:
        db: Database session
        denylist: Revoked token store
        identities: Optional registry of live connections, signed out with their token
        notifier: Optional cross-process notifier told about sign-outs
    """

    def __init__(self, db: Session, denylist: TokenDenylist,
                 identities: Optional[IdentityRegistry] = None, notifier=None):
        self.repository = UserRepository(db)
        self.denylist = denylist
        self.identities = identities
        self.notifier = notifier

    def _ensure_configured(self) -> None:
        if not settings.secret_is_configured:
            logger.error("JWT secret key is empty or still the placeholder value")
            raise AuthMisconfiguredError()

    def register(self, user_in: UserCreate) -> User:
        """
        Create a new account

        Raises:
            DuplicateAccountError: If the email is already registered
        """
        self._ensure_configured()
        try:
            if self.repository.get_by_email(email=user_in.email):
                raise DuplicateAccountError()
            user = self.repository.create(obj_in=user_in)
        except SQLAlchemyError as e:
            logger.error(f"Failed to register {user_in.email}: {e}")
            raise StoreUnavailableError() from e

        logger.info(f"Registered user {user.id}")
        return user

    def sign_in(self, email: str, password: str) -> Token:
        """
        Exchange credentials for an access token

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
            PermissionDeniedError: Account is inactive
        """
        self._ensure_configured()
        try:
            user = self.repository.authenticate(email=email, password=password)
        except SQLAlchemyError as e:
            logger.error(f"Failed to authenticate {email}: {e}")
            raise StoreUnavailableError() from e

        if not user:
            raise InvalidCredentialsError()
        if not self.repository.is_active(user):
            raise PermissionDeniedError()

        access_token = create_access_token(
            subject=str(user.id),
            expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
        )
        logger.info(f"User {user.id} signed in")
        return Token(access_token=access_token)

    def _claims(self, token: str) -> TokenPayload:
        self._ensure_configured()
        try:
            token_data = TokenPayload(**decode_access_token(token))
        except (JWTError, ValidationError):
            raise InvalidTokenError()
        if token_data.sub is None or token_data.jti is None:
            raise InvalidTokenError()
        return token_data

    def token_id(self, token: str) -> str:
        """Revocation ID (``jti``) of a valid token"""
        return self._claims(token).jti

    def resolve(self, token: str) -> User:
        """
        Return the active user a token belongs to

        Raises:
            InvalidTokenError: Bad signature, expired, revoked or unknown user
            PermissionDeniedError: Account is inactive
        """
        token_data = self._claims(token)
        if self.denylist.is_revoked(token_data.jti):
            raise InvalidTokenError()

        try:
            user = self.repository.get(id=token_data.sub)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load user {token_data.sub}: {e}")
            raise StoreUnavailableError() from e

        if not user:
            raise InvalidTokenError()
        if not self.repository.is_active(user):
            raise PermissionDeniedError()
        return user

    def sign_out(self, token: str) -> None:
        """Revoke the token for the rest of its lifetime"""
        token_data = self._claims(token)
        ttl = int(token_data.exp - time.time()) if token_data.exp else settings.access_token_expire_minutes * 60
        self.denylist.revoke(token_data.jti, ttl)
        if self.identities is not None:
            self.identities.sign_out(token_data.jti)
        if self.notifier is not None:
            self.notifier.notify_sign_out(token_data.jti)
        logger.info(f"User {token_data.sub} signed out")

"""
Dependencies for API endpoints in Braintrader

This module provides common dependencies for API endpoints.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from braintrader.core.config import settings
from braintrader.db.session import SessionLocal, get_db, redis_client
from braintrader.models.user import User
from braintrader.services.auth import AuthService, MemoryTokenDenylist, RedisTokenDenylist, TokenDenylist
from braintrader.services.notifier import RedisChangeNotifier
from braintrader.services.record_feed import RecordFeed
from braintrader.services.session import IdentityRegistry

# OAuth2 scheme for token authentication
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_prefix}/auth/login")


@lru_cache()
def get_token_denylist() -> TokenDenylist:
    """
    Get the process-wide token denylist

    Redis-backed when Redis is enabled so every API process sees revocations.
    """
    if settings.redis_enabled:
        return RedisTokenDenylist(redis_client)
    return MemoryTokenDenylist()


@lru_cache()
def get_change_notifier() -> Optional[RedisChangeNotifier]:
    """Get the cross-process notifier, or None when change publishing is off"""
    if settings.publish_changes:
        return RedisChangeNotifier(redis_client, settings.change_channel_prefix)
    return None


@lru_cache()
def get_record_feed() -> RecordFeed:
    """Get the process-wide record feed"""
    return RecordFeed(SessionLocal, notifier=get_change_notifier(), multiplier=settings.contract_multiplier)


@lru_cache()
def get_identity_registry() -> IdentityRegistry:
    """Get the process-wide registry of live connections by token ID"""
    return IdentityRegistry()


def get_auth_service(
    db: Session = Depends(get_db),
    denylist: TokenDenylist = Depends(get_token_denylist),
    identities: IdentityRegistry = Depends(get_identity_registry),
    notifier: Optional[RedisChangeNotifier] = Depends(get_change_notifier),
) -> AuthService:
    return AuthService(db, denylist, identities=identities, notifier=notifier)


def get_current_user(
    token: str = Depends(oauth2_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> User:
    """
    Get current user from token

    Args:
        token: JWT bearer token
        auth: Authentication service

    Returns:
        User: Current active user

    Raises:
        InvalidTokenError: If the token is invalid, revoked or the user is not found
        PermissionDeniedError: If the user is inactive
    """
    return auth.resolve(token)

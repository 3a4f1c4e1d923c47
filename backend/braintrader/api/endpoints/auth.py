"""
Authentication API endpoints for Braintrader

This module provides API endpoints for registration, sign-in and sign-out.
"""

from typing import Any

from fastapi import APIRouter, Depends, Response, status
from fastapi.security import OAuth2PasswordRequestForm

from braintrader.api.deps import get_auth_service, get_current_user, oauth2_scheme
from braintrader.models.user import User
from braintrader.schemas.token import Token
from braintrader.schemas.user import User as UserSchema, UserCreate
from braintrader.services.auth import AuthService

router = APIRouter()


@router.post("/register", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
def create_user(*, user_in: UserCreate, auth: AuthService = Depends(get_auth_service)) -> Any:
    """
    Create a new user.
    """
    return auth.register(user_in)


@router.post("/login", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    auth: AuthService = Depends(get_auth_service),
) -> Any:
    """
    OAuth2 compatible token login, get an access token for future requests.
    """
    return auth.sign_in(email=form_data.username, password=form_data.password)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    token: str = Depends(oauth2_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> Response:
    """
    Revoke the current access token.
    """
    auth.sign_out(token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=UserSchema)
def read_users_me(current_user: User = Depends(get_current_user)) -> Any:
    """
    Get current user.
    """
    return current_user

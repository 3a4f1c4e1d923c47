"""
Error taxonomy for Braintrader

Every error that reaches a user carries a plain-text message. The API layer
renders these as ``{"detail": <message>}`` with the matching status code.
"""

from fastapi import status


class JournalError(Exception):
    """Base class for errors surfaced to the user"""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Something went wrong."

    def __init__(self, user_message: str = None):
        self.user_message = user_message or self.default_message
        super().__init__(self.user_message)


class InvalidCredentialsError(JournalError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Incorrect email or password"


class InvalidTokenError(JournalError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Could not validate credentials"


class AuthMisconfiguredError(JournalError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = (
        "Failed to connect to authentication service. Check the configured JWT secret key."
    )


class PermissionDeniedError(JournalError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = (
        "Access denied. Ensure your account is active and allowed to read and write journal records."
    )


class StoreUnavailableError(JournalError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Database connection issue. Verify the journal store configuration."


class DuplicateAccountError(JournalError):
    default_message = "A user with this email already exists."


SAVE_FAILED_MESSAGE = "Failed to save trade. Check your database permissions."


def describe_error(exc: Exception) -> str:
    """Map any exception to the message shown to the user"""
    if isinstance(exc, JournalError):
        return exc.user_message
    return StoreUnavailableError.default_message

"""
Account repository for Braintrader
"""

from typing import Optional

from sqlalchemy.orm import Session

from braintrader.core.security import get_password_hash, verify_password
from braintrader.models.user import User
from braintrader.repositories.base import BaseRepository
from braintrader.schemas.user import UserCreate


class UserRepository(BaseRepository[User, UserCreate]):
    """Journal owner accounts, looked up by email"""

    def __init__(self, db: Session):
        super().__init__(User, db)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.lower()).first()

    def create(self, *, obj_in: UserCreate) -> User:
        """
        Register an account; the password is stored only as a bcrypt hash

        Args:
            obj_in: Registration data

        Returns:
            User: The new, active account
        """
        return super().create(obj_in={
            "email": obj_in.email.lower(),
            "full_name": obj_in.full_name,
            "mobile": obj_in.mobile,
            "hashed_password": get_password_hash(obj_in.password),
            "is_active": True,
        })

    def authenticate(self, *, email: str, password: str) -> Optional[User]:
        """Account matching the credentials, or None on unknown email or wrong password"""
        user = self.get_by_email(email)
        if user is None or not verify_password(password, user.hashed_password):
            return None
        return user

    def is_active(self, user: User) -> bool:
        return bool(user.is_active)

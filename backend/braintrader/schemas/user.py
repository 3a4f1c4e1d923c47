"""
Account schemas for Braintrader API
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, field_validator


class UserBase(BaseModel):
    email: EmailStr
    full_name: Optional[str] = None
    mobile: Optional[str] = None


class UserCreate(UserBase):
    """Registration payload"""
    password: str

    @field_validator("password")
    @classmethod
    def password_min_length(cls, v):
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters long")
        return v


class User(UserBase):
    """Account as returned by the API; never includes the password hash"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    is_active: bool
    display_name: str
    created_at: Optional[datetime] = None

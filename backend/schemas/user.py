from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from models.users import UserRole
from schemas.common import ORMBase, Timestamps, StoreSummary

PASSWORD_SPECIAL_CHARS = "!@#$%^&*"


def validate_password_strength(password: str) -> str:
    """Shared password rule: 8-16 characters, one uppercase letter, one of !@#$%^&*."""
    if len(password) < 8 or len(password) > 16:
        raise ValueError("Password must be between 8 and 16 characters")
    if not any(c.isupper() for c in password):
        raise ValueError("Password must contain at least 1 uppercase letter")
    if not any(c in PASSWORD_SPECIAL_CHARS for c in password):
        raise ValueError("Password must contain at least 1 special character (!@#$%^&*)")
    return password


def _normalize_email(email):
    return email.strip().lower() if isinstance(email, str) else email


# Shared properties for account input
class UserFields(ORMBase):
    name: str = Field(min_length=20, max_length=60)
    email: EmailStr
    address: str = Field(max_length=400)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)


# Schema for self-service registration; role is always NORMAL_USER
class SignupRequest(UserFields):
    password: str

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return validate_password_strength(v)


# Schema for administrative account creation
class UserCreate(SignupRequest):
    role: UserRole = UserRole.NORMAL_USER


# Schema for partial user updates (Admin only)
class UserUpdate(ORMBase):
    name: Optional[str] = Field(None, min_length=20, max_length=60)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, max_length=400)
    role: Optional[UserRole] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)


# Schema for user authentication credentials
class LoginRequest(ORMBase):
    email: EmailStr
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)


class ChangePasswordRequest(ORMBase):
    old_password: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v):
        return validate_password_strength(v)


# Output schema for user profile details; never carries the password hash
class UserOut(Timestamps):
    id: str
    name: str
    email: EmailStr
    address: str
    role: UserRole


# User list entry with ownership counters
class UserListItem(UserOut):
    store_count: int = 0
    rating_count: int = 0


class OwnedStoreOut(StoreSummary):
    rating_count: int = 0


class UserRatingOut(ORMBase):
    id: str
    rating_value: int
    created_at: datetime
    store: StoreSummary


# Full user view; stores and ratings only for the user themself or an admin
class UserDetail(UserOut):
    owned_stores: Optional[List[OwnedStoreOut]] = None
    ratings: Optional[List[UserRatingOut]] = None


# Response for signup and login
class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


# Identity carried by a validated access token
class TokenData(BaseModel):
    user_id: str
    role: UserRole


class DashboardStats(ORMBase):
    total_users: int
    total_stores: int
    total_ratings: int

# backend/models/users.py
import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Enum
from sqlalchemy.orm import relationship
from database import Base


# Allowed account roles; fixed set, assigned at creation
class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    STORE_OWNER = "STORE_OWNER"
    NORMAL_USER = "NORMAL_USER"


# Represents a user account with authentication details and system role
class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(60), nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    address = Column(String(400), nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.NORMAL_USER, index=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Deleting a user removes the stores they own and the ratings they wrote
    owned_stores = relationship("Store", back_populates="owner", cascade="all, delete-orphan")
    ratings = relationship("Rating", back_populates="user", cascade="all, delete-orphan")
    # Audit entries outlive the account; the database nulls their user_id
    logs = relationship("Log", back_populates="user", passive_deletes=True)

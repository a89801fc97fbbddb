# backend/models/rating.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base


# A single 1-5 star rating given by a user to a store
class Rating(Base):
    __tablename__ = "ratings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    rating_value = Column(Integer, nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    store_id = Column(String(36), ForeignKey("stores.id", ondelete="CASCADE"), index=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False, index=True)
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    user = relationship("User", back_populates="ratings")
    store = relationship("Store", back_populates="ratings")

    __table_args__ = (
        # One rating per user per store; the final arbiter for concurrent submissions
        UniqueConstraint("user_id", "store_id", name="uq_rating_user_store"),
        CheckConstraint("rating_value >= 1 AND rating_value <= 5", name="ck_rating_value_range"),
    )

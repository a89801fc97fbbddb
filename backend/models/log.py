# backend/models/log.py
from sqlalchemy import Column, Index, Integer, String, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import relationship
from database import Base


# Audit trail entry: who did what to which resource, and whether it worked
class Log(Base):
    __tablename__ = "logs"
    __table_args__ = (
        Index("ix_logs_user_ts", "user_id", "ts"),
    )

    id = Column(Integer, primary_key=True, index=True)
    ts = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    # Actor; NULL for anonymous attempts and after the account is deleted
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    action = Column(String(50), nullable=False, index=True)    # LOGIN, SIGNUP, STORE_CREATE, ...
    resource = Column(String(50), nullable=False, index=True)  # auth, users, stores
    status = Column(String(20), nullable=False, default="SUCCESS", index=True)
    ip = Column(String(64), nullable=True)
    meta = Column(JSON, nullable=True)

    user = relationship("User", back_populates="logs", lazy="joined")

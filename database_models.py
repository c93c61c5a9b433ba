from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint

from database import Base


def utcnow() -> datetime:
    """Naive UTC timestamp, the format every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    """
    End user of the client application, identified by an external account id.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(String, unique=True, nullable=False, index=True)
    username = Column(String, nullable=False)
    hwid = Column(String, nullable=True)
    role = Column(String, nullable=False, default="user")
    is_banned = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)


class Subscription(Base):
    __tablename__ = "subscriptions"
    __table_args__ = (
        UniqueConstraint("user_id", "subscription_type", name="uq_subscriptions_user_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    subscription_type = Column(String, nullable=False)
    expired = Column(Boolean, nullable=False, default=False)
    expires_at = Column(DateTime, nullable=True)  # None = no time-based expiry
    created_at = Column(DateTime, default=utcnow, nullable=False)

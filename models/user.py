"""
Admin request models
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, StrictBool


class CreateUserRequest(BaseModel):
    account_id: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1)
    hwid: Optional[str] = None
    role: Optional[str] = None
    subscription_type: Optional[str] = None


class BanUserRequest(BaseModel):
    account_id: str = Field(..., min_length=1)
    is_banned: StrictBool


class UserUpdate(BaseModel):
    """
    Partial update of a user. Only fields present in the request body are
    applied; `model_fields_set` tells which ones were sent.
    """
    username: Optional[str] = None
    hwid: Optional[str] = None
    role: Optional[str] = None
    subscription_type: Optional[str] = None
    subscription_expires_days: Optional[int] = Field(default=None, ge=0)

    def profile_updates(self) -> dict:
        """Supplied profile fields, keyed by column name."""
        supplied = self.model_fields_set & {"username", "hwid", "role"}
        return {name: getattr(self, name) for name in supplied}


class SubscriptionSummary(BaseModel):
    type: str
    expires_at: Optional[datetime] = None


class UserSummary(BaseModel):
    id: int
    account_id: str
    username: str
    hwid: Optional[str] = None
    role: str
    is_banned: bool
    subscriptions: List[SubscriptionSummary] = []
    created_at: datetime
    updated_at: datetime


class UserDetail(BaseModel):
    id: int
    account_id: str
    username: str
    hwid: Optional[str] = None
    role: str
    is_banned: bool
    subscriptions: List[str] = []
    created_at: datetime
    updated_at: datetime

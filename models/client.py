"""
Client request and response models.
Field aliases are the names the desktop client sends and reads.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field


class SetupRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    version: str = Field(..., alias="Version", min_length=1)


class LoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    account_id: str = Field(..., alias="AccountId", min_length=1)
    hwid: str = Field(..., alias="Hwid", min_length=1)


class Entitlement(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(..., alias="Type")
    expired: bool = Field(..., alias="Expired")
    expires_at: Optional[datetime] = Field(default=None, alias="ExpiresAt")


class BanState(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_banned: bool = Field(..., alias="IsBanned")


class UserInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., alias="UserName")
    hwid: Optional[str] = Field(default=None, alias="Hwid")
    ban: BanState = Field(..., alias="Ban")
    role: str = Field(..., alias="Role")


class LoginPayload(BaseModel):
    """Profile plus entitlement list returned by a successful login."""
    model_config = ConfigDict(populate_by_name=True)

    account_id: str = Field(..., alias="_id")
    info: UserInfo = Field(..., alias="Info")
    subscriptions: List[Entitlement] = Field(..., alias="Subscriptions")

    @property
    def active(self) -> List[Entitlement]:
        return [entitlement for entitlement in self.subscriptions if not entitlement.expired]


class VersionInfo(BaseModel):
    version: str
    latest_version: str


class UpdateInfo(BaseModel):
    download_url: str
    version: str
    size: int = 0

"""
Session Service - client version check and account login
"""
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import Settings, settings as default_settings
from crud.user import UserRepository
from models.client import LoginPayload
from services.entitlement_service import EntitlementService
from services.errors import ForbiddenError, NotFoundError, VersionMismatchError

logger = logging.getLogger(__name__)


def check_setup(version: str, settings: Optional[Settings] = None) -> None:
    """Raise VersionMismatchError unless the client runs the configured version."""
    expected = (settings or default_settings).app_version
    if version != expected:
        logger.info(f"Client version {version!r} rejected (expected {expected!r})")
        raise VersionMismatchError()


class SessionService:
    """
    Resolves a client login to a user record.

    The hardware id is bound, not verified: a login from a new device
    overwrites the stored hwid instead of being rejected.
    """

    def __init__(self, db: AsyncSession, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or default_settings
        self.user_repo = UserRepository(db)
        self.entitlements = EntitlementService(db, self.settings)

    async def login(self, account_id: str, hwid: str) -> LoginPayload:
        """
        Authenticate an account and return its profile and entitlements.

        Args:
            account_id: External account id
            hwid: Hardware fingerprint reported by the client

        Raises:
            NotFoundError: unknown account id
            ForbiddenError: account is banned (hwid is left untouched)
        """
        user = await self.user_repo.get_user_by_account_id(account_id)
        if user is None:
            raise NotFoundError()

        if user.is_banned:
            logger.info(f"Login refused for banned account {account_id}")
            raise ForbiddenError()

        if user.hwid != hwid:
            logger.info(f"Rebinding hwid for account {account_id}")
            await self.user_repo.update_user(user, {"hwid": hwid})
            await self.db.commit()

        return await self.entitlements.resolve(user)

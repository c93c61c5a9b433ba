"""
Entitlement Service - builds the subscription list a client sees after login
"""
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import Settings, settings as default_settings
from crud.subscription import SubscriptionRepository
from database_models import User, utcnow
from models.client import BanState, Entitlement, LoginPayload, UserInfo


class EntitlementService:
    """
    Resolves the entitlements of an already authenticated user.
    """

    def __init__(self, db: AsyncSession, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or default_settings
        self.subscription_repo = SubscriptionRepository(db)

    def sentinel(self) -> Entitlement:
        """Synthetic expired entry telling the client no plan is usable."""
        return Entitlement(
            type=self.settings.default_entitlement_type,
            expired=True,
            expires_at=None,
        )

    async def resolve(self, user: User, now: Optional[datetime] = None) -> LoginPayload:
        """
        Build the login payload for a user.

        Only subscriptions that are not past their expiry time are listed.
        When none of them is also free of the explicit expired flag, the
        sentinel entry is appended so the list is never empty.

        Args:
            user: Resolved, non-banned user
            now: Resolution timestamp (defaults to the current UTC time)

        Returns:
            LoginPayload with profile fields and the full entitlement list
        """
        now = now or utcnow()
        rows = await self.subscription_repo.get_time_valid(user.id, now)

        entitlements = [
            Entitlement(
                type=row.subscription_type,
                expired=bool(row.expired),
                expires_at=row.expires_at,
            )
            for row in rows
        ]

        if not any(not entitlement.expired for entitlement in entitlements):
            entitlements.append(self.sentinel())

        return LoginPayload(
            account_id=user.account_id,
            info=UserInfo(
                username=user.username,
                hwid=user.hwid,
                ban=BanState(is_banned=bool(user.is_banned)),
                role=user.role,
            ),
            subscriptions=entitlements,
        )

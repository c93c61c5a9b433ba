"""
Admin Service - user and subscription management
"""
import logging
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import Settings, settings as default_settings
from crud.subscription import SubscriptionRepository
from crud.user import UserRepository
from database_models import User
from models.user import CreateUserRequest, SubscriptionSummary, UserDetail, UserSummary, UserUpdate
from services.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

DEMO_ACCOUNT = {
    "account_id": "123456789",
    "username": "TestUser",
    "hwid": "test-hwid-123",
    "role": "admin",
}


class AdminService:
    """
    Service class for administrative operations.
    Every operation is keyed by the external account id and commits its own writes.
    """

    def __init__(self, db: AsyncSession, settings: Optional[Settings] = None):
        """
        Initialize the admin service.

        Args:
            db: AsyncSession instance for database operations
            settings: Settings override (defaults to the process settings)
        """
        self.db = db
        self.settings = settings or default_settings
        self.user_repo = UserRepository(db)
        self.subscription_repo = SubscriptionRepository(db)

    async def _require_user(self, account_id: str) -> User:
        user = await self.user_repo.get_user_by_account_id(account_id)
        if user is None:
            raise NotFoundError()
        return user

    async def create_user(self, request: CreateUserRequest) -> User:
        """
        Create a user, optionally with one subscription running for the
        default window.

        Raises:
            ConflictError: the account id is already registered
        """
        if await self.user_repo.get_user_by_account_id(request.account_id) is not None:
            raise ConflictError()

        try:
            user = await self.user_repo.create_user(request.model_dump())
            if request.subscription_type:
                await self.subscription_repo.add_subscription(
                    user.id,
                    request.subscription_type,
                    self.settings.default_subscription_days,
                )
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent insert of the same account id
            await self.db.rollback()
            raise ConflictError()

        logger.info(f"Created user {request.account_id}")
        return user

    async def set_ban(self, account_id: str, is_banned: bool) -> User:
        """Ban or unban an account."""
        user = await self._require_user(account_id)
        await self.user_repo.update_user(user, {"is_banned": is_banned})
        await self.db.commit()

        logger.info(f"User {account_id} {'banned' if is_banned else 'unbanned'}")
        return user

    async def list_users(self) -> List[UserSummary]:
        """All users, newest first, each with its non-expired subscriptions."""
        users = await self.user_repo.list_users()
        subscriptions = await self.subscription_repo.get_unexpired_by_user([user.id for user in users])

        return [
            UserSummary(
                id=user.id,
                account_id=user.account_id,
                username=user.username,
                hwid=user.hwid,
                role=user.role,
                is_banned=bool(user.is_banned),
                subscriptions=[
                    SubscriptionSummary(type=sub.subscription_type, expires_at=sub.expires_at)
                    for sub in subscriptions[user.id]
                ],
                created_at=user.created_at,
                updated_at=user.updated_at,
            )
            for user in users
        ]

    async def get_user(self, account_id: str) -> UserDetail:
        """One user with the types of its non-expired subscriptions."""
        user = await self._require_user(account_id)
        subscriptions = await self.subscription_repo.get_unexpired_by_user([user.id])

        return UserDetail(
            id=user.id,
            account_id=user.account_id,
            username=user.username,
            hwid=user.hwid,
            role=user.role,
            is_banned=bool(user.is_banned),
            subscriptions=[sub.subscription_type for sub in subscriptions[user.id]],
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    async def update_user(self, account_id: str, update: UserUpdate) -> User:
        """
        Apply a partial update.

        Only fields present in `update` are written. A subscription type
        rides along with a profile change and replaces that type's
        subscription with a fresh expiry window; zero days means the default.

        Raises:
            ValidationError: nothing to update, or a required field set to null
            NotFoundError: unknown account id
        """
        profile = update.profile_updates()
        if not profile:
            raise ValidationError("No fields to update")

        for name in ("username", "role"):
            if name in profile and not profile[name]:
                raise ValidationError(f"{name} cannot be empty")

        user = await self._require_user(account_id)
        await self.user_repo.update_user(user, profile)

        if update.subscription_type:
            days = update.subscription_expires_days or self.settings.default_subscription_days
            await self.subscription_repo.replace_subscription(user.id, update.subscription_type, days)

        await self.db.commit()
        logger.info(f"Updated user {account_id}: {sorted(update.model_fields_set)}")
        return user

    async def delete_user(self, account_id: str) -> None:
        """
        Delete a user and its subscriptions.
        Subscriptions go first so no subscription is ever left without a user.
        """
        user = await self._require_user(account_id)
        removed = await self.subscription_repo.delete_for_user(user.id)
        await self.user_repo.delete_user(user)
        await self.db.commit()

        logger.info(f"Deleted user {account_id} and {removed} subscription(s)")

    async def seed_demo_user(self) -> None:
        """Insert the demo account if it is not there yet."""
        if await self.user_repo.get_user_by_account_id(DEMO_ACCOUNT["account_id"]) is not None:
            return

        await self.create_user(
            CreateUserRequest(
                **DEMO_ACCOUNT,
                subscription_type=self.settings.default_entitlement_type,
            )
        )
        logger.info("Seeded demo user")

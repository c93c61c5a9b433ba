"""
SubscriptionRepository for database operations on Subscription model
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from database_models import Subscription, utcnow


class SubscriptionRepository:
    """
    Repository class for Subscription database operations.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_time_valid(self, user_id: int, now: Optional[datetime] = None) -> List[Subscription]:
        """
        Subscriptions with no expiry or an expiry after `now`.
        The explicit `expired` flag is not filtered here.
        """
        now = now or utcnow()
        result = await self.db.execute(
            select(Subscription)
            .where(
                Subscription.user_id == user_id,
                or_(Subscription.expires_at.is_(None), Subscription.expires_at > now),
            )
            .order_by(Subscription.id)
        )
        return list(result.scalars().all())

    async def get_unexpired_by_user(self, user_ids: Sequence[int]) -> Dict[int, List[Subscription]]:
        """
        Subscriptions whose `expired` flag is false, grouped by user id.
        """
        grouped: Dict[int, List[Subscription]] = {user_id: [] for user_id in user_ids}
        if not user_ids:
            return grouped

        result = await self.db.execute(
            select(Subscription)
            .where(
                Subscription.user_id.in_(list(user_ids)),
                Subscription.expired.is_(False),
            )
            .order_by(Subscription.id)
        )
        for subscription in result.scalars().all():
            grouped[subscription.user_id].append(subscription)
        return grouped

    async def add_subscription(self, user_id: int, subscription_type: str, days: int) -> Subscription:
        """Insert a non-expired subscription expiring `days` days from now."""
        now = utcnow()
        subscription = Subscription(
            user_id=user_id,
            subscription_type=subscription_type,
            expired=False,
            expires_at=now + timedelta(days=days),
            created_at=now,
        )
        self.db.add(subscription)
        await self.db.flush()
        return subscription

    async def replace_subscription(self, user_id: int, subscription_type: str, days: int) -> Subscription:
        """
        Insert-or-replace the subscription for (user, type).
        The old row is deleted rather than updated so renewal starts a fresh row.
        """
        result = await self.db.execute(
            select(Subscription).where(
                Subscription.user_id == user_id,
                Subscription.subscription_type == subscription_type,
            )
        )
        for existing in result.scalars().all():
            await self.db.delete(existing)
        await self.db.flush()

        return await self.add_subscription(user_id, subscription_type, days)

    async def delete_for_user(self, user_id: int) -> int:
        """
        Delete every subscription owned by the user.

        Returns:
            Number of deleted subscriptions
        """
        result = await self.db.execute(
            select(Subscription).where(Subscription.user_id == user_id)
        )
        subscriptions = list(result.scalars().all())
        for subscription in subscriptions:
            await self.db.delete(subscription)
        await self.db.flush()
        return len(subscriptions)

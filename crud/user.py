"""
UserRepository for database operations on User model
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from database_models import User, utcnow


class UserRepository:
    """
    Repository class for User database operations.
    Users are always addressed by their external account id.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the repository with a database session.

        Args:
            db: AsyncSession instance for database operations
        """
        self.db = db

    async def get_user_by_account_id(self, account_id: str) -> Optional[User]:
        """
        Retrieve a user by external account id.

        Args:
            account_id: External account id

        Returns:
            User object if found, None otherwise
        """
        result = await self.db.execute(
            select(User).where(User.account_id == account_id)
        )
        return result.scalar_one_or_none()

    async def list_users(self) -> List[User]:
        """Return all users, newest first."""
        result = await self.db.execute(
            select(User).order_by(User.created_at.desc(), User.id.desc())
        )
        return list(result.scalars().all())

    async def create_user(self, user_data: dict) -> User:
        """
        Create a new user in the database.

        Args:
            user_data: Dictionary containing user data. Must include:
                - account_id: str
                - username: str
                Optional:
                - hwid: str (empty values are stored as None)
                - role: str (defaults to "user")

        Returns:
            Created User object
        """
        now = utcnow()
        user = User(
            account_id=user_data["account_id"],
            username=user_data["username"],
            hwid=user_data.get("hwid") or None,
            role=user_data.get("role") or "user",
            is_banned=False,
            created_at=now,
            updated_at=now,
        )
        self.db.add(user)
        await self.db.flush()  # Flush to get the ID without committing
        await self.db.refresh(user)
        return user

    async def update_user(self, user: User, updates: dict) -> User:
        """
        Update user fields and refresh updated_at.

        Args:
            user: User object to update
            updates: Dictionary of fields to update (e.g., {"hwid": "abc"})

        Returns:
            Updated User object
        """
        for key, value in updates.items():
            if hasattr(user, key):
                setattr(user, key, value)
        user.updated_at = utcnow()

        await self.db.flush()
        await self.db.refresh(user)
        return user

    async def delete_user(self, user: User) -> None:
        """
        Delete the user row. Subscriptions must already be gone.

        Args:
            user: User object to delete
        """
        await self.db.delete(user)
        await self.db.flush()

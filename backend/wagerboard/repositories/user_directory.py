"""
UserDirectory

Read-only name resolution for the leaderboard, plus the small amount of
write access needed to seed the 'users' table.
"""

from typing import NamedTuple, Protocol

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from wagerboard.exceptions import NotFoundError, ValidationError
from wagerboard.models import User


class UserName(NamedTuple):
    first_name: str
    last_name: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class UserDirectory(Protocol):
    """Collaborator consumed by the leaderboard ranker."""

    async def resolve_name(self, db: AsyncSession, user_id: str) -> UserName:
        """Return the user's name; raise NotFoundError if the id is unknown."""
        ...


class SqlUserDirectory:
    """UserDirectory backed by the 'users' table."""

    async def resolve_name(self, db: AsyncSession, user_id: str) -> UserName:
        user = await self.get_user(db, user_id)
        return UserName(user.first_name, user.last_name)

    async def get_user(self, db: AsyncSession, user_id: str) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    async def create_user(
        self,
        db: AsyncSession,
        user_id: str,
        first_name: str,
        last_name: str,
        email: str,
        twitch_username: str,
    ) -> User:
        user = User(
            id=user_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            twitch_username=twitch_username,
        )
        existing = await db.execute(
            select(User.id).where(
                or_(
                    User.id == user_id,
                    User.email == email,
                    User.twitch_username == twitch_username,
                )
            )
        )
        if existing.first() is not None:
            raise ValidationError(
                f"User {user_id} conflicts with an existing id, email or Twitch username"
            )

        db.add(user)
        try:
            await db.flush()
        except IntegrityError as e:
            # Lost a race with another insert of the same identity
            raise ValidationError(
                f"User {user_id} conflicts with an existing id, email or Twitch username"
            ) from e
        await db.refresh(user)
        return user

    async def delete_user(self, db: AsyncSession, user_id: str) -> None:
        user = await self.get_user(db, user_id)
        await db.delete(user)
        await db.flush()

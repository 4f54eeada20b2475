"""
User repository.

Users are the owners rather than owned records, so this does not derive from
the owner-scoped BaseRepository: lookups go by primary key or email.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.models.user import User


class UserRepository:
    """Repository for User operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, obj_in: dict) -> User:
        user = User(**obj_in)
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """Get user by primary key."""
        return await self.session.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        query = select(User).where(User.email == email)
        result = await self.session.exec(query)
        return result.first()

    async def update(self, user: User, obj_in: dict) -> User:
        """Set name, email or password_hash; the id never changes."""
        for field, value in obj_in.items():
            if field in ("name", "email", "password_hash"):
                setattr(user, field, value)
        user.updated_at = datetime.utcnow()

        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

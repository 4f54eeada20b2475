"""
User service - profile operations.
"""
import uuid

from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.core.exceptions import NotFoundError, UnauthorizedError, ValidationError, AlreadyExistsError
from crm_backend.core.security import verify_password, get_password_hash
from crm_backend.core.transaction import atomic
from crm_backend.repositories.user_repo import UserRepository
from crm_backend.models.user import User
from crm_backend.models.activity import Activities
from crm_backend.schemas.user import ProfileUpdate
from crm_backend.services.activity_service import ActivityService


class UserService:
    """Service for user operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)
        self.activity_service = ActivityService(session)

    async def get_profile(self, user_id: uuid.UUID) -> User:
        """Get user profile."""
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", str(user_id))
        return user

    async def update_profile(self, user_id: uuid.UUID, profile_data: ProfileUpdate) -> User:
        """Update name, email or password; the current password must match."""
        user = await self.get_profile(user_id)

        if not verify_password(profile_data.current_password, user.password_hash):
            raise UnauthorizedError("Current password is incorrect")

        if profile_data.new_password and profile_data.new_password != profile_data.confirm_password:
            raise ValidationError("Passwords don't match", field="confirm_password")

        update_data = {}
        if profile_data.name:
            update_data["name"] = profile_data.name
        if profile_data.email and profile_data.email != user.email:
            existing = await self.user_repo.get_by_email(profile_data.email)
            if existing:
                raise AlreadyExistsError("User", "email", profile_data.email)
            update_data["email"] = profile_data.email
        if profile_data.new_password:
            update_data["password_hash"] = get_password_hash(profile_data.new_password)

        async with atomic(self.session):
            user = await self.user_repo.update(user, update_data)
            await self.activity_service.record(
                user_id=user_id,
                title=Activities.PROFILE_UPDATED
            )

        return user

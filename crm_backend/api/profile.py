"""
Profile API routes.
"""
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.config import settings
from crm_backend.database import get_session
from crm_backend.services.user_service import UserService
from crm_backend.schemas.user import UserResponse, ProfileUpdate
from crm_backend.api.deps import get_current_user
from crm_backend.models.user import User

router = APIRouter(prefix=f"{settings.API_PREFIX}/profile", tags=["profile"])


@router.get("/", response_model=UserResponse)
async def get_profile(current_user: User = Depends(get_current_user)):
    """Get the signed-in user's profile."""
    return current_user


@router.put("/", response_model=UserResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Update name, email or password."""
    user_service = UserService(session)
    return await user_service.update_profile(current_user.id, profile_data)

"""
API dependencies - shared across all routes.
"""
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.database import get_session
from crm_backend.config import settings
from crm_backend.core.exceptions import UnauthorizedError
from crm_backend.models.user import User
from crm_backend.services.auth_service import AuthService


oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False)


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    session: AsyncSession = Depends(get_session)
) -> User:
    """Get current authenticated user from the bearer token."""
    if not token:
        raise UnauthorizedError("Not authenticated")

    auth_service = AuthService(session)
    return await auth_service.resolve_principal(token)

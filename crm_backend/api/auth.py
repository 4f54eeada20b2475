"""
Authentication API routes.
"""
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.config import settings
from crm_backend.database import get_session
from crm_backend.services.auth_service import AuthService
from crm_backend.schemas.auth import RegisterRequest, LoginRequest, AuthResponse

router = APIRouter(prefix=f"{settings.API_PREFIX}/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    request: RegisterRequest,
    session: AsyncSession = Depends(get_session)
):
    """Register a new user."""
    auth_service = AuthService(session)
    return await auth_service.register(request)


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    session: AsyncSession = Depends(get_session)
):
    """Login and get a bearer token."""
    auth_service = AuthService(session)
    return await auth_service.login(request)

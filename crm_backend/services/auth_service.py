"""
Authentication service - registration, login and principal resolution.
"""
import logging
import uuid

from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.core.security import (
    get_password_hash,
    verify_password,
    create_access_token,
    verify_token
)
from crm_backend.core.exceptions import AlreadyExistsError, UnauthorizedError
from crm_backend.core.transaction import atomic
from crm_backend.repositories.user_repo import UserRepository
from crm_backend.models.user import User
from crm_backend.schemas.auth import RegisterRequest, LoginRequest

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)

    async def register(self, request: RegisterRequest) -> dict:
        """Register a new user and sign them in."""
        existing = await self.user_repo.get_by_email(request.email)
        if existing:
            raise AlreadyExistsError("User", "email", request.email)

        async with atomic(self.session):
            user = await self.user_repo.create({
                "name": request.name,
                "email": request.email,
                "password_hash": get_password_hash(request.password)
            })

        logger.info(f"User {user.id} registered")
        return {"user": user, "token": self.issue_token(user)}

    async def login(self, request: LoginRequest) -> dict:
        """Authenticate with email and password."""
        user = await self.user_repo.get_by_email(request.email)
        if not user or not verify_password(request.password, user.password_hash):
            raise UnauthorizedError("Incorrect email or password")

        return {"user": user, "token": self.issue_token(user)}

    async def resolve_principal(self, token: str) -> User:
        """Resolve the user a bearer token was issued to."""
        payload = verify_token(token, "access")
        if not payload:
            raise UnauthorizedError("Could not validate credentials")

        user_id = payload.get("user_id")
        try:
            user_uuid = uuid.UUID(str(user_id))
        except ValueError:
            raise UnauthorizedError("Could not validate credentials")

        user = await self.user_repo.get_by_id(user_uuid)
        if not user:
            raise UnauthorizedError("User not found")
        return user

    @staticmethod
    def issue_token(user: User) -> str:
        return create_access_token({"user_id": str(user.id), "email": user.email})

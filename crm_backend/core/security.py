"""
Password hashing and bearer tokens.

Tokens are short-lived HS256 JWTs carrying the principal's user_id; there is
no refresh flow, a client signs in again once the token expires.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Literal
import uuid

import jwt
import bcrypt

from crm_backend.config import settings

TokenType = Literal["access"]


def get_password_hash(password: str) -> str:
    """bcrypt hash with a fresh salt, stored as text."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def create_access_token(claims: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign an access token for the given claims (user_id, email).

    Adds exp, iat, type and a random jti. Lifetime defaults to
    ACCESS_TOKEN_EXPIRE_MINUTES.
    """
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    payload = {
        **claims,
        "exp": issued_at + lifetime,
        "iat": issued_at,
        "type": "access",
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """Payload of a correctly signed, unexpired token, else None."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.InvalidTokenError:
        # Covers bad signatures, malformed input and ExpiredSignatureError
        return None


def verify_token(token: str, token_type: TokenType = "access") -> Optional[dict]:
    """Like decode_token, but also requires the expected `type` claim."""
    payload = decode_token(token)
    if not payload or payload.get("type") != token_type:
        return None
    return payload

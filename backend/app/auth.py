"""
Authentication boundary.

Issues and verifies HS256 bearer tokens and resolves the caller into a
``Principal`` snapshot that services use for every authorization decision.
Passwords are hashed with werkzeug.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import check_password_hash, generate_password_hash

from app.config import get_settings
from app.database import get_db
from app.errors import Forbidden, Unauthenticated
from app.models import User

settings = get_settings()

ALGORITHM = "HS256"

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller attached to each operation."""

    id: str
    role: str
    name: str = ""
    email: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return check_password_hash(password_hash, password)


def create_access_token(user_id: str, role: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(days=settings.token_expire_days)
    to_encode = {"sub": user_id, "role": role, "exp": expire}
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError:
        raise Unauthenticated("Invalid token")
    if not payload.get("sub"):
        raise Unauthenticated("Invalid token")
    return payload


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("No token provided")

    payload = decode_access_token(credentials.credentials)

    result = await db.execute(select(User).where(User.id == payload["sub"]))
    user = result.scalar_one_or_none()
    if not user:
        raise Unauthenticated("User not found")
    if not user.is_active:
        raise Forbidden("Account is deactivated")

    # Role comes from the stored user, not the token, so role changes apply immediately
    return Principal(id=user.id, role=user.role, name=user.name, email=user.email)


def require_roles(*roles: str):
    """Dependency factory rejecting callers whose role is not in ``roles``."""

    async def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in roles:
            raise Forbidden(f"Access denied. Required role: {', '.join(roles)}")
        return principal

    return dependency

"""Bearer-token authentication and role gates for the HTTP API.

Tokens are HS256 JWTs carrying ``userId``, ``email`` and ``role``. The user
is always re-read from the repository so that a deactivated account is
locked out even while its token is still valid.
"""

from datetime import UTC, datetime, timedelta

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from urbanmart import config
from urbanmart.identity.user import User, UserRole
from urbanmart.utils.errors import AuthenticationError, PermissionDeniedError
from urbanmart.utils.lookup import find_one

bearer_scheme = HTTPBearer(auto_error=False)


def issue_token(user, expires_in: int | None = None) -> str:
    now = datetime.now(UTC)
    payload = {
        "userId": str(user.id),
        "email": user.email,
        "role": user.role,
        "iat": now,
        "exp": now + timedelta(seconds=expires_in if expires_in is not None else config.JWT_EXPIRES_IN),
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired") from None
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token") from None


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")

    payload = decode_token(credentials.credentials)
    user_id = payload.get("userId")
    user = find_one(User, id=str(user_id)) if user_id else None
    if user is None or not user.is_active:
        raise AuthenticationError("User not found or inactive")
    return user


def require_role(*roles: UserRole):
    """Dependency factory admitting users with one of ``roles``. ADMIN always passes."""
    allowed = {role.value for role in roles} | {UserRole.ADMIN.value}

    async def _dependency(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise PermissionDeniedError("Insufficient permissions")
        return user

    return _dependency


require_admin = require_role(UserRole.ADMIN)
require_merchant = require_role(UserRole.MERCHANT)
require_customer = require_role(UserRole.CUSTOMER)
require_delivery = require_role(UserRole.DELIVERY)

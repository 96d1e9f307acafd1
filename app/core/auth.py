"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification (7 day tokens, no server-side revocation)
- FastAPI dependencies for protected routes (role and owner checks)

Tokens are trusted for their whole lifetime: verification never re-reads the
account, so a role change or removal only takes effect after the token
expires.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import get_settings
from app.core.errors import Forbidden, InvalidToken, Unauthorized
from app.schemas.schemas import Role

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing
pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds
)

# Bearer token extractor (errors are raised by get_current_user instead)
bearer_scheme = HTTPBearer(auto_error=False)

INVALID_TOKEN_MESSAGE = "Invalid or expired token"


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


# ============================================================
# TOKEN SERVICE
# ============================================================

def create_access_token(
    subject_id: str,
    role: Role,
    email: str,
    issued_at: Optional[datetime] = None,
) -> str:
    """Create a signed JWT for an account, valid for jwt_expire_days."""
    issued_at = issued_at or datetime.now(timezone.utc)
    payload = {
        "sub": str(subject_id),
        "role": Role(role).value,
        "email": email,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.jwt_expire_days),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str, now: Optional[datetime] = None) -> dict:
    """
    Verify a JWT and return its payload.

    Expiry is checked against `now` (defaults to the current UTC time) so the
    validity window can be evaluated at any instant. A naive `now` is read as
    UTC.

    Raises:
        InvalidToken: bad signature, malformed payload or expired token
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"verify_exp": False},
        )
    except JWTError as e:
        raise InvalidToken(str(e)) from e

    for claim in ("sub", "role", "email", "exp"):
        if claim not in payload:
            raise InvalidToken(f"missing claim '{claim}'")
    try:
        payload["role"] = Role(payload["role"])
        expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
    except (ValueError, TypeError) as e:
        raise InvalidToken(str(e)) from e

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    if now > expires_at:
        raise InvalidToken("token expired")
    return payload


# ============================================================
# ACCESS CONTROL
# ============================================================

def authorize_role(identity: dict, allowed_roles: Iterable[Role]) -> None:
    """Raise Forbidden unless the identity's role is one of allowed_roles."""
    if identity.get("role") not in set(allowed_roles):
        raise Forbidden()


def authorize_owner_or_role(
    identity: dict, resource_owner_id, allowed_roles: Iterable[Role]
) -> None:
    """Pass if the identity owns the resource or holds one of allowed_roles."""
    if resource_owner_id is not None and str(identity.get("id")) == str(resource_owner_id):
        return
    authorize_role(identity, allowed_roles)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> dict:
    """
    FastAPI dependency - Get current authenticated user from the bearer token.

    Usage:
        @app.get("/protected")
        def route(user: dict = Depends(get_current_user)):
            return user
    """
    if credentials is None:
        raise Unauthorized("Missing or malformed Authorization header")

    try:
        payload = decode_token(credentials.credentials)
    except InvalidToken as e:
        logger.warning("Token rejected on %s %s: %s", request.method, request.url.path, e)
        raise Unauthorized(INVALID_TOKEN_MESSAGE)

    user = {"id": payload["sub"], "role": payload["role"], "email": payload["email"]}
    request.state.user = user
    return user


def require_roles(*roles: Role):
    """Dependency factory - authenticated user whose role is in `roles`."""
    def _checker(user: dict = Depends(get_current_user)) -> dict:
        authorize_role(user, roles)
        return user
    return _checker


def require_owner_or_roles(*roles: Role, param: str = "id"):
    """
    Dependency factory - the resource named by path parameter `param` must
    belong to the caller, or the caller must hold one of `roles`.
    """
    def _checker(request: Request, user: dict = Depends(get_current_user)) -> dict:
        authorize_owner_or_role(user, request.path_params.get(param), roles)
        return user
    return _checker


get_current_student = require_roles(Role.student)
get_current_company = require_roles(Role.recruiter)
get_current_tpo = require_roles(Role.tpo)

"""
Authentication Utility - passwords, session cookies and route gates.

Provides:
- Password hashing with scrypt (salted, memory-hard)
- Signed session cookies carrying an opaque session id
- FastAPI dependencies for protected routes (require_auth, require_role)
"""

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response, status
from jose import JWTError, jwt
from passlib.context import CryptContext

from placement_portal.core.config import Settings
from placement_portal.core.sessions import SessionStore
from placement_portal.schemas.schemas import UserRole
from placement_portal.services.storage import DatabaseStorage
from placement_portal.utils.logging import get_logger

logger = get_logger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["scrypt"], deprecated="auto")

# scrypt cost used by `<digest>.<salt>` hashes from the previous portal
LEGACY_SCRYPT_N = 16384
LEGACY_SCRYPT_R = 8
LEGACY_SCRYPT_P = 1

NOT_AUTHENTICATED = "Not authenticated"
INSUFFICIENT_PERMISSIONS = "Insufficient permissions"


def hash_password(password: str) -> str:
    """Hash password with scrypt and a random per-user salt."""
    return pwd_context.hash(password)


def _verify_legacy_password(plain_password: str, stored: str) -> bool:
    """Check a `<hex digest>.<hex salt>` hash written by the previous portal."""
    digest, _, salt = stored.partition(".")
    if not salt:
        return False
    try:
        expected = bytes.fromhex(digest)
    except ValueError:
        return False
    supplied = hashlib.scrypt(
        plain_password.encode("utf-8"), salt=salt.encode("utf-8"),
        n=LEGACY_SCRYPT_N, r=LEGACY_SCRYPT_R, p=LEGACY_SCRYPT_P, dklen=len(expected) or 64
    )
    return hmac.compare_digest(supplied, expected)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash (constant-time comparison)."""
    if is_legacy_hash(hashed_password):
        return _verify_legacy_password(plain_password, hashed_password)
    return pwd_context.verify(plain_password, hashed_password)


def is_legacy_hash(hashed_password: str) -> bool:
    return not hashed_password.startswith("$")


def password_needs_rehash(hashed_password: str) -> bool:
    """True for legacy hashes and for passlib hashes with outdated parameters."""
    return is_legacy_hash(hashed_password) or pwd_context.needs_update(hashed_password)


def create_session_token(session_id: str, settings: Settings) -> str:
    """Sign the session id so the cookie can't be forged or extended."""
    expire = datetime.now(timezone.utc) + timedelta(seconds=settings.session_max_age_seconds)
    return jwt.encode({"sid": session_id, "exp": expire}, settings.session_secret, algorithm=settings.jwt_algorithm)


def decode_session_token(token: str, settings: Settings) -> Optional[str]:
    """Return the session id, or None for a bad or expired token."""
    try:
        payload = jwt.decode(token, settings.session_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    return payload.get("sid")


class SessionManager:
    """Binds the session store to the session cookie."""

    def __init__(self, store: SessionStore, settings: Settings):
        self.store = store
        self.settings = settings

    def start(self, response: Response, user_id: int) -> str:
        """Issue a brand new session for user_id and set the cookie."""
        session_id = secrets.token_urlsafe(32)
        self.store.set(session_id, {"user_id": user_id}, self.settings.session_max_age_seconds)
        response.set_cookie(
            key=self.settings.session_cookie_name,
            value=create_session_token(session_id, self.settings),
            max_age=self.settings.session_max_age_seconds,
            httponly=True,
            samesite="lax",
            secure=self.settings.is_production,
        )
        return session_id

    def session_id(self, request: Request) -> Optional[str]:
        token = request.cookies.get(self.settings.session_cookie_name)
        if not token:
            return None
        return decode_session_token(token, self.settings)

    def load(self, request: Request) -> Optional[dict]:
        session_id = self.session_id(request)
        if not session_id:
            return None
        return self.store.get(session_id)

    def end(self, request: Request, response: Response) -> None:
        session_id = self.session_id(request)
        if session_id:
            self.store.destroy(session_id)
        response.delete_cookie(self.settings.session_cookie_name)


# ============================================================
# DEPENDENCIES
# ============================================================

def get_storage(request: Request) -> DatabaseStorage:
    return request.app.state.storage


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.sessions


async def require_auth(request: Request, sessions: SessionManager = Depends(get_session_manager)) -> int:
    """
    FastAPI dependency - session must carry a user id.

    Usage:
        @router.post("/logout")
        async def route(user_id: int = Depends(require_auth)):
            ...
    """
    data = sessions.load(request)
    if not data or not data.get("user_id"):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=NOT_AUTHENTICATED)
    return data["user_id"]


async def get_current_user(
    user_id: int = Depends(require_auth),
    storage: DatabaseStorage = Depends(get_storage)
) -> dict:
    """Resolve the full user record from the store on every request."""
    user = storage.get_user(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


def require_role(*roles: UserRole):
    """
    Dependency factory - authenticated AND role in the allowed set.

    Usage:
        @router.get("/stats")
        async def route(user: dict = Depends(require_role(UserRole.admin, UserRole.officer))):
            ...
    """
    allowed = {UserRole(r).value for r in roles}

    async def dependency(user: dict = Depends(get_current_user)) -> dict:
        if user["role"] not in allowed:
            logger.info("role_denied", user_id=user["id"], role=user["role"], allowed=sorted(allowed))
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=INSUFFICIENT_PERMISSIONS)
        return user

    return dependency


require_student = require_role(UserRole.student)
require_employer = require_role(UserRole.employer)
require_admin = require_role(UserRole.admin, UserRole.officer)

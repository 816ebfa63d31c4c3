"""
ChoreoNotes Backend — Credential Service
=========================================

What:  Registration, login and token verification.
How:   Passwords are hashed with bcrypt (cost from settings.bcrypt_rounds);
       tokens are HS256 JWTs signed with settings.jwt_secret, carrying the
       claims {id, email, iat, exp}.
Who:   Called by the /api/auth routes and the `get_current_user_id` dependency.

Flow:
    register:  email taken? → 409 │ hash → insert user → issue token
    login:     lookup by email → bcrypt check → issue token
               (unknown email and wrong password share one 401 message)
    verify:    signature + expiry → claims, anything else → 401

bcrypt is CPU-bound (~100ms at cost 10), so hashing and checking run in a
worker thread to keep the event loop responsive.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import bcrypt
import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from choreonotes.config import settings
from choreonotes.exceptions import ConflictError, NotFoundError, UnauthorizedError
from choreonotes.models.user import User
from choreonotes.services.users import UserDirectory

logger = logging.getLogger(__name__)

INVALID_LOGIN_MESSAGE = "Invalid email or password"


# ── Password hashing ──────────────────────────────────────────────────────


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or a password bcrypt refuses (>72 bytes)
        return False


# ── Tokens ────────────────────────────────────────────────────────────────


def create_access_token(
    user_id: int,
    email: str,
    expires_in: Optional[timedelta] = None,
) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "id": user_id,
        "email": email,
        "iat": now,
        "exp": now + (expires_in or timedelta(hours=settings.jwt_expires_hours)),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a token.

    Returns:
        The claims dict; `claims["id"]` is the user id

    Raises:
        UnauthorizedError: bad signature, expired, malformed, or missing `id`
    """
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError(message="Token has expired")
    except jwt.PyJWTError as e:
        logger.debug("Rejected token: %s", e)
        raise UnauthorizedError(message="Invalid or expired token")

    if not isinstance(claims.get("id"), int):
        raise UnauthorizedError(message="Invalid or expired token")
    return claims


# ── Service ───────────────────────────────────────────────────────────────


class CredentialService:
    """Account lifecycle on top of the user directory."""

    def __init__(self, db: AsyncSession):
        self.users = UserDirectory(db)

    async def register(self, email: str, password: str, username: str) -> Tuple[User, str]:
        if await self.users.email_exists(email):
            raise ConflictError(message="Email already registered")

        password_hash = await asyncio.to_thread(hash_password, password)
        user = await self.users.create(email, password_hash, username)
        return user, create_access_token(user.id, user.email)

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        user = await self.users.find_by_email(email)
        if user is None:
            logger.info("Login failed: unknown email")
            raise UnauthorizedError(message=INVALID_LOGIN_MESSAGE)

        valid = await asyncio.to_thread(verify_password, password, user.password_hash)
        if not valid:
            logger.info("Login failed: wrong password for user %s", user.id)
            raise UnauthorizedError(message=INVALID_LOGIN_MESSAGE)

        logger.info("User %s logged in", user.id)
        return user, create_access_token(user.id, user.email)

    async def get_current_user(self, user_id: int) -> User:
        user = await self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=user_id)
        return user

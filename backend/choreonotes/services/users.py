"""
ChoreoNotes Backend — User Directory
=====================================

What:  Persistence of user identity records.
Who:   Used by CredentialService (register/login/me) and the auth dependency.

Email comparison is exact: "Dancer@x.com" and "dancer@x.com" are two users.
"""

import logging
from typing import Optional

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from choreonotes.exceptions import ConflictError
from choreonotes.models.user import User

logger = logging.getLogger(__name__)


class UserDirectory:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, email: str, password_hash: str, username: str) -> User:
        """
        Insert a user and return it with its generated id and timestamp.

        Raises:
            ConflictError: the email is already registered (unique constraint)
        """
        user = User(email=email, password_hash=password_hash, username=username)
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent registration of the same email;
            # the request session rolls back when the error propagates
            raise ConflictError(
                message="Email already registered",
                context={"original_error": type(e).__name__},
            )
        logger.info("User %s registered (id=%s)", email, user.id)
        return user

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: int) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        result = await self.db.execute(select(exists().where(User.email == email)))
        return bool(result.scalar())

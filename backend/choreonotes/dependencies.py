"""
ChoreoNotes Backend — FastAPI Dependencies
===========================================

What:  Request-scoped wiring: the authenticated user id and the services
       bound to the request's database session.
How:   `get_current_user_id` reads `Authorization: Bearer <token>`, verifies
       the token and checks the user still exists. Service factories build a
       fresh instance around the session from `get_db_session`, so one
       request shares one transaction across all services it touches.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from choreonotes.database import get_db_session
from choreonotes.exceptions import NotFoundError, UnauthorizedError
from choreonotes.services.composition import RoutineComposition
from choreonotes.services.credentials import CredentialService, verify_token
from choreonotes.services.moves import MoveCatalog
from choreonotes.services.routines import RoutineCatalog

# auto_error=False: a missing header becomes our 401 body instead of FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_credential_service(db: AsyncSession = Depends(get_db_session)) -> CredentialService:
    return CredentialService(db)


def get_move_catalog(db: AsyncSession = Depends(get_db_session)) -> MoveCatalog:
    return MoveCatalog(db)


def get_routine_catalog(db: AsyncSession = Depends(get_db_session)) -> RoutineCatalog:
    return RoutineCatalog(db)


def get_routine_composition(
    db: AsyncSession = Depends(get_db_session),
    routines: RoutineCatalog = Depends(get_routine_catalog),
    moves: MoveCatalog = Depends(get_move_catalog),
) -> RoutineComposition:
    return RoutineComposition(db, routines, moves)


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    service: CredentialService = Depends(get_credential_service),
) -> int:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError(message="Access token required")

    claims = verify_token(credentials.credentials)
    try:
        user = await service.get_current_user(claims["id"])
    except NotFoundError:
        raise UnauthorizedError(message="User not found")
    return user.id

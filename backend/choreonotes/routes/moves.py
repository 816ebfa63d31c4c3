"""
ChoreoNotes Backend — Move Route Handlers
==========================================

What:  /api/moves CRUD for the authenticated user.
How:   Reads go straight to MoveCatalog. Update and delete first run
       `authorize_ownership`, so a missing move is a 404 and someone else's
       move is a 403.

Visibility:
    GET /api/moves lists only the caller's moves, but GET /api/moves/{id}
    returns any move by id, whoever owns it.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from choreonotes.dependencies import (
    get_current_user_id,
    get_move_catalog,
    get_routine_composition,
)
from choreonotes.models.move import Difficulty
from choreonotes.schemas.common import ErrorResponse, MessageResponse
from choreonotes.schemas.move import (
    MoveCreate,
    MoveEnvelope,
    MoveListResponse,
    MoveMutationResponse,
    MoveResponse,
    MoveUpdate,
)
from choreonotes.services.access import authorize_ownership
from choreonotes.services.composition import RoutineComposition
from choreonotes.services.moves import MoveCatalog
from choreonotes.services.patch import Patch

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/moves", tags=["Moves"])

OWNER_ONLY = {
    403: {"description": "Move belongs to another user", "model": ErrorResponse},
    404: {"description": "Move not found", "model": ErrorResponse},
}


@router.get("", response_model=MoveListResponse, summary="List my moves")
async def list_moves(
    q: Optional[str] = Query(default=None, description="Name search (alias of `search`)"),
    search: Optional[str] = Query(default=None, description="Case-insensitive name search"),
    difficulty_level: Optional[Difficulty] = Query(default=None),
    user_id: int = Depends(get_current_user_id),
    catalog: MoveCatalog = Depends(get_move_catalog),
) -> MoveListResponse:
    moves = await catalog.list(user_id, search=q or search, difficulty=difficulty_level)
    return MoveListResponse(
        moves=[MoveResponse.model_validate(m) for m in moves],
        count=len(moves),
    )


@router.get(
    "/{move_id}",
    response_model=MoveEnvelope,
    responses={404: {"description": "Move not found", "model": ErrorResponse}},
    summary="Get a move by id",
)
async def get_move(
    move_id: int,
    user_id: int = Depends(get_current_user_id),
    catalog: MoveCatalog = Depends(get_move_catalog),
) -> MoveEnvelope:
    move = await catalog.get_by_id(move_id)
    return MoveEnvelope(move=MoveResponse.model_validate(move))


@router.post(
    "",
    response_model=MoveMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a move",
)
async def create_move(
    body: MoveCreate,
    user_id: int = Depends(get_current_user_id),
    catalog: MoveCatalog = Depends(get_move_catalog),
) -> MoveMutationResponse:
    move = await catalog.create(user_id, **body.model_dump())
    return MoveMutationResponse(
        message="Move created successfully",
        move=MoveResponse.model_validate(move),
    )


@router.put(
    "/{move_id}",
    response_model=MoveMutationResponse,
    responses=OWNER_ONLY,
    summary="Update a move (partial)",
)
async def update_move(
    move_id: int,
    body: MoveUpdate,
    user_id: int = Depends(get_current_user_id),
    catalog: MoveCatalog = Depends(get_move_catalog),
) -> MoveMutationResponse:
    await authorize_ownership(user_id, move_id, catalog.find_by_id, resource="move")
    move = await catalog.update(move_id, Patch.from_schema(body))
    return MoveMutationResponse(
        message="Move updated successfully",
        move=MoveResponse.model_validate(move),
    )


@router.delete(
    "/{move_id}",
    response_model=MessageResponse,
    responses=OWNER_ONLY,
    summary="Delete a move",
)
async def delete_move(
    move_id: int,
    user_id: int = Depends(get_current_user_id),
    catalog: MoveCatalog = Depends(get_move_catalog),
    composition: RoutineComposition = Depends(get_routine_composition),
) -> MessageResponse:
    await authorize_ownership(user_id, move_id, catalog.find_by_id, resource="move")

    # Entries vanish through the FK cascade; their routines need a new duration
    affected = await composition.routine_ids_for_move(move_id)
    await catalog.delete(move_id)
    await composition.recompute_durations(affected)

    return MessageResponse(message="Move deleted successfully")

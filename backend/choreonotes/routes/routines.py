"""
ChoreoNotes Backend — Routine Route Handlers
=============================================

What:  /api/routines CRUD and the nested /api/routines/{id}/moves composition.
How:   Routine update/delete check ownership here; composition changes check
       it inside RoutineComposition (they must also vet the move).

Endpoints:
    GET    /api/routines                         my routines, newest first
    GET    /api/routines/{id}                    routine + ordered moves
    POST   /api/routines                         create (409 on duplicate name)
    PUT    /api/routines/{id}                    partial update (owner)
    DELETE /api/routines/{id}                    delete (owner)
    GET    /api/routines/{id}/moves              ordered moves
    POST   /api/routines/{id}/moves              add {move_id, order} (owner)
    PUT    /api/routines/{id}/moves/{move_id}    reorder {order} (owner)
    DELETE /api/routines/{id}/moves/{move_id}    remove (owner)
"""

import logging

from fastapi import APIRouter, Depends, status

from choreonotes.dependencies import (
    get_current_user_id,
    get_routine_catalog,
    get_routine_composition,
)
from choreonotes.schemas.common import ErrorResponse, MessageResponse
from choreonotes.schemas.routine import (
    RoutineCreate,
    RoutineDetail,
    RoutineEnvelope,
    RoutineListResponse,
    RoutineMoveCreate,
    RoutineMoveItem,
    RoutineMoveListResponse,
    RoutineMoveMutationResponse,
    RoutineMoveOrderUpdate,
    RoutineMoveResponse,
    RoutineMutationResponse,
    RoutineResponse,
    RoutineUpdate,
)
from choreonotes.services.access import authorize_ownership
from choreonotes.services.composition import RoutineComposition
from choreonotes.services.patch import Patch
from choreonotes.services.routines import RoutineCatalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/routines", tags=["Routines"])

OWNER_ONLY = {
    403: {"description": "Routine belongs to another user", "model": ErrorResponse},
    404: {"description": "Routine not found", "model": ErrorResponse},
}


# ── Routines ──────────────────────────────────────────────────────────────


@router.get("", response_model=RoutineListResponse, summary="List my routines")
async def list_routines(
    user_id: int = Depends(get_current_user_id),
    catalog: RoutineCatalog = Depends(get_routine_catalog),
) -> RoutineListResponse:
    routines = await catalog.list(user_id)
    return RoutineListResponse(
        routines=[RoutineResponse.model_validate(r) for r in routines],
        count=len(routines),
    )


@router.get(
    "/{routine_id}",
    response_model=RoutineEnvelope,
    responses={404: {"description": "Routine not found", "model": ErrorResponse}},
    summary="Get a routine with its moves",
)
async def get_routine(
    routine_id: int,
    user_id: int = Depends(get_current_user_id),
    catalog: RoutineCatalog = Depends(get_routine_catalog),
) -> RoutineEnvelope:
    detail = await catalog.get_detail(routine_id)
    return RoutineEnvelope(routine=RoutineDetail.model_validate(detail))


@router.post(
    "",
    response_model=RoutineMutationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Routine name already exists", "model": ErrorResponse}},
    summary="Create a routine",
)
async def create_routine(
    body: RoutineCreate,
    user_id: int = Depends(get_current_user_id),
    catalog: RoutineCatalog = Depends(get_routine_catalog),
) -> RoutineMutationResponse:
    routine = await catalog.create(user_id, **body.model_dump())
    return RoutineMutationResponse(
        message="Routine created successfully",
        routine=RoutineResponse.model_validate(routine),
    )


@router.put(
    "/{routine_id}",
    response_model=RoutineMutationResponse,
    responses={
        **OWNER_ONLY,
        409: {"description": "Routine name already exists", "model": ErrorResponse},
    },
    summary="Update a routine (partial)",
)
async def update_routine(
    routine_id: int,
    body: RoutineUpdate,
    user_id: int = Depends(get_current_user_id),
    catalog: RoutineCatalog = Depends(get_routine_catalog),
) -> RoutineMutationResponse:
    await authorize_ownership(user_id, routine_id, catalog.find_by_id, resource="routine")
    routine = await catalog.update(routine_id, Patch.from_schema(body), user_id)
    return RoutineMutationResponse(
        message="Routine updated successfully",
        routine=RoutineResponse.model_validate(routine),
    )


@router.delete(
    "/{routine_id}",
    response_model=MessageResponse,
    responses=OWNER_ONLY,
    summary="Delete a routine",
)
async def delete_routine(
    routine_id: int,
    user_id: int = Depends(get_current_user_id),
    catalog: RoutineCatalog = Depends(get_routine_catalog),
) -> MessageResponse:
    await authorize_ownership(user_id, routine_id, catalog.find_by_id, resource="routine")
    await catalog.delete(routine_id)
    return MessageResponse(message="Routine deleted successfully")


# ── Composition ───────────────────────────────────────────────────────────


@router.get(
    "/{routine_id}/moves",
    response_model=RoutineMoveListResponse,
    responses={404: {"description": "Routine not found", "model": ErrorResponse}},
    summary="List a routine's moves in order",
)
async def list_routine_moves(
    routine_id: int,
    user_id: int = Depends(get_current_user_id),
    composition: RoutineComposition = Depends(get_routine_composition),
) -> RoutineMoveListResponse:
    items = await composition.list_moves(routine_id)
    return RoutineMoveListResponse(
        moves=[RoutineMoveItem.model_validate(item) for item in items],
        count=len(items),
    )


@router.post(
    "/{routine_id}/moves",
    response_model=RoutineMoveMutationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        403: {"description": "Routine or move belongs to another user", "model": ErrorResponse},
        404: {"description": "Routine or move not found", "model": ErrorResponse},
    },
    summary="Add a move to a routine",
)
async def add_routine_move(
    routine_id: int,
    body: RoutineMoveCreate,
    user_id: int = Depends(get_current_user_id),
    composition: RoutineComposition = Depends(get_routine_composition),
) -> RoutineMoveMutationResponse:
    entry = await composition.add_move(routine_id, body.move_id, body.order, user_id)
    return RoutineMoveMutationResponse(
        message="Move added to routine successfully",
        routine_move=RoutineMoveResponse.model_validate(entry),
    )


@router.put(
    "/{routine_id}/moves/{move_id}",
    response_model=RoutineMoveMutationResponse,
    responses=OWNER_ONLY,
    summary="Change a move's position in a routine",
)
async def update_routine_move(
    routine_id: int,
    move_id: int,
    body: RoutineMoveOrderUpdate,
    user_id: int = Depends(get_current_user_id),
    composition: RoutineComposition = Depends(get_routine_composition),
) -> RoutineMoveMutationResponse:
    entry = await composition.update_order(routine_id, move_id, body.order, user_id)
    return RoutineMoveMutationResponse(
        message="Move order updated successfully",
        routine_move=RoutineMoveResponse.model_validate(entry),
    )


@router.delete(
    "/{routine_id}/moves/{move_id}",
    response_model=MessageResponse,
    responses=OWNER_ONLY,
    summary="Remove a move from a routine",
)
async def remove_routine_move(
    routine_id: int,
    move_id: int,
    user_id: int = Depends(get_current_user_id),
    composition: RoutineComposition = Depends(get_routine_composition),
) -> MessageResponse:
    await composition.remove_move(routine_id, move_id, user_id)
    return MessageResponse(message="Move removed from routine successfully")

"""
ChoreoNotes Backend — Routine and Composition Schemas
======================================================

What:  Request/response models for /api/routines and its nested
       /api/routines/{id}/moves resource.

Notes:
    - duration_minutes is accepted on create only; afterwards it is the
      composition aggregate maintained by RoutineComposition
    - RoutineMoveItem is a full move plus its order_index inside the routine
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from choreonotes.schemas.move import MoveResponse, blank_to_none


class RoutineCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200, examples=["Warmup"])
    description: Optional[str] = None
    duration_minutes: Optional[int] = Field(default=None, ge=0)

    model_config = {"extra": "forbid"}

    @field_validator("description", mode="before")
    @classmethod
    def normalize_blank(cls, v: Any) -> Any:
        return blank_to_none(v)


class RoutineUpdate(BaseModel):
    """Partial update of name and/or description."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None

    model_config = {"extra": "forbid"}

    @field_validator("description", mode="before")
    @classmethod
    def normalize_blank(cls, v: Any) -> Any:
        return blank_to_none(v)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("Routine name cannot be null")
        return v


class RoutineResponse(BaseModel):
    id: int
    user_id: int
    name: str
    description: Optional[str] = None
    duration_minutes: Optional[int] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class RoutineMoveItem(MoveResponse):
    order_index: int


class RoutineDetail(RoutineResponse):
    moves: List[RoutineMoveItem] = Field(default_factory=list)


class RoutineEnvelope(BaseModel):
    routine: RoutineDetail


class RoutineMutationResponse(BaseModel):
    message: str
    routine: RoutineResponse


class RoutineListResponse(BaseModel):
    routines: List[RoutineResponse]
    count: int


# ── Composition ───────────────────────────────────────────────────────────


class RoutineMoveCreate(BaseModel):
    move_id: int
    order: int = Field(ge=0, description="Position in the routine (ascending)")

    model_config = {"extra": "forbid"}


class RoutineMoveOrderUpdate(BaseModel):
    order: int = Field(ge=0)

    model_config = {"extra": "forbid"}


class RoutineMoveResponse(BaseModel):
    id: int
    routine_id: int
    move_id: int
    order_index: int

    model_config = {"from_attributes": True}


class RoutineMoveMutationResponse(BaseModel):
    message: str
    routine_move: RoutineMoveResponse


class RoutineMoveListResponse(BaseModel):
    moves: List[RoutineMoveItem]
    count: int

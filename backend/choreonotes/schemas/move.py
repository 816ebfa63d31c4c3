"""
ChoreoNotes Backend — Move Schemas
===================================

What:  Request models for creating and partially updating moves, and the
       response envelopes of the /api/moves routes.

Normalization rules (applied before the services see the data):
    - description / video_url: empty string → null
    - video_url: http(s) link on youtube.com, youtu.be or vimeo.com, ≤500 chars
    - difficulty_level: one of beginner / intermediate / advanced
    - MoveUpdate: only keys present in the JSON body count as "set";
      `name` may be omitted but not set to null
"""

import re
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from choreonotes.models.move import Difficulty

VIDEO_URL_PATTERN = re.compile(
    r"^https?://(www\.)?(youtube\.com|youtu\.be|vimeo\.com)([/?#]|$)",
    re.IGNORECASE,
)


def blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and v.strip() == "":
        return None
    return v


def check_video_url(v: Optional[str]) -> Optional[str]:
    if v is not None and not VIDEO_URL_PATTERN.match(v):
        raise ValueError("Video URL must be from YouTube or Vimeo")
    return v


class MoveCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200, examples=["Pirouette"])
    description: Optional[str] = None
    video_url: Optional[str] = Field(default=None, max_length=500)
    difficulty_level: Optional[Difficulty] = None

    model_config = {"extra": "forbid"}

    @field_validator("description", "video_url", mode="before")
    @classmethod
    def normalize_blank(cls, v: Any) -> Any:
        return blank_to_none(v)

    @field_validator("video_url")
    @classmethod
    def validate_video_url(cls, v: Optional[str]) -> Optional[str]:
        return check_video_url(v)


class MoveUpdate(BaseModel):
    """Partial update: every field optional, absent fields stay untouched."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    video_url: Optional[str] = Field(default=None, max_length=500)
    difficulty_level: Optional[Difficulty] = None

    model_config = {"extra": "forbid"}

    @field_validator("description", "video_url", mode="before")
    @classmethod
    def normalize_blank(cls, v: Any) -> Any:
        return blank_to_none(v)

    @field_validator("video_url")
    @classmethod
    def validate_video_url(cls, v: Optional[str]) -> Optional[str]:
        return check_video_url(v)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("Move name cannot be null")
        return v


class MoveResponse(BaseModel):
    id: int
    user_id: int
    name: str
    description: Optional[str] = None
    video_url: Optional[str] = None
    difficulty_level: Optional[Difficulty] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class MoveEnvelope(BaseModel):
    move: MoveResponse


class MoveMutationResponse(BaseModel):
    message: str
    move: MoveResponse


class MoveListResponse(BaseModel):
    moves: List[MoveResponse]
    count: int

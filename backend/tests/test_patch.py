"""
ChoreoNotes Backend — Partial Update Tests
===========================================

What we test:
    ✅ Only fields present in the request body end up in the patch
    ✅ An explicit null is kept (clears the column)
    ✅ build_update refuses columns outside PATCHABLE and empty patches
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from choreonotes.models.move import Difficulty, Move
from choreonotes.models.routine import Routine
from choreonotes.schemas.move import MoveUpdate
from choreonotes.schemas.routine import RoutineUpdate
from choreonotes.services.patch import Patch, build_update


class TestPatchFromSchema:
    def test_only_sent_fields_are_kept(self):
        patch = Patch.from_schema(MoveUpdate.model_validate({"name": "Fouetté"}))
        assert patch.fields == {"name": "Fouetté"}
        assert "description" not in patch

    def test_explicit_null_is_kept(self):
        patch = Patch.from_schema(MoveUpdate.model_validate({"description": None}))
        assert patch.fields == {"description": None}
        assert "description" in patch

    def test_blank_string_becomes_null(self):
        patch = Patch.from_schema(MoveUpdate.model_validate({"video_url": ""}))
        assert patch.fields == {"video_url": None}

    def test_empty_body_is_an_empty_patch(self):
        patch = Patch.from_schema(MoveUpdate.model_validate({}))
        assert not patch
        assert patch.fields == {}

    def test_difficulty_is_parsed_to_enum(self):
        patch = Patch.from_schema(MoveUpdate.model_validate({"difficulty_level": "advanced"}))
        assert patch.get("difficulty_level") is Difficulty.ADVANCED

    def test_null_name_is_rejected(self):
        with pytest.raises(PydanticValidationError):
            MoveUpdate.model_validate({"name": None})
        with pytest.raises(PydanticValidationError):
            RoutineUpdate.model_validate({"name": None})


class TestBuildUpdate:
    def test_sets_only_patched_columns(self):
        stmt = build_update(Move, 3, Patch.of(name="Pirouette"))
        sql = str(stmt.compile())
        assert sql.startswith("UPDATE moves SET name=")
        assert "description" not in sql
        assert "WHERE moves.id =" in sql

    def test_rejects_unknown_column(self):
        with pytest.raises(ValueError):
            build_update(Move, 3, Patch.of(user_id=2))

    def test_rejects_id_and_timestamp(self):
        with pytest.raises(ValueError):
            build_update(Routine, 3, Patch.of(id=9, created_at=None))

    def test_routine_duration_is_not_patchable(self):
        with pytest.raises(ValueError):
            build_update(Routine, 3, Patch.of(duration_minutes=5))

    def test_rejects_empty_patch(self):
        with pytest.raises(ValueError):
            build_update(Move, 3, Patch())

"""
ChoreoNotes Backend — Access Control Tests
===========================================

Pure unit tests: the accessor is an AsyncMock, no database involved.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from choreonotes.exceptions import ForbiddenError, NotFoundError
from choreonotes.services.access import authorize_ownership


def owned_by(user_id):
    record = MagicMock()
    record.user_id = user_id
    return record


class TestAuthorizeOwnership:
    @pytest.mark.asyncio
    async def test_owner_gets_the_record(self):
        record = owned_by(1)
        accessor = AsyncMock(return_value=record)

        result = await authorize_ownership(1, 42, accessor, resource="move")

        assert result is record
        accessor.assert_awaited_once_with(42)

    @pytest.mark.asyncio
    async def test_missing_record_is_not_found(self):
        accessor = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError) as exc_info:
            await authorize_ownership(1, 42, accessor, resource="routine")
        assert exc_info.value.resource == "routine"

    @pytest.mark.asyncio
    async def test_someone_elses_record_is_forbidden(self):
        accessor = AsyncMock(return_value=owned_by(2))

        with pytest.raises(ForbiddenError) as exc_info:
            await authorize_ownership(1, 42, accessor, resource="move")
        assert exc_info.value.message == "Access denied"

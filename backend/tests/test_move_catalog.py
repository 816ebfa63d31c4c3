"""
ChoreoNotes Backend — Move Catalog Tests
=========================================

Runs against a real (temporary SQLite) database.

What we test:
    ✅ create / get / list scoped to the owner, newest first
    ✅ search is a case-insensitive substring match, wildcards are literal
    ✅ difficulty filter combines with search
    ✅ partial update keeps omitted fields, empty patch is a no-op
    ✅ update / delete of a missing move raise NotFoundError
"""

import pytest

from choreonotes.exceptions import NotFoundError
from choreonotes.models.move import Difficulty
from choreonotes.services.moves import MoveCatalog, escape_like
from choreonotes.services.patch import Patch


class TestMoveCatalogCreateAndRead:
    @pytest.mark.asyncio
    async def test_create_and_get(self, db_session, make_user):
        owner = await make_user()
        catalog = MoveCatalog(db_session)

        move = await catalog.create(
            owner.id,
            name="Pirouette",
            description="Full turn on one leg",
            difficulty_level=Difficulty.INTERMEDIATE,
        )

        fetched = await catalog.get_by_id(move.id)
        assert fetched.name == "Pirouette"
        assert fetched.user_id == owner.id
        assert fetched.difficulty_level is Difficulty.INTERMEDIATE
        assert fetched.video_url is None
        assert fetched.created_at is not None

    @pytest.mark.asyncio
    async def test_get_missing_raises(self, db_session):
        with pytest.raises(NotFoundError):
            await MoveCatalog(db_session).get_by_id(404)

    @pytest.mark.asyncio
    async def test_find_missing_returns_none(self, db_session):
        assert await MoveCatalog(db_session).find_by_id(404) is None

    @pytest.mark.asyncio
    async def test_list_only_own_moves_newest_first(self, db_session, make_user):
        alice = await make_user()
        bob = await make_user()
        catalog = MoveCatalog(db_session)

        first = await catalog.create(alice.id, name="Plié")
        second = await catalog.create(alice.id, name="Jeté")
        await catalog.create(bob.id, name="Chassé")

        moves = await catalog.list(alice.id)
        assert [m.id for m in moves] == [second.id, first.id]


class TestMoveCatalogFilters:
    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_substring(self, db_session, make_user):
        owner = await make_user()
        catalog = MoveCatalog(db_session)
        await catalog.create(owner.id, name="Pirouette")
        await catalog.create(owner.id, name="Grand Jeté")

        names = [m.name for m in await catalog.list(owner.id, search="ROUET")]
        assert names == ["Pirouette"]

    @pytest.mark.asyncio
    async def test_search_wildcards_match_literally(self, db_session, make_user):
        owner = await make_user()
        catalog = MoveCatalog(db_session)
        await catalog.create(owner.id, name="100% spin")
        await catalog.create(owner.id, name="Box step")

        assert [m.name for m in await catalog.list(owner.id, search="%")] == ["100% spin"]
        assert await catalog.list(owner.id, search="_") == []

    @pytest.mark.asyncio
    async def test_difficulty_and_search_combine(self, db_session, make_user):
        owner = await make_user()
        catalog = MoveCatalog(db_session)
        await catalog.create(owner.id, name="Spin A", difficulty_level=Difficulty.BEGINNER)
        await catalog.create(owner.id, name="Spin B", difficulty_level=Difficulty.ADVANCED)
        await catalog.create(owner.id, name="Slide", difficulty_level=Difficulty.ADVANCED)

        moves = await catalog.list(owner.id, search="spin", difficulty=Difficulty.ADVANCED)
        assert [m.name for m in moves] == ["Spin B"]

    def test_escape_like(self):
        assert escape_like("50%_off\\") == "50\\%\\_off\\\\"


class TestMoveCatalogMutations:
    @pytest.mark.asyncio
    async def test_partial_update_keeps_omitted_fields(self, db_session, make_user):
        owner = await make_user()
        catalog = MoveCatalog(db_session)
        move = await catalog.create(
            owner.id,
            name="Pirouette",
            description="Turn",
            video_url="https://youtu.be/abc",
            difficulty_level=Difficulty.BEGINNER,
        )

        updated = await catalog.update(move.id, Patch.of(name="Double Pirouette"))

        assert updated.name == "Double Pirouette"
        assert updated.description == "Turn"
        assert updated.video_url == "https://youtu.be/abc"
        assert updated.difficulty_level is Difficulty.BEGINNER

    @pytest.mark.asyncio
    async def test_update_can_clear_a_field(self, db_session, make_user):
        owner = await make_user()
        catalog = MoveCatalog(db_session)
        move = await catalog.create(owner.id, name="Pirouette", description="Turn")

        updated = await catalog.update(move.id, Patch.of(description=None))
        assert updated.description is None
        assert updated.name == "Pirouette"

    @pytest.mark.asyncio
    async def test_empty_patch_returns_current(self, db_session, make_user):
        owner = await make_user()
        catalog = MoveCatalog(db_session)
        move = await catalog.create(owner.id, name="Pirouette")

        same = await catalog.update(move.id, Patch())
        assert same.id == move.id
        assert same.name == "Pirouette"

    @pytest.mark.asyncio
    async def test_update_missing_raises(self, db_session):
        with pytest.raises(NotFoundError):
            await MoveCatalog(db_session).update(404, Patch.of(name="Ghost"))

    @pytest.mark.asyncio
    async def test_delete(self, db_session, make_user):
        owner = await make_user()
        catalog = MoveCatalog(db_session)
        move = await catalog.create(owner.id, name="Pirouette")

        assert await catalog.delete(move.id) is True
        assert await catalog.find_by_id(move.id) is None

        with pytest.raises(NotFoundError):
            await catalog.delete(move.id)

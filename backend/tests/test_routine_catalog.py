"""
ChoreoNotes Backend — Routine Catalog Tests
============================================

What we test:
    ✅ Routine names are unique per owner, not globally
    ✅ Renaming re-checks uniqueness but ignores the routine itself
    ✅ get_detail attaches the ordered composition
    ✅ Deleting a routine removes its entries but not the moves
"""

import pytest
from sqlalchemy import func, select

from choreonotes.exceptions import ConflictError, NotFoundError
from choreonotes.models.routine import RoutineMove
from choreonotes.services.moves import MoveCatalog
from choreonotes.services.patch import Patch
from choreonotes.services.routines import NAME_TAKEN_MESSAGE, RoutineCatalog


class TestRoutineNames:
    @pytest.mark.asyncio
    async def test_duplicate_name_for_same_owner_conflicts(self, db_session, make_user):
        owner = await make_user()
        catalog = RoutineCatalog(db_session)
        await catalog.create(owner.id, name="Warmup")

        with pytest.raises(ConflictError) as exc_info:
            await catalog.create(owner.id, name="Warmup")
        assert exc_info.value.message == NAME_TAKEN_MESSAGE

    @pytest.mark.asyncio
    async def test_same_name_for_different_owners(self, db_session, make_user):
        alice = await make_user()
        bob = await make_user()
        catalog = RoutineCatalog(db_session)

        a = await catalog.create(alice.id, name="Warmup")
        b = await catalog.create(bob.id, name="Warmup")
        assert a.id != b.id

    @pytest.mark.asyncio
    async def test_is_name_unique_with_exclusion(self, db_session, make_user):
        owner = await make_user()
        catalog = RoutineCatalog(db_session)
        routine = await catalog.create(owner.id, name="Warmup")

        assert not await catalog.is_name_unique("Warmup", owner.id)
        assert await catalog.is_name_unique("Warmup", owner.id, exclude_id=routine.id)
        assert await catalog.is_name_unique("Cooldown", owner.id)

    @pytest.mark.asyncio
    async def test_rename_onto_sibling_conflicts(self, db_session, make_user):
        owner = await make_user()
        catalog = RoutineCatalog(db_session)
        await catalog.create(owner.id, name="Warmup")
        cooldown = await catalog.create(owner.id, name="Cooldown")

        with pytest.raises(ConflictError):
            await catalog.update(cooldown.id, Patch.of(name="Warmup"), owner.id)

    @pytest.mark.asyncio
    async def test_rename_to_own_name_is_fine(self, db_session, make_user):
        owner = await make_user()
        catalog = RoutineCatalog(db_session)
        routine = await catalog.create(owner.id, name="Warmup", description="old")

        updated = await catalog.update(
            routine.id, Patch.of(name="Warmup", description="new"), owner.id
        )
        assert updated.name == "Warmup"
        assert updated.description == "new"


class TestRoutineCrud:
    @pytest.mark.asyncio
    async def test_create_keeps_given_duration(self, db_session, make_user):
        owner = await make_user()
        routine = await RoutineCatalog(db_session).create(
            owner.id, name="Warmup", duration_minutes=15
        )
        assert routine.duration_minutes == 15

    @pytest.mark.asyncio
    async def test_create_without_duration_is_null(self, db_session, make_user):
        owner = await make_user()
        routine = await RoutineCatalog(db_session).create(owner.id, name="Warmup")
        assert routine.duration_minutes is None

    @pytest.mark.asyncio
    async def test_list_is_per_owner_newest_first(self, db_session, make_user):
        alice = await make_user()
        bob = await make_user()
        catalog = RoutineCatalog(db_session)
        first = await catalog.create(alice.id, name="One")
        second = await catalog.create(alice.id, name="Two")
        await catalog.create(bob.id, name="Three")

        assert [r.id for r in await catalog.list(alice.id)] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_partial_update_keeps_description(self, db_session, make_user):
        owner = await make_user()
        catalog = RoutineCatalog(db_session)
        routine = await catalog.create(owner.id, name="Warmup", description="Stretch first")

        updated = await catalog.update(routine.id, Patch.of(name="Morning Warmup"), owner.id)
        assert updated.name == "Morning Warmup"
        assert updated.description == "Stretch first"

    @pytest.mark.asyncio
    async def test_update_missing_raises(self, db_session, make_user):
        owner = await make_user()
        with pytest.raises(NotFoundError):
            await RoutineCatalog(db_session).update(404, Patch.of(description="x"), owner.id)

    @pytest.mark.asyncio
    async def test_get_detail_orders_moves(self, db_session, make_user):
        owner = await make_user()
        routines = RoutineCatalog(db_session)
        moves = MoveCatalog(db_session)
        routine = await routines.create(owner.id, name="Warmup")
        plie = await moves.create(owner.id, name="Plié")
        jete = await moves.create(owner.id, name="Jeté")
        db_session.add_all([
            RoutineMove(routine_id=routine.id, move_id=jete.id, order_index=2),
            RoutineMove(routine_id=routine.id, move_id=plie.id, order_index=1),
        ])
        await db_session.flush()

        detail = await routines.get_detail(routine.id)

        assert detail["name"] == "Warmup"
        assert [(m["name"], m["order_index"]) for m in detail["moves"]] == [
            ("Plié", 1),
            ("Jeté", 2),
        ]

    @pytest.mark.asyncio
    async def test_delete_cascades_entries_only(self, db_session, make_user):
        owner = await make_user()
        routines = RoutineCatalog(db_session)
        moves = MoveCatalog(db_session)
        routine = await routines.create(owner.id, name="Warmup")
        move = await moves.create(owner.id, name="Plié")
        db_session.add(RoutineMove(routine_id=routine.id, move_id=move.id, order_index=0))
        await db_session.flush()

        assert await routines.delete(routine.id) is True

        remaining = await db_session.execute(select(func.count()).select_from(RoutineMove))
        assert remaining.scalar_one() == 0
        assert await moves.find_by_id(move.id) is not None
        with pytest.raises(NotFoundError):
            await routines.get_by_id(routine.id)

"""
ChoreoNotes Backend — Routine Composition
==========================================

What:  Manages the ordered (routine, move) entries and keeps each routine's
       duration equal to its number of entries (one minute per move).
How:   Every mutation checks ownership through `authorize_ownership`, writes
       the entry, then recomputes the duration from a COUNT(*). All of it runs
       on the request's session, so insert and recompute commit together.
Who:   Called by the /api/routines/{id}/moves routes, and by the move delete
       route to refresh routines that lost entries through the FK cascade.

Entry lifecycle:
    absent ──add_move──▶ present ──update_order──▶ present ──remove_move──▶ absent

The same move may be added to a routine more than once. update_order and
remove_move act on every entry matching (routine, move).
"""

import logging
from typing import Any, Dict, Iterable, List

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from choreonotes.exceptions import NotFoundError
from choreonotes.models.routine import RoutineMove
from choreonotes.services.access import authorize_ownership
from choreonotes.services.moves import MoveCatalog
from choreonotes.services.routines import RoutineCatalog

logger = logging.getLogger(__name__)

ENTRY_MISSING_MESSAGE = "Move not found in routine"


class RoutineComposition:
    def __init__(self, db: AsyncSession, routines: RoutineCatalog, moves: MoveCatalog):
        self.db = db
        self.routines = routines
        self.moves = moves

    async def list_moves(self, routine_id: int) -> List[Dict[str, Any]]:
        await self.routines.get_by_id(routine_id)
        return await self.routines.ordered_moves(routine_id)

    async def add_move(
        self,
        routine_id: int,
        move_id: int,
        order_index: int,
        acting_user_id: int,
    ) -> RoutineMove:
        await authorize_ownership(
            acting_user_id, routine_id, self.routines.find_by_id, resource="routine"
        )
        await authorize_ownership(
            acting_user_id, move_id, self.moves.find_by_id, resource="move"
        )

        entry = RoutineMove(routine_id=routine_id, move_id=move_id, order_index=order_index)
        self.db.add(entry)
        await self.db.flush()

        minutes = await self.recompute_duration(routine_id)
        logger.info(
            "Move %s added to routine %s at %s (duration now %s)",
            move_id,
            routine_id,
            order_index,
            minutes,
        )
        return entry

    async def update_order(
        self,
        routine_id: int,
        move_id: int,
        new_order: int,
        acting_user_id: int,
    ) -> RoutineMove:
        await authorize_ownership(
            acting_user_id, routine_id, self.routines.find_by_id, resource="routine"
        )

        result = await self.db.execute(
            update(RoutineMove)
            .where(RoutineMove.routine_id == routine_id, RoutineMove.move_id == move_id)
            .values(order_index=new_order)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError(message=ENTRY_MISSING_MESSAGE, resource="routine_move")

        entries = await self._entries(routine_id, move_id)
        return entries[0]

    async def remove_move(self, routine_id: int, move_id: int, acting_user_id: int) -> bool:
        await authorize_ownership(
            acting_user_id, routine_id, self.routines.find_by_id, resource="routine"
        )

        result = await self.db.execute(
            delete(RoutineMove).where(
                RoutineMove.routine_id == routine_id,
                RoutineMove.move_id == move_id,
            )
        )
        if result.rowcount == 0:
            raise NotFoundError(message=ENTRY_MISSING_MESSAGE, resource="routine_move")

        minutes = await self.recompute_duration(routine_id)
        logger.info(
            "Move %s removed from routine %s (duration now %s)", move_id, routine_id, minutes
        )
        return True

    # ── Duration aggregate ────────────────────────────────────────────────

    async def recompute_duration(self, routine_id: int) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(RoutineMove).where(
                RoutineMove.routine_id == routine_id
            )
        )
        minutes = int(result.scalar_one())
        await self.routines.set_duration(routine_id, minutes)
        return minutes

    async def recompute_durations(self, routine_ids: Iterable[int]) -> None:
        for routine_id in routine_ids:
            await self.recompute_duration(routine_id)

    async def routine_ids_for_move(self, move_id: int) -> List[int]:
        result = await self.db.execute(
            select(RoutineMove.routine_id).where(RoutineMove.move_id == move_id).distinct()
        )
        return list(result.scalars().all())

    async def _entries(self, routine_id: int, move_id: int) -> List[RoutineMove]:
        result = await self.db.execute(
            select(RoutineMove)
            .where(RoutineMove.routine_id == routine_id, RoutineMove.move_id == move_id)
            .order_by(RoutineMove.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

"""
ChoreoNotes Backend — Routine Catalog
======================================

What:  CRUD over routines, per-owner name uniqueness, and the duration
       aggregate written by RoutineComposition.
Who:   Called by the /api/routines routes and by RoutineComposition.

Name uniqueness is enforced twice: `is_name_unique` gives the friendly 409
before writing, and the (user_id, name) unique constraint catches the race
where two requests pass the check at the same time.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, desc, exists, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from choreonotes.exceptions import ConflictError, NotFoundError
from choreonotes.models.move import Move
from choreonotes.models.routine import Routine, RoutineMove
from choreonotes.services.patch import Patch, build_update

logger = logging.getLogger(__name__)

NAME_TAKEN_MESSAGE = "Routine name already exists"


class RoutineCatalog:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def is_name_unique(
        self,
        name: str,
        owner_id: int,
        exclude_id: Optional[int] = None,
    ) -> bool:
        clause = exists().where(Routine.user_id == owner_id, Routine.name == name)
        if exclude_id is not None:
            clause = clause.where(Routine.id != exclude_id)
        result = await self.db.execute(select(clause))
        return not result.scalar()

    async def create(
        self,
        owner_id: int,
        name: str,
        description: Optional[str] = None,
        duration_minutes: Optional[int] = None,
    ) -> Routine:
        if not await self.is_name_unique(name, owner_id):
            logger.info("User %s already has a routine named %r", owner_id, name)
            raise ConflictError(message=NAME_TAKEN_MESSAGE)

        routine = Routine(
            user_id=owner_id,
            name=name,
            description=description,
            duration_minutes=duration_minutes,
        )
        self.db.add(routine)
        try:
            await self.db.flush()
        except IntegrityError:
            raise ConflictError(message=NAME_TAKEN_MESSAGE)
        await self.db.refresh(routine)
        logger.info("Routine %s created by user %s", routine.id, owner_id)
        return routine

    async def list(self, owner_id: int) -> List[Routine]:
        query = (
            select(Routine)
            .where(Routine.user_id == owner_id)
            .order_by(desc(Routine.created_at), desc(Routine.id))
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find_by_id(self, routine_id: int) -> Optional[Routine]:
        query = (
            select(Routine)
            .where(Routine.id == routine_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_id(self, routine_id: int) -> Routine:
        routine = await self.find_by_id(routine_id)
        if routine is None:
            raise NotFoundError(resource="routine", resource_id=routine_id)
        return routine

    async def get_detail(self, routine_id: int) -> Dict[str, Any]:
        """
        A routine with its composition attached under `moves`.

        Each item is the move's columns plus the entry's `order_index`,
        ascending by order (ties by entry id).
        """
        routine = await self.get_by_id(routine_id)
        return {
            "id": routine.id,
            "user_id": routine.user_id,
            "name": routine.name,
            "description": routine.description,
            "duration_minutes": routine.duration_minutes,
            "created_at": routine.created_at,
            "moves": await self.ordered_moves(routine_id),
        }

    async def ordered_moves(self, routine_id: int) -> List[Dict[str, Any]]:
        query = (
            select(Move, RoutineMove.order_index)
            .join(RoutineMove, RoutineMove.move_id == Move.id)
            .where(RoutineMove.routine_id == routine_id)
            .order_by(RoutineMove.order_index, RoutineMove.id)
        )
        result = await self.db.execute(query)
        return [
            {
                "id": move.id,
                "user_id": move.user_id,
                "name": move.name,
                "description": move.description,
                "video_url": move.video_url,
                "difficulty_level": move.difficulty_level,
                "created_at": move.created_at,
                "order_index": order_index,
            }
            for move, order_index in result.all()
        ]

    async def update(self, routine_id: int, patch: Patch, acting_user_id: int) -> Routine:
        """
        Apply a partial update.

        A new name must be unique among `acting_user_id`'s other routines.
        """
        if not patch:
            return await self.get_by_id(routine_id)

        if "name" in patch and not await self.is_name_unique(
            patch.get("name"), acting_user_id, exclude_id=routine_id
        ):
            raise ConflictError(message=NAME_TAKEN_MESSAGE)

        try:
            result = await self.db.execute(build_update(Routine, routine_id, patch))
        except IntegrityError:
            raise ConflictError(message=NAME_TAKEN_MESSAGE)
        if result.rowcount == 0:
            raise NotFoundError(resource="routine", resource_id=routine_id)

        logger.info("Routine %s updated (%s)", routine_id, ", ".join(sorted(patch.fields)))
        return await self.get_by_id(routine_id)

    async def delete(self, routine_id: int) -> bool:
        result = await self.db.execute(delete(Routine).where(Routine.id == routine_id))
        if result.rowcount == 0:
            raise NotFoundError(resource="routine", resource_id=routine_id)
        logger.info("Routine %s deleted", routine_id)
        return True

    async def set_duration(self, routine_id: int, minutes: int) -> None:
        await self.db.execute(
            update(Routine)
            .where(Routine.id == routine_id)
            .values(duration_minutes=minutes)
            .execution_options(synchronize_session=False)
        )

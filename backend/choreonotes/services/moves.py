"""
ChoreoNotes Backend — Move Catalog
===================================

What:  CRUD over a user's dance moves, with name search and difficulty filter.
How:   Plain SQLAlchemy statements on the request's AsyncSession. Ownership
       is NOT checked here; routes run `authorize_ownership` first, with
       `find_by_id` as the accessor.
Who:   Called by the /api/moves routes and by RoutineComposition.

Ordering:
    Lists are newest first. Rows created within the same timestamp tick are
    ordered by id (descending), so the order is stable.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from choreonotes.exceptions import NotFoundError
from choreonotes.models.move import Difficulty, Move
from choreonotes.services.patch import Patch, build_update

logger = logging.getLogger(__name__)


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class MoveCatalog:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        owner_id: int,
        name: str,
        description: Optional[str] = None,
        video_url: Optional[str] = None,
        difficulty_level: Optional[Difficulty] = None,
    ) -> Move:
        move = Move(
            user_id=owner_id,
            name=name,
            description=description,
            video_url=video_url,
            difficulty_level=difficulty_level,
        )
        self.db.add(move)
        await self.db.flush()
        await self.db.refresh(move)
        logger.info("Move %s created by user %s", move.id, owner_id)
        return move

    async def list(
        self,
        owner_id: int,
        search: Optional[str] = None,
        difficulty: Optional[Difficulty] = None,
    ) -> List[Move]:
        """
        Moves owned by `owner_id`, newest first.

        Args:
            search:     case-insensitive substring of the move name
            difficulty: exact difficulty level
        """
        query = select(Move).where(Move.user_id == owner_id)

        if search:
            query = query.where(Move.name.ilike(f"%{escape_like(search)}%", escape="\\"))
        if difficulty is not None:
            query = query.where(Move.difficulty_level == difficulty)

        query = query.order_by(desc(Move.created_at), desc(Move.id))
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find_by_id(self, move_id: int) -> Optional[Move]:
        query = (
            select(Move)
            .where(Move.id == move_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_id(self, move_id: int) -> Move:
        move = await self.find_by_id(move_id)
        if move is None:
            raise NotFoundError(resource="move", resource_id=move_id)
        return move

    async def update(self, move_id: int, patch: Patch) -> Move:
        if not patch:
            return await self.get_by_id(move_id)

        result = await self.db.execute(build_update(Move, move_id, patch))
        if result.rowcount == 0:
            raise NotFoundError(resource="move", resource_id=move_id)

        logger.info("Move %s updated (%s)", move_id, ", ".join(sorted(patch.fields)))
        return await self.get_by_id(move_id)

    async def delete(self, move_id: int) -> bool:
        """Delete a move; its composition entries go with it (FK cascade)."""
        result = await self.db.execute(delete(Move).where(Move.id == move_id))
        if result.rowcount == 0:
            raise NotFoundError(resource="move", resource_id=move_id)
        logger.info("Move %s deleted", move_id)
        return True

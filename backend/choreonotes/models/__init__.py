# Models package init
"""
ChoreoNotes Backend — ORM Models
=================================

Importing this package registers every table with `Base.metadata`
(used by Alembic autogenerate and `Database.create_all`).

Tables:
    - users          (user.py)
    - moves          (move.py)
    - routines       (routine.py)
    - routine_moves  (routine.py)
"""

from choreonotes.models.user import User
from choreonotes.models.move import Difficulty, Move
from choreonotes.models.routine import Routine, RoutineMove

__all__ = ["User", "Difficulty", "Move", "Routine", "RoutineMove"]

"""
ChoreoNotes Backend — Services Layer
=====================================

What:  Business logic between the routes (HTTP) and the database.
How:   Each service is a small class constructed with the request's
       AsyncSession (see choreonotes.dependencies). Services raise the
       exceptions in choreonotes.exceptions; routes never build error
       responses themselves.

Service Inventory:
    - CredentialService:   register / login / token verification (users.py underneath)
    - authorize_ownership: the ownership check guarding every mutation
    - MoveCatalog:         moves CRUD, search and difficulty filter
    - RoutineCatalog:      routines CRUD, name uniqueness, duration writes
    - RoutineComposition:  ordered routine ↔ move entries, duration aggregate
    - Patch/build_update:  explicit partial-update values
"""

from choreonotes.services.access import authorize_ownership
from choreonotes.services.composition import RoutineComposition
from choreonotes.services.credentials import CredentialService
from choreonotes.services.moves import MoveCatalog
from choreonotes.services.patch import Patch, build_update
from choreonotes.services.routines import RoutineCatalog
from choreonotes.services.users import UserDirectory

__all__ = [
    "authorize_ownership",
    "CredentialService",
    "MoveCatalog",
    "Patch",
    "RoutineCatalog",
    "RoutineComposition",
    "UserDirectory",
    "build_update",
]

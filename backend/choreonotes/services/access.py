"""
ChoreoNotes Backend — Access Control Layer
===========================================

What:  The one ownership check every mutating operation goes through.
How:   Callers pass the acting user id, the target id and an accessor, an
       async callable returning the stored record (anything with `user_id`)
       or None. Each catalog's `find_by_id` is such an accessor.

Outcomes:
    accessor returns None            → NotFoundError  (truly absent)
    record.user_id != acting_user_id → ForbiddenError (exists, someone else's)
    otherwise                        → the record, for the caller to reuse
"""

import logging
from typing import Any, Awaitable, Callable, Optional, Protocol

from choreonotes.exceptions import ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)


class Owned(Protocol):
    user_id: int


ResourceAccessor = Callable[[int], Awaitable[Optional[Any]]]


async def authorize_ownership(
    acting_user_id: int,
    resource_id: int,
    accessor: ResourceAccessor,
    resource: str = "resource",
) -> Owned:
    record = await accessor(resource_id)
    if record is None:
        raise NotFoundError(resource=resource, resource_id=resource_id)

    if record.user_id != acting_user_id:
        logger.warning(
            "User %s denied access to %s %s owned by user %s",
            acting_user_id,
            resource,
            resource_id,
            record.user_id,
        )
        raise ForbiddenError(
            context={"resource": resource, "resource_id": resource_id},
        )

    return record

"""
ChoreoNotes Backend — Partial Update Patches
=============================================

What:  An explicit "patch" value (the set of fields a client actually sent)
       and the single UPDATE statement builder every catalog uses.
How:   Pydantic tracks which fields were present in the request body
       (`model_fields_set`); `Patch.from_schema` keeps exactly those.
       `build_update` turns a patch into `UPDATE <table> SET ... WHERE id = :id`
       after checking it only touches the model's declared PATCHABLE columns.

Semantics:
    field absent from the body      → column untouched
    field present with a value      → column set to that value
    field present with null         → column set to NULL (where the schema allows it)
    empty patch                     → no statement at all (caller returns the current row)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Type

from pydantic import BaseModel
from sqlalchemy import Update, update


@dataclass(frozen=True)
class Patch:
    """Field name → new value, for the fields that were explicitly set."""

    fields: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_schema(cls, schema: BaseModel) -> "Patch":
        return cls(dict(schema.model_dump(exclude_unset=True)))

    @classmethod
    def of(cls, **values: Any) -> "Patch":
        return cls(dict(values))

    def __bool__(self) -> bool:
        return bool(self.fields)

    def __contains__(self, name: str) -> bool:
        return name in self.fields

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)


def build_update(model: Type[Any], row_id: int, patch: Patch) -> Update:
    """
    Build the UPDATE statement for one row of `model`.

    Raises:
        ValueError: the patch is empty or names a column outside
            `model.PATCHABLE` (a programming error, not a client error)
    """
    allowed: FrozenSet[str] = model.PATCHABLE
    unknown = set(patch.fields) - allowed
    if unknown:
        raise ValueError(
            f"Cannot patch {sorted(unknown)} on {model.__tablename__}; "
            f"allowed: {sorted(allowed)}"
        )
    if not patch:
        raise ValueError("Cannot build an UPDATE from an empty patch")

    return (
        update(model)
        .where(model.id == row_id)
        .values(**patch.fields)
        .execution_options(synchronize_session=False)
    )

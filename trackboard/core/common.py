import uuid
from datetime import datetime, timezone
from typing import Iterable, Set

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trackboard.core.errors import NotFound, ValidationFailed


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


async def get_live(db: AsyncSession, model, row_id: str, label: str):
    """Fetch a row that has not been soft-deleted, or raise NotFound."""
    result = await db.execute(
        select(model)
        .where(model.id == row_id, model.deleted_at.is_(None))
        .execution_options(populate_existing=True)
    )
    row = result.scalar_one_or_none()
    if row is None:
        raise NotFound(f"{label} not found")
    return row


def require_fields(payload: BaseModel, names: Iterable[str]) -> None:
    missing = [name for name in names if not getattr(payload, name, None)]
    if missing:
        raise ValidationFailed(f"{', '.join(missing)} required")


def reject_cleared(patch: BaseModel, names: Iterable[str]) -> None:
    cleared = [n for n in names if n in patch.model_fields_set and getattr(patch, n) is None]
    if cleared:
        raise ValidationFailed(f"{', '.join(cleared)} cannot be cleared")


def to_column(value):
    # typed sequences are flattened only here, on their way into a JSON column
    if isinstance(value, list):
        return [v.model_dump() if isinstance(v, BaseModel) else v for v in value]
    return value


def apply_patch(row, patch: BaseModel, columns: Iterable[str]) -> Set[str]:
    """Copy the fields present in ``patch`` onto ``row``; absent fields are left alone."""
    fields = patch.model_fields_set & set(columns)
    for name in fields:
        setattr(row, name, to_column(getattr(patch, name)))
    return fields

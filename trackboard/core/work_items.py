"""
Work item mutation pipeline.

Every mutation runs as one transaction covering the existing-row read and
all writes (item row, assignee set, transition log, derived fields). The
board event is published only after the commit succeeds, and always to the
owning board, never to the item.
"""
import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from trackboard.core.common import (
    apply_patch,
    get_live,
    new_id,
    reject_cleared,
    require_fields,
    to_column,
    utcnow,
)
from trackboard.core.errors import NotFound, ValidationFailed
from trackboard.core.events import EventType, make_event
from trackboard.core.realtime import Broadcaster
from trackboard.core.status import is_done
from trackboard.db.models import Board, User, WorkItem, WorkItemAssignee, WorkItemTransition
from trackboard.db.session import transaction
from trackboard.schemas.item import (
    AssigneeIn,
    AssigneeRead,
    UserSummary,
    WorkItemCreate,
    WorkItemRead,
    WorkItemUpdate,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "type", "status")
FLAGS = ("branch_required", "toc_enabled")
COLLECTIONS = ("labels", "checklist", "attachments", "watchers")

# Columns a client may write directly; done_in_sprint_id is derived.
WRITABLE_COLUMNS = (
    "title",
    "summary",
    "description",
    "type",
    "status",
    "priority",
    "reporter_id",
    "epic_id",
    "sprint_id",
    "parent_id",
    "team_id",
    "stack",
    "branch_required",
    "branch_name",
    "toc_enabled",
    "estimation_points",
    "effort_hours",
    "due_date",
    "labels",
    "checklist",
    "attachments",
    "watchers",
)


def normalise_assignees(assignees: Iterable[AssigneeIn]) -> List[AssigneeIn]:
    """Drop duplicate users and keep at most one primary (the first flagged)."""
    seen = set()
    result = []
    primary_taken = False
    for a in assignees:
        if a.user_id in seen:
            continue
        seen.add(a.user_id)
        is_primary = a.is_primary and not primary_taken
        primary_taken = primary_taken or is_primary
        result.append(AssigneeIn(user_id=a.user_id, is_primary=is_primary))
    return result


def _add_assignees(db: AsyncSession, item_id: str, assignees: Iterable[AssigneeIn]) -> None:
    for position, a in enumerate(normalise_assignees(assignees)):
        db.add(
            WorkItemAssignee(
                item_id=item_id,
                user_id=a.user_id,
                is_primary=a.is_primary,
                position=position,
            )
        )


async def _load_assignees(db: AsyncSession, item_ids: List[str]) -> Dict[str, List[AssigneeRead]]:
    by_item: Dict[str, List[AssigneeRead]] = {item_id: [] for item_id in item_ids}
    if not item_ids:
        return by_item

    result = await db.execute(
        select(WorkItemAssignee.item_id, WorkItemAssignee.is_primary, User)
        .join(User, User.id == WorkItemAssignee.user_id)
        .where(WorkItemAssignee.item_id.in_(item_ids))
        .order_by(WorkItemAssignee.item_id, WorkItemAssignee.position)
    )
    for item_id, is_primary, user in result.all():
        by_item[item_id].append(
            AssigneeRead(
                id=user.id,
                name=user.name,
                email=user.email,
                avatar_url=user.avatar_url,
                is_primary=is_primary,
            )
        )
    return by_item


def _to_read(item: WorkItem, assignees: List[AssigneeRead]) -> WorkItemRead:
    # rows written before primaries were normalised may flag several;
    # the first in insertion order wins
    primary = next((a for a in assignees if a.is_primary), None)
    view = WorkItemRead.model_validate(item)
    return view.model_copy(
        update={
            "assignees": assignees,
            "assignee": UserSummary(**primary.model_dump(exclude={"is_primary"})) if primary else None,
        }
    )


async def item_view(db: AsyncSession, item: WorkItem) -> WorkItemRead:
    assignees = await _load_assignees(db, [item.id])
    return _to_read(item, assignees[item.id])


async def get_work_item(db: AsyncSession, item_id: str) -> WorkItemRead:
    item = await get_live(db, WorkItem, item_id, "work item")
    return await item_view(db, item)


async def list_work_items(
    db: AsyncSession,
    board_id: str,
    sprint_id: Optional[str] = None,
    epic_id: Optional[str] = None,
    status: Optional[str] = None,
    assignee_id: Optional[str] = None,
) -> List[WorkItemRead]:
    query = select(WorkItem).where(WorkItem.board_id == board_id, WorkItem.deleted_at.is_(None))
    if sprint_id:
        query = query.where(WorkItem.sprint_id == sprint_id)
    if epic_id:
        query = query.where(WorkItem.epic_id == epic_id)
    if status:
        query = query.where(WorkItem.status == status)
    if assignee_id:
        query = query.where(
            WorkItem.id.in_(
                select(WorkItemAssignee.item_id).where(WorkItemAssignee.user_id == assignee_id)
            )
        )

    result = await db.execute(
        query.order_by(WorkItem.created_at, WorkItem.id).execution_options(populate_existing=True)
    )
    items = result.scalars().all()
    assignees = await _load_assignees(db, [i.id for i in items])
    return [_to_read(i, assignees[i.id]) for i in items]


async def create_work_item(
    db: AsyncSession,
    broadcaster: Broadcaster,
    board_id: str,
    payload: WorkItemCreate,
) -> WorkItemRead:
    require_fields(payload, REQUIRED_FIELDS)

    if payload.assignees:
        assignees = payload.assignees
    elif payload.assignee_id:
        assignees = [AssigneeIn(user_id=payload.assignee_id, is_primary=True)]
    else:
        assignees = []

    item_id = new_id()
    async with transaction(db):
        if await db.get(Board, board_id) is None:
            raise NotFound("board not found")

        now = utcnow()
        item = WorkItem(
            id=item_id,
            board_id=board_id,
            created_at=now,
            updated_at=now,
            version=1,
        )
        for name in WRITABLE_COLUMNS:
            setattr(item, name, to_column(getattr(payload, name)))
        db.add(item)
        # item row before its assignee rows
        await db.flush()
        _add_assignees(db, item_id, assignees)
        db.add(
            WorkItemTransition(
                id=new_id(),
                item_id=item_id,
                board_id=board_id,
                from_status=None,
                to_status=item.status,
                at=now,
                actor_id=payload.reporter_id,
            )
        )

    logger.info(f"Created work item {item_id} on board {board_id}")
    view = await item_view(db, item)
    await broadcaster.publish(board_id, make_event(EventType.ITEM_CREATED, itemId=item_id))
    return view


async def update_work_item(
    db: AsyncSession,
    broadcaster: Broadcaster,
    item_id: str,
    patch: WorkItemUpdate,
    actor_id: Optional[str] = None,
) -> WorkItemRead:
    if not patch.model_fields_set:
        raise ValidationFailed("no fields to update")
    reject_cleared(patch, REQUIRED_FIELDS + FLAGS)

    async with transaction(db):
        item = await get_live(db, WorkItem, item_id, "work item")
        board_id = item.board_id
        previous_status = item.status

        apply_patch(item, patch, WRITABLE_COLUMNS)
        # a cleared collection is an empty one
        for name in COLLECTIONS:
            if getattr(item, name) is None:
                setattr(item, name, [])

        if "assignees" in patch.model_fields_set:
            await db.execute(delete(WorkItemAssignee).where(WorkItemAssignee.item_id == item_id))
            _add_assignees(db, item_id, patch.assignees or [])

        if item.status != previous_status:
            db.add(
                WorkItemTransition(
                    id=new_id(),
                    item_id=item_id,
                    board_id=board_id,
                    from_status=previous_status,
                    to_status=item.status,
                    at=utcnow(),
                    actor_id=actor_id,
                )
            )

        # the completion marker is written once and never revisited
        if "status" in patch.model_fields_set and is_done(item.status) and item.done_in_sprint_id is None:
            item.done_in_sprint_id = item.sprint_id

        item.updated_at = utcnow()
        item.version = (item.version or 1) + 1

    logger.info(f"Updated work item {item_id} ({', '.join(sorted(patch.model_fields_set))})")
    view = await item_view(db, item)
    await broadcaster.publish(board_id, make_event(EventType.ITEM_UPDATED, itemId=item_id))
    return view


async def soft_delete_work_item(db: AsyncSession, broadcaster: Broadcaster, item_id: str) -> Dict[str, str]:
    async with transaction(db):
        item = await get_live(db, WorkItem, item_id, "work item")
        board_id = item.board_id
        item.deleted_at = utcnow()

    logger.info(f"Soft-deleted work item {item_id}")
    await broadcaster.publish(board_id, make_event(EventType.ITEM_DELETED, itemId=item_id))
    return {"id": item_id}

"""
Sprint lifecycle and the sprint-epic linkage manager.

set_epics_for_sprint is the only cascading write path: linking an epic to
a sprint moves every live item of that epic onto the sprint. The policy is
assign-only-if-different; unlinking an epic never moves items back out.
"""
import logging
from typing import Dict, List

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from trackboard.core.common import apply_patch, get_live, new_id, reject_cleared, require_fields, utcnow
from trackboard.core.errors import NotFound
from trackboard.core.events import EventType, make_event
from trackboard.core.realtime import Broadcaster
from trackboard.core.status import SprintState
from trackboard.db.models import Board, Epic, Sprint, SprintEpic, WorkItem
from trackboard.db.session import transaction
from trackboard.schemas.sprint import SprintCreate, SprintEpicsRead, SprintRead, SprintUpdate

logger = logging.getLogger(__name__)

SPRINT_COLUMNS = ("name", "number", "goal", "start_date", "end_date", "state")


async def list_sprints(db: AsyncSession, board_id: str) -> List[SprintRead]:
    result = await db.execute(
        select(Sprint)
        .where(Sprint.board_id == board_id, Sprint.deleted_at.is_(None))
        .order_by(Sprint.start_date, Sprint.id)
        .execution_options(populate_existing=True)
    )
    return [SprintRead.model_validate(s) for s in result.scalars().all()]


async def get_sprint(db: AsyncSession, sprint_id: str) -> SprintRead:
    return SprintRead.model_validate(await get_live(db, Sprint, sprint_id, "sprint"))


async def create_sprint(
    db: AsyncSession,
    broadcaster: Broadcaster,
    board_id: str,
    payload: SprintCreate,
) -> SprintRead:
    require_fields(payload, ("name", "start_date", "end_date"))

    sprint_id = new_id()
    async with transaction(db):
        if await db.get(Board, board_id) is None:
            raise NotFound("board not found")
        now = utcnow()
        sprint = Sprint(
            id=sprint_id,
            board_id=board_id,
            name=payload.name,
            number=payload.number,
            goal=payload.goal,
            start_date=payload.start_date,
            end_date=payload.end_date,
            state=(payload.state or SprintState.PLANNED).value,
            created_at=now,
            updated_at=now,
        )
        db.add(sprint)

    logger.info(f"Created sprint {sprint_id} on board {board_id}")
    await broadcaster.publish(board_id, make_event(EventType.SPRINT_CREATED, sprintId=sprint_id))
    return SprintRead.model_validate(sprint)


async def update_sprint(
    db: AsyncSession,
    broadcaster: Broadcaster,
    sprint_id: str,
    patch: SprintUpdate,
) -> SprintRead:
    reject_cleared(patch, ("name", "start_date", "end_date", "state"))

    async with transaction(db):
        sprint = await get_live(db, Sprint, sprint_id, "sprint")
        board_id = sprint.board_id
        apply_patch(sprint, patch, SPRINT_COLUMNS)
        if "state" in patch.model_fields_set:
            sprint.state = SprintState(patch.state).value
        sprint.updated_at = utcnow()

    await broadcaster.publish(board_id, make_event(EventType.SPRINT_UPDATED, sprintId=sprint_id))
    return SprintRead.model_validate(sprint)


async def soft_delete_sprint(db: AsyncSession, broadcaster: Broadcaster, sprint_id: str) -> Dict[str, str]:
    async with transaction(db):
        sprint = await get_live(db, Sprint, sprint_id, "sprint")
        board_id = sprint.board_id
        sprint.deleted_at = utcnow()

    logger.info(f"Soft-deleted sprint {sprint_id}")
    await broadcaster.publish(board_id, make_event(EventType.SPRINT_DELETED, sprintId=sprint_id))
    return {"id": sprint_id}


async def get_epics_for_sprint(db: AsyncSession, sprint_id: str) -> SprintEpicsRead:
    await get_live(db, Sprint, sprint_id, "sprint")
    result = await db.execute(
        select(SprintEpic.epic_id).where(SprintEpic.sprint_id == sprint_id).order_by(SprintEpic.epic_id)
    )
    return SprintEpicsRead(sprint_id=sprint_id, epic_ids=list(result.scalars().all()))


async def set_epics_for_sprint(
    db: AsyncSession,
    broadcaster: Broadcaster,
    sprint_id: str,
    epic_ids: List[str],
) -> SprintEpicsRead:
    """Replace the sprint's epic links and pull the epics' live items onto the sprint."""
    wanted = list(dict.fromkeys(epic_ids))

    async with transaction(db):
        sprint = await get_live(db, Sprint, sprint_id, "sprint")
        board_id = sprint.board_id

        if wanted:
            found = await db.execute(select(Epic.id).where(Epic.id.in_(wanted), Epic.board_id == board_id))
            unknown = set(wanted) - set(found.scalars().all())
            if unknown:
                raise NotFound(f"epic not found: {', '.join(sorted(unknown))}")

        await db.execute(
            delete(SprintEpic)
            .where(SprintEpic.sprint_id == sprint_id, SprintEpic.epic_id.not_in(wanted))
            .execution_options(synchronize_session=False)
        )

        existing = await db.execute(select(SprintEpic.epic_id).where(SprintEpic.sprint_id == sprint_id))
        linked = set(existing.scalars().all())
        for epic_id in wanted:
            if epic_id not in linked:
                db.add(SprintEpic(sprint_id=sprint_id, epic_id=epic_id))

        if wanted:
            moved = await db.execute(
                update(WorkItem)
                .where(
                    WorkItem.epic_id.in_(wanted),
                    WorkItem.deleted_at.is_(None),
                    or_(WorkItem.sprint_id.is_(None), WorkItem.sprint_id != sprint_id),
                )
                .values(sprint_id=sprint_id, version=WorkItem.version + 1)
                .execution_options(synchronize_session=False)
            )
            logger.info(f"Sprint {sprint_id}: moved {moved.rowcount} work items from {len(wanted)} epics")

    await broadcaster.publish(
        board_id,
        make_event(EventType.SPRINT_EPICS_UPDATED, sprintId=sprint_id, epicIds=wanted),
    )
    return SprintEpicsRead(sprint_id=sprint_id, epic_ids=wanted)

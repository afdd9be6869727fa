import logging
from typing import Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trackboard.core.common import apply_patch, get_live, new_id, reject_cleared, require_fields, utcnow
from trackboard.core.errors import NotFound
from trackboard.core.events import EventType, make_event
from trackboard.core.realtime import Broadcaster
from trackboard.core.status import DEFAULT_EPIC_STATUS
from trackboard.db.models import Board, Epic
from trackboard.db.session import transaction
from trackboard.schemas.epic import EpicCreate, EpicRead, EpicUpdate

logger = logging.getLogger(__name__)

EPIC_COLUMNS = (
    "name",
    "summary",
    "description",
    "color",
    "ice_impact",
    "ice_confidence",
    "ice_ease",
    "status",
)


async def list_epics(db: AsyncSession, board_id: str) -> List[EpicRead]:
    result = await db.execute(
        select(Epic)
        .where(Epic.board_id == board_id, Epic.deleted_at.is_(None))
        .order_by(Epic.created_at, Epic.id)
        .execution_options(populate_existing=True)
    )
    return [EpicRead.model_validate(e) for e in result.scalars().all()]


async def get_epic(db: AsyncSession, epic_id: str) -> EpicRead:
    return EpicRead.model_validate(await get_live(db, Epic, epic_id, "epic"))


async def create_epic(
    db: AsyncSession,
    broadcaster: Broadcaster,
    board_id: str,
    payload: EpicCreate,
) -> EpicRead:
    require_fields(payload, ("name",))

    epic_id = new_id()
    async with transaction(db):
        if await db.get(Board, board_id) is None:
            raise NotFound("board not found")
        now = utcnow()
        epic = Epic(
            id=epic_id,
            board_id=board_id,
            name=payload.name,
            summary=payload.summary,
            description=payload.description,
            color=payload.color,
            ice_impact=payload.ice_impact or 0,
            ice_confidence=payload.ice_confidence or 0,
            ice_ease=payload.ice_ease or 0,
            status=payload.status or DEFAULT_EPIC_STATUS,
            created_at=now,
            updated_at=now,
        )
        db.add(epic)

    logger.info(f"Created epic {epic_id} on board {board_id}")
    await broadcaster.publish(board_id, make_event(EventType.EPIC_CREATED, epicId=epic_id))
    return EpicRead.model_validate(epic)


async def update_epic(
    db: AsyncSession,
    broadcaster: Broadcaster,
    epic_id: str,
    patch: EpicUpdate,
) -> EpicRead:
    reject_cleared(patch, ("name", "status", "ice_impact", "ice_confidence", "ice_ease"))

    async with transaction(db):
        epic = await get_live(db, Epic, epic_id, "epic")
        board_id = epic.board_id
        apply_patch(epic, patch, EPIC_COLUMNS)
        epic.updated_at = utcnow()

    await broadcaster.publish(board_id, make_event(EventType.EPIC_UPDATED, epicId=epic_id))
    return EpicRead.model_validate(epic)


async def soft_delete_epic(db: AsyncSession, broadcaster: Broadcaster, epic_id: str) -> Dict[str, str]:
    # linked sprints and member items keep their references
    async with transaction(db):
        epic = await get_live(db, Epic, epic_id, "epic")
        board_id = epic.board_id
        epic.deleted_at = utcnow()

    logger.info(f"Soft-deleted epic {epic_id}")
    await broadcaster.publish(board_id, make_event(EventType.EPIC_DELETED, epicId=epic_id))
    return {"id": epic_id}

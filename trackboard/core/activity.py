"""
Comments and calendar events.

Their CRUD lives elsewhere; these operations exist so the corresponding
board events are published from the same transactional path as every
other mutation.
"""
import logging
from typing import Dict

from sqlalchemy.ext.asyncio import AsyncSession

from trackboard.core.common import apply_patch, get_live, new_id, reject_cleared, require_fields, utcnow
from trackboard.core.errors import NotFound
from trackboard.core.events import EventType, make_event
from trackboard.core.realtime import Broadcaster
from trackboard.db.models import Board, CalendarEvent, Comment, WorkItem
from trackboard.db.session import transaction
from trackboard.schemas.activity import CalendarEventCreate, CalendarEventUpdate, CommentCreate

logger = logging.getLogger(__name__)

EVENT_COLUMNS = ("title", "description", "start_at", "end_at", "location", "link_url")


async def create_comment(
    db: AsyncSession,
    broadcaster: Broadcaster,
    item_id: str,
    payload: CommentCreate,
) -> Dict[str, str]:
    require_fields(payload, ("user_id", "content"))

    comment_id = new_id()
    async with transaction(db):
        item = await get_live(db, WorkItem, item_id, "work item")
        board_id = item.board_id
        db.add(
            Comment(
                id=comment_id,
                item_id=item_id,
                board_id=board_id,
                user_id=payload.user_id,
                content=payload.content,
                mentions=list(payload.mentions),
                created_at=utcnow(),
            )
        )

    await broadcaster.publish(
        board_id,
        make_event(EventType.COMMENT_CREATED, itemId=item_id, commentId=comment_id),
    )
    return {"id": comment_id}


async def create_calendar_event(
    db: AsyncSession,
    broadcaster: Broadcaster,
    board_id: str,
    payload: CalendarEventCreate,
) -> Dict[str, str]:
    require_fields(payload, ("title",))

    event_id = new_id()
    async with transaction(db):
        if await db.get(Board, board_id) is None:
            raise NotFound("board not found")
        now = utcnow()
        db.add(
            CalendarEvent(
                id=event_id,
                board_id=board_id,
                title=payload.title,
                description=payload.description,
                start_at=payload.start_at,
                end_at=payload.end_at,
                location=payload.location,
                link_url=payload.link_url,
                created_by=payload.created_by,
                created_at=now,
                updated_at=now,
            )
        )

    await broadcaster.publish(board_id, make_event(EventType.EVENT_CREATED, eventId=event_id))
    return {"id": event_id}


async def update_calendar_event(
    db: AsyncSession,
    broadcaster: Broadcaster,
    event_id: str,
    patch: CalendarEventUpdate,
) -> Dict[str, str]:
    reject_cleared(patch, ("title",))

    async with transaction(db):
        event = await get_live(db, CalendarEvent, event_id, "event")
        board_id = event.board_id
        apply_patch(event, patch, EVENT_COLUMNS)
        event.updated_at = utcnow()

    await broadcaster.publish(board_id, make_event(EventType.EVENT_UPDATED, eventId=event_id))
    return {"id": event_id}


async def soft_delete_calendar_event(db: AsyncSession, broadcaster: Broadcaster, event_id: str) -> Dict[str, str]:
    async with transaction(db):
        event = await get_live(db, CalendarEvent, event_id, "event")
        board_id = event.board_id
        event.deleted_at = utcnow()

    await broadcaster.publish(board_id, make_event(EventType.EVENT_DELETED, eventId=event_id))
    return {"id": event_id}

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from trackboard.api.deps import get_broadcaster
from trackboard.core import activity
from trackboard.core.realtime import Broadcaster
from trackboard.db.session import get_db
from trackboard.schemas.activity import Ack, CalendarEventCreate, CalendarEventUpdate

board_router = APIRouter(prefix="/api/boards/{board_id}/events", tags=["events"])
router = APIRouter(prefix="/api/events", tags=["events"])


@board_router.post("", response_model=Ack, status_code=201)
async def create_event(
    board_id: str,
    payload: CalendarEventCreate,
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    return await activity.create_calendar_event(db, broadcaster, board_id, payload)


@router.patch("/{event_id}", response_model=Ack)
async def update_event(
    event_id: str,
    patch: CalendarEventUpdate,
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    return await activity.update_calendar_event(db, broadcaster, event_id, patch)


@router.delete("/{event_id}", response_model=Ack)
async def delete_event(
    event_id: str,
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    return await activity.soft_delete_calendar_event(db, broadcaster, event_id)

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession

from trackboard.api.deps import get_broadcaster
from trackboard.core import activity, work_items
from trackboard.core.realtime import Broadcaster
from trackboard.db.session import get_db
from trackboard.schemas.activity import Ack, CommentCreate
from trackboard.schemas.item import WorkItemCreate, WorkItemRead, WorkItemUpdate

logger = logging.getLogger(__name__)

board_router = APIRouter(prefix="/api/boards/{board_id}/items", tags=["items"])
router = APIRouter(prefix="/api/items", tags=["items"])


@board_router.get("", response_model=List[WorkItemRead])
async def list_items(
    board_id: str,
    sprint_id: Optional[str] = Query(default=None, alias="sprintId"),
    epic_id: Optional[str] = Query(default=None, alias="epicId"),
    status: Optional[str] = None,
    assignee_id: Optional[str] = Query(default=None, alias="assignee"),
    db: AsyncSession = Depends(get_db),
):
    """List the live items of a board, optionally filtered."""
    return await work_items.list_work_items(
        db,
        board_id,
        sprint_id=sprint_id,
        epic_id=epic_id,
        status=status,
        assignee_id=assignee_id,
    )


@board_router.post("", response_model=WorkItemRead, status_code=201)
async def create_item(
    board_id: str,
    payload: WorkItemCreate,
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    return await work_items.create_work_item(db, broadcaster, board_id, payload)


@router.get("/{item_id}", response_model=WorkItemRead)
async def get_item(item_id: str, db: AsyncSession = Depends(get_db)):
    return await work_items.get_work_item(db, item_id)


@router.patch("/{item_id}", response_model=WorkItemRead)
async def update_item(
    item_id: str,
    patch: WorkItemUpdate,
    x_user_id: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Sparse update; ``X-User-Id`` is recorded as the actor of a status change."""
    return await work_items.update_work_item(db, broadcaster, item_id, patch, actor_id=x_user_id)


@router.delete("/{item_id}", response_model=Ack)
async def delete_item(
    item_id: str,
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    return await work_items.soft_delete_work_item(db, broadcaster, item_id)


@router.post("/{item_id}/comments", response_model=Ack, status_code=201)
async def add_comment(
    item_id: str,
    payload: CommentCreate,
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    return await activity.create_comment(db, broadcaster, item_id, payload)

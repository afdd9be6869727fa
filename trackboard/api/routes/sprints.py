from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from trackboard.api.deps import get_broadcaster
from trackboard.core import sprints
from trackboard.core.realtime import Broadcaster
from trackboard.db.session import get_db
from trackboard.schemas.activity import Ack
from trackboard.schemas.sprint import (
    SprintCreate,
    SprintEpicsRead,
    SprintEpicsUpdate,
    SprintRead,
    SprintUpdate,
)

board_router = APIRouter(prefix="/api/boards/{board_id}/sprints", tags=["sprints"])
router = APIRouter(prefix="/api/sprints", tags=["sprints"])


@board_router.get("", response_model=List[SprintRead])
async def list_sprints(board_id: str, db: AsyncSession = Depends(get_db)):
    return await sprints.list_sprints(db, board_id)


@board_router.post("", response_model=SprintRead, status_code=201)
async def create_sprint(
    board_id: str,
    payload: SprintCreate,
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    return await sprints.create_sprint(db, broadcaster, board_id, payload)


@router.get("/{sprint_id}", response_model=SprintRead)
async def get_sprint(sprint_id: str, db: AsyncSession = Depends(get_db)):
    return await sprints.get_sprint(db, sprint_id)


@router.patch("/{sprint_id}", response_model=SprintRead)
async def update_sprint(
    sprint_id: str,
    patch: SprintUpdate,
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    return await sprints.update_sprint(db, broadcaster, sprint_id, patch)


@router.delete("/{sprint_id}", response_model=Ack)
async def delete_sprint(
    sprint_id: str,
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    return await sprints.soft_delete_sprint(db, broadcaster, sprint_id)


@router.get("/{sprint_id}/epics", response_model=SprintEpicsRead)
async def get_sprint_epics(sprint_id: str, db: AsyncSession = Depends(get_db)):
    return await sprints.get_epics_for_sprint(db, sprint_id)


@router.post("/{sprint_id}/epics", response_model=SprintEpicsRead)
async def set_sprint_epics(
    sprint_id: str,
    payload: SprintEpicsUpdate,
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Replace the sprint's epics and move their live items onto the sprint."""
    return await sprints.set_epics_for_sprint(db, broadcaster, sprint_id, payload.epic_ids)

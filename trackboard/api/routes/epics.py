from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from trackboard.api.deps import get_broadcaster
from trackboard.core import epics
from trackboard.core.realtime import Broadcaster
from trackboard.db.session import get_db
from trackboard.schemas.activity import Ack
from trackboard.schemas.epic import EpicCreate, EpicRead, EpicUpdate

board_router = APIRouter(prefix="/api/boards/{board_id}/epics", tags=["epics"])
router = APIRouter(prefix="/api/epics", tags=["epics"])


@board_router.get("", response_model=List[EpicRead])
async def list_epics(board_id: str, db: AsyncSession = Depends(get_db)):
    return await epics.list_epics(db, board_id)


@board_router.post("", response_model=EpicRead, status_code=201)
async def create_epic(
    board_id: str,
    payload: EpicCreate,
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    return await epics.create_epic(db, broadcaster, board_id, payload)


@router.get("/{epic_id}", response_model=EpicRead)
async def get_epic(epic_id: str, db: AsyncSession = Depends(get_db)):
    return await epics.get_epic(db, epic_id)


@router.patch("/{epic_id}", response_model=EpicRead)
async def update_epic(
    epic_id: str,
    patch: EpicUpdate,
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    return await epics.update_epic(db, broadcaster, epic_id, patch)


@router.delete("/{epic_id}", response_model=Ack)
async def delete_epic(
    epic_id: str,
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    return await epics.soft_delete_epic(db, broadcaster, epic_id)

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from trackboard.core import boards
from trackboard.db.session import get_db
from trackboard.schemas.board import BoardCreate, BoardRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/boards", tags=["boards"])


@router.get("", response_model=List[BoardRead])
async def list_boards(db: AsyncSession = Depends(get_db)):
    """List all boards, newest first."""
    return await boards.list_boards(db)


@router.post("", response_model=BoardRead, status_code=201)
async def create_board(payload: BoardCreate, db: AsyncSession = Depends(get_db)):
    return await boards.create_board(db, payload)


@router.get("/{board_id}", response_model=BoardRead)
async def get_board(board_id: str, db: AsyncSession = Depends(get_db)):
    return await boards.get_board(db, board_id)

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trackboard.core.common import new_id, require_fields, utcnow
from trackboard.core.errors import Conflict, NotFound
from trackboard.db.models import Board
from trackboard.db.session import transaction
from trackboard.schemas.board import BoardCreate, BoardRead

logger = logging.getLogger(__name__)


async def list_boards(db: AsyncSession) -> List[BoardRead]:
    result = await db.execute(select(Board).order_by(Board.created_at.desc()))
    return [BoardRead.model_validate(b) for b in result.scalars().all()]


async def get_board(db: AsyncSession, board_id: str) -> BoardRead:
    board = await db.get(Board, board_id)
    if board is None:
        raise NotFound("board not found")
    return BoardRead.model_validate(board)


async def create_board(db: AsyncSession, payload: BoardCreate) -> BoardRead:
    """Create a board. Nothing is published: nobody can be subscribed to it yet."""
    require_fields(payload, ("name", "key"))

    async with transaction(db):
        taken = await db.execute(select(Board.id).where(Board.key == payload.key))
        if taken.scalar_one_or_none() is not None:
            raise Conflict(f"board key {payload.key} already in use")
        now = utcnow()
        board = Board(id=new_id(), name=payload.name, key=payload.key, created_at=now, updated_at=now)
        db.add(board)

    logger.info(f"Created board {board.id} ({board.key})")
    return BoardRead.model_validate(board)

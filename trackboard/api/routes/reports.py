from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from trackboard.core import reports
from trackboard.db.session import get_db
from trackboard.schemas.report import (
    BurndownReport,
    EpicProgressReport,
    VelocityReport,
    WorkloadReport,
)

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/burndown", response_model=BurndownReport)
async def burndown(sprint_id: str = Query(...), db: AsyncSession = Depends(get_db)):
    """Ideal and actual remaining points for each day of the sprint."""
    return await reports.burndown(db, sprint_id)


@router.get("/velocity", response_model=VelocityReport)
async def velocity(
    board_id: str = Query(...),
    window: int = Query(6, ge=1),
    db: AsyncSession = Depends(get_db),
):
    """Completed points of the most recent closed sprints, oldest first."""
    return await reports.velocity(db, board_id, window)


@router.get("/epics", response_model=EpicProgressReport)
async def epic_progress(board_id: str = Query(...), db: AsyncSession = Depends(get_db)):
    return await reports.epic_progress(db, board_id)


@router.get("/workload", response_model=WorkloadReport)
async def workload(board_id: str = Query(...), db: AsyncSession = Depends(get_db)):
    return await reports.workload(db, board_id)

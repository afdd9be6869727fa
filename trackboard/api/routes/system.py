from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from trackboard.api.deps import get_broadcaster
from trackboard.core.realtime import Broadcaster
from trackboard.db.session import get_db
from trackboard.schemas.system import SystemStats

router = APIRouter(prefix="/api/system", tags=["system"])


@router.get("/stats", response_model=SystemStats)
async def get_stats(
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Return system-wide statistics."""
    sql = text("""
        SELECT
            (SELECT COUNT(*) FROM boards) AS boards,
            (SELECT COUNT(*) FROM work_items WHERE deleted_at IS NULL) AS items,
            (SELECT COUNT(*) FROM epics WHERE deleted_at IS NULL) AS epics,
            (SELECT COUNT(*) FROM sprints WHERE deleted_at IS NULL) AS sprints
    """)
    result = await db.execute(sql)
    row = dict(result.mappings().first())
    row["subscribers"] = len(broadcaster.registry)
    return row

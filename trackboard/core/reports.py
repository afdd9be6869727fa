"""
Read-only board analytics.

Every report works on live (non-deleted) rows, takes no locks and emits no
events. Points are estimation points; an item without an estimate counts
as zero. An item counts as completed in a sprint when it is still in that
sprint, its done-in-sprint marker points at it and its status is Done.
"""
import logging
import math
from datetime import date, datetime, timedelta
from typing import List

from sqlalchemy import and_, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from trackboard.core.common import get_live
from trackboard.core.errors import ValidationFailed
from trackboard.core.status import SprintState, WorkItemStatus
from trackboard.db.models import Epic, Sprint, User, WorkItem, WorkItemAssignee
from trackboard.schemas.item import UserSummary
from trackboard.schemas.report import (
    AssigneeWorkload,
    BurndownReport,
    EpicProgress,
    EpicProgressReport,
    SprintVelocity,
    VelocityReport,
    WorkloadReport,
)

logger = logging.getLogger(__name__)

DONE = WorkItemStatus.DONE.value
IN_PROGRESS = WorkItemStatus.IN_PROGRESS.value

POINTS = func.coalesce(WorkItem.estimation_points, 0)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def sprint_days(start: date, end: date) -> List[date]:
    """Inclusive calendar days from start to end; empty when end precedes start."""
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def ideal_line(total: int, day_count: int) -> List[int]:
    if day_count == 0:
        return []
    if day_count == 1:
        return [total]
    step = total / (day_count - 1)
    return [total - round_half_up(step * i) for i in range(day_count)]


def _completed_in(sprint_id):
    return and_(
        WorkItem.sprint_id == sprint_id,
        WorkItem.done_in_sprint_id == sprint_id,
        WorkItem.status == DONE,
        WorkItem.deleted_at.is_(None),
    )


def _day_of(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        return datetime.fromisoformat(value).date()
    return value


async def burndown(db: AsyncSession, sprint_id: str) -> BurndownReport:
    sprint = await get_live(db, Sprint, sprint_id, "sprint")

    total = (
        await db.execute(
            select(func.coalesce(func.sum(WorkItem.estimation_points), 0)).where(
                WorkItem.sprint_id == sprint_id,
                WorkItem.deleted_at.is_(None),
            )
        )
    ).scalar_one()
    total = int(total)

    days = sprint_days(sprint.start_date, sprint.end_date)

    completed = (
        await db.execute(select(POINTS, WorkItem.updated_at).where(_completed_in(sprint_id)))
    ).all()
    completed = [(int(points), _day_of(updated_at)) for points, updated_at in completed]

    actual = []
    for day in days:
        done_so_far = sum(points for points, finished_on in completed if finished_on <= day)
        actual.append(max(0, total - done_so_far))

    return BurndownReport(labels=days, ideal=ideal_line(total, len(days)), actual=actual, total=total)


async def velocity(db: AsyncSession, board_id: str, window: int = 6) -> VelocityReport:
    if window < 1:
        raise ValidationFailed("window must be at least 1")

    result = await db.execute(
        select(Sprint)
        .where(
            Sprint.board_id == board_id,
            Sprint.state == SprintState.CLOSED.value,
            Sprint.deleted_at.is_(None),
        )
        .order_by(Sprint.end_date.desc(), Sprint.id)
        .limit(window)
    )
    sprints = list(reversed(result.scalars().all()))

    rows = []
    for sprint in sprints:
        done = (
            await db.execute(select(func.coalesce(func.sum(WorkItem.estimation_points), 0)).where(_completed_in(sprint.id)))
        ).scalar_one()
        rows.append(
            SprintVelocity(
                id=sprint.id,
                name=sprint.name,
                start_date=sprint.start_date,
                end_date=sprint.end_date,
                estimation_done=int(done),
            )
        )

    avg = sum(r.estimation_done for r in rows) / len(rows) if rows else 0
    return VelocityReport(sprints=rows, avg=avg)


async def epic_progress(db: AsyncSession, board_id: str) -> EpicProgressReport:
    epics = (
        await db.execute(
            select(Epic.id, Epic.name)
            .where(Epic.board_id == board_id, Epic.deleted_at.is_(None))
            .order_by(Epic.created_at, Epic.id)
        )
    ).all()

    sums = {}
    if epics:
        result = await db.execute(
            select(
                WorkItem.epic_id,
                func.sum(POINTS),
                func.sum(case((WorkItem.status == DONE, POINTS), else_=0)),
            )
            .where(WorkItem.epic_id.in_([e.id for e in epics]), WorkItem.deleted_at.is_(None))
            .group_by(WorkItem.epic_id)
        )
        sums = {epic_id: (int(total or 0), int(done or 0)) for epic_id, total, done in result.all()}

    rows = []
    for epic_id, name in epics:
        total, done = sums.get(epic_id, (0, 0))
        rows.append(
            EpicProgress(
                id=epic_id,
                name=name,
                items_total=total,
                items_done=done,
                percent_done_weighted=done / total if total > 0 else 0,
            )
        )
    return EpicProgressReport(rows=rows)


async def workload(db: AsyncSession, board_id: str) -> WorkloadReport:
    result = await db.execute(
        select(
            User.id,
            User.name,
            User.email,
            User.avatar_url,
            func.sum(case((WorkItem.status == DONE, 0), else_=1)).label("open_count"),
            func.sum(case((WorkItem.status == IN_PROGRESS, 1), else_=0)).label("in_progress_count"),
            func.sum(POINTS).label("estimation_sum"),
        )
        .select_from(WorkItemAssignee)
        .join(WorkItem, WorkItem.id == WorkItemAssignee.item_id)
        .join(User, User.id == WorkItemAssignee.user_id)
        .where(WorkItem.board_id == board_id, WorkItem.deleted_at.is_(None))
        .group_by(User.id, User.name, User.email, User.avatar_url)
        .order_by(User.name, User.id)
    )

    return WorkloadReport(
        rows=[
            AssigneeWorkload(
                assignee=UserSummary(id=r.id, name=r.name, email=r.email, avatar_url=r.avatar_url),
                open=int(r.open_count),
                in_progress=int(r.in_progress_count),
                estimation_sum=int(r.estimation_sum),
            )
            for r in result.all()
        ]
    )

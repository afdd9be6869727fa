"""Tests for the reporting engine: burndown, velocity, epic progress and workload."""
from datetime import date, datetime, timezone

import pytest
from sqlalchemy import update

from trackboard.core import boards, epics, reports, sprints, work_items
from trackboard.core.errors import NotFound, ValidationFailed
from trackboard.db.models import WorkItem
from trackboard.schemas.board import BoardCreate
from trackboard.schemas.epic import EpicCreate
from trackboard.schemas.item import AssigneeIn, WorkItemCreate, WorkItemUpdate
from trackboard.schemas.sprint import SprintCreate


async def add_item(db, broadcaster, board_id, status="To Do", **fields):
    return await work_items.create_work_item(
        db, broadcaster, board_id, WorkItemCreate(title="Task", type="task", status=status, **fields)
    )


async def complete(db, broadcaster, item_id, on: date):
    await work_items.update_work_item(db, broadcaster, item_id, WorkItemUpdate(status="Done"))
    await db.execute(
        update(WorkItem)
        .where(WorkItem.id == item_id)
        .values(updated_at=datetime(on.year, on.month, on.day, 12, tzinfo=timezone.utc))
    )
    await db.commit()


class TestHelpers:
    @pytest.mark.parametrize(
        "value, expected",
        [(0.5, 1), (1.5, 2), (2.5, 3), (2.4999, 2), (0, 0)],
    )
    def test_round_half_up(self, value, expected) -> None:
        assert reports.round_half_up(value) == expected

    def test_ideal_line(self) -> None:
        assert reports.ideal_line(5, 7) == [5, 4, 3, 2, 2, 1, 0]
        assert reports.ideal_line(10, 2) == [10, 0]
        assert reports.ideal_line(8, 1) == [8]
        assert reports.ideal_line(0, 3) == [0, 0, 0]
        assert reports.ideal_line(3, 0) == []

    def test_sprint_days(self) -> None:
        assert reports.sprint_days(date(2024, 1, 30), date(2024, 2, 1)) == [
            date(2024, 1, 30),
            date(2024, 1, 31),
            date(2024, 2, 1),
        ]
        assert reports.sprint_days(date(2024, 1, 2), date(2024, 1, 1)) == []


class TestBurndown:
    @pytest.mark.asyncio
    async def test_board_epic_sprint_scenario(self, db, broadcaster, registry, make_connection) -> None:
        board = await boards.create_board(db, BoardCreate(name="Board", key="B"))
        listener = make_connection()
        registry.subscribe(board.id, listener)
        epic = await epics.create_epic(db, broadcaster, board.id, EpicCreate(name="E1"))
        sprint = await sprints.create_sprint(
            db,
            broadcaster,
            board.id,
            SprintCreate(name="S1", start_date=date(2024, 1, 1), end_date=date(2024, 1, 7)),
        )
        item = await work_items.create_work_item(
            db,
            broadcaster,
            board.id,
            WorkItemCreate(title="X", type="story", status="Open", epic_id=epic.id, estimation_points=5),
        )

        linked = await sprints.set_epics_for_sprint(db, broadcaster, sprint.id, [epic.id])
        assert linked.model_dump(by_alias=True) == {"sprintId": sprint.id, "epicIds": [epic.id]}
        assert (await work_items.get_work_item(db, item.id)).sprint_id == sprint.id

        await complete(db, broadcaster, item.id, on=date(2024, 1, 7))
        assert (await work_items.get_work_item(db, item.id)).done_in_sprint_id == sprint.id

        report = await reports.burndown(db, sprint.id)

        assert report.total == 5
        assert report.labels[0] == date(2024, 1, 1)
        assert report.labels[-1] == date(2024, 1, 7)
        assert report.ideal == [5, 4, 3, 2, 2, 1, 0]
        assert report.actual == [5, 5, 5, 5, 5, 5, 0]
        assert [e["type"] for e in listener.events] == [
            "epic.created",
            "sprint.created",
            "item.created",
            "sprint.epics.updated",
            "item.updated",
        ]

    @pytest.mark.asyncio
    async def test_single_day_sprint(self, db, broadcaster, board, sprint) -> None:
        await add_item(db, broadcaster, board.id, sprint_id=sprint.id, estimation_points=4)

        report = await reports.burndown(db, sprint.id)

        assert report.labels == [sprint.start_date]
        assert report.ideal == [4]
        assert report.actual == [4]

    @pytest.mark.asyncio
    async def test_only_items_completed_in_the_sprint_count(self, db, broadcaster, board) -> None:
        s1 = await sprints.create_sprint(
            db, broadcaster, board.id, SprintCreate(name="S1", start_date=date(2024, 1, 1), end_date=date(2024, 1, 3))
        )
        s2 = await sprints.create_sprint(
            db, broadcaster, board.id, SprintCreate(name="S2", start_date=date(2024, 1, 4), end_date=date(2024, 1, 6))
        )
        early = await add_item(db, broadcaster, board.id, sprint_id=s1.id, estimation_points=2)
        carried = await add_item(db, broadcaster, board.id, sprint_id=s1.id, estimation_points=3)
        await add_item(db, broadcaster, board.id, sprint_id=s1.id)

        await complete(db, broadcaster, early.id, on=date(2024, 1, 2))
        # finished only after moving to the next sprint
        await work_items.update_work_item(db, broadcaster, carried.id, WorkItemUpdate(sprint_id=s2.id))
        await complete(db, broadcaster, carried.id, on=date(2024, 1, 2))

        report = await reports.burndown(db, s1.id)

        assert report.total == 2
        assert report.actual == [2, 0, 0]

    @pytest.mark.asyncio
    async def test_unknown_sprint(self, db) -> None:
        with pytest.raises(NotFound):
            await reports.burndown(db, "missing")


class TestVelocity:
    @pytest.mark.asyncio
    async def test_recent_closed_sprints_oldest_first(self, db, broadcaster, board) -> None:
        created = []
        for n, points in enumerate([1, 3, 5, 7], start=1):
            s = await sprints.create_sprint(
                db,
                broadcaster,
                board.id,
                SprintCreate(
                    name=f"S{n}",
                    start_date=date(2024, n, 1),
                    end_date=date(2024, n, 14),
                    state="CLOSED",
                ),
            )
            item = await add_item(db, broadcaster, board.id, sprint_id=s.id, estimation_points=points)
            await complete(db, broadcaster, item.id, on=date(2024, n, 10))
            created.append(s)
        await sprints.create_sprint(
            db, broadcaster, board.id, SprintCreate(name="S5", start_date=date(2024, 5, 1), end_date=date(2024, 5, 14))
        )

        report = await reports.velocity(db, board.id, window=3)

        assert [s.name for s in report.sprints] == ["S2", "S3", "S4"]
        assert [s.estimation_done for s in report.sprints] == [3, 5, 7]
        assert report.avg == 5

    @pytest.mark.asyncio
    async def test_no_closed_sprints(self, db, board) -> None:
        report = await reports.velocity(db, board.id)

        assert report.sprints == []
        assert report.avg == 0

    @pytest.mark.asyncio
    async def test_window_must_be_positive(self, db, board) -> None:
        with pytest.raises(ValidationFailed):
            await reports.velocity(db, board.id, window=0)


class TestEpicProgress:
    @pytest.mark.asyncio
    async def test_weighted_by_points(self, db, broadcaster, board, epic) -> None:
        done = await add_item(db, broadcaster, board.id, epic_id=epic.id, estimation_points=3)
        await add_item(db, broadcaster, board.id, epic_id=epic.id, estimation_points=1)
        await work_items.update_work_item(db, broadcaster, done.id, WorkItemUpdate(status="Done"))

        report = await reports.epic_progress(db, board.id)

        row = report.rows[0]
        assert (row.items_total, row.items_done) == (4, 3)
        assert row.percent_done_weighted == 0.75

    @pytest.mark.asyncio
    async def test_zero_points_is_zero_percent(self, db, broadcaster, board, epic) -> None:
        item = await add_item(db, broadcaster, board.id, epic_id=epic.id)
        await work_items.update_work_item(db, broadcaster, item.id, WorkItemUpdate(status="Done"))

        report = await reports.epic_progress(db, board.id)

        assert report.rows[0].items_total == 0
        assert report.rows[0].percent_done_weighted == 0

    @pytest.mark.asyncio
    async def test_epic_without_items_is_listed(self, db, board, epic) -> None:
        report = await reports.epic_progress(db, board.id)

        assert [(r.id, r.items_total, r.percent_done_weighted) for r in report.rows] == [(epic.id, 0, 0)]


class TestWorkload:
    @pytest.mark.asyncio
    async def test_open_in_progress_and_points(self, db, broadcaster, board, users) -> None:
        ana, bruno = users
        await add_item(
            db, broadcaster, board.id, status="In Progress", estimation_points=3,
            assignees=[AssigneeIn(user_id=ana.id, is_primary=True)],
        )
        await add_item(
            db, broadcaster, board.id, estimation_points=2,
            assignees=[AssigneeIn(user_id=ana.id)],
        )
        await add_item(db, broadcaster, board.id, status="Done", estimation_points=8, assignee_id=bruno.id)

        report = await reports.workload(db, board.id)

        rows = {r.assignee.id: r for r in report.rows}
        assert [r.assignee.name for r in report.rows] == ["Ana", "Bruno"]
        assert rows[ana.id].model_dump(by_alias=True, include={"open", "in_progress", "estimation_sum"}) == {
            "open": 2,
            "inProgress": 1,
            "estimationSum": 5,
        }
        assert (rows[bruno.id].open, rows[bruno.id].estimation_sum) == (0, 8)

    @pytest.mark.asyncio
    async def test_deleted_items_are_ignored(self, db, broadcaster, board, users) -> None:
        item = await add_item(db, broadcaster, board.id, estimation_points=2, assignee_id=users[0].id)
        await work_items.soft_delete_work_item(db, broadcaster, item.id)

        assert (await reports.workload(db, board.id)).rows == []

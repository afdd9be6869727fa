"""Tests for the sprint-epic linkage manager and its cascade onto work items."""
import pytest
from sqlalchemy import select

from trackboard.core import sprints, work_items
from trackboard.core.common import new_id, utcnow
from trackboard.core.errors import NotFound, TransactionFailed
from trackboard.db.models import Epic, WorkItem
from trackboard.schemas.item import WorkItemCreate, WorkItemUpdate
from trackboard.schemas.sprint import SprintCreate


async def add_item(db, broadcaster, board, **fields):
    return await work_items.create_work_item(
        db, broadcaster, board.id, WorkItemCreate(title="Task", type="task", status="To Do", **fields)
    )


async def reload(db, item_id):
    result = await db.execute(
        select(WorkItem).where(WorkItem.id == item_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


@pytest.fixture
async def second_epic(db, board):
    now = utcnow()
    epic = Epic(id=new_id(), board_id=board.id, name="Search", created_at=now, updated_at=now)
    db.add(epic)
    await db.commit()
    return epic


class TestSetEpicsForSprint:
    @pytest.mark.asyncio
    async def test_cascade_moves_live_epic_items(self, db, broadcaster, board, epic, sprint, listener) -> None:
        member = await add_item(db, broadcaster, board, epic_id=epic.id)
        outsider = await add_item(db, broadcaster, board)
        gone = await add_item(db, broadcaster, board, epic_id=epic.id)
        await work_items.soft_delete_work_item(db, broadcaster, gone.id)
        listener.sent.clear()

        result = await sprints.set_epics_for_sprint(db, broadcaster, sprint.id, [epic.id])

        assert result.sprint_id == sprint.id
        assert result.epic_ids == [epic.id]
        assert (await reload(db, member.id)).sprint_id == sprint.id
        assert (await reload(db, member.id)).version == member.version + 1
        assert (await reload(db, outsider.id)).sprint_id is None
        assert (await reload(db, gone.id)).sprint_id is None
        assert listener.events == [
            {"type": "sprint.epics.updated", "sprintId": sprint.id, "epicIds": [epic.id]}
        ]

    @pytest.mark.asyncio
    async def test_cascade_pulls_items_from_other_sprints(self, db, broadcaster, board, epic, sprint) -> None:
        other = await sprints.create_sprint(
            db,
            broadcaster,
            board.id,
            SprintCreate(name="Sprint 0", start_date=sprint.start_date, end_date=sprint.end_date),
        )
        item = await add_item(db, broadcaster, board, epic_id=epic.id, sprint_id=other.id)

        await sprints.set_epics_for_sprint(db, broadcaster, sprint.id, [epic.id])

        assert (await reload(db, item.id)).sprint_id == sprint.id

    @pytest.mark.asyncio
    async def test_idempotent(self, db, broadcaster, board, epic, sprint) -> None:
        item = await add_item(db, broadcaster, board, epic_id=epic.id)

        first = await sprints.set_epics_for_sprint(db, broadcaster, sprint.id, [epic.id])
        after_first = await reload(db, item.id)
        version = after_first.version
        second = await sprints.set_epics_for_sprint(db, broadcaster, sprint.id, [epic.id])
        after_second = await reload(db, item.id)

        assert first == second
        assert (await sprints.get_epics_for_sprint(db, sprint.id)).epic_ids == [epic.id]
        assert after_second.sprint_id == sprint.id
        # already on the sprint, so the second call leaves the row alone
        assert after_second.version == version

    @pytest.mark.asyncio
    async def test_duplicates_collapse(self, db, broadcaster, board, epic, sprint) -> None:
        result = await sprints.set_epics_for_sprint(db, broadcaster, sprint.id, [epic.id, epic.id])

        assert result.epic_ids == [epic.id]

    @pytest.mark.asyncio
    async def test_removed_epic_keeps_its_items(self, db, broadcaster, board, epic, second_epic, sprint) -> None:
        item = await add_item(db, broadcaster, board, epic_id=epic.id)
        await sprints.set_epics_for_sprint(db, broadcaster, sprint.id, [epic.id, second_epic.id])

        result = await sprints.set_epics_for_sprint(db, broadcaster, sprint.id, [second_epic.id])

        assert result.epic_ids == [second_epic.id]
        assert (await sprints.get_epics_for_sprint(db, sprint.id)).epic_ids == [second_epic.id]
        assert (await reload(db, item.id)).sprint_id == sprint.id

    @pytest.mark.asyncio
    async def test_empty_list_clears_links(self, db, broadcaster, epic, sprint) -> None:
        await sprints.set_epics_for_sprint(db, broadcaster, sprint.id, [epic.id])

        result = await sprints.set_epics_for_sprint(db, broadcaster, sprint.id, [])

        assert result.epic_ids == []
        assert (await sprints.get_epics_for_sprint(db, sprint.id)).epic_ids == []

    @pytest.mark.asyncio
    async def test_unknown_sprint(self, db, broadcaster, epic, listener) -> None:
        with pytest.raises(NotFound):
            await sprints.set_epics_for_sprint(db, broadcaster, "missing", [epic.id])
        assert listener.sent == []

    @pytest.mark.asyncio
    async def test_unknown_epic_changes_nothing(self, db, broadcaster, board, epic, sprint, listener) -> None:
        item = await add_item(db, broadcaster, board, epic_id=epic.id)
        # the rollback expires every loaded row
        sprint_id, epic_id = sprint.id, epic.id
        listener.sent.clear()

        with pytest.raises(NotFound):
            await sprints.set_epics_for_sprint(db, broadcaster, sprint_id, [epic_id, "missing"])

        assert (await sprints.get_epics_for_sprint(db, sprint_id)).epic_ids == []
        assert (await reload(db, item.id)).sprint_id is None
        assert listener.sent == []

    @pytest.mark.asyncio
    async def test_store_failure_keeps_links_and_items(
        self, db, broadcaster, board, epic, second_epic, sprint, listener, break_store
    ) -> None:
        item = await add_item(db, broadcaster, board, epic_id=epic.id)
        sprint_id, epic_id, second_epic_id = sprint.id, epic.id, second_epic.id
        await sprints.set_epics_for_sprint(db, broadcaster, sprint_id, [second_epic_id])
        listener.sent.clear()
        break_store()

        with pytest.raises(TransactionFailed):
            await sprints.set_epics_for_sprint(db, broadcaster, sprint_id, [epic_id])

        assert (await sprints.get_epics_for_sprint(db, sprint_id)).epic_ids == [second_epic_id]
        unchanged = await reload(db, item.id)
        assert unchanged.sprint_id is None
        assert unchanged.version == item.version
        assert listener.sent == []

    @pytest.mark.asyncio
    async def test_cascade_then_update_end_state(self, db, broadcaster, board, epic, second_epic, sprint) -> None:
        item = await add_item(db, broadcaster, board, epic_id=epic.id)

        await sprints.set_epics_for_sprint(db, broadcaster, sprint.id, [epic.id])
        await work_items.update_work_item(db, broadcaster, item.id, WorkItemUpdate(epic_id=second_epic.id))

        final = await reload(db, item.id)
        assert final.epic_id == second_epic.id
        assert final.sprint_id == sprint.id

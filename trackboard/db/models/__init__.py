from trackboard.db.models.user import User
from trackboard.db.models.board import Board
from trackboard.db.models.epic import Epic
from trackboard.db.models.sprint import Sprint, SprintEpic
from trackboard.db.models.work_item import WorkItem, WorkItemAssignee, WorkItemTransition
from trackboard.db.models.activity import Comment, CalendarEvent

__all__ = [
    "User",
    "Board",
    "Epic",
    "Sprint",
    "SprintEpic",
    "WorkItem",
    "WorkItemAssignee",
    "WorkItemTransition",
    "Comment",
    "CalendarEvent",
]

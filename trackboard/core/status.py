"""
Work item status domain.

Status is stored as free text so boards can define their own workflow
columns. The members of WorkItemStatus are the ones the system knows
about; anything else is a custom status and carries no side effects.
Only DONE drives behaviour (completion marker, reports), and IN_PROGRESS
is counted separately by the workload report.
"""
from enum import Enum
from typing import Optional


class WorkItemStatus(str, Enum):
    BACKLOG = "Backlog"
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    IN_REVIEW = "In Review"
    DONE = "Done"


class SprintState(str, Enum):
    PLANNED = "PLANNED"
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"


DEFAULT_EPIC_STATUS = "ACTIVE"


def classify_status(value: Optional[str]) -> Optional[WorkItemStatus]:
    """Return the known status for ``value``, or None for a custom one."""
    try:
        return WorkItemStatus(value)
    except ValueError:
        return None


def is_done(value: Optional[str]) -> bool:
    return classify_status(value) is WorkItemStatus.DONE


def is_in_progress(value: Optional[str]) -> bool:
    return classify_status(value) is WorkItemStatus.IN_PROGRESS

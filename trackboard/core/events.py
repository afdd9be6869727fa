from enum import Enum
from typing import Any, Dict


class EventType(str, Enum):
    ITEM_CREATED = "item.created"
    ITEM_UPDATED = "item.updated"
    ITEM_DELETED = "item.deleted"
    EPIC_CREATED = "epic.created"
    EPIC_UPDATED = "epic.updated"
    EPIC_DELETED = "epic.deleted"
    SPRINT_CREATED = "sprint.created"
    SPRINT_UPDATED = "sprint.updated"
    SPRINT_DELETED = "sprint.deleted"
    SPRINT_EPICS_UPDATED = "sprint.epics.updated"
    MEMBER_UPDATED = "member.updated"
    TEAM_CREATED = "team.created"
    COMMENT_CREATED = "comment.created"
    EVENT_CREATED = "event.created"
    EVENT_UPDATED = "event.updated"
    EVENT_DELETED = "event.deleted"


def make_event(event_type: EventType, **identifiers: Any) -> Dict[str, Any]:
    """Build the wire payload: ``{"type": <tag>, ...identifiers}``."""
    return {"type": event_type.value, **identifiers}

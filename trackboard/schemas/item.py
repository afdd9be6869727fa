from datetime import date, datetime
from typing import List, Optional

from trackboard.schemas.base import CamelModel


class ChecklistEntry(CamelModel):
    text: str
    done: bool = False

class Attachment(CamelModel):
    name: str
    url: str

class AssigneeIn(CamelModel):
    user_id: str
    is_primary: bool = False

class UserSummary(CamelModel):
    id: str
    name: str
    email: Optional[str] = None
    avatar_url: Optional[str] = None

class AssigneeRead(UserSummary):
    is_primary: bool = False


class WorkItemFields(CamelModel):
    summary: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    reporter_id: Optional[str] = None
    epic_id: Optional[str] = None
    sprint_id: Optional[str] = None
    parent_id: Optional[str] = None
    team_id: Optional[str] = None
    stack: Optional[str] = None
    branch_name: Optional[str] = None
    estimation_points: Optional[int] = None
    effort_hours: Optional[float] = None
    due_date: Optional[date] = None


class WorkItemCreate(WorkItemFields):
    # required, but checked by the pipeline so the failure is a typed ValidationFailed
    title: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    assignee_id: Optional[str] = None
    branch_required: bool = False
    toc_enabled: bool = False
    assignees: Optional[List[AssigneeIn]] = None
    labels: List[str] = []
    checklist: List[ChecklistEntry] = []
    attachments: List[Attachment] = []
    watchers: List[str] = []


class WorkItemUpdate(WorkItemFields):
    """
    Sparse update. Only fields present in the request body are written:
    an explicit null clears the field, an absent key leaves it unchanged.
    """
    title: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    assignees: Optional[List[AssigneeIn]] = None
    labels: Optional[List[str]] = None
    checklist: Optional[List[ChecklistEntry]] = None
    attachments: Optional[List[Attachment]] = None
    watchers: Optional[List[str]] = None
    branch_required: Optional[bool] = None
    toc_enabled: Optional[bool] = None


class WorkItemRead(WorkItemFields):
    id: str
    board_id: str
    title: str
    type: str
    status: str
    done_in_sprint_id: Optional[str] = None
    branch_required: bool = False
    toc_enabled: bool = False
    labels: List[str] = []
    checklist: List[ChecklistEntry] = []
    attachments: List[Attachment] = []
    watchers: List[str] = []
    assignee: Optional[UserSummary] = None
    assignees: List[AssigneeRead] = []
    created_at: datetime
    updated_at: datetime
    version: int

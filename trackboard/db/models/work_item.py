from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from trackboard.db.base import Base
from trackboard.core.common import utcnow

class WorkItem(Base):
    __tablename__ = "work_items"

    id = Column(String(36), primary_key=True)
    board_id = Column(String(36), ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    summary = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    type = Column(String, nullable=False)
    status = Column(String, nullable=False)  # open domain, see core.status
    priority = Column(String, nullable=True)
    reporter_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    epic_id = Column(String(36), ForeignKey("epics.id"), nullable=True, index=True)
    sprint_id = Column(String(36), ForeignKey("sprints.id"), nullable=True, index=True)
    # frozen the first time the item reaches Done
    done_in_sprint_id = Column(String(36), ForeignKey("sprints.id", ondelete="SET NULL"), nullable=True)
    parent_id = Column(String(36), ForeignKey("work_items.id"), nullable=True)
    team_id = Column(String(36), nullable=True)
    stack = Column(String, nullable=True)
    branch_required = Column(Boolean, nullable=False, default=False)
    branch_name = Column(String, nullable=True)
    toc_enabled = Column(Boolean, nullable=False, default=False)
    estimation_points = Column(Integer, nullable=True)
    effort_hours = Column(Float, nullable=True)
    due_date = Column(Date, nullable=True)
    labels = Column(JSON, nullable=False, default=list)
    checklist = Column(JSON, nullable=False, default=list)
    attachments = Column(JSON, nullable=False, default=list)
    watchers = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    version = Column(Integer, nullable=False, default=1)
    deleted_at = Column(DateTime(timezone=True), nullable=True)


class WorkItemAssignee(Base):
    __tablename__ = "work_item_assignees"

    item_id = Column(String(36), ForeignKey("work_items.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), primary_key=True)
    is_primary = Column(Boolean, nullable=False, default=False)
    position = Column(Integer, nullable=False, default=0)


class WorkItemTransition(Base):
    """Append-only status change log."""

    __tablename__ = "work_item_transitions"

    id = Column(String(36), primary_key=True)
    item_id = Column(String(36), ForeignKey("work_items.id", ondelete="CASCADE"), nullable=False, index=True)
    board_id = Column(String(36), ForeignKey("boards.id", ondelete="CASCADE"), nullable=False)
    from_status = Column(String, nullable=True)
    to_status = Column(String, nullable=False)
    at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    actor_id = Column(String(36), ForeignKey("users.id"), nullable=True)

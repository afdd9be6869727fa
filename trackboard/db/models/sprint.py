from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey
from trackboard.db.base import Base
from trackboard.core.common import utcnow

class Sprint(Base):
    __tablename__ = "sprints"

    id = Column(String(36), primary_key=True)
    board_id = Column(String(36), ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    number = Column(Integer, nullable=True)
    goal = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    state = Column(String, nullable=False, default="PLANNED")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    deleted_at = Column(DateTime(timezone=True), nullable=True)


class SprintEpic(Base):
    __tablename__ = "sprint_epics"

    sprint_id = Column(String(36), ForeignKey("sprints.id", ondelete="CASCADE"), primary_key=True)
    epic_id = Column(String(36), ForeignKey("epics.id", ondelete="CASCADE"), primary_key=True)

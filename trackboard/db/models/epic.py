from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from trackboard.db.base import Base
from trackboard.core.common import utcnow

class Epic(Base):
    __tablename__ = "epics"

    id = Column(String(36), primary_key=True)
    board_id = Column(String(36), ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    summary = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    color = Column(String, nullable=True)
    # ICE prioritisation scores, 0..10
    ice_impact = Column(Integer, nullable=False, default=0)
    ice_confidence = Column(Integer, nullable=False, default=0)
    ice_ease = Column(Integer, nullable=False, default=0)
    status = Column(String, nullable=False, default="ACTIVE")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

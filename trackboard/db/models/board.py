from sqlalchemy import Column, String, DateTime
from trackboard.db.base import Base
from trackboard.core.common import utcnow

class Board(Base):
    __tablename__ = "boards"

    id = Column(String(36), primary_key=True)
    name = Column(String, nullable=False)
    key = Column(String, nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

from datetime import datetime
from typing import List, Optional

from trackboard.schemas.base import CamelModel

class CommentCreate(CamelModel):
    user_id: Optional[str] = None
    content: Optional[str] = None
    mentions: List[str] = []

class CalendarEventCreate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    location: Optional[str] = None
    link_url: Optional[str] = None
    created_by: Optional[str] = None

class CalendarEventUpdate(CalendarEventCreate):
    pass

class Ack(CamelModel):
    id: str

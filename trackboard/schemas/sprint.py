from datetime import date, datetime
from typing import List, Optional

from trackboard.core.status import SprintState
from trackboard.schemas.base import CamelModel

class SprintCreate(CamelModel):
    name: Optional[str] = None
    number: Optional[int] = None
    goal: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    state: Optional[SprintState] = None

class SprintUpdate(SprintCreate):
    pass

class SprintRead(CamelModel):
    id: str
    board_id: str
    name: str
    number: Optional[int] = None
    goal: Optional[str] = None
    start_date: date
    end_date: date
    state: SprintState
    created_at: datetime
    updated_at: datetime

class SprintEpicsUpdate(CamelModel):
    epic_ids: List[str]

class SprintEpicsRead(CamelModel):
    sprint_id: str
    epic_ids: List[str]

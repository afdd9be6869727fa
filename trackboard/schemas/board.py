from datetime import datetime
from typing import Optional

from trackboard.schemas.base import CamelModel

class BoardCreate(CamelModel):
    name: Optional[str] = None
    key: Optional[str] = None

class BoardRead(CamelModel):
    id: str
    name: str
    key: str
    created_at: datetime
    updated_at: datetime

from datetime import datetime
from typing import Optional

from pydantic import Field

from trackboard.schemas.base import CamelModel

class EpicCreate(CamelModel):
    name: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    ice_impact: Optional[int] = Field(default=None, ge=0, le=10)
    ice_confidence: Optional[int] = Field(default=None, ge=0, le=10)
    ice_ease: Optional[int] = Field(default=None, ge=0, le=10)
    status: Optional[str] = None

class EpicUpdate(EpicCreate):
    pass

class EpicRead(CamelModel):
    id: str
    board_id: str
    name: str
    summary: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    ice_impact: int
    ice_confidence: int
    ice_ease: int
    status: str
    created_at: datetime
    updated_at: datetime

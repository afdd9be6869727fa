from pydantic import BaseModel

class SystemStats(BaseModel):
    boards: int
    items: int
    epics: int
    sprints: int
    subscribers: int

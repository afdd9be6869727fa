from datetime import date
from typing import List

from trackboard.schemas.base import CamelModel
from trackboard.schemas.item import UserSummary

class BurndownReport(CamelModel):
    labels: List[date]
    ideal: List[int]
    actual: List[int]
    total: int

class SprintVelocity(CamelModel):
    id: str
    name: str
    start_date: date
    end_date: date
    estimation_done: int

class VelocityReport(CamelModel):
    sprints: List[SprintVelocity]
    avg: float

class EpicProgress(CamelModel):
    id: str
    name: str
    items_total: int
    items_done: int
    percent_done_weighted: float

class EpicProgressReport(CamelModel):
    rows: List[EpicProgress]

class AssigneeWorkload(CamelModel):
    assignee: UserSummary
    open: int
    in_progress: int
    estimation_sum: int

class WorkloadReport(CamelModel):
    rows: List[AssigneeWorkload]

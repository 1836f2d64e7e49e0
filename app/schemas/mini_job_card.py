from datetime import date, datetime, time
from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.mini_job_card import MiniJobCard
from app.services.durations import format_clock_face
from app.services.status_engine import allowed_next_statuses


class StatusUpdateRequest(BaseModel):
    status: str
    location: Optional[str] = Field(default=None, max_length=255)
    occurred_at: Optional[datetime] = Field(
        default=None,
        description="If omitted, server uses current business-local time.",
    )


class MiniJobCardResponse(BaseModel):
    id: str
    job_card_id: str
    employee_id: int
    status: str
    work_date: date
    observed_time: Optional[time]
    location: Optional[str]
    last_status_change_at: datetime
    on_hold_minutes: int
    assigned_minutes: int
    in_progress_minutes: int
    # Legacy HH:MM clock-face view; hours wrap at 24.
    spent_on_hold: str
    spent_on_assigned: str
    spent_on_in_progress: str
    allowed_next_statuses: List[str]
    created_at: datetime
    updated_at: datetime


class EligibilityResponse(BaseModel):
    employee_id: int
    work_date: date
    can_edit: bool
    editable_task_ids: List[str]


def to_response(task: MiniJobCard) -> MiniJobCardResponse:
    allowed_next = sorted(s.value for s in allowed_next_statuses(task.status))
    return MiniJobCardResponse(
        id=task.id,
        job_card_id=task.job_card_id,
        employee_id=task.employee_id,
        status=task.status,
        work_date=task.work_date,
        observed_time=task.time,
        location=task.location,
        last_status_change_at=task.last_status_change_at,
        on_hold_minutes=int(task.spent_on_hold_minutes or 0),
        assigned_minutes=int(task.spent_assigned_minutes or 0),
        in_progress_minutes=int(task.spent_in_progress_minutes or 0),
        spent_on_hold=format_clock_face(task.spent_on_hold_minutes),
        spent_on_assigned=format_clock_face(task.spent_assigned_minutes),
        spent_on_in_progress=format_clock_face(task.spent_in_progress_minutes),
        allowed_next_statuses=allowed_next,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )

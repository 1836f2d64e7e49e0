from datetime import date, datetime, time
from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.overtime_ledger import OvertimeLedgerEntry
from app.services.durations import format_hhmm


class EndSessionRequest(BaseModel):
    employee_id: int
    work_date: Optional[date] = None
    end_location: Optional[str] = Field(default=None, max_length=255)
    ended_at: Optional[datetime] = Field(
        default=None,
        description="If omitted, server uses current business-local time.",
    )


class LedgerEntryResponse(BaseModel):
    employee_id: int
    work_date: date
    first_time: time
    last_time: time
    current_status: Optional[str]
    last_status: Optional[str]
    status_change_time: Optional[datetime]
    on_hold_time: str
    assigned_time: str
    in_progress_time: str
    morning_ot: str
    evening_ot: str
    total_ot: str
    first_location: Optional[str]
    last_location: Optional[str]
    locations: List[str]


def to_response(entry: OvertimeLedgerEntry) -> LedgerEntryResponse:
    return LedgerEntryResponse(
        employee_id=entry.employee_id,
        work_date=entry.work_date,
        first_time=entry.first_time,
        last_time=entry.last_time,
        current_status=entry.current_status,
        last_status=entry.last_status,
        status_change_time=entry.status_change_time,
        on_hold_time=format_hhmm(entry.spent_on_hold_minutes),
        assigned_time=format_hhmm(entry.spent_assigned_minutes),
        in_progress_time=format_hhmm(entry.spent_in_progress_minutes),
        morning_ot=format_hhmm(entry.morning_ot_minutes),
        evening_ot=format_hhmm(entry.evening_ot_minutes),
        total_ot=format_hhmm(entry.total_ot_minutes),
        first_location=entry.first_location,
        last_location=entry.last_location,
        locations=list(entry.locations or []),
    )

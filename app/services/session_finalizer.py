from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Session

from app.core.clock import BusinessClock, get_clock
from app.database import SessionLocal
from app.models.employee import Employee
from app.models.enums import END_DATE, END_JOB_CARD, JobStatus
from app.models.overtime_ledger import OvertimeLedgerEntry
from app.services import activity_log_service, overtime_ledger
from app.services.durations import BucketTotals, accumulate, minutes_between
from app.services.errors import NoActiveSession, NotFoundError
from app.services.locking import employee_day_lock
from app.services.side_effects import best_effort

logger = logging.getLogger(__name__)


def credit_completed_wrap_up(entry: OvertimeLedgerEntry, ended_at: datetime) -> int:
    """Time after marking work complete but before ending the day is billed as assigned."""
    if entry.current_status != JobStatus.COMPLETED.value or entry.status_change_time is None:
        return 0

    minutes = minutes_between(entry.status_change_time, ended_at)
    if minutes <= 0:
        return 0

    entry.spent_assigned_minutes = accumulate(entry.spent_assigned_minutes, minutes)
    return minutes


def reconcile_day(entry: OvertimeLedgerEntry) -> int:
    """
    Give any part of the day span not covered by a bucket to ON_HOLD.

    Returns the minutes added. Afterwards the three buckets sum to at least
    last_time - first_time.
    """
    total_elapsed = overtime_ledger.elapsed_day_minutes(entry)
    accounted = BucketTotals.of(entry).total
    remainder = total_elapsed - accounted
    if remainder <= 0:
        return 0

    entry.spent_on_hold_minutes = accumulate(entry.spent_on_hold_minutes, remainder)
    return remainder


def end_session(
    employee_id: int,
    work_date: date,
    ended_at: Optional[datetime] = None,
    end_location: Optional[str] = None,
    *,
    db: Optional[Session] = None,
    clock: Optional[BusinessClock] = None,
) -> OvertimeLedgerEntry:
    """
    Close the employee's day and finalize its ledger entry.

    If db is provided, this function will NOT commit/close. Caller owns the transaction.
    """
    clock = clock or get_clock()
    ended_at = ended_at or clock.now()

    owns_db = db is None
    if owns_db:
        db = SessionLocal()

    try:
        employee = db.get(Employee, int(employee_id))
        if employee is None:
            raise NotFoundError(f"Employee not found: {employee_id}")

        with employee_day_lock(employee_id, work_date):
            entry = overtime_ledger.get_entry(employee_id, work_date, db, for_update=True)
            if entry is None:
                raise NoActiveSession(employee_id, work_date)
            overtime_ledger.ensure_in_order(entry, ended_at)

            wrap_up = credit_completed_wrap_up(entry, ended_at)
            overtime_ledger.move_to_status(entry, END_JOB_CARD, ended_at)

            entry.last_time = ended_at.time().replace(microsecond=0)
            entry.add_location(end_location)

            idle = reconcile_day(entry)
            overtime_ledger.apply_overtime(entry)
            entry.updated_at = ended_at
            db.flush()

            best_effort(
                "End of day log write",
                lambda: activity_log_service.append(
                    employee_id=employee_id,
                    action=END_JOB_CARD,
                    status=END_DATE,
                    location=end_location,
                    occurred_at=ended_at,
                    db=db,
                ),
                db=db,
                context={"employee_id": int(employee_id), "work_date": work_date},
            )

            if owns_db:
                db.commit()
                db.refresh(entry)

            logger.info(
                "Session ended",
                extra={
                    "employee_id": int(employee_id),
                    "work_date": work_date,
                    "wrap_up_minutes": wrap_up,
                    "idle_minutes": idle,
                    "morning_ot_minutes": entry.morning_ot_minutes,
                    "evening_ot_minutes": entry.evening_ot_minutes,
                    "on_hold_minutes": entry.spent_on_hold_minutes,
                    "assigned_minutes": entry.spent_assigned_minutes,
                    "in_progress_minutes": entry.spent_in_progress_minutes,
                    "locations": list(entry.locations or []),
                },
            )
            return entry
    except Exception:
        if owns_db:
            db.rollback()
        raise
    finally:
        if owns_db:
            db.close()

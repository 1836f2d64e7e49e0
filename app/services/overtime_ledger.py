from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from app.core.config import get_evening_ot_threshold, get_morning_ot_threshold
from app.database import SessionLocal
from app.models.enums import status_value
from app.models.overtime_ledger import OvertimeLedgerEntry
from app.services.durations import (
    BucketTotals,
    exceeds_one_day,
    minutes_between,
    route_delta,
)
from app.services.locking import employee_day_lock

logger = logging.getLogger(__name__)

# A single OT value is shown on a clock face, so it tops out at 23:59.
MAX_OT_MINUTES = 23 * 60 + 59


def _minutes_from(start: time, end: time) -> int:
    start_dt = datetime.combine(date.min, start)
    end_dt = datetime.combine(date.min, end)
    return max(0, minutes_between(start_dt, end_dt))


def compute_overtime(
    first_time: Optional[time],
    last_time: Optional[time],
    *,
    morning_threshold: Optional[time] = None,
    evening_threshold: Optional[time] = None,
) -> Tuple[int, int]:
    """Return (morning, evening) OT minutes for a day's first and last activity."""
    if morning_threshold is None:
        morning_threshold = get_morning_ot_threshold()
    if evening_threshold is None:
        evening_threshold = get_evening_ot_threshold()

    morning = 0
    if first_time is not None and first_time < morning_threshold:
        morning = min(_minutes_from(first_time, morning_threshold), MAX_OT_MINUTES)

    evening = 0
    if last_time is not None and last_time > evening_threshold:
        evening = min(_minutes_from(evening_threshold, last_time), MAX_OT_MINUTES)

    return morning, evening


def apply_overtime(entry: OvertimeLedgerEntry) -> None:
    if entry.first_time is None or entry.last_time is None:
        logger.warning(
            "Cannot calculate OT without first and last time",
            extra={"employee_id": entry.employee_id, "work_date": entry.work_date},
        )
        return

    morning, evening = compute_overtime(entry.first_time, entry.last_time)
    entry.morning_ot_minutes = morning
    entry.evening_ot_minutes = evening


def move_to_status(entry: OvertimeLedgerEntry, new_status: str, occurred_at: datetime) -> int:
    """
    Close out the entry's current status at occurred_at and switch to new_status.

    Returns the minutes credited to a bucket (0 when the prior status is not
    tracked or the clock went backwards). status_change_time never moves back,
    so a late event cannot re-open time that was already credited.
    """
    credited = 0
    if entry.current_status is not None and entry.status_change_time is not None:
        delta = minutes_between(entry.status_change_time, occurred_at)
        before = BucketTotals.of(entry)
        after = route_delta(before, entry.current_status, delta)
        if after != before:
            after.apply_to(entry)
            credited = delta
            _warn_if_over_a_day(entry, after)
        elif delta < 0:
            logger.warning(
                "Out of order status event ignored for bucket accounting",
                extra={
                    "employee_id": entry.employee_id,
                    "work_date": entry.work_date,
                    "status_change_time": entry.status_change_time,
                    "occurred_at": occurred_at,
                },
            )

    entry.last_status = entry.current_status
    entry.current_status = status_value(new_status)
    if entry.status_change_time is None or occurred_at > entry.status_change_time:
        entry.status_change_time = occurred_at
    return credited


def ensure_in_order(entry: Optional[OvertimeLedgerEntry], occurred_at: datetime) -> None:
    """Raise ValueError when occurred_at is older than the entry's last status change."""
    if entry is None or entry.status_change_time is None:
        return
    if occurred_at < entry.status_change_time:
        raise ValueError(
            "Event is older than the employee's last recorded activity "
            f"({entry.status_change_time.isoformat()})"
        )


def _warn_if_over_a_day(entry: OvertimeLedgerEntry, buckets: BucketTotals) -> None:
    for name in ("on_hold", "assigned", "in_progress"):
        value = getattr(buckets, name)
        if exceeds_one_day(value):
            logger.warning(
                "Ledger bucket exceeds 24 hours",
                extra={
                    "employee_id": entry.employee_id,
                    "work_date": entry.work_date,
                    "bucket": name,
                    "minutes": value,
                },
            )


def get_entry(
    employee_id: int,
    work_date: date,
    db: Session,
    *,
    for_update: bool = False,
) -> Optional[OvertimeLedgerEntry]:
    q = db.query(OvertimeLedgerEntry).filter(
        OvertimeLedgerEntry.employee_id == int(employee_id),
        OvertimeLedgerEntry.work_date == work_date,
    )
    if for_update:
        q = q.with_for_update()
    return q.first()


def _create_entry(
    employee_id: int,
    work_date: date,
    status: str,
    occurred_at: datetime,
    location: Optional[str],
) -> OvertimeLedgerEntry:
    first = occurred_at.time().replace(microsecond=0)
    entry = OvertimeLedgerEntry(
        employee_id=int(employee_id),
        work_date=work_date,
        first_time=first,
        last_time=first,
        current_status=status_value(status),
        last_status=None,
        status_change_time=occurred_at,
        spent_on_hold_minutes=0,
        spent_assigned_minutes=0,
        spent_in_progress_minutes=0,
        morning_ot_minutes=0,
        evening_ot_minutes=0,
        locations=[],
        created_at=occurred_at,
        updated_at=occurred_at,
    )
    entry.add_location(location)
    apply_overtime(entry)
    return entry


def record_activity(
    employee_id: int,
    work_date: date,
    status: str,
    occurred_at: datetime,
    location: Optional[str] = None,
    *,
    db: Optional[Session] = None,
) -> OvertimeLedgerEntry:
    """
    Fold one status event into the employee's ledger entry for work_date.

    A missing entry is created, never reported. If db is provided the caller
    owns the transaction and should hold employee_day_lock until it commits.
    """
    owns_db = db is None
    if owns_db:
        db = SessionLocal()

    try:
        with employee_day_lock(employee_id, work_date):
            entry = get_entry(employee_id, work_date, db, for_update=True)

            if entry is None:
                entry = _create_entry(employee_id, work_date, status, occurred_at, location)
                db.add(entry)
                logger.info(
                    "Created OT ledger entry",
                    extra={
                        "employee_id": int(employee_id),
                        "work_date": work_date,
                        "status": status_value(status),
                        "first_time": entry.first_time,
                    },
                )
            else:
                credited = move_to_status(entry, status, occurred_at)
                observed = occurred_at.time().replace(microsecond=0)
                if entry.last_time is None or observed > entry.last_time:
                    entry.last_time = observed
                entry.add_location(location)
                entry.updated_at = occurred_at
                apply_overtime(entry)
                logger.info(
                    "Updated OT ledger entry",
                    extra={
                        "employee_id": int(employee_id),
                        "work_date": work_date,
                        "status": entry.current_status,
                        "last_status": entry.last_status,
                        "credited_minutes": credited,
                        "last_time": entry.last_time,
                    },
                )

            db.flush()

            if owns_db:
                db.commit()
                db.refresh(entry)

            return entry
    except Exception:
        if owns_db:
            db.rollback()
        raise
    finally:
        if owns_db:
            db.close()


def recalculate_overtime(
    employee_id: int,
    work_date: date,
    *,
    db: Optional[Session] = None,
) -> Optional[OvertimeLedgerEntry]:
    owns_db = db is None
    if owns_db:
        db = SessionLocal()

    try:
        with employee_day_lock(employee_id, work_date):
            entry = get_entry(employee_id, work_date, db, for_update=True)
            if entry is None:
                logger.warning(
                    "No OT ledger entry to recalculate",
                    extra={"employee_id": int(employee_id), "work_date": work_date},
                )
                return None

            apply_overtime(entry)
            db.flush()

            if owns_db:
                db.commit()
                db.refresh(entry)

            return entry
    except Exception:
        if owns_db:
            db.rollback()
        raise
    finally:
        if owns_db:
            db.close()


def elapsed_day_minutes(entry: OvertimeLedgerEntry) -> int:
    return _minutes_from(entry.first_time, entry.last_time)

import logging
from datetime import date, datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.activity_log import ActivityLog
from app.models.employee import Employee
from app.services.errors import NotFoundError

logger = logging.getLogger(__name__)

# A year of history is the widest "recent" window served.
MAX_RECENT_HOURS = 24 * 365


def append(
    *,
    employee_id: int,
    action: str,
    status: str,
    location: Optional[str],
    occurred_at: datetime,
    db: Session,
    generator_name: Optional[str] = None,
) -> ActivityLog:
    row = ActivityLog(
        employee_id=int(employee_id),
        action=str(action),
        status=str(status),
        location=location,
        generator_name=generator_name,
        log_date=occurred_at.date(),
        log_time=occurred_at.time().replace(microsecond=0),
        created_at=occurred_at,
    )
    db.add(row)
    db.flush()

    logger.info(
        "Activity logged",
        extra={"employee_id": int(employee_id), "action": action, "status": status},
    )
    return row


def list_for_employee_day(employee_id: int, day: date, db: Session) -> List[ActivityLog]:
    return (
        db.query(ActivityLog)
        .filter(
            ActivityLog.employee_id == int(employee_id),
            ActivityLog.log_date == day,
        )
        .order_by(ActivityLog.log_time.asc(), ActivityLog.id.asc())
        .all()
    )


def get_log(log_id: int, db: Session) -> ActivityLog:
    row = db.get(ActivityLog, int(log_id))
    if row is None:
        raise NotFoundError(f"Activity log not found: {log_id}")
    return row


def find_employee_by_email(email: str, db: Session) -> Employee:
    cleaned = (email or "").strip().lower()
    if not cleaned:
        raise ValueError("Employee email cannot be empty")
    employee = db.query(Employee).filter(Employee.email == cleaned).first()
    if employee is None:
        raise NotFoundError(f"Employee not found: {cleaned}")
    return employee


def list_for_employee(employee_id: int, db: Session) -> List[ActivityLog]:
    """Newest first."""
    return (
        db.query(ActivityLog)
        .filter(ActivityLog.employee_id == int(employee_id))
        .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .all()
    )


def list_for_day(day: date, db: Session) -> List[ActivityLog]:
    return (
        db.query(ActivityLog)
        .filter(ActivityLog.log_date == day)
        .order_by(ActivityLog.log_time.asc(), ActivityLog.id.asc())
        .all()
    )


def list_recent(hours: int, *, now: datetime, db: Session) -> List[ActivityLog]:
    if hours < 1 or hours > MAX_RECENT_HOURS:
        raise ValueError(f"Hours must be between 1 and {MAX_RECENT_HOURS}")

    since = now - timedelta(hours=hours)
    return (
        db.query(ActivityLog)
        .filter(ActivityLog.created_at >= since)
        .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .all()
    )

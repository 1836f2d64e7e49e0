import logging
from datetime import date
from typing import Iterable, Optional, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.clock import BusinessClock, get_clock
from app.database import SessionLocal
from app.models.enums import END_DATE, JobStatus
from app.models.mini_job_card import MiniJobCard
from app.services import activity_log_service

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = frozenset(
    {JobStatus.IN_PROGRESS.value, JobStatus.ON_HOLD.value, JobStatus.ASSIGNED.value}
)


def can_edit(employee_id: int, day: date, *, db: Optional[Session] = None) -> bool:
    """
    True unless the employee has already ended their day.

    Fails closed: if the log store cannot be read the answer is False.
    """
    owns_db = db is None
    if owns_db:
        db = SessionLocal()

    try:
        logs = activity_log_service.list_for_employee_day(employee_id, day, db)
    except SQLAlchemyError:
        logger.exception(
            "Edit eligibility check failed; denying edits",
            extra={"employee_id": int(employee_id), "day": day},
        )
        return False
    finally:
        if owns_db:
            db.close()

    if not logs:
        logger.info(
            "No activity today; employee can edit",
            extra={"employee_id": int(employee_id), "day": day},
        )
        return True

    if any(row.status == END_DATE for row in logs):
        logger.info(
            "Day already ended; employee cannot edit",
            extra={"employee_id": int(employee_id), "day": day},
        )
        return False

    return True


def editable_task_ids(tasks: Iterable[MiniJobCard]) -> Set[str]:
    """Only the active task is editable while one exists; otherwise every task is."""
    tasks = list(tasks)
    active = {t.id for t in tasks if t.status in ACTIVE_STATUSES}
    if active:
        return active
    return {t.id for t in tasks}


def list_tasks_for_day(employee_id: int, day: date, db: Session):
    return (
        db.query(MiniJobCard)
        .filter(
            MiniJobCard.employee_id == int(employee_id),
            MiniJobCard.work_date == day,
        )
        .order_by(MiniJobCard.created_at.asc(), MiniJobCard.id.asc())
        .all()
    )


def can_edit_task(
    task: MiniJobCard,
    *,
    db: Session,
    clock: Optional[BusinessClock] = None,
    day: Optional[date] = None,
) -> bool:
    """
    Gate a change to task on day (the business day being written, default today).

    A back-dated change is judged against the day it lands on, so a day that
    has already ended stays closed.
    """
    if day is None:
        day = (clock or get_clock()).today()

    if not can_edit(task.employee_id, day, db=db):
        return False

    candidates = list_tasks_for_day(task.employee_id, day, db)
    if all(t.id != task.id for t in candidates):
        candidates.append(task)

    allowed = task.id in editable_task_ids(candidates)
    if not allowed:
        logger.info(
            "Another task is active; edit blocked",
            extra={"employee_id": task.employee_id, "mini_job_card_id": task.id},
        )
    return allowed

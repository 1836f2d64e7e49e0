from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, FrozenSet, Optional

from sqlalchemy.orm import Session

from app.core.clock import BusinessClock, get_clock
from app.database import SessionLocal
from app.models.enums import UPDATE_JOB_CARD, JobStatus, status_value
from app.models.job_card import JobCard
from app.models.mini_job_card import MiniJobCard
from app.services import activity_log_service, edit_eligibility, overtime_ledger
from app.services.durations import BucketTotals, exceeds_one_day, minutes_between, route_delta
from app.services.errors import EditNotAllowed, NotFoundError
from app.services.locking import employee_day_lock
from app.services.side_effects import best_effort

logger = logging.getLogger(__name__)

MAX_LOCATION_LENGTH = 255

# Edges offered to the user. The engine accepts any status; this is for callers.
ALLOWED_TRANSITIONS: Dict[JobStatus, FrozenSet[JobStatus]] = {
    JobStatus.PENDING: frozenset({JobStatus.ASSIGNED, JobStatus.CANCELLED}),
    JobStatus.ASSIGNED: frozenset(
        {JobStatus.PENDING, JobStatus.IN_PROGRESS, JobStatus.ON_HOLD, JobStatus.CANCELLED}
    ),
    JobStatus.IN_PROGRESS: frozenset({JobStatus.ON_HOLD, JobStatus.COMPLETED, JobStatus.CANCELLED}),
    JobStatus.ON_HOLD: frozenset(
        {JobStatus.PENDING, JobStatus.IN_PROGRESS, JobStatus.ASSIGNED, JobStatus.CANCELLED}
    ),
    JobStatus.COMPLETED: frozenset({JobStatus.ON_HOLD}),
    JobStatus.CANCELLED: frozenset({JobStatus.ON_HOLD}),
}


def parse_status(value) -> JobStatus:
    if isinstance(value, JobStatus):
        return value
    if value is None:
        raise ValueError("Status cannot be null")
    try:
        return JobStatus(str(value).strip().upper())
    except ValueError as exc:
        raise ValueError(f"Invalid status: {value}") from exc


def allowed_next_statuses(status) -> FrozenSet[JobStatus]:
    return ALLOWED_TRANSITIONS[parse_status(status)]


def apply_transition(task: MiniJobCard, new_status, occurred_at: datetime) -> bool:
    """
    Move task to new_status at occurred_at, crediting time spent in the old one.

    Returns False for a same-status request, which only refreshes updated_at.
    """
    status = parse_status(new_status)

    if task.status == status.value:
        task.updated_at = occurred_at
        logger.info(
            "Same status requested; treating as duplicate",
            extra={"mini_job_card_id": task.id, "status": status.value},
        )
        return False

    if task.last_status_change_at is not None:
        delta = minutes_between(task.last_status_change_at, occurred_at)
        if delta < 0:
            raise ValueError("Status change is older than the task's last status change")

        before = BucketTotals.of(task)
        after = route_delta(before, task.status, delta)
        if after != before:
            after.apply_to(task)
            logger.info(
                "Credited time to status bucket",
                extra={
                    "mini_job_card_id": task.id,
                    "status": task.status,
                    "minutes": delta,
                },
            )
            if exceeds_one_day(after.total):
                logger.warning(
                    "Time spent on task exceeds 24 hours",
                    extra={
                        "mini_job_card_id": task.id,
                        "on_hold_minutes": after.on_hold,
                        "assigned_minutes": after.assigned,
                        "in_progress_minutes": after.in_progress,
                    },
                )

    task.status = status.value
    task.last_status_change_at = occurred_at
    task.updated_at = occurred_at
    return True


def get_task(db: Session, task_id: str) -> MiniJobCard:
    if not task_id:
        raise ValueError("Mini job card ID cannot be empty")
    task = db.query(MiniJobCard).filter(MiniJobCard.id == str(task_id)).first()
    if task is None:
        raise NotFoundError(f"Mini job card not found: {task_id}")
    return task


def update_status(
    task_id: str,
    new_status,
    *,
    occurred_at: Optional[datetime] = None,
    location: Optional[str] = None,
    db: Optional[Session] = None,
    clock: Optional[BusinessClock] = None,
) -> MiniJobCard:
    """
    If db is provided, this function will NOT commit/close. Caller owns the transaction.
    If db is None, this function manages its own session + commit.
    """
    status = parse_status(new_status)
    if location is not None and len(location) > MAX_LOCATION_LENGTH:
        raise ValueError(f"Location cannot exceed {MAX_LOCATION_LENGTH} characters")

    clock = clock or get_clock()
    occurred_at = occurred_at or clock.now()

    owns_db = db is None
    if owns_db:
        db = SessionLocal()

    try:
        task = get_task(db, task_id)

        work_date = occurred_at.date()
        with employee_day_lock(task.employee_id, work_date):
            if not edit_eligibility.can_edit_task(task, db=db, clock=clock, day=work_date):
                raise EditNotAllowed("Task cannot be edited right now")

            # The ledger is shared by all of the employee's tasks for the day.
            if task.status != status.value:
                overtime_ledger.ensure_in_order(
                    overtime_ledger.get_entry(task.employee_id, work_date, db, for_update=True),
                    occurred_at,
                )

            old_status = task.status
            if location is not None:
                task.location = location

            changed = apply_transition(task, status, occurred_at)
            db.flush()

            if changed:
                context = {
                    "mini_job_card_id": task.id,
                    "employee_id": task.employee_id,
                    "from_status": old_status,
                    "to_status": status.value,
                }
                best_effort(
                    "OT ledger update",
                    lambda: overtime_ledger.record_activity(
                        task.employee_id,
                        work_date,
                        status_value(status),
                        occurred_at,
                        task.location,
                        db=db,
                    ),
                    db=db,
                    context=context,
                )
                best_effort(
                    "Change log write",
                    lambda: _log_change(db, task, old_status, occurred_at),
                    db=db,
                    context=context,
                )
                logger.info("Mini job card status changed", extra=context)

            if owns_db:
                db.commit()
                db.refresh(task)

            return task
    except Exception:
        if owns_db:
            db.rollback()
        raise
    finally:
        if owns_db:
            db.close()


def _log_change(db: Session, task: MiniJobCard, old_status: str, occurred_at: datetime) -> None:
    job_card = db.get(JobCard, task.job_card_id)
    activity_log_service.append(
        employee_id=task.employee_id,
        action=UPDATE_JOB_CARD,
        status=f"{old_status} to {task.status}",
        location=task.location,
        occurred_at=occurred_at,
        generator_name=job_card.generator_name if job_card is not None else None,
        db=db,
    )

import logging
from datetime import date
from typing import Iterable, List, Optional, Tuple
from uuid import uuid4

from sqlalchemy.orm import Session

from app.core.clock import BusinessClock, get_clock
from app.database import SessionLocal
from app.models.employee import Employee
from app.models.enums import JobStatus, JobType
from app.models.job_card import JobCard
from app.models.mini_job_card import MiniJobCard
from app.services.errors import NotFoundError
from app.services.status_engine import parse_status

logger = logging.getLogger(__name__)


def _require_employee(db: Session, employee_id: int) -> Employee:
    employee = db.get(Employee, int(employee_id))
    if employee is None:
        raise NotFoundError(f"Employee not found: {employee_id}")
    return employee


def _require_job_card(db: Session, job_card_id: str) -> JobCard:
    job_card = db.get(JobCard, str(job_card_id))
    if job_card is None:
        raise NotFoundError(f"Job card not found: {job_card_id}")
    return job_card


def _new_mini_job_card(
    job_card_id: str,
    employee_id: int,
    work_date: date,
    location: Optional[str],
    clock: BusinessClock,
) -> MiniJobCard:
    now = clock.now()
    return MiniJobCard(
        id=str(uuid4()),
        job_card_id=job_card_id,
        employee_id=int(employee_id),
        status=JobStatus.PENDING.value,
        work_date=work_date,
        time=now.time(),
        location=location,
        last_status_change_at=now,
        spent_on_hold_minutes=0,
        spent_assigned_minutes=0,
        spent_in_progress_minutes=0,
        created_at=now,
        updated_at=now,
    )


def create_job_card(
    job_type: str,
    generator_name: str,
    employee_ids: Iterable[int],
    *,
    title: Optional[str] = None,
    work_date: Optional[date] = None,
    location: Optional[str] = None,
    db: Optional[Session] = None,
    clock: Optional[BusinessClock] = None,
) -> Tuple[JobCard, List[MiniJobCard]]:
    """
    Create a job card and one PENDING mini job card per assigned employee.

    If db is provided, this function will NOT commit/close. Caller owns the transaction.
    """
    try:
        job_type = JobType(str(job_type).strip().upper()).value
    except ValueError as exc:
        raise ValueError(f"Invalid job type: {job_type}") from exc
    if not generator_name or not generator_name.strip():
        raise ValueError("Generator name cannot be empty")

    employee_ids = list(dict.fromkeys(int(e) for e in employee_ids))
    if not employee_ids:
        raise ValueError("At least one employee must be assigned")

    clock = clock or get_clock()
    work_date = work_date or clock.today()

    owns_db = db is None
    if owns_db:
        db = SessionLocal()

    try:
        for employee_id in employee_ids:
            _require_employee(db, employee_id)

        job_card = JobCard(
            id=str(uuid4()),
            job_type=job_type,
            generator_name=generator_name.strip(),
            title=title,
            created_at=clock.now(),
        )
        db.add(job_card)
        db.flush()

        tasks = [
            _new_mini_job_card(job_card.id, employee_id, work_date, location, clock)
            for employee_id in employee_ids
        ]
        db.add_all(tasks)
        db.flush()

        if owns_db:
            db.commit()

        logger.info(
            "Job card created",
            extra={"job_card_id": job_card.id, "employee_ids": employee_ids, "job_type": job_type},
        )
        return job_card, tasks
    except Exception:
        if owns_db:
            db.rollback()
        raise
    finally:
        if owns_db:
            db.close()


def add_employee(
    job_card_id: str,
    employee_id: int,
    *,
    work_date: Optional[date] = None,
    location: Optional[str] = None,
    db: Optional[Session] = None,
    clock: Optional[BusinessClock] = None,
) -> MiniJobCard:
    clock = clock or get_clock()
    work_date = work_date or clock.today()

    owns_db = db is None
    if owns_db:
        db = SessionLocal()

    try:
        _require_job_card(db, job_card_id)
        _require_employee(db, employee_id)

        task = _new_mini_job_card(str(job_card_id), employee_id, work_date, location, clock)
        db.add(task)
        db.flush()

        if owns_db:
            db.commit()

        logger.info(
            "Employee added to job card",
            extra={"job_card_id": str(job_card_id), "employee_id": int(employee_id), "mini_job_card_id": task.id},
        )
        return task
    except Exception:
        if owns_db:
            db.rollback()
        raise
    finally:
        if owns_db:
            db.close()


def delete_job_card(job_card_id: str, *, db: Optional[Session] = None) -> int:
    """Delete a job card and, in bulk, its mini job cards. Returns the number of mini job cards removed."""
    owns_db = db is None
    if owns_db:
        db = SessionLocal()

    try:
        job_card = _require_job_card(db, job_card_id)

        removed = (
            db.query(MiniJobCard)
            .filter(MiniJobCard.job_card_id == job_card.id)
            .delete(synchronize_session=False)
        )
        db.delete(job_card)
        db.flush()

        if owns_db:
            db.commit()

        logger.info("Job card deleted", extra={"job_card_id": str(job_card_id), "mini_job_cards_removed": removed})
        return int(removed)
    except Exception:
        if owns_db:
            db.rollback()
        raise
    finally:
        if owns_db:
            db.close()


def list_for_job_card(
    job_card_id: str,
    db: Session,
    *,
    employee_id: Optional[int] = None,
) -> List[MiniJobCard]:
    """Mini job cards of one job card, optionally only one employee's."""
    _require_job_card(db, job_card_id)

    q = db.query(MiniJobCard).filter(MiniJobCard.job_card_id == str(job_card_id))
    if employee_id is not None:
        q = q.filter(MiniJobCard.employee_id == int(employee_id))
    return q.order_by(MiniJobCard.created_at.asc(), MiniJobCard.id.asc()).all()


def list_by_status(
    status,
    db: Session,
    *,
    employee_id: Optional[int] = None,
) -> List[MiniJobCard]:
    status = parse_status(status)

    q = db.query(MiniJobCard).filter(MiniJobCard.status == status.value)
    if employee_id is not None:
        q = q.filter(MiniJobCard.employee_id == int(employee_id))
    return q.order_by(MiniJobCard.work_date.desc(), MiniJobCard.created_at.asc(), MiniJobCard.id.asc()).all()

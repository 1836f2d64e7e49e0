from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.core.clock import BusinessClock, get_clock
from app.core.config import get_ot_report_max_days, get_task_report_max_days
from app.models.employee import Employee
from app.models.job_card import JobCard
from app.models.mini_job_card import MiniJobCard
from app.models.overtime_ledger import OvertimeLedgerEntry
from app.services.durations import format_hhmm
from app.services.errors import NotFoundError

logger = logging.getLogger(__name__)


def validate_range(start_date: date, end_date: date, *, max_days: int, today: date) -> None:
    if start_date is None or end_date is None:
        raise ValueError("Start date and end date are required")
    if start_date > end_date:
        raise ValueError("Start date cannot be after end date")
    if (end_date - start_date).days > max_days:
        raise ValueError(f"Maximum report period is {max_days} days")
    if end_date > today:
        raise ValueError("End date cannot be in the future")


def _require_employee(db: Session, employee_id: int) -> Employee:
    employee = db.get(Employee, int(employee_id))
    if employee is None:
        raise NotFoundError(f"Employee not found: {employee_id}")
    return employee


def _job_card_title(job_card: Optional[JobCard]) -> str:
    if job_card is None:
        return ""
    if job_card.title:
        return job_card.title
    return f"{job_card.job_type} - {job_card.generator_name}"


def summarize_task_time(
    employee_id: int,
    start_date: date,
    end_date: date,
    *,
    db: Session,
    clock: Optional[BusinessClock] = None,
) -> dict[str, Any]:
    """
    Read-only per-task time report.

    Semantics:
      start_date <= work_date <= end_date, at most TASK_REPORT_MAX_DAYS apart
    """
    clock = clock or get_clock()
    validate_range(start_date, end_date, max_days=get_task_report_max_days(), today=clock.today())
    employee = _require_employee(db, employee_id)

    rows = (
        db.query(MiniJobCard, JobCard)
        .outerjoin(JobCard, JobCard.id == MiniJobCard.job_card_id)
        .filter(MiniJobCard.employee_id == int(employee_id))
        .filter(MiniJobCard.work_date >= start_date)
        .filter(MiniJobCard.work_date <= end_date)
        .order_by(MiniJobCard.work_date.asc(), MiniJobCard.created_at.asc())
        .all()
    )

    tasks = []
    total_on_hold = total_assigned = total_in_progress = 0
    for task, job_card in rows:
        on_hold = int(task.spent_on_hold_minutes or 0)
        assigned = int(task.spent_assigned_minutes or 0)
        in_progress = int(task.spent_in_progress_minutes or 0)

        total_on_hold += on_hold
        total_assigned += assigned
        total_in_progress += in_progress

        tasks.append(
            {
                "mini_job_card_id": task.id,
                "job_card_id": task.job_card_id,
                "job_card_title": _job_card_title(job_card),
                "status": task.status,
                "date": task.work_date.isoformat(),
                "location": task.location,
                "on_hold_minutes": on_hold,
                "assigned_minutes": assigned,
                "in_progress_minutes": in_progress,
                "total_minutes": on_hold + assigned + in_progress,
                "on_hold_time": format_hhmm(on_hold),
                "assigned_time": format_hhmm(assigned),
                "in_progress_time": format_hhmm(in_progress),
            }
        )

    combined = total_on_hold + total_assigned + total_in_progress

    logger.info(
        "Task time report generated",
        extra={
            "employee_id": int(employee_id),
            "start_date": start_date,
            "end_date": end_date,
            "task_count": len(tasks),
        },
    )

    return {
        "employee_id": employee.id,
        "employee_name": employee.name,
        "start_date": start_date.isoformat(),
        "end_date": end_date.isoformat(),
        "total_tasks": len(tasks),
        "totals": {
            "on_hold_minutes": total_on_hold,
            "assigned_minutes": total_assigned,
            "in_progress_minutes": total_in_progress,
            "combined_minutes": combined,
            "on_hold_time": format_hhmm(total_on_hold),
            "assigned_time": format_hhmm(total_assigned),
            "in_progress_time": format_hhmm(total_in_progress),
            "combined_time": format_hhmm(combined),
        },
        "tasks": tasks,
        "generated_at": clock.now().isoformat(),
    }


def _format_clock(value) -> str:
    if value is None:
        return "00:00"
    return value.strftime("%H:%M")


def summarize_overtime(
    employee_id: int,
    start_date: date,
    end_date: date,
    *,
    db: Session,
    clock: Optional[BusinessClock] = None,
) -> dict[str, Any]:
    clock = clock or get_clock()
    validate_range(start_date, end_date, max_days=get_ot_report_max_days(), today=clock.today())
    employee = _require_employee(db, employee_id)

    entries = (
        db.query(OvertimeLedgerEntry)
        .filter(OvertimeLedgerEntry.employee_id == int(employee_id))
        .filter(OvertimeLedgerEntry.work_date >= start_date)
        .filter(OvertimeLedgerEntry.work_date <= end_date)
        .order_by(OvertimeLedgerEntry.work_date.asc())
        .all()
    )

    totals = {"morning": 0, "evening": 0, "on_hold": 0, "assigned": 0, "in_progress": 0}
    records = []
    for entry in entries:
        totals["morning"] += int(entry.morning_ot_minutes or 0)
        totals["evening"] += int(entry.evening_ot_minutes or 0)
        totals["on_hold"] += int(entry.spent_on_hold_minutes or 0)
        totals["assigned"] += int(entry.spent_assigned_minutes or 0)
        totals["in_progress"] += int(entry.spent_in_progress_minutes or 0)

        records.append(
            {
                "date": entry.work_date.isoformat(),
                "first_time": _format_clock(entry.first_time),
                "last_time": _format_clock(entry.last_time),
                "first_location": entry.first_location or "",
                "last_location": entry.last_location or "",
                "all_locations": list(entry.locations or []),
                "locations_summary": ", ".join(entry.locations or []),
                "morning_ot": format_hhmm(entry.morning_ot_minutes),
                "evening_ot": format_hhmm(entry.evening_ot_minutes),
                "daily_total_ot": format_hhmm(entry.total_ot_minutes),
                "on_hold_time": format_hhmm(entry.spent_on_hold_minutes),
                "assigned_time": format_hhmm(entry.spent_assigned_minutes),
                "in_progress_time": format_hhmm(entry.spent_in_progress_minutes),
                "current_status": entry.current_status,
                "last_status": entry.last_status,
            }
        )

    logger.info(
        "OT report generated",
        extra={
            "employee_id": int(employee_id),
            "start_date": start_date,
            "end_date": end_date,
            "record_count": len(records),
        },
    )

    return {
        "employee_id": employee.id,
        "employee_name": employee.name,
        "start_date": start_date.isoformat(),
        "end_date": end_date.isoformat(),
        "records": records,
        "total_morning_ot": format_hhmm(totals["morning"]),
        "total_evening_ot": format_hhmm(totals["evening"]),
        "total_ot": format_hhmm(totals["morning"] + totals["evening"]),
        "total_on_hold_time": format_hhmm(totals["on_hold"]),
        "total_assigned_time": format_hhmm(totals["assigned"]),
        "total_in_progress_time": format_hhmm(totals["in_progress"]),
    }

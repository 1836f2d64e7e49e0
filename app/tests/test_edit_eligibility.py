from datetime import date, datetime, time

from sqlalchemy.exc import OperationalError

from app.database import SessionLocal
from app.models.enums import END_DATE, END_JOB_CARD, UPDATE_JOB_CARD
from app.models.mini_job_card import MiniJobCard
from app.services import activity_log_service, edit_eligibility

DAY = date(2026, 3, 10)


def _log(employee_id: int, action: str, status: str, day: date = DAY) -> None:
    db = SessionLocal()
    try:
        activity_log_service.append(
            employee_id=employee_id,
            action=action,
            status=status,
            location=None,
            occurred_at=datetime.combine(day, time(12, 0)),
            db=db,
        )
        db.commit()
    finally:
        db.close()


def _task(task_id: str, status: str) -> MiniJobCard:
    return MiniJobCard(id=task_id, status=status)


def test_can_edit_with_no_activity(employee_factory):
    employee = employee_factory()

    assert edit_eligibility.can_edit(employee.id, DAY) is True


def test_can_edit_after_ordinary_updates(employee_factory):
    employee = employee_factory()
    _log(employee.id, UPDATE_JOB_CARD, "PENDING to ASSIGNED")

    assert edit_eligibility.can_edit(employee.id, DAY) is True


def test_cannot_edit_once_day_has_ended(employee_factory):
    employee = employee_factory()
    _log(employee.id, UPDATE_JOB_CARD, "ASSIGNED to IN_PROGRESS")
    _log(employee.id, END_JOB_CARD, END_DATE)

    assert edit_eligibility.can_edit(employee.id, DAY) is False


def test_previous_day_end_does_not_block_today(employee_factory):
    employee = employee_factory()
    _log(employee.id, END_JOB_CARD, END_DATE, day=date(2026, 3, 9))

    assert edit_eligibility.can_edit(employee.id, DAY) is True


def test_can_edit_fails_closed_when_logs_unreadable(employee_factory, monkeypatch):
    employee = employee_factory()

    def _broken(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))

    monkeypatch.setattr(activity_log_service, "list_for_employee_day", _broken)

    assert edit_eligibility.can_edit(employee.id, DAY) is False


def test_only_active_task_is_editable():
    tasks = [
        _task("a", "PENDING"),
        _task("b", "ON_HOLD"),
        _task("c", "COMPLETED"),
    ]

    assert edit_eligibility.editable_task_ids(tasks) == {"b"}


def test_every_task_editable_without_an_active_one():
    tasks = [
        _task("a", "PENDING"),
        _task("b", "COMPLETED"),
        _task("c", "CANCELLED"),
    ]

    assert edit_eligibility.editable_task_ids(tasks) == {"a", "b", "c"}
    assert edit_eligibility.editable_task_ids([]) == set()


def test_list_tasks_for_day_filters_by_employee_and_date(employee_factory, job_card_factory, db):
    employee = employee_factory()
    other = employee_factory()
    today_task = job_card_factory(employee.id)
    job_card_factory(employee.id, work_date=date(2026, 3, 9))
    job_card_factory(other.id)

    rows = edit_eligibility.list_tasks_for_day(employee.id, DAY, db)

    assert [r.id for r in rows] == [today_task.id]

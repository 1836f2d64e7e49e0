from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

from app.core.authorization import Role, require_role, require_self_or_admin
from app.core.clock import BusinessClock, get_clock
from app.database import SessionLocal
from app.deps.auth import require_auth
from app.schemas.activity_log import ActivityLogResponse
from app.services import activity_log_service
from app.services.errors import NotFoundError

router = APIRouter(prefix="/logs", tags=["Activity Logs"])


def _reject_future(day: date, clock: BusinessClock) -> None:
    if day > clock.today():
        raise HTTPException(status_code=400, detail="Date cannot be in the future")


@router.get("/recent", response_model=List[ActivityLogResponse])
def list_recent_logs(
    hours: int = 24,
    _role=Depends(require_role(Role.ADMIN)),
    clock: BusinessClock = Depends(get_clock),
):
    db = SessionLocal()
    try:
        return activity_log_service.list_recent(hours, now=clock.now(), db=db)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    finally:
        db.close()


@router.get("/date/{log_date}", response_model=List[ActivityLogResponse])
def list_logs_for_date(
    log_date: date,
    _role=Depends(require_role(Role.ADMIN)),
    clock: BusinessClock = Depends(get_clock),
):
    _reject_future(log_date, clock)

    db = SessionLocal()
    try:
        return activity_log_service.list_for_day(log_date, db)
    finally:
        db.close()


@router.get("/employee/{email}", response_model=List[ActivityLogResponse])
def list_logs_for_employee(
    email: str,
    request: Request,
    _auth: tuple[int, str] = Depends(require_auth),
):
    db = SessionLocal()
    try:
        employee = activity_log_service.find_employee_by_email(email, db)
        require_self_or_admin(request, employee.id)
        return activity_log_service.list_for_employee(employee.id, db)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    finally:
        db.close()


@router.get("/employee/{email}/date/{log_date}", response_model=List[ActivityLogResponse])
def list_logs_for_employee_and_date(
    email: str,
    log_date: date,
    request: Request,
    _auth: tuple[int, str] = Depends(require_auth),
    clock: BusinessClock = Depends(get_clock),
):
    _reject_future(log_date, clock)

    db = SessionLocal()
    try:
        employee = activity_log_service.find_employee_by_email(email, db)
        require_self_or_admin(request, employee.id)
        return activity_log_service.list_for_employee_day(employee.id, log_date, db)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    finally:
        db.close()


@router.get("/{log_id}", response_model=ActivityLogResponse)
def get_log(
    log_id: int,
    request: Request,
    _auth: tuple[int, str] = Depends(require_auth),
):
    db = SessionLocal()
    try:
        row = activity_log_service.get_log(log_id, db)
        require_self_or_admin(request, row.employee_id)
        return row
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    finally:
        db.close()

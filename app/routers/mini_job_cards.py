from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from app.core.authorization import Role, require_self_or_admin
from app.core.clock import BusinessClock, get_clock
from app.database import SessionLocal
from app.deps.auth import require_auth
from app.schemas.mini_job_card import (
    EligibilityResponse,
    MiniJobCardResponse,
    StatusUpdateRequest,
    to_response,
)
from app.services import edit_eligibility, job_card_service, status_engine
from app.services.errors import EditNotAllowed, NotFoundError

router = APIRouter(
    prefix="/mini_job_cards",
    tags=["Mini Job Cards"],
)


@router.get("", response_model=List[MiniJobCardResponse])
def list_mini_job_cards(
    request: Request,
    employee_id: int,
    work_date: Optional[date] = None,
    _auth: tuple[int, str] = Depends(require_auth),
    clock: BusinessClock = Depends(get_clock),
):
    require_self_or_admin(request, employee_id)

    db = SessionLocal()
    try:
        rows = edit_eligibility.list_tasks_for_day(employee_id, work_date or clock.today(), db)
        return [to_response(r) for r in rows]
    finally:
        db.close()


@router.get("/eligibility", response_model=EligibilityResponse)
def get_edit_eligibility(
    request: Request,
    employee_id: int,
    _auth: tuple[int, str] = Depends(require_auth),
    clock: BusinessClock = Depends(get_clock),
):
    require_self_or_admin(request, employee_id)
    today = clock.today()

    db = SessionLocal()
    try:
        can_edit = edit_eligibility.can_edit(employee_id, today, db=db)
        editable: List[str] = []
        if can_edit:
            tasks = edit_eligibility.list_tasks_for_day(employee_id, today, db)
            editable = sorted(edit_eligibility.editable_task_ids(tasks))
        return EligibilityResponse(
            employee_id=employee_id,
            work_date=today,
            can_edit=can_edit,
            editable_task_ids=editable,
        )
    finally:
        db.close()


def _visible_employee(request: Request) -> Optional[int]:
    """Admins see every employee's tasks; anyone else only their own."""
    if request.state.role == Role.ADMIN.value:
        return None
    return int(request.state.employee_id)


@router.get("/job_card/{job_card_id}", response_model=List[MiniJobCardResponse])
def list_mini_job_cards_for_job_card(
    job_card_id: str,
    request: Request,
    _auth: tuple[int, str] = Depends(require_auth),
):
    db = SessionLocal()
    try:
        rows = job_card_service.list_for_job_card(
            job_card_id, db, employee_id=_visible_employee(request)
        )
        return [to_response(r) for r in rows]
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    finally:
        db.close()


@router.get("/status/{status}", response_model=List[MiniJobCardResponse])
def list_mini_job_cards_by_status(
    status: str,
    request: Request,
    _auth: tuple[int, str] = Depends(require_auth),
):
    db = SessionLocal()
    try:
        rows = job_card_service.list_by_status(status, db, employee_id=_visible_employee(request))
        return [to_response(r) for r in rows]
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    finally:
        db.close()


@router.get("/{task_id}", response_model=MiniJobCardResponse)
def get_mini_job_card(
    task_id: str,
    request: Request,
    _auth: tuple[int, str] = Depends(require_auth),
):
    db = SessionLocal()
    try:
        try:
            task = status_engine.get_task(db, task_id)
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        require_self_or_admin(request, task.employee_id)
        return to_response(task)
    finally:
        db.close()


@router.patch("/{task_id}/status", response_model=MiniJobCardResponse)
def update_mini_job_card_status(
    task_id: str,
    payload: StatusUpdateRequest,
    request: Request,
    _auth: tuple[int, str] = Depends(require_auth),
    clock: BusinessClock = Depends(get_clock),
):
    db = SessionLocal()
    try:
        task = status_engine.get_task(db, task_id)
        require_self_or_admin(request, task.employee_id)

        task = status_engine.update_status(
            task_id,
            payload.status,
            occurred_at=clock.localize(payload.occurred_at),
            location=payload.location,
            db=db,
            clock=clock,
        )
        db.commit()
        db.refresh(task)
        return to_response(task)
    except NotFoundError as exc:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except EditNotAllowed as exc:
        db.rollback()
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except ValueError as exc:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

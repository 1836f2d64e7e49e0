from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request

from app.core.authorization import require_self_or_admin
from app.core.clock import BusinessClock, get_clock
from app.database import SessionLocal
from app.deps.auth import require_auth
from app.schemas.report import ReportRequest
from app.services import report_service
from app.services.errors import NotFoundError

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.post("/task_time")
def task_time_report(
    payload: ReportRequest,
    request: Request,
    _auth: tuple[int, str] = Depends(require_auth),
    clock: BusinessClock = Depends(get_clock),
) -> dict[str, Any]:
    require_self_or_admin(request, payload.employee_id)

    db = SessionLocal()
    try:
        return report_service.summarize_task_time(
            payload.employee_id,
            payload.start_date,
            payload.end_date,
            db=db,
            clock=clock,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    finally:
        db.close()


@router.post("/overtime")
def overtime_report(
    payload: ReportRequest,
    request: Request,
    _auth: tuple[int, str] = Depends(require_auth),
    clock: BusinessClock = Depends(get_clock),
) -> dict[str, Any]:
    require_self_or_admin(request, payload.employee_id)

    db = SessionLocal()
    try:
        return report_service.summarize_overtime(
            payload.employee_id,
            payload.start_date,
            payload.end_date,
            db=db,
            clock=clock,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    finally:
        db.close()

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Request

from app.core.authorization import require_self_or_admin
from app.core.clock import BusinessClock, get_clock
from app.database import SessionLocal
from app.deps.auth import require_auth
from app.schemas.session import EndSessionRequest, LedgerEntryResponse, to_response
from app.services import overtime_ledger, session_finalizer
from app.services.errors import NotFoundError

router = APIRouter(prefix="/sessions", tags=["Sessions"])


@router.post("/end", response_model=LedgerEntryResponse)
def end_session_endpoint(
    payload: EndSessionRequest,
    request: Request,
    _auth: tuple[int, str] = Depends(require_auth),
    clock: BusinessClock = Depends(get_clock),
):
    require_self_or_admin(request, payload.employee_id)

    ended_at = clock.localize(payload.ended_at) or clock.now()
    work_date = payload.work_date or ended_at.date()

    db = SessionLocal()
    try:
        entry = session_finalizer.end_session(
            payload.employee_id,
            work_date,
            ended_at,
            payload.end_location,
            db=db,
            clock=clock,
        )
        db.commit()
        db.refresh(entry)
        return to_response(entry)
    except NotFoundError as exc:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@router.get("/{employee_id}/{work_date}", response_model=LedgerEntryResponse)
def get_ledger_entry(
    employee_id: int,
    work_date: date,
    request: Request,
    _auth: tuple[int, str] = Depends(require_auth),
):
    require_self_or_admin(request, employee_id)

    db = SessionLocal()
    try:
        entry = overtime_ledger.get_entry(employee_id, work_date, db)
        if entry is None:
            raise HTTPException(status_code=404, detail="No ledger entry for that day")
        return to_response(entry)
    finally:
        db.close()

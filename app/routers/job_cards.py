from fastapi import APIRouter, Depends, HTTPException

from app.core.authorization import Role, require_role
from app.core.clock import BusinessClock, get_clock
from app.database import SessionLocal
from app.schemas.job_card import JobCardAddEmployee, JobCardCreate, JobCardResponse
from app.schemas.mini_job_card import MiniJobCardResponse, to_response
from app.services import job_card_service
from app.services.errors import NotFoundError

router = APIRouter(prefix="/job_cards", tags=["Job Cards"])


@router.post("", response_model=JobCardResponse)
def create_job_card(
    payload: JobCardCreate,
    _role=Depends(require_role(Role.ADMIN)),
    clock: BusinessClock = Depends(get_clock),
):
    db = SessionLocal()
    try:
        job_card, tasks = job_card_service.create_job_card(
            payload.job_type,
            payload.generator_name,
            payload.employee_ids,
            title=payload.title,
            work_date=payload.work_date,
            location=payload.location,
            db=db,
            clock=clock,
        )
        db.commit()
        return JobCardResponse(
            id=job_card.id,
            job_type=job_card.job_type,
            generator_name=job_card.generator_name,
            title=job_card.title,
            created_at=job_card.created_at,
            mini_job_cards=[to_response(t) for t in tasks],
        )
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


@router.post("/{job_card_id}/employees", response_model=MiniJobCardResponse)
def add_employee_to_job_card(
    job_card_id: str,
    payload: JobCardAddEmployee,
    _role=Depends(require_role(Role.ADMIN)),
    clock: BusinessClock = Depends(get_clock),
):
    db = SessionLocal()
    try:
        task = job_card_service.add_employee(
            job_card_id,
            payload.employee_id,
            work_date=payload.work_date,
            location=payload.location,
            db=db,
            clock=clock,
        )
        db.commit()
        return to_response(task)
    except NotFoundError as exc:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@router.delete("/{job_card_id}")
def delete_job_card(
    job_card_id: str,
    _role=Depends(require_role(Role.ADMIN)),
):
    db = SessionLocal()
    try:
        removed = job_card_service.delete_job_card(job_card_id, db=db)
        db.commit()
        return {"job_card_id": job_card_id, "mini_job_cards_removed": removed}
    except NotFoundError as exc:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError

from app.core.authorization import Role, require_role
from app.database import SessionLocal
from app.deps.auth import require_auth
from app.models.employee import Employee
from app.schemas.employee import EmployeeCreate, EmployeeResponse

router = APIRouter(prefix="/employees", tags=["Employees"])


@router.post("", response_model=EmployeeResponse)
def create_employee(
    payload: EmployeeCreate,
    _role=Depends(require_role(Role.ADMIN)),
):
    try:
        role = Role(payload.role.upper()).value
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid role: {payload.role}") from exc

    db = SessionLocal()
    try:
        row = Employee(
            name=payload.name,
            email=payload.email.strip().lower(),
            role=role,
            is_active=True,
        )
        db.add(row)
        db.commit()
        db.refresh(row)
        return row
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=409, detail="Employee email already exists") from exc
    finally:
        db.close()


@router.get("", response_model=List[EmployeeResponse])
def list_employees(
    _auth: tuple[int, str] = Depends(require_auth),
):
    db = SessionLocal()
    try:
        rows = (
            db.query(Employee)
            .order_by(Employee.id.asc())
            .all()
        )
        return rows
    finally:
        db.close()


@router.get("/{employee_id}", response_model=EmployeeResponse)
def get_employee(
    employee_id: int,
    _auth: tuple[int, str] = Depends(require_auth),
):
    db = SessionLocal()
    try:
        row = db.get(Employee, int(employee_id))
        if row is None:
            raise HTTPException(status_code=404, detail="Employee not found")
        return row
    finally:
        db.close()

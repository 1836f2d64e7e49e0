import os

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from app.services.auth_service import create_access_token

router = APIRouter(prefix="/auth", tags=["auth"])

DEV_ENVIRONMENTS = {"dev", "local", "test"}


class TokenRequest(BaseModel):
    employee_id: int = Field(gt=0)
    role: str = "EMPLOYEE"


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/token", response_model=TokenResponse)
def issue_token(payload: TokenRequest):
    """Development-only token minting; real deployments get tokens from the identity provider."""
    if os.getenv("ENV", "dev").lower() not in DEV_ENVIRONMENTS:
        raise HTTPException(status_code=404, detail="Not Found")

    try:
        token = create_access_token(employee_id=payload.employee_id, role=payload.role)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return TokenResponse(access_token=token)

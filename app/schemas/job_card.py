from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.mini_job_card import MiniJobCardResponse


class JobCardCreate(BaseModel):
    job_type: str
    generator_name: str
    title: Optional[str] = None
    employee_ids: List[int] = Field(min_length=1)
    work_date: Optional[date] = None
    location: Optional[str] = Field(default=None, max_length=255)


class JobCardAddEmployee(BaseModel):
    employee_id: int
    work_date: Optional[date] = None
    location: Optional[str] = Field(default=None, max_length=255)


class JobCardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    job_type: str
    generator_name: str
    title: Optional[str]
    created_at: datetime
    mini_job_cards: List[MiniJobCardResponse] = []

from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ActivityLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    employee_id: int
    action: str
    status: str
    location: Optional[str]
    generator_name: Optional[str]
    log_date: date
    log_time: time
    created_at: datetime

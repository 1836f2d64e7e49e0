from datetime import date

from pydantic import BaseModel


class ReportRequest(BaseModel):
    employee_id: int
    start_date: date
    end_date: date

from typing import Optional

from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, Integer, String, Time
from sqlalchemy.ext.mutable import MutableList
from sqlalchemy.schema import UniqueConstraint

from app.database import Base


class OvertimeLedgerEntry(Base):
    __tablename__ = "overtime_ledger_entries"

    id = Column(Integer, primary_key=True)

    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    work_date = Column(Date, nullable=False, index=True)

    first_time = Column(Time, nullable=False)
    last_time = Column(Time, nullable=False)

    current_status = Column(String, nullable=True)
    last_status = Column(String, nullable=True)
    status_change_time = Column(DateTime, nullable=True)

    spent_on_hold_minutes = Column(Integer, nullable=False, default=0)
    spent_assigned_minutes = Column(Integer, nullable=False, default=0)
    spent_in_progress_minutes = Column(Integer, nullable=False, default=0)

    morning_ot_minutes = Column(Integer, nullable=False, default=0)
    evening_ot_minutes = Column(Integer, nullable=False, default=0)

    locations = Column(MutableList.as_mutable(JSON), nullable=False, default=lambda: [])

    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("employee_id", "work_date", name="uq_overtime_ledger_employee_date"),
    )

    @property
    def first_location(self) -> Optional[str]:
        return self.locations[0] if self.locations else None

    @property
    def last_location(self) -> Optional[str]:
        return self.locations[-1] if self.locations else None

    @property
    def total_ot_minutes(self) -> int:
        return int(self.morning_ot_minutes or 0) + int(self.evening_ot_minutes or 0)

    def add_location(self, location: Optional[str]) -> bool:
        if location is None or not location.strip():
            return False
        if self.locations is None:
            self.locations = []
        self.locations.append(location.strip())
        return True

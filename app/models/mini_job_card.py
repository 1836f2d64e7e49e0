from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Time
from sqlalchemy.schema import Index

from app.database import Base


class MiniJobCard(Base):
    __tablename__ = "mini_job_cards"

    id = Column(String, primary_key=True, index=True)

    job_card_id = Column(String, ForeignKey("job_cards.id"), nullable=False, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)

    status = Column(String, nullable=False, default="PENDING", index=True)
    work_date = Column(Date, nullable=False)
    time = Column(Time, nullable=True)
    location = Column(String, nullable=True)

    last_status_change_at = Column(DateTime, nullable=False)

    # Minute counters; rendered HH:MM only at the edges.
    spent_on_hold_minutes = Column(Integer, nullable=False, default=0)
    spent_assigned_minutes = Column(Integer, nullable=False, default=0)
    spent_in_progress_minutes = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("ix_mini_job_cards_employee_date", "employee_id", "work_date"),
    )

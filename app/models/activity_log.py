from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Time
from sqlalchemy.schema import Index

from app.database import Base


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True)

    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)

    action = Column(String, nullable=False)
    status = Column(String, nullable=False)
    location = Column(String, nullable=True)
    generator_name = Column(String, nullable=True)

    log_date = Column(Date, nullable=False)
    log_time = Column(Time, nullable=False)

    created_at = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("ix_activity_logs_employee_date", "employee_id", "log_date"),
    )

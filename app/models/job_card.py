from datetime import datetime

from sqlalchemy import Column, DateTime, String

from app.database import Base


class JobCard(Base):
    __tablename__ = "job_cards"

    id = Column(String, primary_key=True, index=True)
    job_type = Column(String, nullable=False)
    generator_name = Column(String, nullable=False)
    title = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

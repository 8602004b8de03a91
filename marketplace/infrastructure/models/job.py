"""SQLAlchemy model backing the deferred job queue."""

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text

from marketplace.domain.entities import JOB_STATUS_PENDING
from marketplace.infrastructure.database import Base
from marketplace.utils import now_in_app_naive_datetime


class JobModel(Base):
    """Durable record of a job waiting for, or done by, the worker."""

    __tablename__ = "dispatch_job"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False, index=True)
    data = Column(JSON, nullable=False, default=dict)
    status = Column(String(20), nullable=False, default=JOB_STATUS_PENDING, index=True)
    attempts = Column(Integer, nullable=False, default=0)
    last_error = Column(Text, nullable=True)
    next_run_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    locked_at = Column(DateTime(), nullable=True)
    finished_at = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["JobModel"]

"""Persistence helpers for the deferred job queue."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import ColumnElement, and_, func, or_, select, update
from sqlalchemy.orm import Session

from marketplace.domain.entities import (
    JOB_STATUS_COMPLETED,
    JOB_STATUS_FAILED,
    JOB_STATUS_PENDING,
    JOB_STATUS_RUNNING,
    Job,
)
from marketplace.infrastructure.models import JobModel
from marketplace.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)

_MAX_ERROR_LENGTH = 2000


class JobRepository:
    """Store, claim and finish :class:`Job` records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, job_id: int) -> Job | None:
        model = self.session.get(JobModel, job_id)
        return self._to_entity(model) if model is not None else None

    def list_by_status(self, status: str) -> Sequence[Job]:
        query = select(JobModel).where(JobModel.status == status).order_by(JobModel.id)
        return [self._to_entity(model) for model in self.session.scalars(query)]

    def create(
        self, name: str, data: dict[str, Any], *, run_at: datetime | None = None
    ) -> Job:
        now = ensure_app_naive_datetime(now_in_app_timezone())
        model = JobModel(
            name=name,
            data=data,
            status=JOB_STATUS_PENDING,
            attempts=0,
            next_run_at=ensure_app_naive_datetime(run_at) or now,
            created_at=now,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def claim_due(
        self,
        *,
        now: datetime,
        lock_lifetime: timedelta,
        limit: int | None = None,
    ) -> Sequence[Job]:
        """Lock and return jobs ready to run.

        Running jobs whose lock is older than ``lock_lifetime`` are claimed
        again, so a job abandoned by a crashed worker is eventually redelivered.
        Each row is taken with a conditional update; a job claimed by another
        worker in the meantime is skipped.
        """

        naive_now = ensure_app_naive_datetime(now)
        due = self._due_clause(naive_now, naive_now - lock_lifetime)
        query = (
            select(JobModel.id)
            .where(due)
            .order_by(JobModel.next_run_at, JobModel.id)
        )
        if limit is not None:
            query = query.limit(limit)

        candidates = list(self.session.scalars(query))
        claimed_ids = [job_id for job_id in candidates if self._claim(job_id, due, naive_now)]
        self.session.commit()
        if not claimed_ids:
            return []

        claimed = self.session.scalars(
            select(JobModel)
            .where(JobModel.id.in_(claimed_ids))
            .order_by(JobModel.next_run_at, JobModel.id)
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(model) for model in claimed]

    def _claim(self, job_id: int, due: ColumnElement[bool], naive_now: datetime) -> bool:
        result = self.session.execute(
            update(JobModel)
            .where(JobModel.id == job_id, due)
            .values(
                status=JOB_STATUS_RUNNING,
                locked_at=naive_now,
                attempts=func.coalesce(JobModel.attempts, 0) + 1,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    def _due_clause(naive_now: datetime, stale_before: datetime) -> ColumnElement[bool]:
        return or_(
            and_(
                JobModel.status == JOB_STATUS_PENDING,
                JobModel.next_run_at <= naive_now,
            ),
            and_(
                JobModel.status == JOB_STATUS_RUNNING,
                JobModel.locked_at <= stale_before,
            ),
        )

    def mark_completed(self, job_id: int, *, finished_at: datetime | None = None) -> None:
        self._finish(job_id, JOB_STATUS_COMPLETED, None, finished_at)

    def mark_failed(
        self, job_id: int, error: str, *, finished_at: datetime | None = None
    ) -> None:
        self._finish(job_id, JOB_STATUS_FAILED, error[:_MAX_ERROR_LENGTH], finished_at)

    def _finish(
        self,
        job_id: int,
        status: str,
        error: str | None,
        finished_at: datetime | None,
    ) -> None:
        model = self.session.get(JobModel, job_id)
        if model is None:
            msg = f"Job with id {job_id} not found"
            raise ValueError(msg)
        model.status = status
        model.last_error = error
        model.locked_at = None
        model.finished_at = ensure_app_naive_datetime(finished_at or now_in_app_timezone())
        self.session.add(model)
        self.session.commit()

    @staticmethod
    def _to_entity(model: JobModel) -> Job:
        return Job(
            id=model.id,
            name=model.name,
            data=dict(model.data or {}),
            status=model.status,
            attempts=model.attempts or 0,
            last_error=model.last_error,
            next_run_at=ensure_app_timezone(model.next_run_at),
            locked_at=ensure_app_timezone(model.locked_at),
            finished_at=ensure_app_timezone(model.finished_at),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["JobRepository"]

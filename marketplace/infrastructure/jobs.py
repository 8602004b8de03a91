"""Durable job queue and polling worker used for deferred event delivery."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable

import anyio

from marketplace.domain.entities import Job
from marketplace.infrastructure.database import SessionFactory
from marketplace.infrastructure.repositories import JobRepository
from marketplace.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

JobFunction = Callable[[Job], Awaitable[None]]

DEFAULT_PROCESS_EVERY = 3600.0
DEFAULT_MAX_CONCURRENCY = 20
DEFAULT_LOCK_LIFETIME = 600.0


class JobQueue:
    """Producer side of the queue: persist jobs for later execution."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    async def enqueue(
        self,
        name: str,
        data: dict[str, Any],
        *,
        run_at: datetime | None = None,
    ) -> Job:
        """Store a ``name`` job carrying ``data``; it runs now unless ``run_at`` is given."""

        job = await anyio.to_thread.run_sync(self._create, name, data, run_at)
        logger.info("Enqueued job %s (id=%s)", name, job.id)
        return job

    def _create(self, name: str, data: dict[str, Any], run_at: datetime | None) -> Job:
        with self._session_factory() as session:
            return JobRepository(session).create(name, data, run_at=run_at)


class JobWorker:
    """Consumer side: poll the queue and run the job functions defined by name.

    Delivery is at-least-once. A job whose worker died while running it is
    claimed again once its lock is older than ``lock_lifetime`` seconds, so
    job functions must tolerate being executed twice.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        process_every: float = DEFAULT_PROCESS_EVERY,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        lock_lifetime: float = DEFAULT_LOCK_LIFETIME,
    ) -> None:
        if process_every <= 0:
            raise ValueError("process_every must be positive")
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._session_factory = session_factory
        self._definitions: dict[str, JobFunction] = {}
        self._stop_event: anyio.Event | None = None
        self._stopped = False
        self.process_every = process_every
        self.max_concurrency = max_concurrency
        self.lock_lifetime = timedelta(seconds=lock_lifetime)

    @property
    def definitions(self) -> dict[str, JobFunction]:
        return dict(self._definitions)

    def define(self, name: str, function: JobFunction) -> None:
        """Register ``function`` as the executor of jobs called ``name``."""

        if name in self._definitions:
            logger.warning("Replacing job definition for %s", name)
        self._definitions[name] = function

    async def process_pending(self, *, now: datetime | None = None) -> int:
        """Run every job due at ``now`` and return how many were claimed."""

        now = now or now_in_app_timezone()
        jobs = await anyio.to_thread.run_sync(self._claim_due, now)
        if not jobs:
            return 0

        logger.info("Processing %d queued job(s)", len(jobs))
        limiter = anyio.CapacityLimiter(self.max_concurrency)
        async with anyio.create_task_group() as task_group:
            for job in jobs:
                task_group.start_soon(self._run_job, job, limiter)
        return len(jobs)

    async def run(self) -> None:
        """Poll the queue every ``process_every`` seconds until :meth:`stop`."""

        self._stop_event = anyio.Event()
        logger.info(
            "Job worker started (every %ss, max %d concurrent)",
            self.process_every,
            self.max_concurrency,
        )
        while not self._stopped:
            try:
                await self.process_pending()
            except Exception:
                logger.exception("Job queue poll failed")
            with anyio.move_on_after(self.process_every):
                await self._stop_event.wait()
        logger.info("Job worker stopped")

    def stop(self) -> None:
        self._stopped = True
        if self._stop_event is not None:
            self._stop_event.set()

    async def _run_job(self, job: Job, limiter: anyio.CapacityLimiter) -> None:
        async with limiter:
            function = self._definitions.get(job.name)
            if function is None:
                error = f"No job definition registered for '{job.name}'"
                logger.error("%s (job id=%s)", error, job.id)
            else:
                try:
                    await function(job)
                except Exception as exc:
                    error = f"{type(exc).__name__}: {exc}"
                    logger.exception("Job %s (id=%s) failed", job.name, job.id)
                else:
                    await anyio.to_thread.run_sync(self._mark_completed, job.id)
                    return

            await anyio.to_thread.run_sync(self._mark_failed, job.id, error)

    def _claim_due(self, now: datetime) -> list[Job]:
        with self._session_factory() as session:
            repository = JobRepository(session)
            return list(repository.claim_due(now=now, lock_lifetime=self.lock_lifetime))

    def _mark_completed(self, job_id: int) -> None:
        with self._session_factory() as session:
            JobRepository(session).mark_completed(job_id)

    def _mark_failed(self, job_id: int, error: str) -> None:
        with self._session_factory() as session:
            JobRepository(session).mark_failed(job_id, error)


__all__ = [
    "DEFAULT_LOCK_LIFETIME",
    "DEFAULT_MAX_CONCURRENCY",
    "DEFAULT_PROCESS_EVERY",
    "JobFunction",
    "JobQueue",
    "JobWorker",
]

"""Domain entity for a deferred job stored in the queue."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

JOB_STATUS_PENDING = "pending"
JOB_STATUS_RUNNING = "running"
JOB_STATUS_COMPLETED = "completed"
JOB_STATUS_FAILED = "failed"


@dataclass
class Job:
    """Unit of deferred work, executed by the worker defined for ``name``."""

    id: int | None
    name: str
    data: dict[str, Any] = field(default_factory=dict)
    status: str = JOB_STATUS_PENDING
    attempts: int = 0
    last_error: str | None = None
    next_run_at: datetime | None = None
    locked_at: datetime | None = None
    finished_at: datetime | None = None
    created_at: datetime | None = None


__all__ = [
    "Job",
    "JOB_STATUS_COMPLETED",
    "JOB_STATUS_FAILED",
    "JOB_STATUS_PENDING",
    "JOB_STATUS_RUNNING",
]

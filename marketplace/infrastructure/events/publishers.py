"""Delivery strategies that hand events over to the handler registry.

Both strategies end in :meth:`EventHandlerRegistry.dispatch`; they differ in
latency and durability:

* :class:`ImmediatePublisher` dispatches in the current process right away.
  Nothing is persisted, so an event is lost if the process dies before its
  handlers finish.
* :class:`DeferredPublisher` stores a ``dispatch_event`` job in the durable
  queue; a :class:`~marketplace.infrastructure.jobs.JobWorker` dispatches it
  later. It survives restarts but delivers at-least-once, so handlers may see
  the same event twice.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Protocol

from marketplace.domain.entities import Event, Job, deserialize_event, serialize_event
from marketplace.infrastructure.jobs import JobQueue, JobWorker

from .registry import EventHandlerRegistry

logger = logging.getLogger(__name__)

DISPATCH_EVENT_JOB = "dispatch_event"

Subscriber = Callable[[Event], Awaitable[None]]


class EventPublisher(Protocol):
    """Common interface of the delivery strategies."""

    async def publish(self, event: Event) -> None:
        ...


class ImmediatePublisher:
    """Emit events on an in-process channel whose subscriber is the registry."""

    def __init__(self, registry: EventHandlerRegistry) -> None:
        self._subscribers: list[Subscriber] = [registry.dispatch]

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def publish(self, event: Event) -> None:
        logger.info("Publishing event: %s", event.type)
        for subscriber in self._subscribers:
            await subscriber(event)
        logger.info("Event published: %s", event.type)


class DeferredPublisher:
    """Persist events as queue jobs for the background worker."""

    def __init__(self, queue: JobQueue, *, job_name: str = DISPATCH_EVENT_JOB) -> None:
        self._queue = queue
        self._job_name = job_name

    async def publish(self, event: Event) -> None:
        job = await self._queue.enqueue(self._job_name, {"event": serialize_event(event)})
        logger.info("Queued event %s as job %s", event.type, job.id)


def register_dispatch_job(
    worker: JobWorker,
    registry: EventHandlerRegistry,
    *,
    job_name: str = DISPATCH_EVENT_JOB,
) -> None:
    """Teach ``worker`` to feed queued events back into ``registry``."""

    async def dispatch_event_job(job: Job) -> None:
        event = deserialize_event(job.data.get("event") or {})
        await registry.dispatch(event)

    worker.define(job_name, dispatch_event_job)


__all__ = [
    "DISPATCH_EVENT_JOB",
    "DeferredPublisher",
    "EventPublisher",
    "ImmediatePublisher",
    "register_dispatch_job",
]

"""Composition root for the event subsystem."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from marketplace.application.use_cases.notifications import (
    OrderEventHandler,
    SanctionEventHandler,
    TrustProtectEventHandler,
)
from marketplace.config import Settings, get_settings
from marketplace.infrastructure.database import SessionFactory
from marketplace.infrastructure.jobs import JobQueue, JobWorker

from .publishers import DeferredPublisher, ImmediatePublisher, register_dispatch_job
from .registry import EventHandlerRegistry

logger = logging.getLogger(__name__)


@dataclass
class EventRuntime:
    """Everything a process needs to publish and consume events."""

    registry: EventHandlerRegistry
    immediate: ImmediatePublisher
    deferred: DeferredPublisher
    queue: JobQueue
    worker: JobWorker


def build_event_registry(
    session_factory: SessionFactory, settings: Settings | None = None
) -> EventHandlerRegistry:
    """Create the registry with every notification handler and seal it."""

    settings = settings or get_settings()
    registry = EventHandlerRegistry(
        concurrent=settings.event_dispatch_concurrent,
        handler_timeout=settings.event_handler_timeout_seconds,
    )
    registry.register(SanctionEventHandler(session_factory))
    registry.register(OrderEventHandler(session_factory))
    registry.register(TrustProtectEventHandler(session_factory))
    registry.seal()
    logger.info("Event registry ready with %d handler(s)", len(registry.handlers))
    return registry


def build_event_runtime(
    session_factory: SessionFactory, settings: Settings | None = None
) -> EventRuntime:
    """Wire the registry to both publishers and to the deferred job worker."""

    settings = settings or get_settings()
    registry = build_event_registry(session_factory, settings)
    queue = JobQueue(session_factory)
    worker = JobWorker(
        session_factory,
        process_every=settings.job_process_every_seconds,
        max_concurrency=settings.job_max_concurrency,
        lock_lifetime=settings.job_lock_lifetime_seconds,
    )
    register_dispatch_job(worker, registry)
    return EventRuntime(
        registry=registry,
        immediate=ImmediatePublisher(registry),
        deferred=DeferredPublisher(queue),
        queue=queue,
        worker=worker,
    )


__all__ = ["EventRuntime", "build_event_registry", "build_event_runtime"]

"""In-process event dispatch: handler registry and delivery strategies."""

from .publishers import (
    DISPATCH_EVENT_JOB,
    DeferredPublisher,
    EventPublisher,
    ImmediatePublisher,
    register_dispatch_job,
)
from .registry import EventHandler, EventHandlerRegistry

__all__ = [
    "DISPATCH_EVENT_JOB",
    "DeferredPublisher",
    "EventHandler",
    "EventHandlerRegistry",
    "EventPublisher",
    "ImmediatePublisher",
    "register_dispatch_job",
]

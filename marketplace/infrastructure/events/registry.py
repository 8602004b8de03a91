"""Registry that fans domain events out to the interested handlers."""

from __future__ import annotations

import inspect
import logging
from typing import Awaitable, Protocol, runtime_checkable

import anyio

from marketplace.domain.entities import Event

logger = logging.getLogger(__name__)


@runtime_checkable
class EventHandler(Protocol):
    """Unit of logic reacting to the events it declares support for.

    ``supports`` may be a plain or a coroutine function but must not have
    side effects; ``handle`` is always awaited.
    """

    def supports(self, event: Event) -> bool | Awaitable[bool]:
        ...

    async def handle(self, event: Event) -> None:
        ...


class EventHandlerRegistry:
    """Set of handlers plus the best-effort ``dispatch`` operation.

    Handlers are registered while the application starts; once :meth:`seal`
    has been called the set is read-only. ``dispatch`` never raises because
    of a handler: failures and timeouts are logged and the remaining
    handlers still run.
    """

    def __init__(
        self,
        *,
        concurrent: bool = False,
        handler_timeout: float | None = None,
    ) -> None:
        if handler_timeout is not None and handler_timeout <= 0:
            raise ValueError("handler_timeout must be positive")
        self._handlers: list[EventHandler] = []
        self._sealed = False
        self.concurrent = concurrent
        self.handler_timeout = handler_timeout

    @property
    def handlers(self) -> tuple[EventHandler, ...]:
        return tuple(self._handlers)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def register(self, handler: EventHandler) -> None:
        """Add ``handler``; registering the same instance twice is a no-op."""

        if self._sealed:
            raise RuntimeError("Cannot register handlers after the registry was sealed")
        if any(existing is handler for existing in self._handlers):
            return
        self._handlers.append(handler)
        logger.debug("Registered event handler %s", _handler_name(handler))

    def seal(self) -> None:
        self._sealed = True

    async def matching_handlers(self, event: Event) -> list[EventHandler]:
        """Return the handlers whose predicate accepts ``event``."""

        matching: list[EventHandler] = []
        for handler in self._handlers:
            try:
                result = handler.supports(event)
                if inspect.isawaitable(result):
                    result = await result
            except Exception:
                logger.warning(
                    "Handler %s failed to evaluate support for event %s",
                    _handler_name(handler),
                    event.type,
                    exc_info=True,
                )
                continue
            if result:
                matching.append(handler)
        return matching

    async def dispatch(self, event: Event) -> None:
        """Deliver ``event`` to every interested handler."""

        handlers = await self.matching_handlers(event)
        if not handlers:
            logger.debug("No handler registered for event %s", event.type)
            return

        if self.concurrent and len(handlers) > 1:
            async with anyio.create_task_group() as task_group:
                for handler in handlers:
                    task_group.start_soon(self._invoke, handler, event)
            return

        for handler in handlers:
            await self._invoke(handler, event)

    async def _invoke(self, handler: EventHandler, event: Event) -> None:
        name = _handler_name(handler)
        try:
            if self.handler_timeout is None:
                await handler.handle(event)
            else:
                with anyio.fail_after(self.handler_timeout):
                    await handler.handle(event)
        except TimeoutError:
            logger.warning(
                "Handler %s timed out after %ss handling event %s",
                name,
                self.handler_timeout,
                event.type,
            )
        except Exception:
            logger.warning(
                "Error handling event %s in %s", event.type, name, exc_info=True
            )


def _handler_name(handler: object) -> str:
    return type(handler).__name__


__all__ = ["EventHandler", "EventHandlerRegistry"]

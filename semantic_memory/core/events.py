"""
Semantic Memory - Change Channels

Record stores and the semantic index publish their mutations through a
``ChangeChannel``. Subscribing returns a ``Subscription`` handle; disposing the
handle is the only way to stop listening.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from semantic_memory.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Listener = Callable[[T], None]


class Subscription:
    """Handle returned by ``ChangeChannel.subscribe``."""

    def __init__(self, channel: "ChangeChannel", listener: Callable) -> None:
        self._channel = channel
        self._listener = listener
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Stop receiving events. Safe to call more than once."""
        if self._disposed:
            return
        self._disposed = True
        self._channel._remove(self._listener)


class ChangeChannel(Generic[T]):
    """Synchronous fan-out of events to subscribed listeners."""

    def __init__(self, name: str = "changes") -> None:
        self.name = name
        self._listeners: list[Listener] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: Listener) -> Subscription:
        self._listeners.append(listener)
        logger.debug(
            "Listener subscribed",
            channel=self.name,
            total_listeners=len(self._listeners),
        )
        return Subscription(self, listener)

    def emit(self, event: T) -> None:
        """
        Deliver an event to every listener.

        A listener that raises is logged and skipped; the rest still run.
        """
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(
                    "Change listener failed",
                    channel=self.name,
                    error=str(e),
                )

    def _remove(self, listener: Listener) -> None:
        # identity, not equality: the same bound method may be subscribed twice
        for i, registered in enumerate(self._listeners):
            if registered is listener:
                del self._listeners[i]
                break

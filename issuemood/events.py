"""Broadcast channels for log and error events.

The fetch layer and the pipeline publish here; any number of observers
(CLI, web page, tests) subscribe and get their own trio memory channel.
Publishing never blocks the publisher.
"""

from __future__ import annotations

import logging
import math
from typing import Generic, TypeVar

import trio

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EventChannel(Generic[T]):
    """Fan-out of events to every open subscriber.

    Must be used from the trio thread; trio's scheduling makes publish safe
    for any number of concurrent producer tasks.
    """

    def __init__(self, name: str):
        self.name = name
        self._subscribers: list[trio.MemorySendChannel] = []
        self._closed = False

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, buffer_size: float = math.inf) -> trio.MemoryReceiveChannel:
        """Open a new receive stream that sees every event published from now on."""
        if self._closed:
            raise trio.ClosedResourceError(f"{self.name} channel is closed")
        send_channel, receive_channel = trio.open_memory_channel(buffer_size)
        self._subscribers.append(send_channel)
        return receive_channel

    def publish(self, event: T) -> None:
        """Deliver event to all subscribers without waiting."""
        if self._closed:
            return
        for send_channel in list(self._subscribers):
            try:
                send_channel.send_nowait(event)
            except trio.WouldBlock:
                logger.warning(f"Subscriber buffer full on {self.name} channel, dropping event")
            except (trio.BrokenResourceError, trio.ClosedResourceError):
                # Subscriber went away
                self._subscribers.remove(send_channel)

    def close(self) -> None:
        """End every subscriber's stream."""
        self._closed = True
        for send_channel in self._subscribers:
            send_channel.close()
        self._subscribers.clear()


class AnalysisEvents:
    """Log and error channels shared by the fetcher and the pipeline."""

    def __init__(self):
        self.logs: EventChannel[str] = EventChannel("logs")
        self.errors: EventChannel[Exception] = EventChannel("errors")

    def log(self, message: str, level: int = logging.INFO) -> None:
        """Publish a human-readable progress message."""
        logger.log(level, message)
        if level >= logging.WARNING:
            message = f"{logging.getLevelName(level)}: {message}"
        self.logs.publish(message)

    def error(self, exc: Exception) -> None:
        """Publish a diagnostic error. Callers recover locally."""
        logger.error(f"{type(exc).__name__}: {exc}")
        self.errors.publish(exc)

    def close(self) -> None:
        self.logs.close()
        self.errors.close()

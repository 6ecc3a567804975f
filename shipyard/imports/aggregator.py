"""Collect import diagnostics from one producer through one consumer thread.

The channel holds a single message, so a producer that emits faster than the
consumer drains blocks on ``send`` instead of buffering without bound. ``close``
only returns once the consumer has drained everything sent before it.
"""

from __future__ import annotations

import queue
import threading
from concurrent.futures import Future
from typing import Callable, Optional

from shipyard.imports.messages import Message, normalize_locale, render_messages

Emit = Callable[[Message], None]

_CLOSED = object()


class MessageAggregator:
    def __init__(self, locale: Optional[str] = None) -> None:
        self.locale = normalize_locale(locale)
        self._queue: queue.Queue[object] = queue.Queue(maxsize=1)
        self._drained: Future[list[Message]] = Future()
        self._consumer: Optional[threading.Thread] = None
        self._closed = False

    def start(self) -> "MessageAggregator":
        if self._consumer is not None:
            raise RuntimeError("Message aggregator already started.")
        self._consumer = threading.Thread(
            target=self._consume, name="import-messages", daemon=True
        )
        self._consumer.start()
        return self

    def send(self, message: Message) -> None:
        if self._consumer is None:
            raise RuntimeError("Message aggregator is not started.")
        if self._closed:
            raise RuntimeError("Message aggregator is closed.")
        self._queue.put(message)

    def close(self) -> list[str]:
        if self._consumer is None:
            raise RuntimeError("Message aggregator is not started.")
        if not self._closed:
            self._closed = True
            self._queue.put(_CLOSED)
        received = self._drained.result()
        return render_messages(received, self.locale)

    def __enter__(self) -> "MessageAggregator":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _consume(self) -> None:
        received: list[Message] = []
        try:
            while True:
                item = self._queue.get()
                if item is _CLOSED:
                    break
                received.append(item)
        except Exception as exc:
            self._drained.set_exception(exc)
            raise
        self._drained.set_result(received)


def aggregate(
    producer: Callable[[Emit], object], locale: Optional[str] = None
) -> list[str]:
    """Run ``producer`` with an emit callback and return its rendered messages."""
    with MessageAggregator(locale) as aggregator:
        producer(aggregator.send)
        return aggregator.close()

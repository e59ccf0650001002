"""
Many-producer / single-consumer collection of open ports.

Workers each hold an Intake handle and push ports as they find them.
The coordinator calls collect(), which drains the queue until every
handle has been released, then returns the ports sorted.
"""

from __future__ import annotations

import queue
import threading
from typing import List, Tuple

from .ports import MAX_PORT, MIN_PORT

_CLOSED = object()


class ChannelBroken(RuntimeError):
    """Raised when a port is reported to an intake that can no longer accept it."""


class Intake:
    """Producer handle into a ResultCollector."""

    def __init__(self, collector: "ResultCollector"):
        self._collector = collector
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def send(self, port: int) -> None:
        if self._released:
            raise ChannelBroken(f"intake handle already released (port {port})")
        if port < MIN_PORT or port > MAX_PORT:
            raise ValueError(f"Invalid port: {port}")
        self._collector._put(port)

    def clone(self) -> "Intake":
        if self._released:
            raise ChannelBroken("cannot clone a released intake handle")
        return self._collector.intake()

    def close(self) -> None:
        if self._released:
            return
        self._released = True
        self._collector._release()

    def __enter__(self) -> "Intake":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ResultCollector:
    def __init__(self):
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._lock = threading.Lock()
        self._senders = 0
        self._closed = False
        self._collected = False

    @property
    def closed(self) -> bool:
        return self._closed

    def intake(self) -> Intake:
        with self._lock:
            if self._closed:
                raise ChannelBroken("collector intake is closed")
            self._senders += 1
        return Intake(self)

    def _put(self, port: int) -> None:
        # Checked under the lock so nothing lands behind the close marker.
        with self._lock:
            if self._closed:
                raise ChannelBroken(f"collector intake is closed (port {port})")
            self._queue.put(port)

    def _release(self) -> None:
        with self._lock:
            self._senders -= 1
            if self._senders == 0:
                self._close_locked()

    def _close_locked(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put(_CLOSED)

    def collect(self) -> Tuple[int, ...]:
        """
        Block until every intake handle is released and the queue is
        drained. Returns the ports in ascending order. One call only.
        """
        with self._lock:
            if self._collected:
                raise ChannelBroken("results were already collected")
            self._collected = True
            if self._senders == 0:
                self._close_locked()

        ports: List[int] = []
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                break
            ports.append(item)

        ports.sort()
        return tuple(ports)

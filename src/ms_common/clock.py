"""Scheduling abstraction for the two kinds of delayed work in a session.

The phase ticker and the per-request expiry timers are the only scheduled
callbacks. Both go through a ``Scheduler`` so that the session can run on
the asyncio event loop in production and on a ``ManualScheduler`` in tests,
where time only moves when ``advance()`` is called.
"""

import asyncio
import heapq
import itertools
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Protocol

from src.ms_common.datetime_utils import utc_now


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def now(self) -> datetime: ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """Schedules callbacks on the running event loop."""

    def now(self) -> datetime:
        return utc_now()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


class _ManualHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Deterministic scheduler: callbacks fire only inside ``advance()``.

    Callbacks due at the same instant fire in scheduling order. A callback
    may schedule further callbacks; those fire in the same ``advance()``
    call if they fall due before its end.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2025, 1, 1, tzinfo=timezone.utc)
        self._queue: list[tuple[datetime, int, _ManualHandle, Callable[[], None]]] = []
        self._seq = itertools.count()

    def now(self) -> datetime:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = _ManualHandle()
        due = self._now + timedelta(seconds=delay)
        heapq.heappush(self._queue, (due, next(self._seq), handle, callback))
        return handle

    @property
    def pending(self) -> int:
        """Number of scheduled callbacks not yet fired or cancelled."""
        return sum(1 for _, _, h, _ in self._queue if not h.cancelled)

    def advance(self, seconds: float) -> None:
        target = self._now + timedelta(seconds=seconds)
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = due
            callback()
        self._now = target

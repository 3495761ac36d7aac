from __future__ import annotations
import asyncio
import heapq
import itertools
import time
from typing import Callable, List, Optional, Protocol, Tuple

Callback = Callable[[], None]


class Handle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """The engine's only view of time: read the clock, run something later."""

    def now(self) -> float:
        """Current time in milliseconds."""
        ...

    def call_later(self, delay_ms: float, callback: Callback) -> Handle: ...

    def call_soon(self, callback: Callback) -> Handle: ...


class AsyncioScheduler:
    """Schedules on an asyncio event loop (the running one unless given)."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        if self._loop is None:
            try:
                self._loop = asyncio.get_running_loop()
            except RuntimeError:
                # Same clock asyncio's default loop.time() reads
                return time.monotonic() * 1000.0
        return self._loop.time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callback) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay_ms) / 1000.0, callback)

    def call_soon(self, callback: Callback) -> asyncio.Handle:
        return self.loop.call_soon(callback)


class ManualHandle:
    __slots__ = ("when", "callback", "cancelled")

    def __init__(self, when: float, callback: Callback):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Deterministic fake clock for tests and offline simulation.

    Nothing runs until the clock is advanced. Callbacks fire in due-time
    order; ties keep scheduling order, and call_soon callbacks run at the
    current time on the next advance.
    """

    def __init__(self, start: float = 0.0):
        self._now = float(start)
        self._queue: List[Tuple[float, int, ManualHandle]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callback) -> ManualHandle:
        handle = ManualHandle(self._now + max(0.0, delay_ms), callback)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    def call_soon(self, callback: Callback) -> ManualHandle:
        return self.call_later(0.0, callback)

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def _pop_due(self, until: float) -> Optional[ManualHandle]:
        while self._queue and self._queue[0][0] <= until:
            _, _, handle = heapq.heappop(self._queue)
            if not handle.cancelled:
                return handle
        return None

    def advance(self, ms: float = 0.0) -> None:
        """Move the clock forward by ms, running every callback that comes due."""
        target = self._now + max(0.0, ms)
        while True:
            handle = self._pop_due(target)
            if handle is None:
                break
            self._now = max(self._now, handle.when)
            handle.callback()
        self._now = target

    def run_until(self, predicate: Callable[[], bool], limit_ms: float = 600_000.0) -> bool:
        """
        Run callbacks one by one until predicate() holds, nothing is left to
        run, or limit_ms of simulated time has passed. Returns predicate().
        """
        deadline = self._now + limit_ms
        while not predicate():
            handle = self._pop_due(deadline)
            if handle is None:
                break
            self._now = max(self._now, handle.when)
            handle.callback()
        return predicate()

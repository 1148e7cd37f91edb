"""Test helpers: a deterministic scheduler with a virtual clock."""

import heapq
import itertools
from collections.abc import Callable, Coroutine
from typing import Any


class ManualTimerHandle:
    """Handle returned by ``ManualScheduler.call_later``."""

    when: float
    cancelled: bool

    def __init__(self, when: float, callback: Callable[..., None], args: tuple[Any, ...]):
        self.when = when
        self.cancelled = False
        self._callback = callback
        self._args = args

    def cancel(self) -> None:
        self.cancelled = True

    def _run(self) -> None:
        self._callback(*self._args)


class ManualScheduler:
    """Scheduler whose clock only moves when told to.

    Timers fire in due-time order (ties in arming order) while the clock is
    advanced; during a callback ``now()`` reports the timer's due time.
    Exceptions raised by callbacks propagate out of ``advance``/``advance_to``.

    Examples
    --------
    >>> scheduler = ManualScheduler()
    >>> fired = []
    >>> _ = scheduler.call_later(10, fired.append, "x")
    >>> scheduler.advance(5); fired
    []
    >>> scheduler.advance(5); fired
    ['x']
    """

    spawned: list[Coroutine[Any, Any, Any]]

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: list[tuple[float, int, ManualTimerHandle]] = []
        self._sequence = itertools.count()
        self.spawned = []

    def now(self) -> float:
        return self._now

    def call_later(
        self, delay: float, callback: Callable[..., None], *args: Any
    ) -> ManualTimerHandle:
        handle = ManualTimerHandle(self._now + delay, callback, args)
        heapq.heappush(self._queue, (handle.when, next(self._sequence), handle))
        return handle

    def spawn(self, coroutine: Coroutine[Any, Any, Any]) -> Coroutine[Any, Any, Any]:
        self.spawned.append(coroutine)
        return coroutine

    @property
    def pending(self) -> int:
        """Number of timers that are armed and not cancelled."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("Cannot advance the clock by a negative duration")
        self.advance_to(self._now + seconds)

    def advance_to(self, when: float) -> None:
        """Move the clock to ``when``, firing every timer due on the way."""
        if when < self._now:
            raise ValueError(
                f"Cannot advance the clock backwards ({when} < {self._now}), use set_time"
            )

        while self._queue and self._queue[0][0] <= when:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = max(self._now, due)
            handle.cancelled = True
            handle._run()

        self._now = when

    def run_all(self) -> None:
        """Fire every pending timer, including those armed while firing."""
        while self.pending:
            self.advance_to(max(self._now, self._queue[0][0]))

    def set_time(self, when: float) -> None:
        """Jump the clock to ``when`` without firing anything (may go backwards)."""
        self._now = when


class CallRecorder:
    """Callable that remembers when, and with what, it was called.

    Useful as the wrapped callable when asserting on an invoker's behavior.
    """

    calls: list[tuple[float, tuple[Any, ...], dict[str, Any]]]

    def __init__(self, scheduler: ManualScheduler):
        self.scheduler = scheduler
        self.calls = []

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        self.calls.append((self.scheduler.now(), args, kwargs))

    @property
    def times(self) -> list[float]:
        return [time for time, _, _ in self.calls]

    @property
    def args(self) -> list[tuple[Any, ...]]:
        return [args for _, args, _ in self.calls]

"""Clock and timer plumbing used by the invokers.

The invokers never talk to asyncio directly: they read the time, arm timers and
hand off coroutines through a ``Scheduler``. ``LoopScheduler`` is the asyncio
implementation; ``pacer.testing.ManualScheduler`` is a virtual clock for tests.
"""

import asyncio
import contextlib
import logging
import time
from collections.abc import Callable, Coroutine
from typing import Any, NamedTuple, Protocol, runtime_checkable

from .errors import TimerSlotError

logger = logging.getLogger(__name__)


@runtime_checkable
class TimerHandle(Protocol):
    def cancel(self) -> None: ...


@runtime_checkable
class Scheduler(Protocol):
    def now(self) -> float: ...

    def call_later(
        self, delay: float, callback: Callable[..., None], *args: Any
    ) -> TimerHandle: ...

    def spawn(self, coroutine: Coroutine[Any, Any, Any]) -> Any: ...


class LoopScheduler:
    """Scheduler backed by an asyncio event loop.

    Without an explicit loop, the running loop is looked up on every timer
    operation, so invokers can be created at import time and used from any
    loop later on. Arming a timer outside of a running loop raises
    ``RuntimeError``.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now(self) -> float:
        # Must match the clock call_later schedules against
        if self._loop is not None:
            return self._loop.time()
        with contextlib.suppress(RuntimeError):
            return asyncio.get_running_loop().time()
        return time.monotonic()

    def call_later(
        self, delay: float, callback: Callable[..., None], *args: Any
    ) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback, *args)

    def spawn(self, coroutine: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        task = self.loop.create_task(coroutine)
        # The loop only keeps weak references to tasks
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task


DEFAULT_SCHEDULER = LoopScheduler()


class CapturedCall(NamedTuple):
    """Arguments recorded for a deferred execution."""

    args: tuple[Any, ...]
    kwargs: dict[str, Any]

    def apply(self, func: Callable[..., Any]) -> Any:
        return func(*self.args, **self.kwargs)


class TimerSlot:
    """Owner of at most one pending timer and the call it will replay.

    Every ``arm`` is matched by exactly one release, whichever comes first of
    the timer firing, ``release`` (cancel) or ``take`` (flush). Ownership is
    dropped before any callback runs, so callbacks may re-arm the slot.

    Attributes
    ----------
    arms : int
        Number of timers armed over the slot's lifetime.
    releases : int
        Number of timers released (fired, cancelled or taken).
    """

    arms: int
    releases: int

    def __init__(self, scheduler: Scheduler):
        self._scheduler = scheduler
        self._handle: TimerHandle | None = None
        self._call: CapturedCall | None = None
        self.arms = 0
        self.releases = 0

    @property
    def armed(self) -> bool:
        return self._handle is not None

    @property
    def captured(self) -> CapturedCall | None:
        return self._call

    def arm(
        self,
        delay: float,
        call: CapturedCall,
        on_fire: Callable[[CapturedCall], None],
    ) -> None:
        """Schedule ``on_fire(call)`` after ``delay`` seconds.

        Raises
        ------
        TimerSlotError
            If the slot already owns a pending timer.
        """
        if self._handle is not None:
            raise TimerSlotError("Timer slot already owns a pending timer")

        generation = self.arms + 1
        handle = self._scheduler.call_later(
            max(delay, 0.0), self._fire, generation, on_fire
        )

        self.arms = generation
        self._call = call
        self._handle = handle
        logger.debug("Armed timer #%d for %.6fs", generation, delay)

    def recapture(self, call: CapturedCall) -> None:
        """Replace the call the pending timer will replay."""
        if self._handle is None:
            raise TimerSlotError("Cannot recapture a call on an idle timer slot")
        self._call = call

    def take(self) -> CapturedCall | None:
        """Cancel the pending timer and hand its captured call to the caller.

        Returns None when nothing was pending.
        """
        handle, call = self._handle, self._call
        if handle is None:
            return None

        self._clear()
        handle.cancel()
        logger.debug("Released timer #%d", self.arms)
        return call

    def release(self) -> bool:
        """Cancel the pending timer, if any. Returns whether one was pending."""
        return self.take() is not None

    def _clear(self) -> None:
        self._handle = None
        self._call = None
        self.releases += 1

    def _fire(self, generation: int, on_fire: Callable[[CapturedCall], None]) -> None:
        # A timer superseded by release + re-arm must not fire the new one
        if self._handle is None or generation != self.arms:
            return

        call = self._call
        if call is None:
            raise TimerSlotError(f"Timer #{generation} fired without a captured call")
        self._clear()
        logger.debug("Timer #%d fired", generation)
        on_fire(call)

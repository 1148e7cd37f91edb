"""Rate limiter base classes for gating high-frequency callbacks.

A ``RateLimiterConfig`` is an immutable, serializable description of a policy
(throttle, debounce, ...). Calling ``create_invoker`` on it wraps a callable in
a ``BaseInvoker`` subclass, which owns the mutable state the policy needs.
"""

import functools
import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import Enum
from typing import Any, ClassVar, Generic, Literal, TypeVar

from pydantic import ConfigDict, Field

from ..discriminated import Discriminated, discriminated_base
from ..errors import CallableError, InvalidConfigurationError
from ..settings import PACER_SETTINGS
from ..stats import InvocationStats
from ..timers import DEFAULT_SCHEDULER, CapturedCall, Scheduler, TimerSlot
from ..utils import NEVER, Never

logger = logging.getLogger(__name__)

Trigger = Literal["immediate", "trailing", "flush"]


class InvokerStatus(str, Enum):
    """Whether an invoker currently owns a pending timer."""

    IDLE = "idle"
    ARMED = "armed"


@discriminated_base
class RateLimiterConfig(Discriminated, ABC):
    """Abstract base class for rate limiting policies.

    Subclasses register under a ``kind`` and implement ``create_invoker``.
    Validating a dict against this class returns the config registered for
    the dict's ``kind``.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    delay: float = Field(..., ge=0)

    @abstractmethod
    def create_invoker(
        self,
        func: Callable[..., Any],
        *,
        scheduler: Scheduler | None = None,
        stats: InvocationStats | None = None,
    ) -> "BaseInvoker[Any]":
        """Wrap ``func`` in a controlled invoker applying this policy.

        Parameters
        ----------
        func : Callable
            The callable to gate. Bound methods carry their receiver.
        scheduler : Scheduler or None, optional
            Clock and timer source. Defaults to the running asyncio loop.
        stats : InvocationStats or None, optional
            Collector updated by the invoker, possibly shared with others.

        Returns
        -------
        BaseInvoker
            A fresh invoker with its own state.
        """
        raise NotImplementedError


class _InvokerState:
    """Internal state for an invoker: last execution time, timer slot, call count."""

    last_invocation: float | Never
    timer: TimerSlot
    call_count: int

    def __init__(self, scheduler: Scheduler):
        self.last_invocation = NEVER
        self.timer = TimerSlot(scheduler)
        self.call_count = 0


ConfigT = TypeVar("ConfigT", bound=RateLimiterConfig)


class BaseInvoker(ABC, Generic[ConfigT]):
    """Callable wrapper applying a rate limiting policy to ``func``.

    Calling the invoker is the same as calling ``invoke``. Subclasses decide
    in ``_on_invoke`` whether to execute now, arm the timer or do nothing, and
    in ``_on_timer`` what a timer fire does.
    """

    config: ConfigT

    def __init__(
        self,
        func: Callable[..., Any],
        config: ConfigT,
        *,
        scheduler: Scheduler | None = None,
        stats: InvocationStats | None = None,
    ):
        if not callable(func):
            raise InvalidConfigurationError(f"Expected a callable, got {func!r}")

        self.config = config
        self._func = func
        self._scheduler = scheduler or DEFAULT_SCHEDULER
        self._stats = stats
        self._state = _InvokerState(self._scheduler)
        functools.update_wrapper(self, func, updated=())

    @property
    def call_count(self) -> int:
        """Number of ``invoke`` attempts, whether or not they executed."""
        return self._state.call_count

    @property
    def status(self) -> InvokerStatus:
        return InvokerStatus.ARMED if self._state.timer.armed else InvokerStatus.IDLE

    @property
    def pending(self) -> bool:
        return self._state.timer.armed

    @property
    def stats(self) -> InvocationStats | None:
        return self._stats

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        self.invoke(*args, **kwargs)

    def invoke(self, *args: Any, **kwargs: Any) -> None:
        """Submit a call; the policy decides whether and when ``func`` runs."""
        self._state.call_count += 1
        if self._stats is not None:
            self._stats.record_call()

        self._on_invoke(CapturedCall(args, kwargs), self._scheduler.now())

    def cancel(self) -> None:
        """Discard the pending execution, if any. Never executes ``func``."""
        if self._state.timer.release():
            logger.debug("Cancelled pending %s execution of %s", self.config.kind, self._name)
            if self._stats is not None:
                self._stats.record_cancellation()

        self._on_cancel()

    def flush(self, *args: Any, **kwargs: Any) -> None:
        """Run the pending execution now, if there is one.

        Called with arguments, ``func`` receives those; called bare, it
        receives the call captured by the pending timer.
        """
        captured = self._state.timer.take()
        if captured is None:
            return

        if self._stats is not None:
            self._stats.record_flush()

        call = CapturedCall(args, kwargs) if args or kwargs else captured
        self._on_flush(self._scheduler.now())
        self._execute(call, trigger="flush")

    @abstractmethod
    def _on_invoke(self, call: CapturedCall, now: float) -> None: ...

    @abstractmethod
    def _on_timer(self, call: CapturedCall) -> None: ...

    def _on_cancel(self) -> None:
        pass

    def _on_flush(self, now: float) -> None:
        pass

    def _arm(self, delay: float, call: CapturedCall) -> None:
        self._state.timer.arm(delay, call, self._on_timer)

    def _execute(self, call: CapturedCall, *, trigger: Trigger) -> None:
        if PACER_SETTINGS.log_executions:
            logger.debug(
                "Executing %s (%s, %s) with %d args",
                self._name,
                self.config.kind,
                trigger,
                len(call.args) + len(call.kwargs),
            )
        if self._stats is not None:
            self._stats.record_execution(deferred=trigger == "trailing")

        try:
            result = call.apply(self._func)
        except Exception as err:
            if self._stats is not None:
                self._stats.record_error(err)
            raise CallableError(
                f"{self._name} raised {type(err).__name__} during {trigger} "
                f"{self.config.kind} execution",
                exception=err,
                policy=self.config.kind,
            ) from err

        if inspect.iscoroutine(result):
            self._scheduler.spawn(result)

    @property
    def _name(self) -> str:
        return getattr(self._func, "__qualname__", None) or repr(self._func)

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} {self._name} delay={self.config.delay} "
            f"status={self.status.value} calls={self.call_count}>"
        )

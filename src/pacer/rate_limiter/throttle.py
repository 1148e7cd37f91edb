"""Throttle policy: run at most once per window, on the leading and/or trailing edge."""

from collections.abc import Callable
from typing import Any, Literal

from typing_extensions import override

from ..stats import InvocationStats
from ..timers import CapturedCall, Scheduler
from ..utils import NEVER, Never, elapsed_since
from .base import BaseInvoker, RateLimiterConfig


@RateLimiterConfig.register("throttle")
class ThrottleConfig(RateLimiterConfig):
    """Execute at most once every ``delay`` seconds.

    Attributes
    ----------
    leading : bool
        Execute on the first call of a window.
    trailing : bool
        Execute once more when the window closes if calls were suppressed in it.
    trailing_call : {"armed", "latest"}
        Which call the trailing execution replays: the one that armed the
        timer, or the most recent one received in the window.
    """

    leading: bool = True
    trailing: bool = True
    trailing_call: Literal["armed", "latest"] = "armed"

    @override
    def create_invoker(
        self,
        func: Callable[..., Any],
        *,
        scheduler: Scheduler | None = None,
        stats: InvocationStats | None = None,
    ) -> "ThrottledInvoker":
        return ThrottledInvoker(func, self, scheduler=scheduler, stats=stats)


class ThrottledInvoker(BaseInvoker[ThrottleConfig]):
    @override
    def _on_invoke(self, call: CapturedCall, now: float) -> None:
        state = self._state
        config = self.config

        if isinstance(state.last_invocation, Never) and not config.leading:
            state.last_invocation = now

        elapsed = elapsed_since(now, state.last_invocation)
        remaining = config.delay - elapsed if elapsed is not None else 0.0

        # remaining > delay means the clock went backwards
        if remaining <= 0 or remaining > config.delay:
            state.timer.release()
            state.last_invocation = now
            self._execute(call, trigger="immediate")
        elif not state.timer.armed:
            if config.trailing:
                self._arm(remaining, call)
        elif config.trailing_call == "latest":
            state.timer.recapture(call)

    @override
    def _on_timer(self, call: CapturedCall) -> None:
        self._state.last_invocation = (
            self._scheduler.now() if self.config.leading else NEVER
        )
        self._execute(call, trigger="trailing")

    @override
    def _on_cancel(self) -> None:
        self._state.last_invocation = NEVER

    @override
    def _on_flush(self, now: float) -> None:
        self._state.last_invocation = now

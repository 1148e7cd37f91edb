"""Debounce policy: collapse a burst of calls into a single execution."""

from collections.abc import Callable
from typing import Any

from typing_extensions import override

from ..stats import InvocationStats
from ..timers import CapturedCall, Scheduler
from .base import BaseInvoker, RateLimiterConfig


@RateLimiterConfig.register("debounce")
class DebounceConfig(RateLimiterConfig):
    """Execute once ``delay`` seconds after the last call of a burst.

    With ``immediate``, execute on the first call of the burst instead; the
    timer still tracks the burst but its fire does nothing.
    """

    immediate: bool = False

    @override
    def create_invoker(
        self,
        func: Callable[..., Any],
        *,
        scheduler: Scheduler | None = None,
        stats: InvocationStats | None = None,
    ) -> "DebouncedInvoker":
        return DebouncedInvoker(func, self, scheduler=scheduler, stats=stats)


class DebouncedInvoker(BaseInvoker[DebounceConfig]):
    @override
    def _on_invoke(self, call: CapturedCall, now: float) -> None:
        timer = self._state.timer
        starts_burst = not timer.release()

        # The burst stays tracked even if the immediate execution raises or re-enters
        self._arm(self.config.delay, call)

        if self.config.immediate and starts_burst:
            self._execute(call, trigger="immediate")

    @override
    def _on_timer(self, call: CapturedCall) -> None:
        if not self.config.immediate:
            self._execute(call, trigger="trailing")

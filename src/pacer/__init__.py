"""Throttle and debounce wrappers for high-frequency callbacks.

Wrap a callable to get a controlled invoker exposing ``invoke``, ``cancel``,
``flush`` and ``call_count``:

>>> on_input = debounce(search, 0.3)  # doctest: +SKIP
>>> on_input("py")  # doctest: +SKIP
"""

from .discriminated import Discriminated, discriminated_base
from .errors import (
    CallableError,
    Error,
    InvalidConfigurationError,
    PacerError,
    TimerSlotError,
)
from .rate_limiter import (
    BaseInvoker,
    DebounceConfig,
    DebouncedInvoker,
    InvokerStatus,
    RateLimiterConfig,
    ThrottleConfig,
    ThrottledInvoker,
    debounce,
    throttle,
    wrap,
)
from .settings import PACER_SETTINGS, PacerSettings
from .stats import InvocationStats
from .timers import CapturedCall, LoopScheduler, Scheduler, TimerHandle, TimerSlot
from .utils import NEVER, Never

__all__ = [
    # Entry points
    "debounce",
    "throttle",
    "wrap",
    # Policies
    "BaseInvoker",
    "DebounceConfig",
    "DebouncedInvoker",
    "InvokerStatus",
    "RateLimiterConfig",
    "ThrottleConfig",
    "ThrottledInvoker",
    # Scheduling
    "CapturedCall",
    "LoopScheduler",
    "Scheduler",
    "TimerHandle",
    "TimerSlot",
    # Statistics and settings
    "InvocationStats",
    "PACER_SETTINGS",
    "PacerSettings",
    # Error handling
    "CallableError",
    "Error",
    "InvalidConfigurationError",
    "PacerError",
    "TimerSlotError",
    # Tagged unions and sentinels
    "Discriminated",
    "discriminated_base",
    "NEVER",
    "Never",
]

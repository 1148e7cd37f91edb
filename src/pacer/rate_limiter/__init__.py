"""Rate limiters gating high-frequency callbacks behind timing policies.

Provides RateLimiterConfig (abstract base), the throttle and debounce policies,
and the wrap/throttle/debounce entry points.
"""

from .base import BaseInvoker, InvokerStatus, RateLimiterConfig
from .debounce import DebounceConfig, DebouncedInvoker
from .factory import debounce, normalize_delay, throttle, wrap
from .throttle import ThrottleConfig, ThrottledInvoker

__all__ = [
    "BaseInvoker",
    "DebounceConfig",
    "DebouncedInvoker",
    "InvokerStatus",
    "RateLimiterConfig",
    "ThrottleConfig",
    "ThrottledInvoker",
    "debounce",
    "normalize_delay",
    "throttle",
    "wrap",
]

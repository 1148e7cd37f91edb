"""Entry points wrapping a callable in a throttled or debounced invoker."""

import logging
from collections.abc import Callable, Mapping
from typing import Any, Literal, TypeVar

from pydantic import ValidationError

from ..errors import InvalidConfigurationError
from ..settings import PACER_SETTINGS
from ..stats import InvocationStats
from ..timers import Scheduler
from .base import BaseInvoker, RateLimiterConfig
from .debounce import DebounceConfig, DebouncedInvoker
from .throttle import ThrottleConfig, ThrottledInvoker

logger = logging.getLogger(__name__)


def normalize_delay(delay: float) -> float:
    """Validate a delay in seconds.

    Zero is accepted and makes every call execute immediately. Negative
    delays raise, or are clamped to zero when ``PACER_STRICT_DELAY`` is off.

    Raises
    ------
    InvalidConfigurationError
        If the delay is not a number, does not fit in a float, or is negative
        in strict mode.
    """
    if isinstance(delay, bool) or not isinstance(delay, (int, float)):
        raise InvalidConfigurationError(f"Delay must be a number, got {delay!r}")

    if delay >= 0:
        try:
            return float(delay)
        except OverflowError as err:
            raise InvalidConfigurationError(
                "Delay is too large to be represented as a float"
            ) from err

    if PACER_SETTINGS.strict_delay:
        raise InvalidConfigurationError(
            f"Delay must be greater than or equal to 0, got {delay}"
        )

    logger.warning("Negative delay %s clamped to 0", delay)
    return 0.0


ConfigT = TypeVar("ConfigT", bound=RateLimiterConfig)


def _build_config(
    config_cls: type[ConfigT], options: Mapping[str, Any]
) -> ConfigT:
    try:
        return config_cls.model_validate(dict(options))
    except ValidationError as err:
        raise InvalidConfigurationError(
            f"Invalid {config_cls.__name__} options: {err}"
        ) from err


def _config_from_mapping(options: Mapping[str, Any], delay: float) -> RateLimiterConfig:
    kinds = RateLimiterConfig.registered_kinds()
    kind = options.get("kind")
    if not isinstance(kind, str) or kind not in kinds:
        raise InvalidConfigurationError(
            f"Unknown rate limiter kind {kind!r}, expected one of: {', '.join(sorted(kinds))}"
        )

    config_cls = kinds[kind]
    unknown = set(options) - set(config_cls.model_fields) - {"kind"}
    if unknown:
        raise InvalidConfigurationError(
            f"Unsupported option(s) for {kind}: {', '.join(sorted(unknown))}"
        )

    return _build_config(config_cls, {**options, "delay": delay})


def wrap(
    func: Callable[..., Any],
    delay: float,
    config: RateLimiterConfig | Mapping[str, Any] | None = None,
    *,
    scheduler: Scheduler | None = None,
    stats: InvocationStats | None = None,
) -> BaseInvoker[Any]:
    """Wrap ``func`` in an invoker for the policy described by ``config``.

    Parameters
    ----------
    func : Callable
        The callable to gate.
    delay : float
        Window (throttle) or quiet period (debounce) in seconds. Overrides any
        delay carried by ``config``.
    config : RateLimiterConfig or Mapping or None, optional
        A config instance, or a mapping with a ``kind`` key plus policy
        options, e.g. ``{"kind": "debounce", "immediate": True}``. Defaults
        to a throttle with leading and trailing executions.
    scheduler : Scheduler or None, optional
        Clock and timer source. Defaults to the running asyncio loop.
    stats : InvocationStats or None, optional
        Collector to update, possibly shared with other invokers.

    Returns
    -------
    BaseInvoker
        The controlled invoker.

    Raises
    ------
    InvalidConfigurationError
        If the delay, the callable or the config is invalid.
    """
    delay = normalize_delay(delay)

    if config is None:
        resolved: RateLimiterConfig = ThrottleConfig(delay=delay)
    elif isinstance(config, RateLimiterConfig):
        resolved = config.model_copy(update={"delay": delay})
    else:
        resolved = _config_from_mapping(config, delay)

    return resolved.create_invoker(func, scheduler=scheduler, stats=stats)


def throttle(
    func: Callable[..., Any],
    delay: float,
    *,
    leading: bool = True,
    trailing: bool = True,
    trailing_call: Literal["armed", "latest"] = "armed",
    scheduler: Scheduler | None = None,
    stats: InvocationStats | None = None,
) -> ThrottledInvoker:
    """Execute ``func`` at most once every ``delay`` seconds.

    See ``ThrottleConfig`` for the meaning of the options.

    Examples
    --------
    >>> on_scroll = throttle(render_position, 0.1)  # doctest: +SKIP
    >>> window.on("scroll", on_scroll)  # doctest: +SKIP
    """
    config = _build_config(
        ThrottleConfig,
        {
            "delay": normalize_delay(delay),
            "leading": leading,
            "trailing": trailing,
            "trailing_call": trailing_call,
        },
    )
    return config.create_invoker(func, scheduler=scheduler, stats=stats)


def debounce(
    func: Callable[..., Any],
    delay: float,
    *,
    immediate: bool = False,
    scheduler: Scheduler | None = None,
    stats: InvocationStats | None = None,
) -> DebouncedInvoker:
    """Execute ``func`` once calls have stopped for ``delay`` seconds.

    With ``immediate``, execute on the first call of each burst instead.
    """
    config = _build_config(
        DebounceConfig,
        {"delay": normalize_delay(delay), "immediate": immediate},
    )
    return config.create_invoker(func, scheduler=scheduler, stats=stats)

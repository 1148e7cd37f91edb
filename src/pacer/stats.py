"""Statistics collector shared by reference between invokers."""

from pydantic import BaseModel, Field

from .errors import Error


class InvocationStats(BaseModel):
    """Counters describing what one or more invokers did.

    A single collector can be passed to several invokers (e.g. every handler
    attached to a page) to aggregate their activity. Each invoker keeps its own
    ``call_count``; the collector is an observer and never drives behavior.

    Attributes
    ----------
    calls : int
        Number of ``invoke`` attempts.
    executions : int
        Number of times a wrapped callable actually ran.
    deferred_executions : int
        Executions triggered by a timer fire (subset of ``executions``).
    cancellations : int
        Pending timers discarded by ``cancel``.
    flushes : int
        Pending timers forced by ``flush``.
    errors : int
        Executions in which the wrapped callable raised.
    last_error : Error or None
        The most recent failure, if any.
    """

    calls: int = 0
    executions: int = 0
    deferred_executions: int = 0
    cancellations: int = 0
    flushes: int = 0
    errors: int = 0
    last_error: Error | None = Field(default=None)

    @property
    def suppressed(self) -> int:
        """Calls that did not translate into an execution.

        Flushing an immediate debounce runs the callable a second time for the
        same call, so this is clamped at zero.
        """
        return max(0, self.calls - self.executions)

    def record_call(self) -> None:
        self.calls += 1

    def record_execution(self, *, deferred: bool = False) -> None:
        self.executions += 1
        if deferred:
            self.deferred_executions += 1

    def record_cancellation(self) -> None:
        self.cancellations += 1

    def record_flush(self) -> None:
        self.flushes += 1

    def record_error(self, exception: BaseException) -> None:
        self.errors += 1
        self.last_error = Error.from_exception(exception)

    def reset(self) -> None:
        for name, field in type(self).model_fields.items():
            setattr(self, name, field.get_default())

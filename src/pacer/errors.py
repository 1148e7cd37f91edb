from pydantic import BaseModel


class Error(BaseModel):
    """A basic serializable error.

    Used to keep a record of failures (e.g. in ``InvocationStats``) without
    holding on to the exception object and its traceback.

    Examples
    --------
    >>> error = Error(message="Something went wrong")
    >>> str(error)
    'ERROR: Something went wrong'
    >>> error.model_dump()
    {'message': 'Something went wrong'}
    """

    message: str

    @classmethod
    def from_exception(cls, exception: BaseException) -> "Error":
        return cls(message=f"{type(exception).__name__}: {exception}")

    def __str__(self) -> str:
        return "ERROR: " + self.message


class PacerError(Exception):
    """Base class for all errors raised by pacer."""


class InvalidConfigurationError(PacerError, ValueError):
    """A rate limiter was configured with values it cannot work with."""


class TimerSlotError(PacerError, RuntimeError):
    """A timer slot was armed while it already owned a pending timer."""


class CallableError(PacerError, RuntimeError):
    """The wrapped callable raised while being executed by an invoker."""

    def __init__(
        self,
        message: str,
        *,
        exception: Exception,
        policy: str | None = None,
    ):
        super().__init__(message)
        self.exception = exception
        self.policy = policy

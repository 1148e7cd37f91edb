"""Tests for error handling."""

import pytest
from pacer import (
    CallableError,
    Error,
    InvalidConfigurationError,
    PacerError,
    TimerSlotError,
)


def test_error_creation():
    """Test that Error can be created with a message."""
    error = Error(message="Something went wrong")
    assert error.message == "Something went wrong"


def test_error_string_representation():
    """Test that Error has correct string representation."""
    error = Error(message="Something went wrong")
    assert str(error) == "ERROR: Something went wrong"


def test_error_from_exception():
    """Test that Error keeps the exception type and message."""
    error = Error.from_exception(TimeoutError("too slow"))
    assert error.message == "TimeoutError: too slow"


def test_error_json_serialization():
    """Test that Error can be serialized to JSON."""
    error = Error(message="Something went wrong")
    json_str = error.model_dump_json()
    assert '"message":"Something went wrong"' in json_str


@pytest.mark.parametrize(
    "error_cls,builtin",
    [
        (InvalidConfigurationError, ValueError),
        (TimerSlotError, RuntimeError),
        (CallableError, RuntimeError),
    ],
)
def test_errors_share_a_base_and_a_builtin(error_cls, builtin):
    """Test that pacer errors can be caught as PacerError or as the builtin they refine."""
    assert issubclass(error_cls, PacerError)
    assert issubclass(error_cls, builtin)


def test_callable_error_keeps_original_exception():
    """Test that CallableError exposes the exception raised by the wrapped callable."""
    original = KeyError("missing")
    error = CallableError("handler failed", exception=original, policy="throttle")

    assert str(error) == "handler failed"
    assert error.exception is original
    assert error.policy == "throttle"

import pytest
from pacer import InvocationStats
from pacer.testing import CallRecorder, ManualScheduler


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Virtual clock starting at t=0; durations in tests are arbitrary units."""
    return ManualScheduler()


@pytest.fixture
def record(scheduler: ManualScheduler) -> CallRecorder:
    return CallRecorder(scheduler)


@pytest.fixture
def stats() -> InvocationStats:
    return InvocationStats()

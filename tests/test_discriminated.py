import pytest
from pacer import Discriminated, discriminated_base


@discriminated_base
class Event(Discriminated):
    """Base class for UI events."""

    target: str


class PointerEvent(Event):
    """Base class for pointer events."""

    x: int = 0
    y: int = 0


@Event.register("scroll")
class ScrollEvent(Event):
    offset: int


@PointerEvent.register("click")
class ClickEvent(PointerEvent):
    button: int = 0


@pytest.mark.parametrize(
    "event,kind",
    [
        (ScrollEvent(target="page", offset=120), "scroll"),
        (ClickEvent(target="save", x=3, y=4), "click"),
    ],
)
def test_registered_kinds_round_trip_through_the_base(event: Event, kind: str):
    assert event.kind == kind

    dumped = event.model_dump()
    assert dumped["kind"] == kind
    assert Event.model_validate(dumped) == event
    assert Event.model_validate_json(event.model_dump_json()) == event


def test_unregistered_class_has_no_kind():
    assert PointerEvent(target="canvas").kind is None


def test_registered_kinds_lists_concrete_classes():
    assert Event.registered_kinds() == {"scroll": ScrollEvent, "click": ClickEvent}
    assert ClickEvent.registered_kinds() == Event.registered_kinds()


def test_invalid_kind():
    with pytest.raises(ValueError, match=f"Kind resize is not registered for class {Event}"):
        Event.model_validate({"kind": "resize", "target": "window"})


def test_missing_kind():
    with pytest.raises(ValueError, match=f"Kind is not provided for class {Event}"):
        Event.model_validate({"target": "window"})


def test_non_string_kind():
    with pytest.raises(ValueError, match="Kind is expected to be a string"):
        Event.model_validate({"kind": 3, "target": "window"})


def test_duplicate_kind_is_rejected():
    with pytest.raises(ValueError, match="Kind scroll is already registered"):

        @Event.register("scroll")
        class _OtherScroll(Event):
            pass


def test_register_requires_a_discriminated_base():
    class Plain(Discriminated):
        pass

    with pytest.raises(ValueError, match="is not registered with @discriminated_base"):

        @Plain.register("plain")
        class _Child(Plain):
            pass

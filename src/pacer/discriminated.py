"""Tagged models: serialize a ``kind`` and validate back to the registered subclass."""

import sys
from typing import Any, Callable, TypeVar

from pydantic import BaseModel, GetCoreSchemaHandler, computed_field
from pydantic_core import core_schema

T = TypeVar("T")

CURRENT_MODULE_NAME = sys.modules[__name__].__name__


class _KindRegistry:
    def __init__(self):
        self._by_base: dict[type, dict[str, type]] = {}
        self._kind_of: dict[type, str] = {}

    def add_base(self, base_cls: type) -> None:
        if not issubclass(base_cls, Discriminated):
            raise ValueError(f"Class {base_cls} is not a subclass of Discriminated")
        if base_cls in self._by_base:
            raise ValueError(f"Class {base_cls} is already registered")
        self._by_base[base_cls] = {}

    def root_of(self, cls: type) -> type | None:
        for klass in cls.__mro__:
            if klass in self._by_base:
                return klass
        return None

    def add_kind(self, base_cls: type, subclass: type, kind: str) -> None:
        if not issubclass(subclass, base_cls):
            raise ValueError(f"Class {subclass} is not a subclass of {base_cls}")

        root = self.root_of(base_cls)
        if root is None:
            raise ValueError(
                f"Class {base_cls} is not registered with @discriminated_base"
            )

        kinds = self._by_base[root]
        if kind in kinds:
            raise ValueError(f"Kind {kind} is already registered for {base_cls}")

        kinds[kind] = subclass
        self._kind_of[subclass] = kind

    def kinds(self, cls: type) -> dict[str, type]:
        root = self.root_of(cls)
        return dict(self._by_base[root]) if root is not None else {}

    def kind_of(self, cls: type) -> str | None:
        return self._kind_of.get(cls)


_REGISTRY = _KindRegistry()


class Discriminated(BaseModel):
    @computed_field
    def kind(self) -> str | None:
        """The discriminator identifying the concrete type, or None if unregistered."""
        return _REGISTRY.kind_of(type(self))

    @classmethod
    def register(cls, kind: str) -> Callable[[type[T]], type[T]]:
        def decorator(subclass: type[T]) -> type[T]:
            _REGISTRY.add_kind(cls, subclass, kind)
            return subclass

        return decorator

    @classmethod
    def registered_kinds(cls) -> dict[str, type]:
        """Mapping of kind name to concrete class for this class's union."""
        return _REGISTRY.kinds(cls)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        metadata = getattr(cls, "__pydantic_generic_metadata__", {})
        origin = metadata.get("origin") or cls

        # Only the union root dispatches on kind; concrete classes validate normally
        if not any(
            base.__name__ == "Discriminated" and base.__module__ == CURRENT_MODULE_NAME
            for base in origin.__bases__
        ):
            return handler(source)

        def validate_discriminated(value: Any) -> Any:
            if isinstance(value, origin):
                return value
            if not isinstance(value, dict):
                raise ValueError(f"Value {value} is not a dictionary")

            kind = value.get("kind")
            if kind is None:
                raise ValueError(f"Kind is not provided for class {origin}")
            if not isinstance(kind, str):
                raise ValueError(f"Kind is expected to be a string, got {type(kind)}")

            concrete = _REGISTRY.kinds(origin).get(kind)
            if concrete is None:
                raise ValueError(f"Kind {kind} is not registered for class {origin}")

            return concrete.model_validate(value)

        return core_schema.no_info_plain_validator_function(validate_discriminated)


def discriminated_base(cls: type[T]) -> type[T]:
    """Mark a class as the root of a tagged union.

    Concrete implementations register under a ``kind`` with ``Root.register``;
    validating a dict against the root returns the registered subclass.

    Examples
    --------
    >>> @discriminated_base
    ... class Shape(Discriminated):
    ...     pass
    >>> @Shape.register("square")
    ... class Square(Shape):
    ...     side: float
    >>> Shape.model_validate({"kind": "square", "side": 2.0})
    Square(side=2.0, kind='square')
    """
    _REGISTRY.add_base(cls)
    return cls

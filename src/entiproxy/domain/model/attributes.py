"""Attribute containers: named values seeded into and held by entities."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


def check_attribute_name(name: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValueError("attribute name must be a non-empty string")
    return name


class AttributeContainer(ABC):
    """Opaque bag of named attributes.

    Creation methods accept an ``AttributeContainer`` to seed the initial state of a
    new entity; every entity exposes its own container through ``Entity.attributes``.
    """

    @abstractmethod
    def get_attribute(self, name: str, default: object = None) -> object: ...

    @abstractmethod
    def set_attribute(self, name: str, value: object) -> object:
        """Store ``value`` under ``name`` and return the previous value (or ``None``)."""

    @abstractmethod
    def remove_attribute(self, name: str) -> object:
        """Remove ``name`` and return the removed value (or ``None``)."""

    @abstractmethod
    def attribute_names(self) -> frozenset[str]: ...

    def has_attribute(self, name: str) -> bool:
        return name in self.attribute_names()

    def as_dict(self) -> dict[str, object]:
        return {name: self.get_attribute(name) for name in sorted(self.attribute_names())}

    def __len__(self) -> int:
        return len(self.attribute_names())


class DefaultAttributeContainer(AttributeContainer):
    """In-memory attribute container backed by a dict."""

    def __init__(self, initial: Mapping[str, object] | None = None) -> None:
        self._values: dict[str, object] = {}
        for name, value in (initial or {}).items():
            self.set_attribute(name, value)

    def get_attribute(self, name: str, default: object = None) -> object:
        return self._values.get(name, default)

    def set_attribute(self, name: str, value: object) -> object:
        previous = self._values.get(check_attribute_name(name))
        self._values[name] = value
        return previous

    def remove_attribute(self, name: str) -> object:
        return self._values.pop(name, None)

    def attribute_names(self) -> frozenset[str]:
        return frozenset(self._values)

    def has_attribute(self, name: str) -> bool:
        return name in self._values

    def __repr__(self) -> str:
        return f"DefaultAttributeContainer({self._values!r})"

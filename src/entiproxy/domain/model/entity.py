"""
The entity concept:
identity, attributes, and child entities.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING

from entiproxy.domain.model.container import EntityContainer

if TYPE_CHECKING:
    from uuid import UUID

    from entiproxy.domain.model.attributes import AttributeContainer


class Entity(EntityContainer):
    """Base of every entity type.

    Typed interfaces subclass ``Entity`` and declare abstract methods carrying
    markers (see ``entiproxy.domain.methods.markers``); the registry implements
    those methods on a proxy backed by a store entity.
    """

    @property
    @abstractmethod
    def id(self) -> UUID: ...

    @property
    @abstractmethod
    def attributes(self) -> AttributeContainer: ...


def is_entity_type(candidate: object) -> bool:
    """Return whether ``candidate`` is ``Entity`` or one of its subclasses."""

    return isinstance(candidate, type) and issubclass(candidate, Entity)

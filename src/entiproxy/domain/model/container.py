"""Creation backend contract shared by stores and entities."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from entiproxy.domain.model.attributes import AttributeContainer
    from entiproxy.domain.model.entity import Entity


class DuplicateEntityError(ValueError):
    """Raised when an entity is created with an identifier already in use."""

    def __init__(self, entity_id: UUID) -> None:
        super().__init__(f"entity {entity_id} already exists in this container")
        self.entity_id = entity_id


class EntityContainer(ABC):
    """Holds entities and creates new ones.

    ``new_entity`` covers the four creation shapes: no arguments, an identifier,
    an attribute container, or both. Without an identifier the container assigns a
    fresh random one.
    """

    @abstractmethod
    def new_entity(
        self,
        entity_id: UUID | None = None,
        attributes: AttributeContainer | None = None,
    ) -> Entity: ...

    @abstractmethod
    def get_entity(self, entity_id: UUID) -> Entity | None: ...

    @abstractmethod
    def entity_ids(self) -> frozenset[UUID]: ...

    @abstractmethod
    def kill_entity(self, entity_id: UUID) -> bool:
        """Remove a contained entity; return whether it existed."""

    def has_entity(self, entity_id: UUID) -> bool:
        return entity_id in self.entity_ids()

    def __len__(self) -> int:
        return len(self.entity_ids())

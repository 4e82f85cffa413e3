"""In-memory entity store."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from entiproxy.domain.model.attributes import AttributeContainer, DefaultAttributeContainer
from entiproxy.domain.model.container import DuplicateEntityError, EntityContainer
from entiproxy.domain.model.entity import Entity

if TYPE_CHECKING:
    from collections.abc import Iterator


def new_id() -> UUID:
    return uuid4()


class DefaultEntityContainer(EntityContainer):
    """Dict-backed container of ``DefaultEntity`` objects."""

    def __init__(self) -> None:
        self._entities: dict[UUID, DefaultEntity] = {}

    def new_entity(
        self,
        entity_id: UUID | None = None,
        attributes: AttributeContainer | None = None,
    ) -> DefaultEntity:
        if entity_id is None:
            entity_id = new_id()
        elif not isinstance(entity_id, UUID):
            raise TypeError(f"entity id must be a UUID, got {type(entity_id).__name__}")
        if entity_id in self._entities:
            raise DuplicateEntityError(entity_id)

        entity = DefaultEntity(entity_id, parent=self)
        if attributes is not None:
            for name in attributes.attribute_names():
                entity.attributes.set_attribute(name, attributes.get_attribute(name))
        self._entities[entity_id] = entity
        return entity

    def get_entity(self, entity_id: UUID) -> DefaultEntity | None:
        return self._entities.get(entity_id)

    def entity_ids(self) -> frozenset[UUID]:
        return frozenset(self._entities)

    def kill_entity(self, entity_id: UUID) -> bool:
        entity = self._entities.pop(entity_id, None)
        if entity is None:
            return False
        entity.detach()
        return True

    def has_entity(self, entity_id: UUID) -> bool:
        return entity_id in self._entities

    def __iter__(self) -> Iterator[DefaultEntity]:
        return iter(tuple(self._entities.values()))


class DefaultEntity(DefaultEntityContainer, Entity):
    """Entity held in memory; it is itself a container of child entities."""

    def __init__(self, entity_id: UUID, *, parent: EntityContainer | None = None) -> None:
        super().__init__()
        self._id = entity_id
        self._attributes = DefaultAttributeContainer()
        self._parent = parent

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def attributes(self) -> AttributeContainer:
        return self._attributes

    @property
    def parent(self) -> EntityContainer | None:
        return self._parent

    @property
    def is_alive(self) -> bool:
        return self._parent is not None

    def detach(self) -> None:
        """Mark this entity and its whole subtree as no longer alive."""

        self._parent = None
        for child in self._entities.values():
            child.detach()

    def __repr__(self) -> str:
        return f"DefaultEntity(id={self._id}, children={len(self)})"

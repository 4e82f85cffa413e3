"""Public entity model surface."""

from __future__ import annotations

from entiproxy.domain.model.attributes import AttributeContainer, DefaultAttributeContainer
from entiproxy.domain.model.container import DuplicateEntityError, EntityContainer
from entiproxy.domain.model.default import DefaultEntity, DefaultEntityContainer, new_id
from entiproxy.domain.model.entity import Entity, is_entity_type

__all__ = [  # noqa: RUF022
    # attributes
    "AttributeContainer",
    "DefaultAttributeContainer",
    # containers
    "EntityContainer",
    "DuplicateEntityError",
    # entities
    "Entity",
    "is_entity_type",
    # in-memory store
    "DefaultEntity",
    "DefaultEntityContainer",
    "new_id",
]

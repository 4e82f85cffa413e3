"""Entity store backed by SQLAlchemy sessions.

Entities are rows of the ``entity`` table (children point at their parent);
attributes are JSON values in the ``attribute`` table. Identifiers are unique per
database, not just per container.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import delete, insert, select, update

from entiproxy.adapters.sqlalchemy.mappings import attribute_table, entity_table
from entiproxy.domain.model import (
    AttributeContainer,
    DuplicateEntityError,
    Entity,
    EntityContainer,
    new_id,
)
from entiproxy.domain.model.attributes import check_attribute_name

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Select
    from sqlalchemy.orm import Session


class _SqlAlchemyContainer(EntityContainer):
    def __init__(self, session: Session, parent_id: UUID | None) -> None:
        self.session = session
        self._parent_id = parent_id

    def new_entity(
        self,
        entity_id: UUID | None = None,
        attributes: AttributeContainer | None = None,
    ) -> SqlAlchemyEntity:
        if entity_id is None:
            entity_id = new_id()
        elif not isinstance(entity_id, UUID):
            raise TypeError(f"entity id must be a UUID, got {type(entity_id).__name__}")
        if _entity_exists(self.session, entity_id):
            raise DuplicateEntityError(entity_id)

        self.session.execute(insert(entity_table).values(id=entity_id, parent_id=self._parent_id))
        entity = SqlAlchemyEntity(self.session, entity_id)
        if attributes is not None:
            for name in sorted(attributes.attribute_names()):
                entity.attributes.set_attribute(name, attributes.get_attribute(name))
        return entity

    def get_entity(self, entity_id: UUID) -> SqlAlchemyEntity | None:
        stmt = (
            select(entity_table.c.id)
            .where(entity_table.c.id == entity_id)
            .where(self._parent_clause())
        )
        if self.session.execute(stmt).scalar_one_or_none() is None:
            return None
        return SqlAlchemyEntity(self.session, entity_id)

    def entity_ids(self) -> frozenset[UUID]:
        stmt = select(entity_table.c.id).where(self._parent_clause())
        return frozenset(self.session.execute(stmt).scalars())

    def kill_entity(self, entity_id: UUID) -> bool:
        if self.get_entity(entity_id) is None:
            return False
        subtree = _collect_subtree(self.session, entity_id)
        self.session.execute(delete(attribute_table).where(attribute_table.c.entity_id.in_(subtree)))
        self.session.execute(delete(entity_table).where(entity_table.c.id.in_(subtree)))
        return True

    def _parent_clause(self) -> ColumnElement[bool]:
        if self._parent_id is None:
            return entity_table.c.parent_id.is_(None)
        return entity_table.c.parent_id == self._parent_id


class SqlAlchemyEntityContainer(_SqlAlchemyContainer):
    """Root container: entities without a parent."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, parent_id=None)

    def find_entity(self, entity_id: UUID) -> SqlAlchemyEntity | None:
        """Look an entity up at any depth of the stored graph."""

        if not _entity_exists(self.session, entity_id):
            return None
        return SqlAlchemyEntity(self.session, entity_id)


class SqlAlchemyEntity(_SqlAlchemyContainer, Entity):
    def __init__(self, session: Session, entity_id: UUID) -> None:
        super().__init__(session, parent_id=entity_id)
        self._id = entity_id
        self._attributes = SqlAlchemyAttributeContainer(session, entity_id)

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def attributes(self) -> AttributeContainer:
        return self._attributes

    @property
    def is_alive(self) -> bool:
        return _entity_exists(self.session, self._id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SqlAlchemyEntity):
            return NotImplemented
        return other.session is self.session and other.id == self._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"SqlAlchemyEntity(id={self._id})"


class SqlAlchemyAttributeContainer(AttributeContainer):
    """Attributes of one stored entity; reads and writes go through the session."""

    def __init__(self, session: Session, entity_id: UUID) -> None:
        self.session = session
        self._entity_id = entity_id

    def get_attribute(self, name: str, default: object = None) -> object:
        row = self.session.execute(self._select_value(name)).first()
        return default if row is None else row[0]

    def set_attribute(self, name: str, value: object) -> object:
        check_attribute_name(name)
        try:
            json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise TypeError(f"attribute {name!r} must be JSON serializable") from exc

        row = self.session.execute(self._select_value(name)).first()
        if row is None:
            self.session.execute(
                insert(attribute_table).values(entity_id=self._entity_id, name=name, value=value)
            )
            return None
        self.session.execute(
            update(attribute_table)
            .where(attribute_table.c.entity_id == self._entity_id)
            .where(attribute_table.c.name == name)
            .values(value=value)
        )
        return row[0]

    def remove_attribute(self, name: str) -> object:
        row = self.session.execute(self._select_value(name)).first()
        if row is None:
            return None
        self.session.execute(
            delete(attribute_table)
            .where(attribute_table.c.entity_id == self._entity_id)
            .where(attribute_table.c.name == name)
        )
        return row[0]

    def attribute_names(self) -> frozenset[str]:
        stmt = select(attribute_table.c.name).where(attribute_table.c.entity_id == self._entity_id)
        return frozenset(self.session.execute(stmt).scalars())

    def _select_value(self, name: str) -> Select[tuple[object]]:
        return (
            select(attribute_table.c.value)
            .where(attribute_table.c.entity_id == self._entity_id)
            .where(attribute_table.c.name == name)
        )


def _entity_exists(session: Session, entity_id: UUID) -> bool:
    stmt = select(entity_table.c.id).where(entity_table.c.id == entity_id)
    return session.execute(stmt).scalar_one_or_none() is not None


def _collect_subtree(session: Session, root_id: UUID) -> list[UUID]:
    collected = [root_id]
    frontier = [root_id]
    while frontier:
        stmt = select(entity_table.c.id).where(entity_table.c.parent_id.in_(frontier))
        frontier = list(session.execute(stmt).scalars())
        collected.extend(frontier)
    return collected

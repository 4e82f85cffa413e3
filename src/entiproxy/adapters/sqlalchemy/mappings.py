"""SQLAlchemy table metadata for the entity store."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    TypeDecorator,
    Uuid,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _utcnow() -> datetime:
    return datetime.now(UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

entity_table = Table(
    "entity",
    metadata,
    Column("id", UUIDColumnType, primary_key=True),
    Column(
        "parent_id",
        UUIDColumnType,
        ForeignKey("entity.id", ondelete="CASCADE"),
        nullable=True,
    ),
    Column("created_at", UTCDateTime(), nullable=False, default=_utcnow),
    Index("ix_entity_parent_id", "parent_id"),
)

attribute_table = Table(
    "attribute",
    metadata,
    Column(
        "entity_id",
        UUIDColumnType,
        ForeignKey("entity.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("name", String, primary_key=True),
    Column("value", JSON, nullable=True),
)


def create_all_tables(engine: Engine) -> None:
    """Create the entity store tables if they do not exist yet."""

    log.debug("Creating entity store tables on %s", engine.url)
    metadata.create_all(engine, checkfirst=True)

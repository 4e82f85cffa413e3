"""SQLAlchemy adapter package for the entity store."""

from __future__ import annotations

from .mappings import attribute_table, create_all_tables, entity_table, metadata
from .store import SqlAlchemyAttributeContainer, SqlAlchemyEntity, SqlAlchemyEntityContainer
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyAttributeContainer",
    "SqlAlchemyEntity",
    "SqlAlchemyEntityContainer",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "attribute_table",
    "configured_engine",
    "create_all_tables",
    "entity_table",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
]

"""Application entry points behind the command line."""

from __future__ import annotations

import importlib
from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from entiproxy.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from entiproxy.domain.methods import FixedIDSupplier
from entiproxy.domain.model import is_entity_type
from entiproxy.domain.registry import EntityTypeRegistry

if TYPE_CHECKING:
    from uuid import UUID

    from entiproxy.domain.methods import CreationShape, IdentifierSource
    from entiproxy.domain.model import Entity

UnitOfWorkFactory = Callable[[], SqlAlchemyUnitOfWork]


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MethodDescription:
    name: str
    entity_type: str
    shape: CreationShape
    identifier_source: IdentifierSource
    fixed_id: UUID | None = None


@dataclass(frozen=True, slots=True)
class EntityTypeDescription:
    entity_type: str
    methods: tuple[MethodDescription, ...]


def load_entity_type(target: str) -> type[Entity]:
    """Import an entity type given as ``package.module:ClassName``."""

    module_name, sep, attribute_path = target.partition(":")
    if not sep or not module_name or not attribute_path:
        raise ValueError(f"Expected MODULE:CLASS, got {target!r}")
    try:
        loaded: object = importlib.import_module(module_name)
    except ImportError as exc:
        raise ValueError(f"Cannot import module {module_name!r}") from exc
    for part in attribute_path.split("."):
        try:
            loaded = getattr(loaded, part)
        except AttributeError as exc:
            raise ValueError(f"{module_name!r} has no attribute {attribute_path!r}") from exc
    if not is_entity_type(loaded):
        raise ValueError(f"{target} is not an Entity type")
    return loaded  # pyright: ignore[reportReturnType]


def describe_entity_type(
    target: str | type[Entity],
    *,
    registry: EntityTypeRegistry | None = None,
) -> EntityTypeDescription:
    """Register an entity type and summarise how each of its methods dispatches."""

    interface = load_entity_type(target) if isinstance(target, str) else target
    effective_registry = registry or EntityTypeRegistry()
    registered = effective_registry.register(interface)

    methods = tuple(
        MethodDescription(
            name=name,
            entity_type=method.entity_type.__qualname__,
            shape=method.shape,
            identifier_source=method.identifier_source,
            fixed_id=(
                method.id_supplier.value
                if isinstance(method.id_supplier, FixedIDSupplier)
                else None
            ),
        )
        for name, method in sorted(registered.methods.items())
    )
    return EntityTypeDescription(entity_type=interface.__qualname__, methods=methods)


def list_entity_ids(
    *,
    parent_id: UUID | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> tuple[UUID, ...]:
    """Return the ids stored under ``parent_id`` (root entities when omitted)."""

    if unit_of_work_factory is None and not is_started():
        startup()
    effective_uow = unit_of_work_factory or SqlAlchemyUnitOfWork

    with effective_uow() as uow:
        container = uow.entities
        if parent_id is not None:
            parent = uow.entities.find_entity(parent_id)
            if parent is None:
                raise ValueError(f"No entity with id {parent_id}")
            container = parent
        entity_ids = tuple(sorted(container.entity_ids(), key=str))

    log.debug("Listed %d entities under %s", len(entity_ids), parent_id or "root")
    return entity_ids

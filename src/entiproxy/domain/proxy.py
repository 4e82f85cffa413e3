"""Proxies implementing entity types on top of store entities."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING

from entiproxy.domain.model import Entity

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from uuid import UUID

    from entiproxy.domain.methods import NewEntityMethod
    from entiproxy.domain.model import AttributeContainer
    from entiproxy.domain.registry import EntityTypeRegistry


class EntityProxy(Entity):
    """Base of generated proxy classes.

    Identity, attributes and child management are forwarded to the backing
    (store) entity; declared interface methods are added per entity type by
    ``build_proxy_class``.
    """

    def __init__(self, delegate: Entity, registry: EntityTypeRegistry) -> None:
        self._delegate = delegate
        self._registry = registry

    @property
    def delegate(self) -> Entity:
        return self._delegate

    @property
    def registry(self) -> EntityTypeRegistry:
        return self._registry

    @property
    def id(self) -> UUID:
        return self._delegate.id

    @property
    def attributes(self) -> AttributeContainer:
        return self._delegate.attributes

    def new_entity(
        self,
        entity_id: UUID | None = None,
        attributes: AttributeContainer | None = None,
    ) -> Entity:
        return self._delegate.new_entity(entity_id, attributes)

    def get_entity(self, entity_id: UUID) -> Entity | None:
        return self._delegate.get_entity(entity_id)

    def entity_ids(self) -> frozenset[UUID]:
        return self._delegate.entity_ids()

    def kill_entity(self, entity_id: UUID) -> bool:
        return self._delegate.kill_entity(entity_id)

    def has_entity(self, entity_id: UUID) -> bool:
        return self._delegate.has_entity(entity_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return unwrap(other) == self._delegate

    def __hash__(self) -> int:
        return hash(self._delegate)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._delegate.id})"


def unwrap(entity: Entity) -> Entity:
    """Return the store entity behind ``entity`` (itself when not a proxy)."""

    while isinstance(entity, EntityProxy):
        entity = entity.delegate
    return entity


def make_dispatcher(
    name: str,
    function: Callable[..., object],
    method: NewEntityMethod,
) -> Callable[..., Entity]:
    """Build the proxy implementation of one resolved creation method."""

    signature = inspect.signature(function)

    def dispatch(self: EntityProxy, *args: object, **kwargs: object) -> Entity:
        try:
            bound = signature.bind(self, *args, **kwargs)
        except TypeError as exc:
            raise TypeError(f"{name}(): {exc}") from exc
        bound.apply_defaults()
        call_args = tuple(bound.arguments.values())[1:]
        created = method.invoke(self.delegate, call_args)
        return self.registry.proxy(created, method.entity_type)

    # not functools.wraps: copying __dict__ would carry __isabstractmethod__ over
    dispatch.__name__ = name
    dispatch.__qualname__ = getattr(function, "__qualname__", name)
    dispatch.__doc__ = function.__doc__
    dispatch.__signature__ = signature  # type: ignore[attr-defined]
    return dispatch


def build_proxy_class(
    interface: type[Entity],
    implementations: Mapping[str, Callable[..., Entity]],
) -> type[EntityProxy]:
    namespace: dict[str, object] = {
        "__module__": interface.__module__,
        "__qualname__": f"{interface.__qualname__}Proxy",
        **implementations,
    }
    return type(f"{interface.__name__}Proxy", (interface, EntityProxy), namespace)

"""Entity type registration.

Registering an entity type walks its declared members once, asks an ordered chain
of ``MethodResolver`` objects to compile each one, and builds a proxy class whose
methods dispatch through the compiled descriptors. Descriptors are cached per
function object, so a method inherited by several entity types is resolved once.
"""

from __future__ import annotations

import inspect
import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Generic, TypeVar

from entiproxy.domain.methods import (
    Diagnosis,
    EntityDeclarationError,
    Failed,
    NewEntityResolver,
    Resolved,
    inspect_method,
)
from entiproxy.domain.model import Entity, is_entity_type
from entiproxy.domain.proxy import EntityProxy, build_proxy_class, make_dispatcher, unwrap

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping, Sequence

    from entiproxy.domain.methods import MethodResolver, NewEntityMethod

log = logging.getLogger(__name__)

TEntity = TypeVar("TEntity", bound=Entity)


@dataclass(frozen=True)
class RegisteredEntityType(Generic[TEntity]):
    interface: type[TEntity]
    methods: Mapping[str, NewEntityMethod]
    proxy_class: type[EntityProxy]


class EntityTypeRegistry:
    """Registry of entity types and their compiled method descriptors."""

    def __init__(self, resolvers: Sequence[MethodResolver] | None = None) -> None:
        self._resolvers: tuple[MethodResolver, ...] = (
            tuple(resolvers) if resolvers is not None else (NewEntityResolver(),)
        )
        self._types: dict[type[Entity], RegisteredEntityType[Entity]] = {}
        self._descriptors: dict[Callable[..., object], NewEntityMethod] = {}
        self._pending: set[type[Entity]] = set()
        self._lock = threading.RLock()

    @property
    def resolvers(self) -> tuple[MethodResolver, ...]:
        return self._resolvers

    def register(self, interface: type[TEntity]) -> RegisteredEntityType[TEntity]:
        """Validate ``interface`` and compile its methods; idempotent."""

        if not is_entity_type(interface):
            raise TypeError(f"{interface!r} is not an Entity type")
        if interface is Entity or issubclass(interface, EntityProxy):
            raise TypeError(f"{interface.__qualname__} cannot be registered as an entity type")
        with self._lock:
            return self._register(interface)  # pyright: ignore[reportReturnType]

    def is_registered(self, interface: type[Entity]) -> bool:
        return interface in self._types

    def get(self, interface: type[Entity]) -> RegisteredEntityType[Entity] | None:
        return self._types.get(interface)

    def registered_types(self) -> tuple[type[Entity], ...]:
        return tuple(self._types)

    def descriptor_for(self, function: Callable[..., object]) -> NewEntityMethod | None:
        return self._descriptors.get(function)

    def proxy(self, entity: Entity, interface: type[TEntity]) -> TEntity:
        """Present ``entity`` as ``interface``, registering the type on first use."""

        delegate = unwrap(entity)
        if interface is Entity:
            return delegate  # pyright: ignore[reportReturnType]
        registered = self.register(interface)
        return registered.proxy_class(delegate, self)  # pyright: ignore[reportReturnType]

    # internal ---------------------------------------------------------------

    def _register(self, interface: type[Entity]) -> RegisteredEntityType[Entity]:
        registered = self._types.get(interface)
        if registered is not None:
            return registered

        self._pending.add(interface)
        try:
            compiled: dict[str, tuple[Callable[..., object], NewEntityMethod]] = {}
            for owner, name, member in _declared_members(interface):
                method = self._resolve_member(owner, name, member)
                if method is not None:
                    compiled[name] = (member, method)  # pyright: ignore[reportArgumentType]

            for _, method in compiled.values():
                target = method.entity_type
                if target is Entity or target in self._types or target in self._pending:
                    continue
                self._register(target)

            proxy_class = build_proxy_class(
                interface,
                {
                    name: make_dispatcher(name, function, method)
                    for name, (function, method) in compiled.items()
                },
            )
            registered = RegisteredEntityType(
                interface=interface,
                methods=MappingProxyType({name: method for name, (_, method) in compiled.items()}),
                proxy_class=proxy_class,
            )
        finally:
            self._pending.discard(interface)

        for function, method in compiled.values():
            self._descriptors[function] = method
        self._types[interface] = registered
        log.info(
            "Registered entity type %s with %d method(s)",
            interface.__qualname__,
            len(compiled),
        )
        return registered

    def _resolve_member(
        self,
        owner: type[Entity],
        name: str,
        member: object,
    ) -> NewEntityMethod | None:
        if not inspect.isfunction(member):
            if getattr(member, "__isabstractmethod__", False):
                raise EntityDeclarationError(
                    Diagnosis.UNRESOLVED_METHOD,
                    "abstract member is not a method any resolver can implement",
                    entity_type=owner,
                    method_name=name,
                )
            return None

        cached = self._descriptors.get(member)
        if cached is not None:
            return cached

        signature = inspect_method(member, owner=owner)
        for resolver in self._resolvers:
            resolution = resolver.resolve(signature)
            if isinstance(resolution, Failed):
                raise EntityDeclarationError.from_failure(
                    resolution,
                    entity_type=owner,
                    method_name=name,
                )
            if isinstance(resolution, Resolved):
                log.debug(
                    "Resolved %s.%s: shape=%s, id=%s",
                    owner.__qualname__,
                    name,
                    resolution.method.shape,
                    resolution.method.identifier_source,
                )
                return resolution.method

        if signature.is_abstract:
            raise EntityDeclarationError(
                Diagnosis.UNRESOLVED_METHOD,
                "abstract method carries no marker any resolver accepts",
                entity_type=owner,
                method_name=name,
            )
        return None


def _declared_members(interface: type[Entity]) -> Iterator[tuple[type[Entity], str, object]]:
    """Yield ``(owner, name, member)`` for members declared below ``Entity``."""

    seen: set[str] = set()
    for owner in interface.__mro__:
        if owner is Entity or not is_entity_type(owner) or issubclass(owner, EntityProxy):
            continue
        for name, member in vars(owner).items():
            # abstract dunders still need an implementation
            if _is_dunder(name) and not getattr(member, "__isabstractmethod__", False):
                continue
            if name in seen:
                continue
            seen.add(name)
            yield owner, name, member


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")

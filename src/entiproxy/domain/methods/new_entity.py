"""Dispatch descriptor for entity-creating methods."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final, TypeAlias
from uuid import UUID, uuid4

from entiproxy.domain.model import AttributeContainer

if TYPE_CHECKING:
    from collections.abc import Sequence

    from entiproxy.domain.model import Entity, EntityContainer

IDSupplier: TypeAlias = Callable[[], UUID]

_MASK_64: Final[int] = (1 << 64) - 1
_MIN_SIGNED_64: Final[int] = -(1 << 63)


def compose_uuid(most_sig_bits: int, least_sig_bits: int) -> UUID:
    """Build a UUID from two 64-bit halves (signed halves use their bit pattern)."""

    for half in (most_sig_bits, least_sig_bits):
        if isinstance(half, bool) or not isinstance(half, int):
            raise TypeError(f"identifier bits must be int, got {type(half).__name__}")
        if not _MIN_SIGNED_64 <= half <= _MASK_64:
            raise ValueError(f"identifier bits out of 64-bit range: {half}")
    return UUID(int=((most_sig_bits & _MASK_64) << 64) | (least_sig_bits & _MASK_64))


@dataclass(frozen=True, slots=True)
class RandomIDSupplier:
    """Produce a fresh random identifier on every call."""

    def __call__(self) -> UUID:
        return uuid4()


@dataclass(frozen=True, slots=True)
class FixedIDSupplier:
    """Produce the same identifier on every call (singleton entities)."""

    value: UUID

    @classmethod
    def from_bits(cls, most_sig_bits: int = 0, least_sig_bits: int = 0) -> FixedIDSupplier:
        return cls(compose_uuid(most_sig_bits, least_sig_bits))

    def __call__(self) -> UUID:
        return self.value


class CreationShape(StrEnum):
    """Canonical parameter lists of a creation method."""

    NO_ARG = "no_arg"
    ID = "id"
    CONTAINER = "container"
    ID_AND_CONTAINER = "id_and_container"


class IdentifierSource(StrEnum):
    PARAMETER = "parameter"
    SUPPLIER = "supplier"
    STORE_DEFAULT = "store_default"


@dataclass(frozen=True, slots=True)
class NewEntityMethod:
    """Compiled description of how one method creates an entity.

    Exactly one identifier source is active: the caller's parameter, the
    ``id_supplier``, or the store's default.
    """

    entity_type: type[Entity]
    requires_id_param: bool = False
    requires_container_param: bool = False
    id_supplier: IDSupplier | None = None

    def __post_init__(self) -> None:
        if self.requires_id_param and self.id_supplier is not None:
            raise ValueError("an identifier parameter and an id supplier are mutually exclusive")

    @property
    def parameter_count(self) -> int:
        return int(self.requires_id_param) + int(self.requires_container_param)

    @property
    def shape(self) -> CreationShape:
        if self.requires_id_param and self.requires_container_param:
            return CreationShape.ID_AND_CONTAINER
        if self.requires_id_param:
            return CreationShape.ID
        if self.requires_container_param:
            return CreationShape.CONTAINER
        return CreationShape.NO_ARG

    @property
    def identifier_source(self) -> IdentifierSource:
        if self.requires_id_param:
            return IdentifierSource.PARAMETER
        if self.id_supplier is not None:
            return IdentifierSource.SUPPLIER
        return IdentifierSource.STORE_DEFAULT

    def invoke(self, container: EntityContainer, args: Sequence[object]) -> Entity:
        """Create the entity in ``container`` from positional call arguments."""

        if len(args) != self.parameter_count:
            raise TypeError(f"expected {self.parameter_count} argument(s), got {len(args)}")

        entity_id: UUID | None = None
        attributes: AttributeContainer | None = None
        if self.requires_id_param:
            candidate = args[0]
            if not isinstance(candidate, UUID):
                raise TypeError(f"entity id must be a UUID, got {type(candidate).__name__}")
            entity_id = candidate
        elif self.id_supplier is not None:
            entity_id = self.id_supplier()
        if self.requires_container_param:
            candidate = args[-1]
            if not isinstance(candidate, AttributeContainer):
                raise TypeError(
                    f"attributes must be an AttributeContainer, got {type(candidate).__name__}"
                )
            attributes = candidate

        return container.new_entity(entity_id, attributes)

"""Resolution of ``new_entity`` methods into ``NewEntityMethod`` descriptors.

Stages, each of which either narrows the method toward one canonical shape or
fails with a ``Diagnosis``:
- signature validation (marker, return type, abstractness, parameter count)
- identifier strategy (``entity_id`` marker -> optional id supplier)
- parameter shape (no-arg, id, container, id + container)
- descriptor assembly

The four accepted shapes, for a ``Ghost`` entity type::

    @new_entity
    @abstractmethod
    def new_ghost(self) -> Ghost: ...

    @new_entity
    @abstractmethod
    def new_ghost(self, ghost_id: UUID) -> Ghost: ...

    @new_entity
    @abstractmethod
    def new_ghost(self, attributes: AttributeContainer) -> Ghost: ...

    @new_entity
    @abstractmethod
    def new_ghost(self, ghost_id: UUID, attributes: AttributeContainer) -> Ghost: ...

Shapes without an id parameter may add ``@entity_id(random=True)`` or
``@entity_id(most_sig_bits=..., least_sig_bits=...)``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final
from uuid import UUID

from entiproxy.domain.methods.contracts import (
    NOT_APPLICABLE,
    Diagnosis,
    Failed,
    Resolved,
)
from entiproxy.domain.methods.new_entity import (
    FixedIDSupplier,
    NewEntityMethod,
    RandomIDSupplier,
)
from entiproxy.domain.model import AttributeContainer, is_entity_type

if TYPE_CHECKING:
    from entiproxy.domain.methods.contracts import MethodResolution
    from entiproxy.domain.methods.markers import IdentifierMarker
    from entiproxy.domain.methods.new_entity import IDSupplier
    from entiproxy.domain.methods.signature import MethodSignature
    from entiproxy.domain.model import Entity

MAX_PARAMETERS: Final[int] = 2


class NewEntityResolver:
    """Resolve methods marked with ``new_entity``; stateless and reusable."""

    def resolve(self, signature: MethodSignature) -> MethodResolution:
        if not signature.has_creation_marker:
            return NOT_APPLICABLE

        failure = _validate_signature(signature)
        if failure is not None:
            return failure

        supplier = resolve_id_supplier(signature.identifier_marker)
        if isinstance(supplier, Failed):
            return supplier

        shape = _classify_parameters(signature.parameter_types, id_supplier=supplier)
        if isinstance(shape, Failed):
            return shape
        requires_id_param, requires_container_param = shape

        return Resolved(
            _assemble(
                signature.return_type,  # pyright: ignore[reportArgumentType]
                requires_id_param=requires_id_param,
                requires_container_param=requires_container_param,
                id_supplier=supplier,
            )
        )


def _validate_signature(signature: MethodSignature) -> Failed | None:
    if signature.return_type is None:
        return Failed(Diagnosis.MISSING_RETURN_TYPE, "creation method must declare a return type")
    if not signature.is_abstract:
        return Failed(
            Diagnosis.CONCRETE_METHOD_NOT_ALLOWED,
            "creation method must be abstract (declare it with @abstractmethod)",
        )
    if signature.parameter_count > MAX_PARAMETERS:
        return Failed(
            Diagnosis.TOO_MANY_PARAMETERS,
            f"cannot have over {MAX_PARAMETERS} params, got {signature.parameter_count}",
        )
    if not is_entity_type(signature.return_type):
        return Failed(
            Diagnosis.INVALID_RETURN_TYPE,
            f"return type must be Entity or a subtype, got {signature.return_type!r}",
        )
    return None


def resolve_id_supplier(marker: IdentifierMarker | None) -> IDSupplier | Failed | None:
    """Derive the id supplier requested by an ``entity_id`` marker, if any."""

    if marker is None:
        return None
    if marker.random and marker.has_fixed_bits:
        return Failed(
            Diagnosis.MALFORMED_IDENTIFIER_MARKER,
            "entity_id cannot combine random=True with fixed identifier bits",
        )
    if marker.random:
        return RandomIDSupplier()
    try:
        return FixedIDSupplier.from_bits(
            0 if marker.most_sig_bits is None else marker.most_sig_bits,
            0 if marker.least_sig_bits is None else marker.least_sig_bits,
        )
    except (TypeError, ValueError) as exc:
        return Failed(Diagnosis.MALFORMED_IDENTIFIER_MARKER, f"invalid entity_id bits: {exc}")


def _classify_parameters(
    parameter_types: tuple[object, ...],
    *,
    id_supplier: IDSupplier | None,
) -> tuple[bool, bool] | Failed:
    """Return ``(requires_id_param, requires_container_param)`` for the parameter list."""

    count = len(parameter_types)
    if count >= 1 and parameter_types[0] is UUID and id_supplier is not None:
        return Failed(
            Diagnosis.AMBIGUOUS_IDENTIFIER_SOURCE,
            "cannot have an entity_id marker and an id param",
        )

    if count == 0:
        return False, False
    if count == 1:
        (only,) = parameter_types
        if only is UUID:
            return True, False
        if only is AttributeContainer:
            return False, True
        return Failed(
            Diagnosis.INVALID_SINGLE_PARAMETER_TYPE,
            f"to have one param it must be UUID or AttributeContainer, got {only!r}",
        )
    if parameter_types[0] is UUID and parameter_types[1] is AttributeContainer:
        return True, True
    return Failed(
        Diagnosis.INVALID_TWO_PARAMETER_SHAPE,
        "to have two params they must be (UUID, AttributeContainer), "
        f"got ({parameter_types[0]!r}, {parameter_types[1]!r})",
    )


def _assemble(
    entity_type: type[Entity],
    *,
    requires_id_param: bool,
    requires_container_param: bool,
    id_supplier: IDSupplier | None,
) -> NewEntityMethod:
    return NewEntityMethod(
        entity_type=entity_type,
        requires_id_param=requires_id_param,
        requires_container_param=requires_container_param,
        # never both an id parameter and a supplier
        id_supplier=None if requires_id_param else id_supplier,
    )

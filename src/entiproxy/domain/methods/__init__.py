"""Method markers, signature inspection and method resolution."""

from __future__ import annotations

from .contracts import (
    NOT_APPLICABLE,
    Diagnosis,
    EntityDeclarationError,
    Failed,
    MethodResolution,
    MethodResolver,
    NotApplicable,
    Resolved,
    ResolutionStatus,
)
from .new_entity import (
    CreationShape,
    FixedIDSupplier,
    IdentifierSource,
    IDSupplier,
    NewEntityMethod,
    RandomIDSupplier,
    compose_uuid,
)
from .resolve import NewEntityResolver, resolve_id_supplier
from .signature import MethodSignature, inspect_method

# imported after the ``new_entity`` submodule so the marker function keeps the name
from .markers import IdentifierMarker, entity_id, new_entity

__all__ = [
    "NOT_APPLICABLE",
    "CreationShape",
    "Diagnosis",
    "EntityDeclarationError",
    "Failed",
    "FixedIDSupplier",
    "IDSupplier",
    "IdentifierMarker",
    "IdentifierSource",
    "MethodResolution",
    "MethodResolver",
    "MethodSignature",
    "NewEntityMethod",
    "NewEntityResolver",
    "NotApplicable",
    "RandomIDSupplier",
    "ResolutionStatus",
    "Resolved",
    "compose_uuid",
    "entity_id",
    "inspect_method",
    "new_entity",
    "resolve_id_supplier",
]

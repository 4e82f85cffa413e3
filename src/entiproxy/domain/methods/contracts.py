"""Resolution outcomes shared by method resolvers and the registry.

A resolver answers one of three things for a method:
- ``NotApplicable``: the method does not carry the resolver's marker
- ``Resolved``: the method compiled into a dispatch descriptor
- ``Failed``: the marker is present but the declaration is broken
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Literal, Protocol, TypeAlias, runtime_checkable

if TYPE_CHECKING:
    from entiproxy.domain.methods.new_entity import NewEntityMethod
    from entiproxy.domain.methods.signature import MethodSignature


class Diagnosis(StrEnum):
    """Why a method declaration was rejected."""

    MISSING_RETURN_TYPE = "missing_return_type"
    CONCRETE_METHOD_NOT_ALLOWED = "concrete_method_not_allowed"
    TOO_MANY_PARAMETERS = "too_many_parameters"
    INVALID_RETURN_TYPE = "invalid_return_type"
    MALFORMED_IDENTIFIER_MARKER = "malformed_identifier_marker"
    AMBIGUOUS_IDENTIFIER_SOURCE = "ambiguous_identifier_source"
    INVALID_SINGLE_PARAMETER_TYPE = "invalid_single_parameter_type"
    INVALID_TWO_PARAMETER_SHAPE = "invalid_two_parameter_shape"
    # raised by the registry rather than a resolver
    UNRESOLVED_METHOD = "unresolved_method"
    UNRESOLVABLE_ANNOTATION = "unresolvable_annotation"


class ResolutionStatus(StrEnum):
    NOT_APPLICABLE = "not_applicable"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class NotApplicable:
    """The method lacks this resolver's marker; try the next resolver."""

    status: Literal[ResolutionStatus.NOT_APPLICABLE] = ResolutionStatus.NOT_APPLICABLE


@dataclass(frozen=True, slots=True)
class Resolved:
    method: NewEntityMethod
    status: Literal[ResolutionStatus.RESOLVED] = ResolutionStatus.RESOLVED


@dataclass(frozen=True, slots=True)
class Failed:
    diagnosis: Diagnosis
    message: str
    status: Literal[ResolutionStatus.FAILED] = ResolutionStatus.FAILED


MethodResolution: TypeAlias = "NotApplicable | Resolved | Failed"

NOT_APPLICABLE = NotApplicable()


@runtime_checkable
class MethodResolver(Protocol):
    """One link of the registry's chain of responsibility."""

    def resolve(self, signature: MethodSignature) -> MethodResolution: ...


class EntityDeclarationError(ValueError):
    """Raised when an entity type declares a method that cannot be implemented."""

    def __init__(
        self,
        diagnosis: Diagnosis,
        message: str,
        *,
        entity_type: type | None = None,
        method_name: str | None = None,
    ) -> None:
        location = ".".join(
            part
            for part in (
                entity_type.__qualname__ if entity_type is not None else None,
                method_name,
            )
            if part
        )
        super().__init__(f"{location}: {message}" if location else message)
        self.diagnosis = diagnosis
        self.entity_type = entity_type
        self.method_name = method_name

    @classmethod
    def from_failure(
        cls,
        failure: Failed,
        *,
        entity_type: type | None = None,
        method_name: str | None = None,
    ) -> EntityDeclarationError:
        return cls(
            failure.diagnosis,
            failure.message,
            entity_type=entity_type,
            method_name=method_name,
        )

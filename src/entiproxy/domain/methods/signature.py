"""Structural method signatures.

``inspect_method`` reads a declared interface function once (annotations, parameter
list, abstractness, markers) into a ``MethodSignature``; resolvers only ever see
the signature value.
"""

from __future__ import annotations

import inspect
import typing
from dataclasses import dataclass
from types import NoneType
from typing import TYPE_CHECKING, Any

from entiproxy.domain.methods.contracts import Diagnosis, EntityDeclarationError
from entiproxy.domain.methods.markers import has_new_entity_marker, identifier_marker_of

if TYPE_CHECKING:
    from collections.abc import Callable

    from entiproxy.domain.methods.markers import IdentifierMarker


@dataclass(frozen=True, slots=True)
class MethodSignature:
    """What a resolver needs to know about one declared method.

    ``return_type`` is ``None`` when the method returns nothing (no annotation or
    ``-> None``). ``parameter_types`` excludes the receiver.
    """

    name: str
    return_type: object | None
    parameter_types: tuple[object, ...] = ()
    is_abstract: bool = True
    has_creation_marker: bool = False
    identifier_marker: IdentifierMarker | None = None

    @property
    def parameter_count(self) -> int:
        return len(self.parameter_types)


def inspect_method(function: Callable[..., object], *, owner: type | None = None) -> MethodSignature:
    """Extract the ``MethodSignature`` of a function declared on an entity type."""

    name = getattr(function, "__name__", repr(function))
    localns = {owner.__name__: owner} if owner is not None else None
    try:
        hints = typing.get_type_hints(function, localns=localns)
    except (NameError, TypeError, AttributeError) as exc:
        raise EntityDeclarationError(
            Diagnosis.UNRESOLVABLE_ANNOTATION,
            f"cannot evaluate annotations: {exc}",
            entity_type=owner,
            method_name=name,
        ) from exc

    parameters = list(inspect.signature(function).parameters.values())[1:]
    parameter_types = tuple(_parameter_type(parameter, hints) for parameter in parameters)

    return_type = hints.get("return")
    if return_type is NoneType:
        return_type = None

    return MethodSignature(
        name=name,
        return_type=return_type,
        parameter_types=parameter_types,
        is_abstract=bool(getattr(function, "__isabstractmethod__", False)),
        has_creation_marker=has_new_entity_marker(function),
        identifier_marker=identifier_marker_of(function),
    )


def _parameter_type(parameter: inspect.Parameter, hints: dict[str, Any]) -> object:
    hint = hints.get(parameter.name, Any)
    # the receiving types of variadic parameters never match a single value
    if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
        return tuple[hint, ...]
    if parameter.kind is inspect.Parameter.VAR_KEYWORD:
        return dict[str, hint]
    return hint

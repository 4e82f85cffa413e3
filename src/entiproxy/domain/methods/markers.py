"""Method markers declaring intended entity behaviour.

Usage::

    class Mansion(Entity):
        @new_entity
        @abstractmethod
        def new_ghost(self) -> Ghost: ...

        @entity_id(most_sig_bits=0, least_sig_bits=1)
        @new_entity
        @abstractmethod
        def new_caretaker(self, attributes: AttributeContainer) -> Caretaker: ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, TypeVar

from entiproxy.domain.methods.contracts import Diagnosis, EntityDeclarationError

if TYPE_CHECKING:
    from collections.abc import Callable

NEW_ENTITY_MARKER: Final[str] = "__entiproxy_new_entity__"
ENTITY_ID_MARKER: Final[str] = "__entiproxy_entity_id__"

F = TypeVar("F")


@dataclass(frozen=True, slots=True)
class IdentifierMarker:
    """How a creation method without an identifier parameter obtains one.

    ``random`` requests a fresh identifier per call; the fixed halves compose a
    constant identifier (an unset half is 0).
    """

    random: bool = False
    most_sig_bits: int | None = None
    least_sig_bits: int | None = None

    @property
    def has_fixed_bits(self) -> bool:
        return self.most_sig_bits is not None or self.least_sig_bits is not None


def new_entity(function: F) -> F:
    """Mark an abstract method as creating a child entity of its return type."""

    setattr(function, NEW_ENTITY_MARKER, True)
    return function


def entity_id(
    *,
    random: bool = False,
    most_sig_bits: int | None = None,
    least_sig_bits: int | None = None,
) -> Callable[[F], F]:
    """Declare the identifier strategy of a creation method."""

    marker = IdentifierMarker(
        random=random,
        most_sig_bits=most_sig_bits,
        least_sig_bits=least_sig_bits,
    )

    def decorate(function: F) -> F:
        if getattr(function, ENTITY_ID_MARKER, None) is not None:
            raise EntityDeclarationError(
                Diagnosis.MALFORMED_IDENTIFIER_MARKER,
                "cannot declare more than one entity_id marker",
                method_name=getattr(function, "__name__", None),
            )
        setattr(function, ENTITY_ID_MARKER, marker)
        return function

    return decorate


def has_new_entity_marker(function: object) -> bool:
    return getattr(function, NEW_ENTITY_MARKER, False) is True


def identifier_marker_of(function: object) -> IdentifierMarker | None:
    marker = getattr(function, ENTITY_ID_MARKER, None)
    return marker if isinstance(marker, IdentifierMarker) else None

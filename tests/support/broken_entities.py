"""Entity types with invalid declarations."""

from __future__ import annotations

from abc import abstractmethod
from uuid import UUID  # noqa: TC003 (evaluated when the type is registered)

from entiproxy.domain.methods import entity_id, new_entity
from entiproxy.domain.model import Entity
from tests.support.entities import Ghost


class AmbiguousMansion(Entity):
    @entity_id(random=True)
    @new_entity
    @abstractmethod
    def new_ghost(self, ghost_id: UUID) -> Ghost: ...


class SilentMansion(Entity):
    @abstractmethod
    def haunt(self) -> None: ...


class Graveyard(Entity):
    """Valid on its own, but creates a type that cannot be registered."""

    @new_entity
    @abstractmethod
    def new_mansion(self) -> AmbiguousMansion: ...

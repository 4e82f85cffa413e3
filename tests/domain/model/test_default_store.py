from __future__ import annotations

from uuid import UUID, uuid4

import pytest

from entiproxy.domain.model import (
    DefaultAttributeContainer,
    DefaultEntity,
    DefaultEntityContainer,
    DuplicateEntityError,
    Entity,
    is_entity_type,
)


def test_new_entity_assigns_random_ids(root: DefaultEntityContainer) -> None:
    first = root.new_entity()
    second = root.new_entity()

    assert isinstance(first.id, UUID)
    assert first.id != second.id
    assert root.entity_ids() == frozenset({first.id, second.id})
    assert len(root) == 2


def test_new_entity_with_explicit_id(root: DefaultEntityContainer) -> None:
    entity_id = uuid4()

    entity = root.new_entity(entity_id)

    assert entity.id == entity_id
    assert root.get_entity(entity_id) is entity
    assert entity.parent is root


def test_new_entity_rejects_duplicate_ids(root: DefaultEntityContainer) -> None:
    entity_id = uuid4()
    root.new_entity(entity_id)

    with pytest.raises(DuplicateEntityError) as excinfo:
        root.new_entity(entity_id)

    assert excinfo.value.entity_id == entity_id
    assert len(root) == 1


def test_new_entity_rejects_non_uuid_ids(root: DefaultEntityContainer) -> None:
    with pytest.raises(TypeError, match="UUID"):
        root.new_entity(str(uuid4()))  # type: ignore[arg-type]


def test_ids_are_unique_per_container_only(root: DefaultEntityContainer) -> None:
    entity_id = uuid4()
    parent = root.new_entity(entity_id)

    child = parent.new_entity(entity_id)

    assert child.id == parent.id
    assert child is not parent


def test_seeded_attributes_are_copied(root: DefaultEntityContainer) -> None:
    seed = DefaultAttributeContainer({"name": "Casper", "age": 300})

    entity = root.new_entity(attributes=seed)
    seed.set_attribute("name", "Slimer")

    assert entity.attributes.as_dict() == {"age": 300, "name": "Casper"}


def test_kill_entity_detaches_it(root: DefaultEntityContainer) -> None:
    entity = root.new_entity()

    assert root.kill_entity(entity.id) is True
    assert root.kill_entity(entity.id) is False
    assert entity.is_alive is False
    assert root.get_entity(entity.id) is None
    assert not root.has_entity(entity.id)


def test_entities_are_containers(root: DefaultEntityContainer) -> None:
    parent = root.new_entity()

    child = parent.new_entity()

    assert list(parent) == [child]
    assert parent.has_entity(child.id)
    assert not root.has_entity(child.id)
    assert repr(parent) == f"DefaultEntity(id={parent.id}, children=1)"


def test_attribute_container_operations() -> None:
    attributes = DefaultAttributeContainer()

    assert attributes.set_attribute("name", "Casper") is None
    assert attributes.set_attribute("name", "Slimer") == "Casper"
    assert attributes.get_attribute("missing", "fallback") == "fallback"
    assert attributes.has_attribute("name")
    assert attributes.remove_attribute("name") == "Slimer"
    assert attributes.remove_attribute("name") is None
    assert len(attributes) == 0


@pytest.mark.parametrize("name", ["", "   ", 7])
def test_attribute_names_must_be_non_empty_strings(name: object) -> None:
    with pytest.raises(ValueError, match="non-empty"):
        DefaultAttributeContainer().set_attribute(name, "value")  # type: ignore[arg-type]


def test_is_entity_type() -> None:
    assert is_entity_type(Entity)
    assert is_entity_type(DefaultEntity)
    assert not is_entity_type(DefaultEntityContainer)
    assert not is_entity_type(DefaultEntity(uuid4()))


def test_kill_entity_detaches_the_whole_subtree(root: DefaultEntityContainer) -> None:
    parent = root.new_entity()
    child = parent.new_entity()
    grandchild = child.new_entity()

    root.kill_entity(parent.id)

    assert parent.is_alive is False
    assert child.is_alive is False
    assert grandchild.is_alive is False

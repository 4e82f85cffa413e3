from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

import pytest

from entiproxy import app
from entiproxy.domain.methods import CreationShape, IdentifierSource
from entiproxy.domain.model import DefaultAttributeContainer
from entiproxy.ui import cli
from tests.support.entities import Ghost, Mansion

if TYPE_CHECKING:
    from collections.abc import Callable

    from entiproxy.adapters.sqlalchemy import SqlAlchemyUnitOfWork
    from entiproxy.domain.registry import EntityTypeRegistry


def test_describe_logs_each_creation_method(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="entiproxy")

    cli.main(["describe", "tests.support.entities:Mansion"])

    assert "Mansion: 6 creation method(s)" in caplog.text
    assert "new_ghost_with_id -> Ghost: shape=id, id=parameter" in caplog.text
    assert (
        "new_caretaker -> Caretaker: shape=no_arg, id=supplier "
        "(00000000-0000-0000-0000-000000000001)"
    ) in caplog.text


def test_describe_reports_broken_declarations(caplog: pytest.LogCaptureFixture) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["describe", "tests.support.broken_entities:AmbiguousMansion"])

    assert excinfo.value.code == 1
    assert "ambiguous_identifier_source" in caplog.text
    assert "AmbiguousMansion.new_ghost" in caplog.text


@pytest.mark.parametrize(
    "target",
    [
        "tests.support.entities",
        "tests.support.entities:Nope",
        "tests.support.does_not_exist:Mansion",
        "tests.support.entities:AttributeContainer",
    ],
)
def test_describe_rejects_bad_targets(target: str) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["describe", target])

    assert excinfo.value.code == 1


def test_entities_lists_root_ids(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    captured: dict[str, object] = {}
    stored = (UUID(int=1), UUID(int=2))

    def fake_list(**kwargs: object) -> tuple[UUID, ...]:
        captured.update(kwargs)
        return stored

    monkeypatch.setattr(cli, "list_entity_ids", fake_list)
    caplog.set_level(logging.INFO, logger="entiproxy")

    cli.main(["entities"])

    assert captured["parent_id"] is None
    assert "2 entities" in caplog.text
    assert str(UUID(int=2)) in caplog.text


def test_entities_with_parent(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}
    parent_id = uuid4()

    def fake_list(**kwargs: object) -> tuple[UUID, ...]:
        captured.update(kwargs)
        return ()

    monkeypatch.setattr(cli, "list_entity_ids", fake_list)

    cli.main(["entities", "--parent", str(parent_id)])

    assert captured["parent_id"] == parent_id


def test_entities_invalid_parent(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_list(**_: object) -> tuple[UUID, ...]:
        raise AssertionError("should not be called")

    monkeypatch.setattr(cli, "list_entity_ids", fake_list)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["entities", "--parent", "not-a-uuid"])

    assert excinfo.value.code == 2


def test_missing_command_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])

    assert excinfo.value.code == 2


def test_describe_entity_type_summarises_methods(registry: EntityTypeRegistry) -> None:
    description = app.describe_entity_type(Mansion, registry=registry)

    assert description.entity_type == "Mansion"
    assert [method.name for method in description.methods] == sorted(
        method.name for method in description.methods
    )
    by_name = {method.name: method for method in description.methods}
    assert by_name["new_ghost_with_id_and_attributes"].shape is CreationShape.ID_AND_CONTAINER
    assert by_name["new_random_ghost"].identifier_source is IdentifierSource.SUPPLIER
    assert by_name["new_random_ghost"].fixed_id is None
    assert by_name["new_caretaker"].fixed_id == UUID(int=1)
    assert by_name["new_ghost"].identifier_source is IdentifierSource.STORE_DEFAULT
    assert registry.is_registered(Mansion)


def test_load_entity_type_from_target() -> None:
    assert app.load_entity_type("tests.support.entities:Ghost") is Ghost
    with pytest.raises(ValueError, match="MODULE:CLASS"):
        app.load_entity_type(":Ghost")


def test_list_entity_ids_reads_the_store(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
    registry: EntityTypeRegistry,
) -> None:
    with sqlite_unit_of_work() as uow:
        mansion = registry.proxy(
            uow.entities.new_entity(attributes=DefaultAttributeContainer({"name": "Hill House"})),
            Mansion,
        )
        ghost = mansion.new_ghost()
        caretaker = mansion.new_caretaker()
        uow.commit()
        mansion_id = mansion.id
        child_ids = {ghost.id, caretaker.id}

    assert app.list_entity_ids(unit_of_work_factory=sqlite_unit_of_work) == (mansion_id,)
    listed = app.list_entity_ids(parent_id=mansion_id, unit_of_work_factory=sqlite_unit_of_work)
    assert set(listed) == child_ids
    assert list(listed) == sorted(child_ids, key=str)

    with pytest.raises(ValueError, match="No entity"):
        app.list_entity_ids(parent_id=uuid4(), unit_of_work_factory=sqlite_unit_of_work)

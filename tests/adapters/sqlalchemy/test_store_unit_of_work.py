from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from entiproxy.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from entiproxy.domain.model import DefaultAttributeContainer

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b
    assert is_started()


def test_startup_reads_database_uri_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENTIPROXY_DATABASE_URI", "sqlite+pysqlite:///:memory:")

    startup()

    engine = configured_engine()
    assert engine is not None
    assert engine.url.render_as_string() == "sqlite+pysqlite:///:memory:"


def test_unit_of_work_persists_committed_entities(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyUnitOfWork() as uow:
        parent = uow.entities.new_entity(
            attributes=DefaultAttributeContainer({"name": "Hill House"}),
        )
        child = parent.new_entity()
        uow.commit()
        parent_id, child_id = parent.id, child.id

    with SqlAlchemyUnitOfWork() as uow:
        assert uow.entities.entity_ids() == frozenset({parent_id})
        stored = uow.entities.find_entity(child_id)
        assert stored is not None
        reloaded_parent = uow.entities.get_entity(parent_id)
        assert reloaded_parent is not None
        assert reloaded_parent.attributes.get_attribute("name") == "Hill House"


def test_unit_of_work_discards_uncommitted_changes(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyUnitOfWork() as uow:
        uow.entities.new_entity()

    with SqlAlchemyUnitOfWork() as uow:
        assert uow.entities.entity_ids() == frozenset()


def test_unit_of_work_rolls_back_on_error(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(RuntimeError, match="boom"), SqlAlchemyUnitOfWork() as uow:
        uow.entities.new_entity()
        raise RuntimeError("boom")

    with SqlAlchemyUnitOfWork() as uow:
        assert len(uow.entities) == 0


def test_unit_of_work_session_is_scoped_to_the_block(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.entities

    with uow:
        assert uow.session is not None

    with pytest.raises(StartupError):
        _ = uow.session

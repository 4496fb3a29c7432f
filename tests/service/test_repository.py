"""
Tests for the scenario repositories and their factory.
"""

import pytest

from valuelab_service.repository import (
    InMemoryScenarioRepository,
    RepositoryFactory,
    ScenarioNotFound,
    ScenarioRepository,
)
from valuelab_service.repository.base import validate_new_scenario


@pytest.fixture
def repo():
    return InMemoryScenarioRepository()


def test_repository_interface():
    with pytest.raises(TypeError):

        class IncompleteRepository(ScenarioRepository):
            pass

        IncompleteRepository()


def test_factory_returns_singleton():
    a = RepositoryFactory.get_repository("memory")
    b = RepositoryFactory.get_repository()
    assert isinstance(a, InMemoryScenarioRepository)
    assert a is b


def test_factory_invalid_repository():
    with pytest.raises(ValueError):
        RepositoryFactory.get_repository("postgres")


def test_validate_new_scenario():
    fields = validate_new_scenario({"name": "x", "kind": "lbo", "inputs": {"a": 1}, "currency": None})
    assert fields == {"name": "x", "kind": "LBO", "currency": "USD", "inputs": {"a": 1}}

    with pytest.raises(ValueError, match="required"):
        validate_new_scenario({"name": "x", "kind": "DCF", "inputs": {}})
    with pytest.raises(ValueError, match="JSON object"):
        validate_new_scenario({"name": "x", "kind": "DCF", "inputs": [1, 2]})


def test_save_and_get(repo):
    scenario_id = repo.save({"name": "Base", "kind": "DCF", "currency": "EUR", "inputs": {"revenue0": 10}})
    record = repo.get(scenario_id)

    assert record["id"] == scenario_id
    assert record["currency"] == "EUR"
    assert record["inputs"] == {"revenue0": 10}


def test_returned_records_are_copies(repo):
    scenario_id = repo.save({"name": "Base", "kind": "DCF", "inputs": {"revenue0": 10}})
    repo.get(scenario_id)["inputs"]["revenue0"] = 99
    assert repo.get(scenario_id)["inputs"] == {"revenue0": 10}


def test_list_orders_by_last_write_and_limits(repo):
    a = repo.save({"name": "a", "kind": "DCF", "inputs": {"x": 1}})
    b = repo.save({"name": "b", "kind": "DCF", "inputs": {"x": 1}})
    c = repo.save({"name": "c", "kind": "RISK", "inputs": {"x": 1}})

    assert [r["id"] for r in repo.list()] == [c, b, a]

    repo.update(a, {"name": "a2"})
    assert [r["id"] for r in repo.list()] == [a, c, b]
    assert [r["id"] for r in repo.list(limit=2)] == [a, c]
    assert [r["id"] for r in repo.list(kind="dcf")] == [a, b]


def test_update_ignores_none_and_normalizes_kind(repo):
    scenario_id = repo.save({"name": "a", "kind": "DCF", "inputs": {"x": 1}})
    updated = repo.update(scenario_id, {"name": None, "kind": "lbo", "inputs": {"y": 2}})

    assert updated["name"] == "a"
    assert updated["kind"] == "LBO"
    assert updated["inputs"] == {"y": 2}


def test_missing_records(repo):
    with pytest.raises(ScenarioNotFound):
        repo.get("nope")
    with pytest.raises(ScenarioNotFound):
        repo.update("nope", {"name": "x"})
    with pytest.raises(ScenarioNotFound):
        repo.delete("nope")


def test_delete(repo):
    scenario_id = repo.save({"name": "a", "kind": "DCF", "inputs": {"x": 1}})
    repo.delete(scenario_id)
    assert repo.list() == []

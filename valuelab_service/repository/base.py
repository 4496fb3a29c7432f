from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type

SCENARIO_KINDS = ("DCF", "LBO", "RISK")
DEFAULT_CURRENCY = "USD"


class ScenarioNotFound(LookupError):
    def __init__(self, scenario_id: str):
        self.scenario_id = scenario_id
        super().__init__(f"Scenario '{scenario_id}' not found.")


class ScenarioRepository(ABC):
    """
    Abstract store of named assumption sets.

    Records are plain dicts:
    ``{id, name, kind, currency, inputs, created_at, updated_at}`` where
    ``inputs`` is an opaque JSON-compatible object.
    """

    @abstractmethod
    def save(self, record: Dict[str, Any]) -> str:
        """Create a record and return its id."""
        pass

    @abstractmethod
    def list(self, kind: Optional[str] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Records ordered by most recently updated first."""
        pass

    @abstractmethod
    def get(self, scenario_id: str) -> Dict[str, Any]:
        """Raises ScenarioNotFound."""
        pass

    @abstractmethod
    def update(self, scenario_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        """Apply only the fields present in ``patch``. Raises ScenarioNotFound."""
        pass

    @abstractmethod
    def delete(self, scenario_id: str) -> None:
        """Raises ScenarioNotFound."""
        pass


def validate_new_scenario(record: Dict[str, Any]) -> Dict[str, Any]:
    """Required fields for creation, normalized. Raises ValueError."""
    name = record.get("name")
    kind = record.get("kind")
    inputs = record.get("inputs")
    if not name or not kind or not inputs:
        raise ValueError("name, kind, inputs are required")
    if not isinstance(inputs, dict):
        raise ValueError("inputs must be a JSON object")
    return {
        "name": str(name),
        "kind": str(kind).upper(),
        "currency": str(record.get("currency") or DEFAULT_CURRENCY),
        "inputs": inputs,
    }


class RepositoryFactory:
    """Simple factory to manage scenario repositories (Singleton Pattern)."""

    _repository_classes: Dict[str, Type[ScenarioRepository]] = {}
    _instances: Dict[str, ScenarioRepository] = {}

    @classmethod
    def register(cls, name: str, repository_cls: Type[ScenarioRepository]) -> None:
        cls._repository_classes[name] = repository_cls

    @classmethod
    def get_repository(cls, name: str = "memory") -> ScenarioRepository:
        if name in cls._instances:
            return cls._instances[name]

        repository_cls = cls._repository_classes.get(name)
        if not repository_cls:
            raise ValueError(f"Repository '{name}' not found.")

        instance = repository_cls()
        cls._instances[name] = instance
        return instance

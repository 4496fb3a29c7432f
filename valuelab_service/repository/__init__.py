from valuelab_service.repository.base import (
    SCENARIO_KINDS,
    RepositoryFactory,
    ScenarioNotFound,
    ScenarioRepository,
)
from valuelab_service.repository.memory import InMemoryScenarioRepository

__all__ = [
    "SCENARIO_KINDS",
    "InMemoryScenarioRepository",
    "RepositoryFactory",
    "ScenarioNotFound",
    "ScenarioRepository",
]

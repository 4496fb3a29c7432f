import copy
import datetime
import itertools
import threading
import uuid
from typing import Any, Dict, List, Optional

from valuelab_service import config

from .base import RepositoryFactory, ScenarioNotFound, ScenarioRepository, validate_new_scenario

UPDATABLE_FIELDS = ("name", "kind", "currency", "inputs")


class InMemoryScenarioRepository(ScenarioRepository):
    """Process-local scenario store. Contents are lost on restart."""

    def __init__(self):
        self._records: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()
        # id -> write sequence; list() orders by it, newest write first
        self._touched: Dict[str, int] = {}
        self._seq = itertools.count()

    def save(self, record: Dict[str, Any]) -> str:
        fields = validate_new_scenario(record)
        now = _now()
        scenario_id = uuid.uuid4().hex
        with self._lock:
            self._records[scenario_id] = {
                "id": scenario_id,
                **fields,
                "created_at": now,
                "updated_at": now,
            }
            self._touched[scenario_id] = next(self._seq)
        return scenario_id

    def list(self, kind: Optional[str] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        if limit is None:
            limit = config.SCENARIO_LIST_LIMIT
        with self._lock:
            items = list(self._records.values())
            touched = dict(self._touched)
        if kind:
            items = [r for r in items if r["kind"].upper() == kind.upper()]
        items.sort(key=lambda r: touched[r["id"]], reverse=True)
        return [copy.deepcopy(r) for r in items[:limit]]

    def get(self, scenario_id: str) -> Dict[str, Any]:
        with self._lock:
            record = self._records.get(scenario_id)
            if record is None:
                raise ScenarioNotFound(scenario_id)
            return copy.deepcopy(record)

    def update(self, scenario_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            record = self._records.get(scenario_id)
            if record is None:
                raise ScenarioNotFound(scenario_id)
            updated = dict(record)
            for field in UPDATABLE_FIELDS:
                if patch.get(field) is not None:
                    updated[field] = patch[field] if field == "inputs" else str(patch[field])
            updated["kind"] = updated["kind"].upper()
            updated["updated_at"] = _now()
            self._records[scenario_id] = updated
            self._touched[scenario_id] = next(self._seq)
            return copy.deepcopy(updated)

    def delete(self, scenario_id: str) -> None:
        with self._lock:
            if self._records.pop(scenario_id, None) is None:
                raise ScenarioNotFound(scenario_id)
            self._touched.pop(scenario_id, None)


def _now() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat(timespec="microseconds")


RepositoryFactory.register("memory", InMemoryScenarioRepository)

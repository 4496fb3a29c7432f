"""
Scenario Service
================

CRUD over the scenario repository, plus running a stored scenario through
the engine that matches its ``kind``.
"""

import logging
from typing import Any, Dict, List, Optional

from valuelab_service.repository.base import SCENARIO_KINDS, ScenarioRepository
from valuelab_service.services.valuation import ValuationService

logger = logging.getLogger(__name__)


class ScenarioService:
    def __init__(self, repository: ScenarioRepository, valuation: Optional[ValuationService] = None):
        self.repository = repository
        self.valuation = valuation or ValuationService()

    def create(self, record: Dict[str, Any]) -> Dict[str, Any]:
        scenario_id = self.repository.save(record)
        logger.info(f"Saved scenario {scenario_id} ({record.get('kind')})")
        return self.repository.get(scenario_id)

    def list(self, kind: Optional[str] = None) -> List[Dict[str, Any]]:
        return self.repository.list(kind=kind)

    def get(self, scenario_id: str) -> Dict[str, Any]:
        return self.repository.get(scenario_id)

    def update(self, scenario_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        return self.repository.update(scenario_id, patch)

    def delete(self, scenario_id: str) -> None:
        self.repository.delete(scenario_id)

    def run(self, scenario_id: str) -> Dict[str, Any]:
        """Evaluate the stored inputs. Raises ScenarioNotFound, ValueError."""
        scenario = self.repository.get(scenario_id)
        kind = scenario["kind"].upper()
        inputs = scenario["inputs"]

        if kind == "DCF":
            result = self.valuation.calculate_dcf(inputs)
        elif kind == "LBO":
            result = self.valuation.calculate_lbo(inputs)
        elif kind == "RISK":
            result = self.valuation.calculate_risk(inputs)
        else:
            raise ValueError(f"Unsupported scenario kind '{scenario['kind']}'; expected one of {', '.join(SCENARIO_KINDS)}")

        return {"scenario": scenario, "result": result}

from valuelab_service.services.markets import MarketService
from valuelab_service.services.scenarios import ScenarioService
from valuelab_service.services.valuation import ValuationService

__all__ = ["MarketService", "ScenarioService", "ValuationService"]

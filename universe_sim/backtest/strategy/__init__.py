from .base import Strategy
from .factory import StrategyFactory
from .universe_rebalance import UniverseRebalanceStrategy

__all__ = ["Strategy", "StrategyFactory", "UniverseRebalanceStrategy"]

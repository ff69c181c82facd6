from .filter import CoarseCandidate, FunctionFilter, MembershipFilter, TickerFilter
from .manager import UniverseManager

__all__ = [
    "CoarseCandidate",
    "MembershipFilter",
    "FunctionFilter",
    "TickerFilter",
    "UniverseManager",
]

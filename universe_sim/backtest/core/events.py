# universe_sim/backtest/core/events.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Tuple

from universe_sim.backtest.core.types import (
    DelistingType,
    Direction,
    Side,
    Symbol,
)
from universe_sim.utils.errors import InvariantViolation


# -------------------------
# Base
# -------------------------
class Event:
    pass


# -------------------------
# Market
# -------------------------
@dataclass(frozen=True)
class Bar(Event):
    ts: int
    symbol: Symbol
    open: float
    high: float
    low: float
    close: float
    volume: int = 0


@dataclass(frozen=True)
class DelistingNotice(Event):
    ts: int
    symbol: Symbol
    type: DelistingType = DelistingType.DELISTED


@dataclass(frozen=True)
class DataBatch(Event):
    """
    一个 step 内可观测的全部事实：
      - bars       : symbol -> Bar（本 step 有新观测的 symbol）
      - delistings : 同 step 到达的退市通知
    """
    ts: int
    bars: Mapping[Symbol, Bar] = field(default_factory=dict)
    delistings: Tuple[DelistingNotice, ...] = ()

    def __contains__(self, symbol: Symbol) -> bool:
        return symbol in self.bars

    def symbols(self) -> frozenset[Symbol]:
        return frozenset(self.bars)

    def delisted_symbols(self) -> frozenset[Symbol]:
        """仅 DELISTED（终止）类型"""
        return frozenset(
            d.symbol for d in self.delistings if d.type is DelistingType.DELISTED
        )


# -------------------------
# Universe
# -------------------------
@dataclass(frozen=True)
class MembershipDelta(Event):
    """
    一次 universe 评估得到的成员变化。

    🔒 Invariant: added ∩ removed = ∅
    """
    added: frozenset[Symbol] = frozenset()
    removed: frozenset[Symbol] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, "added", frozenset(self.added))
        object.__setattr__(self, "removed", frozenset(self.removed))

        overlap = self.added & self.removed
        if overlap:
            names = ", ".join(str(s) for s in sorted(overlap))
            raise InvariantViolation(
                f"[MembershipDelta] symbols both added and removed: {names}"
            )

    @property
    def empty(self) -> bool:
        return not self.added and not self.removed


@dataclass(frozen=True)
class LifecycleAction(Event):
    symbol: Symbol
    direction: Direction
    quantity: int


# -------------------------
# Order
# -------------------------
@dataclass(frozen=True)
class OrderEvent(Event):
    ts: int
    symbol: Symbol
    side: Side
    quantity: int
    order_type: str = "MARKET_ON_OPEN"


# -------------------------
# Fill
# -------------------------
@dataclass(frozen=True)
class FillEvent(Event):
    ts: int
    symbol: Symbol
    side: Side
    quantity: int
    price: float
    commission: float

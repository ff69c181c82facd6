# universe_sim/backtest/strategy/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, List

from universe_sim.backtest.core.events import (
    DataBatch,
    FillEvent,
    MembershipDelta,
    OrderEvent,
)
from universe_sim.backtest.core.types import Symbol


class Strategy(ABC):
    """
    Strategy (FINAL / FROZEN)

    Engine 回调顺序（同一 step 内）：
      on_securities_changed(delta)   # 仅当 universe 有变化
      on_data(batch, is_active)      -> List[OrderEvent]

    成交回报：
      on_fill(fill)
    """

    @abstractmethod
    def on_securities_changed(self, delta: MembershipDelta) -> None:
        ...

    @abstractmethod
    def on_data(
        self,
        batch: DataBatch,
        is_active: Callable[[Symbol], bool],
    ) -> List[OrderEvent]:
        ...

    def on_fill(self, fill: FillEvent) -> None:
        ...

# universe_sim/backtest/strategy/universe_rebalance.py
from __future__ import annotations

from typing import Callable, Iterable, List

from universe_sim import logs
from universe_sim.backtest.core.events import (
    DataBatch,
    FillEvent,
    LifecycleAction,
    MembershipDelta,
    OrderEvent,
)
from universe_sim.backtest.core.types import Direction, Side, Symbol
from universe_sim.backtest.guards import assert_data_active
from universe_sim.backtest.reconciler import ChangeReconciler
from universe_sim.backtest.strategy.base import Strategy


_SIDE = {
    Direction.OPEN: Side.BUY,
    Direction.CLOSE: Side.SELL,
}


class UniverseRebalanceStrategy(Strategy):
    """
    Universe Rebalance Strategy（FINAL）

    规则：
      - 每个 batch 先做 active 一致性检查
      - 首个 step：对 ticker 属于 seed_tickers 的手动订阅买入 default_quantity
        （universe 选出的 symbol 即使同 ticker 也不 seed）
      - universe 变化交给 ChangeReconciler，
        OPEN -> BUY，CLOSE -> SELL（MARKET_ON_OPEN）
    """

    def __init__(
        self,
        default_quantity: int = 100,
        seed_tickers: Iterable[str] = (),
        manual: Iterable[Symbol] = (),
    ) -> None:
        self._reconciler = ChangeReconciler(default_quantity=default_quantity)
        self._seed_tickers = frozenset(seed_tickers)
        self._manual = frozenset(manual)
        self._n_orders = 0
        self._n_fills = 0

    # --------------------------------------------------
    # Event handlers
    # --------------------------------------------------
    def on_securities_changed(self, delta: MembershipDelta) -> None:
        self._reconciler.on_membership_delta(delta)

    def on_data(
        self,
        batch: DataBatch,
        is_active: Callable[[Symbol], bool],
    ) -> List[OrderEvent]:
        assert_data_active(batch, is_active)

        orders: List[OrderEvent] = []

        if self._n_orders == 0:
            orders.extend(self._seed_orders(batch))

        actions = self._reconciler.on_data_batch(batch)
        orders.extend(self._to_order(batch.ts, a) for a in actions)

        self._n_orders += len(orders)
        return orders

    def on_fill(self, fill: FillEvent) -> None:
        self._n_fills += 1

    # --------------------------------------------------
    def _seed_orders(self, batch: DataBatch) -> List[OrderEvent]:
        seeds = sorted(
            s for s in batch.bars
            if s in self._manual and s.ticker in self._seed_tickers
        )
        if seeds:
            logs.info(f"[Strategy] ts={batch.ts} seed orders: {[str(s) for s in seeds]}")
        return [
            OrderEvent(
                ts=batch.ts,
                symbol=s,
                side=Side.BUY,
                quantity=self._reconciler.default_quantity,
            )
            for s in seeds
        ]

    @staticmethod
    def _to_order(ts: int, action: LifecycleAction) -> OrderEvent:
        return OrderEvent(
            ts=ts,
            symbol=action.symbol,
            side=_SIDE[action.direction],
            quantity=action.quantity,
        )

    # --------------------------------------------------
    # 🔒 Frozen outputs
    # --------------------------------------------------
    @property
    def reconciler(self) -> ChangeReconciler:
        return self._reconciler

    @property
    def n_orders(self) -> int:
        return self._n_orders

    @property
    def n_fills(self) -> int:
        return self._n_fills

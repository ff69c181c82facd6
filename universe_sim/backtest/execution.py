# universe_sim/backtest/execution.py
from __future__ import annotations

import math
from typing import Callable, Iterable, List, Mapping, Optional

from universe_sim import logs
from universe_sim.backtest.core.events import Bar, FillEvent, OrderEvent
from universe_sim.backtest.core.types import Symbol

"""
MarketOnOpenExecution (FINAL / FROZEN)

Role:
- Queue orders submitted at step t.
- Fill them at the open of step t+1.

Assumptions:
- Idealized execution, no slippage.
- Fixed commission per order.
- If the symbol has no bar at t+1 (renamed / delisted), fill at the
  last observed price; if no price is observable at all -> skip.

Invariants:
- Does NOT advance time.
- Does NOT mutate portfolio.
- Emits ONLY immutable FillEvent.
"""


class MarketOnOpenExecution:

    def __init__(self, *, commission_per_order: float = 0.0) -> None:
        self._commission = float(commission_per_order)
        self._queue: List[OrderEvent] = []

    def submit(self, orders: Iterable[OrderEvent]) -> None:
        for o in orders:
            logs.info(f"[Execution] Submitted: {o.side.value} {o.symbol} qty={o.quantity} ts={o.ts}")
            self._queue.append(o)

    def on_step(
        self,
        ts: int,
        bars: Mapping[Symbol, Bar],
        last_price: Callable[[Symbol], Optional[float]],
    ) -> List[FillEvent]:
        fills: List[FillEvent] = []
        queue, self._queue = self._queue, []

        for o in queue:
            bar = bars.get(o.symbol)
            px = bar.open if bar is not None else last_price(o.symbol)

            if px is None or not math.isfinite(px) or px <= 0.0:
                logs.info(f"[Execution] skip invalid price symbol={o.symbol} price={px} ts={ts}")
                continue

            logs.info(f"[Execution] Filled: {o.side.value} {o.symbol} qty={o.quantity} price={px} ts={ts}")

            fills.append(
                FillEvent(
                    ts=ts,
                    symbol=o.symbol,
                    side=o.side,
                    quantity=int(o.quantity),
                    price=float(px),
                    commission=self._commission,
                )
            )

        return fills

    @property
    def pending_orders(self) -> List[OrderEvent]:
        return list(self._queue)

    @property
    def commission_per_order(self) -> float:
        return self._commission

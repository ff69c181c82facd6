# universe_sim/backtest/portfolio.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from universe_sim import logs
from universe_sim.backtest.core.events import DataBatch, FillEvent
from universe_sim.backtest.core.types import Side, Symbol


@dataclass
class Portfolio:
    """
    Long-only Portfolio（FINAL）

    事实语义：
      - 状态只通过 apply_fill 演化
      - 卖出数量不超过持仓（不允许裸卖）
      - last_prices 记录每个 symbol 最近一次可观测 close
    """
    cash: float
    positions: Dict[Symbol, int] = field(default_factory=dict)
    last_prices: Dict[Symbol, float] = field(default_factory=dict)
    fees: float = 0.0

    def apply_fill(self, f: FillEvent) -> None:
        cur = int(self.positions.get(f.symbol, 0))

        if f.side is Side.BUY:
            new = cur + int(f.quantity)
            self.cash -= float(f.price) * int(f.quantity)
        elif f.side is Side.SELL:
            sell_qty = min(int(f.quantity), cur)  # long-only: 不允许裸卖
            new = cur - sell_qty
            self.cash += float(f.price) * sell_qty
        else:
            raise ValueError(f"unknown side: {f.side}")

        self.cash -= float(f.commission)
        self.fees += float(f.commission)
        self.positions[f.symbol] = new

    def mark(self, batch: DataBatch) -> None:
        for symbol, bar in batch.bars.items():
            self.last_prices[symbol] = float(bar.close)

    def last_price(self, symbol: Symbol) -> Optional[float]:
        return self.last_prices.get(symbol)

    def quantity(self, symbol: Symbol) -> int:
        return int(self.positions.get(symbol, 0))

    def liquidate(
        self,
        symbol: Symbol,
        *,
        ts: int,
        price: float,
        commission: float = 0.0,
    ) -> FillEvent | None:
        """
        退市清算：以给定价格卖出全部持仓。
        无持仓返回 None。
        """
        qty = self.quantity(symbol)
        if qty <= 0:
            return None

        fill = FillEvent(
            ts=ts,
            symbol=symbol,
            side=Side.SELL,
            quantity=qty,
            price=float(price),
            commission=float(commission),
        )
        self.apply_fill(fill)
        logs.info(f"[Portfolio] liquidated delisted {symbol} qty={qty} price={price}")
        return fill

    @property
    def invested(self) -> Dict[Symbol, int]:
        return {s: q for s, q in self.positions.items() if q != 0}

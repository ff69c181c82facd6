# universe_sim/backtest/result.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

import pandas as pd

from universe_sim.backtest.core.events import FillEvent
from universe_sim.backtest.core.types import Symbol


@dataclass(frozen=True)
class BacktestResult:
    """
    BacktestResult (FINAL / FROZEN)

    不可变事实结果，用于：
      - 回归测试（期末持仓断言）
      - 结果展示
    """

    # -----------------------
    # Experiment identity
    # -----------------------
    name: str

    # -----------------------
    # Time / event stats
    # -----------------------
    start_ts: int
    end_ts: int
    n_steps: int
    n_orders: int

    # -----------------------
    # Trade facts
    # -----------------------
    fills: List[FillEvent]
    positions: Dict[Symbol, int]
    cash: float
    total_fees: float

    def quantity(self, symbol: Symbol) -> int:
        return int(self.positions.get(symbol, 0))

    @property
    def n_trades(self) -> int:
        return len(self.fills)

    @property
    def invested(self) -> Dict[Symbol, int]:
        return {s: q for s, q in self.positions.items() if q != 0}

    def to_frame(self) -> pd.DataFrame:
        """fills -> DataFrame（按成交顺序）"""
        columns = ["date", "ticker", "sid", "side", "quantity", "price", "commission"]
        rows = [
            {
                "date": pd.Timestamp(f.ts * 1_000).date(),
                "ticker": f.symbol.ticker,
                "sid": f.symbol.sid,
                "side": f.side.value,
                "quantity": f.quantity,
                "price": f.price,
                "commission": f.commission,
            }
            for f in self.fills
        ]
        return pd.DataFrame(rows, columns=columns)

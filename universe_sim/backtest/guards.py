# universe_sim/backtest/guards.py
from __future__ import annotations

from typing import Callable

from universe_sim.backtest.core.events import DataBatch
from universe_sim.backtest.core.types import Symbol
from universe_sim.utils.errors import ConsistencyError


def assert_data_active(batch: DataBatch, is_active: Callable[[Symbol], bool]) -> None:
    """
    不允许收到非 active symbol 的数据。

    例外：daily 数据下，最后一根 bar 与 DELISTED 通知同 step 到达。
    """
    delisted_now = batch.delisted_symbols()

    inactive = sorted(
        s for s in batch.bars
        if not is_active(s) and s not in delisted_now
    )
    if inactive:
        names = ", ".join(str(s) for s in inactive)
        raise ConsistencyError(f"Received data for non-active security: {names}.")

# universe_sim/backtest/universe/filter.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from universe_sim.backtest.core.types import Symbol
from universe_sim.utils.errors import InvariantViolation


@dataclass(frozen=True)
class CoarseCandidate:
    """一条候选快照记录（coarse 数据行）"""
    symbol: Symbol
    price: float = 0.0
    volume: int = 0


class MembershipFilter(ABC):
    """
    MembershipFilter (FINAL / FROZEN)

    纯函数：
      candidates -> 本次应 active 的 symbol 子集

    冻结规则：
      - 无状态、无副作用
      - 不假设两次评估之间的连续性
      - 任何异常直接抛给调用方
    """

    @abstractmethod
    def select(self, candidates: Sequence[CoarseCandidate]) -> Iterable[Symbol]:
        ...

    def __call__(self, candidates: Sequence[CoarseCandidate]) -> frozenset[Symbol]:
        selected = frozenset(self.select(candidates))

        known = {c.symbol for c in candidates}
        unknown = selected - known
        if unknown:
            names = ", ".join(str(s) for s in sorted(unknown))
            raise InvariantViolation(
                f"[MembershipFilter] selected symbols outside snapshot: {names}"
            )
        return selected


class FunctionFilter(MembershipFilter):
    """包装调用方提供的 callable"""

    def __init__(self, fn: Callable[[Sequence[CoarseCandidate]], Iterable[Symbol]]):
        self._fn = fn

    def select(self, candidates):
        return self._fn(candidates)


class TickerFilter(MembershipFilter):
    """按 ticker 白名单选取"""

    def __init__(self, tickers: Iterable[str]):
        self._tickers = frozenset(tickers)
        if not self._tickers:
            raise ValueError("[TickerFilter] empty ticker set")

    def select(self, candidates):
        return (c.symbol for c in candidates if c.symbol.ticker in self._tickers)

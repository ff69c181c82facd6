# universe_sim/backtest/universe/manager.py
from __future__ import annotations

from typing import Iterable, Sequence

from universe_sim import logs
from universe_sim.backtest.core.events import MembershipDelta
from universe_sim.backtest.core.types import Symbol
from universe_sim.backtest.universe.filter import CoarseCandidate, MembershipFilter


class UniverseManager:
    """
    UniverseManager（engine 侧）

    职责：
      - 持有 active set = manual ∪ selected
      - 调用 MembershipFilter，并把结果与上一次 selection 做 diff
      - 退市的 symbol 立即移出 active set，之后的 selection 中也不再出现

    只有 selected 部分参与 diff；manual 订阅不会出现在 MembershipDelta 中。
    """

    def __init__(self, membership_filter: MembershipFilter, manual: Iterable[Symbol] = ()):
        self._filter = membership_filter
        self._manual: set[Symbol] = set(manual)
        self._selected: frozenset[Symbol] = frozenset()
        # 已退市的 identity 不会再有数据，永不重新加入
        self._terminated: set[Symbol] = set()

    # --------------------------------------------------
    def evaluate(self, candidates: Sequence[CoarseCandidate]) -> MembershipDelta | None:
        selected = self._filter(candidates)

        stale = selected & self._terminated
        if stale:
            logs.debug(f"[Universe] ignore delisted candidates: {sorted(map(str, stale))}")
            selected = selected - stale

        delta = MembershipDelta(
            added=selected - self._selected,
            removed=self._selected - selected,
        )
        self._selected = selected

        if delta.empty:
            return None

        logs.info(
            f"[Universe] added={sorted(map(str, delta.added))} "
            f"removed={sorted(map(str, delta.removed))}"
        )
        return delta

    def on_delisted(self, symbol: Symbol) -> None:
        self._terminated.add(symbol)
        if symbol in self._selected:
            self._selected = self._selected - {symbol}
        self._manual.discard(symbol)

    # --------------------------------------------------
    def is_active(self, symbol: Symbol) -> bool:
        return symbol in self._selected or symbol in self._manual

    @property
    def active(self) -> frozenset[Symbol]:
        return self._selected | frozenset(self._manual)

    @property
    def selected(self) -> frozenset[Symbol]:
        return self._selected

    @property
    def manual(self) -> frozenset[Symbol]:
        return frozenset(self._manual)

    @property
    def terminated(self) -> frozenset[Symbol]:
        return frozenset(self._terminated)

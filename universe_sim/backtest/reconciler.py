# universe_sim/backtest/reconciler.py
from __future__ import annotations

from typing import List, Optional

from universe_sim import logs
from universe_sim.backtest.core.events import (
    DataBatch,
    LifecycleAction,
    MembershipDelta,
)
from universe_sim.backtest.core.types import Direction, Symbol

"""
ChangeReconciler (FINAL / FROZEN)

Role:
- Hold at most ONE pending MembershipDelta.
- Apply it only when every added symbol has data in the current batch.
- Track every symbol that ever received a delisting notice.
- Remember symbols added by a replaced delta that were never opened.

Transition table:
  on_membership_delta(d):
      pending is not None              -> unopened := unopened ∪ pending.added
      d.removed := d.removed − unopened
      unopened := unopened − (dropped removals)
      pending := d                     (last-write-wins)
  on_delisting_notice(s)      delisted := delisted ∪ {s}
  on_data_batch(b):
      delisted := delisted ∪ b.delistings
      pending is None                  -> []
      added ⊄ b.bars                   -> []        (pending kept)
      otherwise                        -> OPEN(added) + CLOSE(removed − delisted)
                                          unopened := unopened − added
                                          pending := None

Invariants:
- At most one action per symbol per application.
- Never CLOSE a symbol in delisted at emission time.
- Never CLOSE a symbol that was never opened.
- Either all added symbols are opened, or none.
- delisted never shrinks.
"""


class ChangeReconciler:

    def __init__(self, default_quantity: int = 100) -> None:
        if default_quantity <= 0:
            raise ValueError(
                f"[Reconciler] default_quantity must be positive: {default_quantity}"
            )
        self._default_quantity = int(default_quantity)

        self._pending: Optional[MembershipDelta] = None
        self._delisted: set[Symbol] = set()
        # 被替换掉的 delta 加入过、但从未开仓的 symbol
        self._unopened: set[Symbol] = set()

    # --------------------------------------------------
    # Inbound
    # --------------------------------------------------
    def on_delisting_notice(self, symbol: Symbol) -> None:
        self._delisted.add(symbol)

    def on_membership_delta(self, delta: MembershipDelta) -> None:
        prior = self._pending

        if prior is not None:
            self._unopened |= prior.added
            logs.debug(f"[Reconciler] pending delta replaced: {prior}")

        # 从未开仓的 symbol 没有可平的仓位
        never_opened = delta.removed & self._unopened
        if never_opened:
            logs.info(
                f"[Reconciler] drop removal of never-opened symbols: "
                f"{sorted(map(str, never_opened))}"
            )
            delta = MembershipDelta(
                added=delta.added,
                removed=delta.removed - never_opened,
            )
            self._unopened -= never_opened

        self._pending = delta

    def on_data_batch(self, batch: DataBatch) -> List[LifecycleAction]:
        # 同 step 的退市通知必须先于 suppression 检查
        for notice in batch.delistings:
            self.on_delisting_notice(notice.symbol)

        delta = self._pending
        if delta is None:
            return []

        missing = [s for s in delta.added if s not in batch]
        if missing:
            logs.debug(
                f"[Reconciler] ts={batch.ts} waiting for data: "
                f"{sorted(map(str, missing))}"
            )
            return []

        actions: List[LifecycleAction] = []

        for symbol in sorted(delta.added):
            logs.info(f"[Reconciler] ts={batch.ts} Added Security: {symbol}")
            actions.append(
                LifecycleAction(symbol, Direction.OPEN, self._default_quantity)
            )
        self._unopened -= delta.added

        for symbol in sorted(delta.removed):
            logs.info(f"[Reconciler] ts={batch.ts} Removed Security: {symbol}")
            if symbol in self._delisted:
                logs.info(f"[Reconciler] close suppressed, delisted: {symbol}")
                continue
            actions.append(
                LifecycleAction(symbol, Direction.CLOSE, self._default_quantity)
            )

        self._pending = None
        return actions

    # --------------------------------------------------
    # 🔒 Read-only observability
    # --------------------------------------------------
    def is_delisted(self, symbol: Symbol) -> bool:
        return symbol in self._delisted

    @property
    def delisted(self) -> frozenset[Symbol]:
        return frozenset(self._delisted)

    @property
    def unopened(self) -> frozenset[Symbol]:
        return frozenset(self._unopened)

    @property
    def pending(self) -> Optional[MembershipDelta]:
        return self._pending

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def default_quantity(self) -> int:
        return self._default_quantity

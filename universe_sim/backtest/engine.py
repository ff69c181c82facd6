# universe_sim/backtest/engine.py
from __future__ import annotations

from typing import List

from universe_sim import logs
from universe_sim.backtest.core.events import DataBatch, FillEvent
from universe_sim.backtest.core.types import DelistingType
from universe_sim.backtest.execution import MarketOnOpenExecution
from universe_sim.backtest.portfolio import Portfolio
from universe_sim.backtest.replay import ReplayPolicy, ReplayStep
from universe_sim.backtest.result import BacktestResult
from universe_sim.backtest.strategy.base import Strategy
from universe_sim.backtest.universe.manager import UniverseManager


class BacktestEngine:
    """
    BacktestEngine (FROZEN)

    单个 step 的固定顺序：
      1. 成交上一 step 提交的订单（market-on-open）
      2. universe 评估 → MembershipDelta → strategy.on_securities_changed
      3. DELISTED：清算持仓、移出 active set
      4. 组装 DataBatch（active + 本 step 退市的 symbol）
      5. portfolio 记录最新价格
      6. strategy.on_data → 订单排队
    """

    def __init__(
        self,
        *,
        universe: UniverseManager,
        strategy: Strategy,
        portfolio: Portfolio,
        execution: MarketOnOpenExecution,
        name: str = "default",
    ) -> None:
        self._universe = universe
        self._strategy = strategy
        self._portfolio = portfolio
        self._execution = execution
        self._name = name

        self._fills: List[FillEvent] = []
        self._n_orders = 0

    def run(self, replay: ReplayPolicy) -> BacktestResult:
        start_ts = None
        end_ts = None
        n_steps = 0

        for step in replay.replay():
            if start_ts is None:
                start_ts = step.ts
            end_ts = step.ts
            n_steps += 1

            self._on_step(step)

        if n_steps == 0:
            raise RuntimeError("[BacktestEngine] replay produced no steps")

        unfilled = self._execution.pending_orders
        if unfilled:
            logs.warning(f"[BacktestEngine] {len(unfilled)} orders left unfilled at end of run")

        return BacktestResult(
            name=self._name,
            start_ts=start_ts,
            end_ts=end_ts,
            n_steps=n_steps,
            n_orders=self._n_orders,
            fills=list(self._fills),
            positions=dict(self._portfolio.positions),
            cash=self._portfolio.cash,
            total_fees=self._portfolio.fees,
        )

    # --------------------------------------------------
    def _on_step(self, step: ReplayStep) -> None:
        # 1) market-on-open 成交
        for fill in self._execution.on_step(step.ts, step.bars, self._portfolio.last_price):
            self._record_fill(fill)

        # 2) universe 评估
        if step.candidates is not None:
            delta = self._universe.evaluate(step.candidates)
            if delta is not None:
                self._strategy.on_securities_changed(delta)

        # 3) engine 自身的退市处理
        delisted_now = set()
        for notice in step.delistings:
            if notice.type is not DelistingType.DELISTED:
                continue
            delisted_now.add(notice.symbol)

            bar = step.bars.get(notice.symbol)
            price = bar.close if bar is not None else self._portfolio.last_price(notice.symbol)
            if price is not None:
                fill = self._portfolio.liquidate(
                    notice.symbol,
                    ts=step.ts,
                    price=price,
                    commission=self._execution.commission_per_order,
                )
                if fill is not None:
                    self._fills.append(fill)
                    self._strategy.on_fill(fill)
            elif self._portfolio.quantity(notice.symbol):
                logs.warning(f"[BacktestEngine] no price to liquidate delisted {notice.symbol}")

            self._universe.on_delisted(notice.symbol)

        # 4) 只投递订阅中的数据
        batch = DataBatch(
            ts=step.ts,
            bars={
                s: bar for s, bar in step.bars.items()
                if self._universe.is_active(s) or s in delisted_now
            },
            delistings=tuple(step.delistings),
        )

        logs.info(
            f"[BacktestEngine] ts={step.ts} Active Securities: "
            f"{', '.join(sorted(map(str, self._universe.active)))}"
        )

        # 5) mark
        self._portfolio.mark(batch)

        # 6) strategy
        orders = self._strategy.on_data(batch, self._universe.is_active)
        self._n_orders += len(orders)
        self._execution.submit(orders)

    def _record_fill(self, fill: FillEvent) -> None:
        self._portfolio.apply_fill(fill)
        self._fills.append(fill)
        self._strategy.on_fill(fill)

    # --------------------------------------------------
    @property
    def portfolio(self) -> Portfolio:
        return self._portfolio

    @property
    def universe(self) -> UniverseManager:
        return self._universe

    @property
    def strategy(self) -> Strategy:
        return self._strategy

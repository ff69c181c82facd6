#!filepath: universe_sim/workflows/run_backtest.py
from __future__ import annotations

from universe_sim import logs
from universe_sim.config.backtest_config import BacktestConfig
from universe_sim.backtest.engine import BacktestEngine
from universe_sim.backtest.execution import MarketOnOpenExecution
from universe_sim.backtest.portfolio import Portfolio
from universe_sim.backtest.result import BacktestResult
from universe_sim.backtest.scenarios import Scenario, build_google_2014
from universe_sim.backtest.strategy.factory import StrategyFactory
from universe_sim.backtest.universe.manager import UniverseManager


def build_engine(cfg: BacktestConfig, scenario: Scenario) -> BacktestEngine:
    universe = UniverseManager(scenario.membership_filter, manual=scenario.manual)
    return BacktestEngine(
        universe=universe,
        # seed 只针对手动订阅
        strategy=StrategyFactory.create({**cfg.strategy, "manual": universe.manual}),
        portfolio=Portfolio(cash=cfg.cash),
        execution=MarketOnOpenExecution(commission_per_order=cfg.commission_per_order),
        name=cfg.name,
    )


@logs.catch(msg="backtest failed")
def run_backtest(cfg: BacktestConfig) -> BacktestResult:
    scenario = build_google_2014(start=cfg.start, end=cfg.end)
    engine = build_engine(cfg, scenario)

    logs.info(f"[Backtest] {cfg.name}: {cfg.start} -> {cfg.end}, {len(scenario.replay)} steps")
    return engine.run(scenario.replay)


def check_positions(result: BacktestResult, expected: dict) -> None:
    """
    期末持仓断言：不一致直接抛 AssertionError
    """
    for symbol, qty in expected.items():
        actual = result.quantity(symbol)
        if actual != qty:
            raise AssertionError(
                f"{symbol} expected {qty}, but received {actual}."
            )

#!filepath: tests/backtest/test_engine_google_2014.py
from __future__ import annotations

from datetime import date

import pytest

from universe_sim.backtest.core.types import Side
from universe_sim.backtest.replay import ReplayStep, StepReplay, to_ts_us
from universe_sim.backtest.scenarios import build_google_2014
from universe_sim.backtest.scenarios.google_2014 import (
    GOOAV,
    GOOCV,
    GOOG,
    GOOG_C,
    GOOGL,
    SPY,
)
from universe_sim.config.backtest_config import BacktestConfig
from universe_sim.workflows.run_backtest import build_engine, check_positions, run_backtest


@pytest.fixture
def cfg() -> BacktestConfig:
    return BacktestConfig(
        name="google_2014",
        start=date(2014, 3, 24),
        end=date(2014, 4, 7),
        cash=100_000,
        commission_per_order=1.0,
        strategy={
            "type": "universe_rebalance",
            "default_quantity": 100,
            "seed_tickers": ["SPY"],
        },
    )


@pytest.fixture
def result(cfg):
    return run_backtest(cfg)


def _fills_on(result, day):
    ts = to_ts_us(day)
    return {(f.symbol, f.side) for f in result.fills if f.ts == ts}


def test_final_holdings(result):
    scenario = build_google_2014()

    check_positions(result, scenario.expected_positions)
    assert result.invested == {SPY: 100, GOOGL: 100, GOOG_C: 100}


def test_trade_count_and_fees(result):
    # 6 buys + 2 closes + 1 delisting liquidation
    assert result.n_trades == 9
    assert result.n_orders == 8
    assert result.total_fees == pytest.approx(9.0)


def test_initial_positions_fill_next_open(result):
    assert _fills_on(result, date(2014, 3, 25)) == {(SPY, Side.BUY), (GOOG, Side.BUY)}


def test_seed_ticker_shared_with_selection_buys_once(cfg):
    cfg = cfg.model_copy(update={"strategy": {**cfg.strategy, "seed_tickers": ["SPY", "GOOG"]}})
    result = run_backtest(cfg)

    ts = to_ts_us(date(2014, 3, 25))
    goog_buys = [f for f in result.fills if f.ts == ts and f.symbol == GOOG]

    assert [f.quantity for f in goog_buys] == [100]
    check_positions(result, build_google_2014().expected_positions)


def test_split_listing_opened_together(result):
    assert _fills_on(result, date(2014, 3, 31)) == {(GOOAV, Side.BUY), (GOOCV, Side.BUY)}


def test_delisted_symbol_liquidated_by_engine_not_closed(result):
    assert _fills_on(result, date(2014, 4, 2)) == {(GOOAV, Side.SELL)}

    gooav_sells = [f for f in result.fills if f.symbol == GOOAV and f.side is Side.SELL]
    assert len(gooav_sells) == 1


def test_rename_waits_for_first_bar(result):
    # 04-02 的 delta 要等到 04-03 新 symbol 有 bar 才执行，04-04 开盘成交
    assert _fills_on(result, date(2014, 4, 3)) == set()
    assert _fills_on(result, date(2014, 4, 4)) == {
        (GOOGL, Side.BUY),
        (GOOG_C, Side.BUY),
        (GOOG, Side.SELL),
        (GOOCV, Side.SELL),
    }


def test_reconciler_state_after_run(cfg):
    scenario = build_google_2014()
    engine = build_engine(cfg, scenario)
    engine.run(scenario.replay)

    rec = engine.strategy.reconciler
    assert rec.delisted == {GOOAV}
    assert rec.has_pending is False


def test_result_frame(result):
    df = result.to_frame()

    assert len(df) == 9
    assert list(df.columns) == ["date", "ticker", "sid", "side", "quantity", "price", "commission"]
    assert set(df["ticker"]) == {"SPY", "GOOG", "GOOAV", "GOOCV", "GOOGL"}


def test_ts_regression_raises():
    replay = StepReplay([ReplayStep(ts=2), ReplayStep(ts=1)])

    with pytest.raises(RuntimeError, match="ts regression"):
        list(replay.replay())


def test_start_after_end_is_user_error():
    from universe_sim.utils.errors import UserInputError

    with pytest.raises(UserInputError):
        BacktestConfig(start=date(2014, 4, 7), end=date(2014, 3, 24))

#!filepath: tests/backtest/test_universe_manager.py
from __future__ import annotations

import pytest

from universe_sim.backtest.core.types import Symbol
from universe_sim.backtest.universe import (
    CoarseCandidate,
    FunctionFilter,
    TickerFilter,
    UniverseManager,
)
from universe_sim.utils.errors import InvariantViolation


SPY = Symbol("SPY", "SID_SPY")
GOOG = Symbol("GOOG", "SID_1")
GOOGL = Symbol("GOOGL", "SID_1")
GOOCV = Symbol("GOOCV", "SID_2")
AAPL = Symbol("AAPL", "SID_3")


def snapshot(*symbols):
    return [CoarseCandidate(symbol=s, price=10.0, volume=100) for s in symbols]


# =============================================================================
# MembershipFilter
# =============================================================================

def test_ticker_filter_selects_by_ticker():
    f = TickerFilter(["GOOG", "GOOGL"])

    assert f(snapshot(GOOG, GOOGL, AAPL)) == {GOOG, GOOGL}


def test_ticker_filter_rejects_empty_set():
    with pytest.raises(ValueError, match="empty ticker set"):
        TickerFilter([])


def test_function_filter_wraps_callable():
    f = FunctionFilter(lambda cs: [c.symbol for c in cs if c.price > 5])

    assert f(snapshot(GOOG, AAPL)) == {GOOG, AAPL}


def test_filter_selection_outside_snapshot_is_invariant_violation():
    f = FunctionFilter(lambda cs: [AAPL])

    with pytest.raises(InvariantViolation, match="outside snapshot"):
        f(snapshot(GOOG))


def test_filter_exception_propagates():
    def boom(cs):
        raise ZeroDivisionError("bad filter")

    manager = UniverseManager(FunctionFilter(boom))

    with pytest.raises(ZeroDivisionError):
        manager.evaluate(snapshot(GOOG))


# =============================================================================
# UniverseManager
# =============================================================================

def test_first_evaluation_adds_selection():
    manager = UniverseManager(TickerFilter(["GOOG"]), manual=[SPY])

    delta = manager.evaluate(snapshot(SPY, GOOG, AAPL))

    assert delta.added == {GOOG}
    assert delta.removed == frozenset()
    assert manager.active == {SPY, GOOG}


def test_unchanged_selection_returns_none():
    manager = UniverseManager(TickerFilter(["GOOG"]))
    manager.evaluate(snapshot(GOOG))

    assert manager.evaluate(snapshot(GOOG, AAPL)) is None


def test_rename_is_add_plus_remove():
    manager = UniverseManager(TickerFilter(["GOOG", "GOOGL"]))
    manager.evaluate(snapshot(GOOG))

    delta = manager.evaluate(snapshot(GOOGL))

    assert delta.added == {GOOGL}
    assert delta.removed == {GOOG}
    assert GOOG.same_underlying(GOOGL)


def test_manual_subscription_never_in_delta():
    manager = UniverseManager(TickerFilter(["GOOG"]), manual=[SPY])

    delta = manager.evaluate(snapshot(GOOG))

    assert SPY not in delta.added
    assert manager.is_active(SPY)
    assert manager.manual == {SPY}


def test_on_delisted_deactivates():
    manager = UniverseManager(TickerFilter(["GOOG", "GOOCV"]), manual=[SPY])
    manager.evaluate(snapshot(GOOG, GOOCV))

    manager.on_delisted(GOOCV)
    manager.on_delisted(SPY)

    assert not manager.is_active(GOOCV)
    assert not manager.is_active(SPY)
    assert manager.selected == {GOOG}

    # 已移出，下一次评估不再报告 removal
    assert manager.evaluate(snapshot(GOOG)) is None


def test_delisted_symbol_still_in_candidates_is_not_readded():
    manager = UniverseManager(TickerFilter(["GOOG", "GOOCV", "GOOGL"]))
    manager.evaluate(snapshot(GOOG, GOOCV))

    manager.on_delisted(GOOCV)

    # 数据源的 candidates 仍带着已退市的 GOOCV
    assert manager.evaluate(snapshot(GOOG, GOOCV)) is None
    assert not manager.is_active(GOOCV)
    assert manager.terminated == {GOOCV}

    delta = manager.evaluate(snapshot(GOOCV, GOOGL))
    assert delta.added == {GOOGL}
    assert delta.removed == {GOOG}

#!filepath: tests/backtest/strategy/test_strategy_factory_frozen.py
from __future__ import annotations

import copy
import inspect

import pytest

from universe_sim.backtest.strategy import (
    Strategy,
    StrategyFactory,
    UniverseRebalanceStrategy,
)


def test_missing_type_raises():
    with pytest.raises(KeyError, match="missing 'type'"):
        StrategyFactory.create({"default_quantity": 100})


def test_unknown_type_raises():
    with pytest.raises(ValueError, match="unknown strategy type"):
        StrategyFactory.create({"type": "unknown_strategy"})


def test_create_returns_strategy():
    strategy = StrategyFactory.create(
        {"type": "universe_rebalance", "default_quantity": 50, "seed_tickers": ["SPY"]}
    )

    assert isinstance(strategy, Strategy)
    assert isinstance(strategy, UniverseRebalanceStrategy)
    assert strategy.reconciler.default_quantity == 50


def test_cfg_not_modified():
    cfg = {"type": "universe_rebalance", "default_quantity": 100}
    cfg_copy = copy.deepcopy(cfg)

    StrategyFactory.create(cfg)

    assert cfg == cfg_copy


def test_no_branching_on_strategy_type():
    """
    🔒 FROZEN:
    Strategy selection must be registry-based, not if/else.
    """
    src = inspect.getsource(StrategyFactory.create)

    for kw in ["if typ ==", "elif", "match typ"]:
        assert kw not in src, f"Branching logic '{kw}' found in StrategyFactory.create"

#!filepath: tests/backtest/test_guards.py
from __future__ import annotations

import pytest

from universe_sim.backtest.core.types import Symbol
from universe_sim.backtest.guards import assert_data_active
from universe_sim.utils.errors import ConsistencyError


A = Symbol("AAA", "SID_A")
B = Symbol("BBB", "SID_B")


def test_active_data_passes(make_batch):
    assert_data_active(make_batch(1, [A]), lambda s: s == A)


def test_inactive_data_raises(make_batch):
    with pytest.raises(ConsistencyError, match="non-active security: BBB SID_B"):
        assert_data_active(make_batch(1, [A, B]), lambda s: s == A)


def test_same_step_delisting_explains_inactive_data(make_batch):
    assert_data_active(make_batch(1, [A, B], delisted=[B]), lambda s: s == A)


def test_warning_does_not_explain_inactive_data(make_batch):
    with pytest.raises(ConsistencyError):
        assert_data_active(make_batch(1, [B], warned=[B]), lambda s: False)

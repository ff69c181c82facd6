# tests/backtest/conftest.py
from __future__ import annotations

from typing import Iterable

import pytest

from universe_sim.backtest.core.events import Bar, DataBatch, DelistingNotice
from universe_sim.backtest.core.types import DelistingType, Symbol


def make_bar(symbol: Symbol, ts: int, price: float = 10.0) -> Bar:
    return Bar(ts=ts, symbol=symbol, open=price, high=price, low=price, close=price, volume=100)


@pytest.fixture
def make_batch():
    """
    Factory fixture for DataBatch.

    Usage:
        batch = make_batch(1, [A, B])
        batch = make_batch(2, [A], delisted=[B])
    """

    def _make(
        ts: int,
        symbols: Iterable[Symbol] = (),
        *,
        delisted: Iterable[Symbol] = (),
        warned: Iterable[Symbol] = (),
    ) -> DataBatch:
        notices = tuple(
            DelistingNotice(ts=ts, symbol=s, type=DelistingType.DELISTED) for s in delisted
        ) + tuple(
            DelistingNotice(ts=ts, symbol=s, type=DelistingType.WARNING) for s in warned
        )
        return DataBatch(
            ts=ts,
            bars={s: make_bar(s, ts) for s in symbols},
            delistings=notices,
        )

    return _make

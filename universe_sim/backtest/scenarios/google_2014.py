# universe_sim/backtest/scenarios/google_2014.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Tuple

import pandas as pd

from universe_sim.backtest.core.events import Bar, DelistingNotice
from universe_sim.backtest.core.types import DelistingType, Symbol
from universe_sim.backtest.replay import ReplayStep, StepReplay, to_ts_us
from universe_sim.backtest.universe.filter import (
    CoarseCandidate,
    MembershipFilter,
    TickerFilter,
)

"""
Google share-class week (2014-03-24 .. 2014-04-07)

Before 2014-03-28:
  - only GOOG  T1AZ164W5VTX exists
On 2014-03-28:
  - GOOAV VP83T1ZUHROL and GOOCV VP83T1ZUHROL are listed
On 2014-04-01:
  - GOOAV receives a delisting WARNING
On 2014-04-02:
  - GOOAV is delisted (last bar + DELISTED in the same step)
  - GOOG  T1AZ164W5VTX becomes GOOGL T1AZ164W5VTX
  - GOOCV VP83T1ZUHROL becomes GOOG  VP83T1ZUHROL
  - the renamed symbols print their first bar on 2014-04-03

Expected at the end: 100 shares each of SPY, GOOGL T1AZ, GOOG VP83.
"""

SPY = Symbol("SPY", "R735QTJ8XC9X")
AAPL = Symbol("AAPL", "R735QTJ8XC9W")
GOOG = Symbol("GOOG", "T1AZ164W5VTX")
GOOGL = Symbol("GOOGL", "T1AZ164W5VTX")
GOOAV = Symbol("GOOAV", "VP83T1ZUHROL")
GOOCV = Symbol("GOOCV", "VP83T1ZUHROL")
GOOG_C = Symbol("GOOG", "VP83T1ZUHROL")

START = date(2014, 3, 24)
END = date(2014, 4, 7)
LISTING = date(2014, 3, 28)
WARNING = date(2014, 4, 1)
RENAME = date(2014, 4, 2)
FIRST_RENAMED_BAR = date(2014, 4, 3)

UNIVERSE_TICKERS = ("GOOG", "GOOCV", "GOOAV", "GOOGL")

# symbol -> (在 coarse 中出现的区间, 有 bar 的区间)
_LIFETIME: Dict[Symbol, Tuple[Tuple[date, date], Tuple[date, date]]] = {
    SPY: ((START, END), (START, END)),
    AAPL: ((START, END), (START, END)),
    GOOG: ((START, WARNING), (START, WARNING)),
    GOOAV: ((LISTING, WARNING), (LISTING, RENAME)),
    GOOCV: ((LISTING, WARNING), (LISTING, WARNING)),
    GOOGL: ((RENAME, END), (FIRST_RENAMED_BAR, END)),
    GOOG_C: ((RENAME, END), (FIRST_RENAMED_BAR, END)),
}

_BASE_PRICE: Dict[Symbol, float] = {
    SPY: 186.0,
    AAPL: 535.0,
    GOOG: 1170.0,
    GOOAV: 560.0,
    GOOCV: 558.0,
    GOOGL: 567.0,
    GOOG_C: 565.0,
}


@dataclass(frozen=True)
class Scenario:
    name: str
    replay: StepReplay
    membership_filter: MembershipFilter
    manual: Tuple[Symbol, ...]
    expected_positions: Dict[Symbol, int]


def _within(day: date, span: Tuple[date, date]) -> bool:
    return span[0] <= day <= span[1]


def _bar(symbol: Symbol, ts: int, i: int) -> Bar:
    px = _BASE_PRICE[symbol] + 0.5 * i
    return Bar(
        ts=ts,
        symbol=symbol,
        open=px,
        high=px + 2.0,
        low=px - 1.0,
        close=px + 1.0,
        volume=1_000_000,
    )


def _steps(start: date, end: date) -> List[ReplayStep]:
    steps: List[ReplayStep] = []

    for i, day in enumerate(pd.bdate_range(start, end)):
        day = day.date()
        ts = to_ts_us(day)

        candidates = tuple(
            CoarseCandidate(symbol=s, price=_BASE_PRICE[s], volume=1_000_000)
            for s, (listed, _) in _LIFETIME.items()
            if _within(day, listed)
        )
        bars = {
            s: _bar(s, ts, i)
            for s, (_, traded) in _LIFETIME.items()
            if _within(day, traded)
        }

        delistings: Tuple[DelistingNotice, ...] = ()
        if day == WARNING:
            delistings = (DelistingNotice(ts=ts, symbol=GOOAV, type=DelistingType.WARNING),)
        elif day == RENAME:
            delistings = (DelistingNotice(ts=ts, symbol=GOOAV, type=DelistingType.DELISTED),)

        steps.append(
            ReplayStep(ts=ts, candidates=candidates, bars=bars, delistings=delistings)
        )

    return steps


def build_google_2014(start: date = START, end: date = END) -> Scenario:
    return Scenario(
        name="google_2014",
        replay=StepReplay(_steps(start, end)),
        membership_filter=TickerFilter(UNIVERSE_TICKERS),
        manual=(SPY,),
        expected_positions={
            SPY: 100,
            GOOGL: 100,
            GOOG_C: 100,
            GOOG: 0,
            GOOAV: 0,
            GOOCV: 0,
        },
    )

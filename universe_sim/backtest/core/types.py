# universe_sim/backtest/core/types.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True, order=True)
class Symbol:
    """
    Immutable security identity.

    - ticker : 交易代码，会因更名而改变
    - sid    : 底层证券标识，更名前后不变

    (GOOCV, VP83T1ZUHROL) 与 (GOOG, VP83T1ZUHROL) 是两个不同的 Symbol。
    """
    ticker: str
    sid: str

    def same_underlying(self, other: "Symbol") -> bool:
        return self.sid == other.sid

    def __str__(self) -> str:
        return f"{self.ticker} {self.sid}"


class Direction(str, Enum):
    OPEN = "OPEN"
    CLOSE = "CLOSE"


class Side(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class DelistingType(str, Enum):
    # 预告：仍可交易
    WARNING = "WARNING"
    # 终止：最后一根 bar 与通知同 step 到达
    DELISTED = "DELISTED"

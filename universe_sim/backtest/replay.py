# universe_sim/backtest/replay.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping, Optional, Sequence, Tuple

import pandas as pd

from universe_sim.backtest.core.events import Bar, DelistingNotice
from universe_sim.backtest.core.types import Symbol
from universe_sim.backtest.universe.filter import CoarseCandidate


def to_ts_us(day) -> int:
    """日期 -> epoch microseconds（UTC 零点）"""
    return int(pd.Timestamp(day).normalize().value // 1_000)


@dataclass(frozen=True)
class ReplayStep:
    """
    一个 tick：
      - candidates : coarse 快照（None 表示本 step 不做 universe 评估）
      - bars       : 本 step 全部原始 bar（engine 负责按订阅过滤）
      - delistings : 本 step 的退市通知
    """
    ts: int
    candidates: Optional[Tuple[CoarseCandidate, ...]] = None
    bars: Mapping[Symbol, Bar] = field(default_factory=dict)
    delistings: Tuple[DelistingNotice, ...] = ()


class ReplayPolicy(ABC):
    """
    ReplayPolicy (FROZEN)

    职责：
      - 决定 step 的时间顺序
      - 不包含任何策略 / 交易逻辑
    """

    @abstractmethod
    def replay(self) -> Iterable[ReplayStep]:
        ...


class StepReplay(ReplayPolicy):
    """
    StepReplay (FINAL / FROZEN)

    输入假设（冻结）：
      - steps 按 ts 严格递增
      - ts 回退或重复 -> RuntimeError（不可修复）
    """

    def __init__(self, steps: Sequence[ReplayStep]):
        if not steps:
            raise ValueError("[StepReplay] empty steps")
        self._steps = list(steps)

    def replay(self) -> Iterator[ReplayStep]:
        last_ts = None

        for step in self._steps:
            # 🔒 全局时间语义断言
            if last_ts is not None and step.ts <= last_ts:
                raise RuntimeError(
                    f"[StepReplay] global ts regression: {step.ts} <= {last_ts}"
                )
            last_ts = step.ts
            yield step

    def __len__(self) -> int:
        return len(self._steps)

from __future__ import annotations

from datetime import date
from typing import Dict

from pydantic import BaseModel, Field, model_validator

from universe_sim.utils.errors import UserInputError


class BacktestConfig(BaseModel):
    """
    BacktestConfig（FINAL / FROZEN）

    语义：
      - 回测“实验定义”
      - 起止日期 / 初始资金 / 手续费
      - strategy 参数原样交给 StrategyFactory
    """

    # 实验名
    name: str = "default"

    start: date
    end: date

    cash: float = Field(100_000.0, gt=0)

    # 每笔成交固定手续费
    commission_per_order: float = Field(1.0, ge=0)

    # strategy 参数（opaque，至少包含 type）
    strategy: Dict = Field(
        default_factory=lambda: {"type": "universe_rebalance"}
    )

    @model_validator(mode="after")
    def _check_dates(self) -> "BacktestConfig":
        if self.start > self.end:
            raise UserInputError(
                f"[BacktestConfig] start {self.start} is after end {self.end}"
            )
        return self

#!filepath: universe_sim/cli.py
from typing import Optional

import typer
from rich import print
from rich.table import Table
from rich.console import Console

from universe_sim import AppConfig, init_logging

app = typer.Typer(help="Universe Membership Backtest CLI")


@app.command()
def version():
    print("v0.1.0")


@app.command()
def run(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="YAML 配置路径"),
    name: Optional[str] = typer.Option(None, "--name", help="覆盖 backtest.name"),
    check: bool = typer.Option(True, "--check/--no-check", help="校验期末持仓"),
):
    """
    运行 2014 Google share-class universe 回归场景
    """
    from universe_sim.backtest.scenarios import build_google_2014
    from universe_sim.workflows.run_backtest import check_positions, run_backtest

    cfg = AppConfig.load(path=config)
    init_logging(cfg.log)

    bt = cfg.backtest
    if name:
        bt = bt.model_copy(update={"name": name})

    print(f"[green]Running {bt.name}: {bt.start} -> {bt.end}[/green]")

    result = run_backtest(bt)

    fills = result.to_frame()
    table = Table(title=f"{result.name} fills")
    for col in fills.columns:
        table.add_column(col)
    for row in fills.itertuples(index=False):
        table.add_row(*(str(v) for v in row))
    Console().print(table)

    for symbol, qty in sorted(result.invested.items()):
        print(f"[blue]{symbol}[/blue] {qty}")
    print(f"trades={result.n_trades} fees=${result.total_fees:.2f} cash={result.cash:.2f}")

    if not check:
        return

    scenario = build_google_2014(start=bt.start, end=bt.end)
    check_positions(result, scenario.expected_positions)
    print("[green]final holdings OK[/green]")


if __name__ == "__main__":
    app()

# python -m universe_sim.cli run

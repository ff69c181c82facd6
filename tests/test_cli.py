#!filepath: tests/test_cli.py
from typer.testing import CliRunner

import universe_sim.cli as cli

runner = CliRunner()


def test_version():
    result = runner.invoke(cli.app, ["version"])

    assert result.exit_code == 0
    assert "v0.1.0" in result.output


def test_run_scenario(monkeypatch):
    # 不写日志文件
    monkeypatch.setattr(cli, "init_logging", lambda cfg: None)
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    result = runner.invoke(cli.app, ["run", "--name", "cli_test"])

    assert result.exit_code == 0, result.output
    assert "final holdings OK" in result.output
    assert "trades=9" in result.output

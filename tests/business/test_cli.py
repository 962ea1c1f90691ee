"""Tests for the command line interface."""

import json

import pytest
from click.testing import CliRunner

from conftest import make_bars

from riskcore import __version__
from riskcore.business.cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def bars_file(tmp_path):
    bars = make_bars([100.0 + i for i in range(30)])
    path = tmp_path / "bars.json"
    path.write_text(
        json.dumps(
            [
                {
                    "timestamp": b.timestamp.isoformat(),
                    "open": b.open,
                    "high": b.high,
                    "low": b.low,
                    "close": b.close,
                }
                for b in bars
            ]
        )
    )
    return path


@pytest.fixture
def trades_file(tmp_path, edge_trades):
    path = tmp_path / "trades.json"
    path.write_text(json.dumps([t.to_dict() for t in edge_trades]))
    return path


class TestCli:
    """Tests for the riskcore command group."""

    def test_version(self, runner):
        """Test --version."""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_margin(self, runner):
        """Test margin text output."""
        result = runner.invoke(cli, ["margin", "--size", "10000", "-L", "10", "--entry", "98000"])

        assert result.exit_code == 0
        assert "1000.00" in result.output
        assert "88690.00" in result.output

    def test_margin_json_short(self, runner):
        """Test margin JSON output for a short."""
        result = runner.invoke(
            cli,
            ["margin", "--size", "10000", "-L", "10", "--entry", "98000", "--side", "short", "--json"],
        )

        data = json.loads(result.output)
        assert data["liquidation_price"] == pytest.approx(107_310)
        assert data["risk_level"] == "low"

    def test_margin_invalid_leverage(self, runner):
        """Test zero leverage exits with an error."""
        result = runner.invoke(cli, ["margin", "--size", "10000", "-L", "0", "--entry", "98000"])
        assert result.exit_code == 1

    def test_kelly_json(self, runner):
        """Test kelly JSON output."""
        result = runner.invoke(
            cli,
            [
                "kelly",
                "--win-rate", "0.6",
                "--avg-win", "0.05",
                "--avg-loss", "0.025",
                "--equity", "10000",
                "--trades", "10",
                "--json",
            ],
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["optimal_fraction"] == pytest.approx(0.4)
        assert data["recommended_size"] == pytest.approx(2000)

    def test_kelly_degenerate(self, runner):
        """Test zero average loss exits with an error."""
        result = runner.invoke(
            cli,
            [
                "kelly",
                "--win-rate", "0.6",
                "--avg-win", "0.05",
                "--avg-loss", "0",
                "--equity", "10000",
                "--trades", "10",
            ],
        )
        assert result.exit_code == 1

    def test_snapshot_json(self, runner, bars_file, trades_file, monkeypatch):
        """Test snapshot JSON output."""
        monkeypatch.delenv("RISKCORE_CONFIG", raising=False)
        result = runner.invoke(
            cli, ["snapshot", "-b", str(bars_file), "-t", str(trades_file), "-o", "json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["kelly"]["recommended_size"] == pytest.approx(2000)
        assert data["chandelier"]["long_stop"] == pytest.approx(121)
        assert data["position_sizing"]["position_size"] == pytest.approx(2000)
        assert data["unavailable"] == {}

    def test_snapshot_text_without_trades(self, runner, bars_file, tmp_path):
        """Test snapshot text output without trade history."""
        config = tmp_path / "risk.yaml"
        config.write_text("risk:\n  max_leverage: 20\n")

        result = runner.invoke(cli, ["snapshot", "-b", str(bars_file), "-c", str(config)])

        assert result.exit_code == 0
        assert "风险快照" in result.output
        assert "kelly" in result.output

    def test_snapshot_bad_bar(self, runner, tmp_path):
        """Test invalid bar exits with an error."""
        path = tmp_path / "bars.json"
        path.write_text(
            json.dumps([{"timestamp": "2025-01-01", "open": 1, "high": 1, "low": 2, "close": 1}])
        )

        result = runner.invoke(cli, ["snapshot", "-b", str(path)])
        assert result.exit_code == 1

    def test_snapshot_text_with_trades(self, runner, bars_file, trades_file, monkeypatch):
        """Test snapshot text output shows the zero-ruin size."""
        monkeypatch.delenv("RISKCORE_CONFIG", raising=False)
        result = runner.invoke(cli, ["snapshot", "-b", str(bars_file), "-t", str(trades_file)])

        assert result.exit_code == 0
        assert "零破产仓位" in result.output
        assert "margin=2000.00" in result.output

    def test_snapshot_non_object_entries(self, runner, tmp_path):
        """Test bar entries that are not JSON objects exit with an error."""
        path = tmp_path / "bars.json"
        path.write_text(json.dumps([1, 2]))

        result = runner.invoke(cli, ["snapshot", "-b", str(path)])
        assert result.exit_code == 1

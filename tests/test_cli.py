"""Tests for CLI commands."""

import json
from decimal import Decimal

from typer.testing import CliRunner

from ccpc.cli import app

runner = CliRunner()


class TestCLIHelp:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "CCPC" in result.output

    def test_project_help(self):
        result = runner.invoke(app, ["project", "--help"])
        assert result.exit_code == 0

    def test_compare_help(self):
        result = runner.invoke(app, ["compare", "--help"])
        assert result.exit_code == 0

    def test_monte_carlo_help(self):
        result = runner.invoke(app, ["monte-carlo", "--help"])
        assert result.exit_code == 0

    def test_tax_year_help(self):
        result = runner.invoke(app, ["tax-year", "--help"])
        assert result.exit_code == 0

    def test_validate_help(self):
        result = runner.invoke(app, ["validate", "--help"])
        assert result.exit_code == 0


class TestTaxYear:
    def test_dumps_golden_values(self):
        result = runner.invoke(app, ["tax-year", "2025", "--province", "ON"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert Decimal(data["cpp"]["max_contribution"]) == Decimal("4034.10")
        assert Decimal(data["federal_basic_personal_amount"]) == Decimal("15705")

    def test_unknown_province(self):
        result = runner.invoke(app, ["tax-year", "2025", "--province", "XX"])
        assert result.exit_code == 1


class TestProject:
    def test_json_output(self):
        result = runner.invoke(
            app,
            ["project", "--start-year", "2025", "--years", "3", "--strategy", "dividends-only", "--json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert len(data["yearly_results"]) == 3
        assert Decimal(data["total_salary"]) == Decimal("0")

    def test_table_output(self):
        result = runner.invoke(app, ["project", "--start-year", "2025", "--years", "2"])
        assert result.exit_code == 0
        assert "Summary" in result.output

    def test_inputs_file_with_override(self, tmp_path):
        path = tmp_path / "scenario.json"
        path.write_text(json.dumps({"province": "BC", "starting_year": 2025, "planning_horizon": 4}))
        result = runner.invoke(
            app, ["project", "--inputs", str(path), "--years", "2", "--salary", "60000", "--json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert len(data["yearly_results"]) == 2
        assert Decimal(data["yearly_results"][0]["salary"]) == Decimal("60000")

    def test_ipp_summary_shown(self, tmp_path):
        path = tmp_path / "scenario.json"
        path.write_text(json.dumps({"starting_year": 2025, "consider_ipp": True}))
        result = runner.invoke(
            app, ["project", "--inputs", str(path), "--years", "2", "--salary", "90000"]
        )
        assert result.exit_code == 0
        assert "IPP Contributions" in result.output

    def test_missing_inputs_file(self, tmp_path):
        result = runner.invoke(app, ["project", "--inputs", str(tmp_path / "missing.json")])
        assert result.exit_code == 1

    def test_invalid_province(self):
        result = runner.invoke(app, ["project", "--province", "XX", "--years", "1"])
        assert result.exit_code == 1


class TestOtherCommands:
    def test_compare(self):
        result = runner.invoke(app, ["compare", "--start-year", "2025", "--years", "2"])
        assert result.exit_code == 0
        assert "Strategy Comparison" in result.output

    def test_monte_carlo(self):
        result = runner.invoke(
            app,
            ["monte-carlo", "--start-year", "2025", "--years", "2", "--simulations", "5", "--seed", "1"],
        )
        assert result.exit_code == 0
        assert "Monte-Carlo" in result.output

    def test_monte_carlo_versus(self):
        result = runner.invoke(
            app,
            [
                "monte-carlo", "--start-year", "2025", "--years", "2",
                "--simulations", "3", "--seed", "1", "--versus", "dividends-only",
            ],
        )
        assert result.exit_code == 0
        assert "Against dividends-only" in result.output

    def test_validate_reports_errors(self, tmp_path):
        path = tmp_path / "scenario.json"
        path.write_text(json.dumps({"planning_horizon": 1}))
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 1
        assert "planning_horizon" in result.output

    def test_validate_clean_file(self, tmp_path):
        path = tmp_path / "scenario.json"
        path.write_text(json.dumps({"province": "AB"}))
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 0
        assert "valid" in result.output

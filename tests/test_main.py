import csv
import json

import click
import pytest
from click.testing import CliRunner

from emi_calc.main import cli, parse_amount, parse_rate, parse_scenario_opts

LOAN_ARGS = ["-a", "1000000", "-r", "8.5", "-t", "20", "--start", "2024-01"]


@pytest.fixture
def runner():
    return CliRunner()


class TestParsing:
    def test_parse_amount_suffixes(self):
        assert parse_amount("500k") == 500_000
        assert parse_amount("1.2m") == 1_200_000
        assert parse_amount("10,00,000") == 1_000_000

    @pytest.mark.parametrize("value", ["abc", "inf", "nan"])
    def test_parse_amount_invalid(self, value):
        with pytest.raises(click.BadParameter):
            parse_amount(value)

    def test_parse_rate(self):
        assert parse_rate("8.5%") == 8.5
        with pytest.raises(click.BadParameter):
            parse_rate("eight")

    def test_parse_scenario(self):
        params = parse_scenario_opts("-a 1m -r 8.5 -t 20")
        assert params.principal == 1_000_000
        assert params.annual_rate_percent == 8.5
        assert params.tenure_years == 20

    @pytest.mark.parametrize("opts", ["-a 1m -r 8.5", "-a 1m -r 8.5 -t", "-x 1 -a 1m -r 8.5 -t 20", "-a 1m -r 8.5 -t two"])
    def test_parse_scenario_invalid(self, opts):
        with pytest.raises(click.BadParameter):
            parse_scenario_opts(opts)


class TestSummaryCommand:
    def test_prints_summary(self, runner):
        result = runner.invoke(cli, ["summary", *LOAN_ARGS])
        assert result.exit_code == 0, result.output
        assert "Monthly EMI            : ₹8,678" in result.output

    def test_currency_option(self, runner):
        result = runner.invoke(cli, ["summary", *LOAN_ARGS, "--currency", "USD"])
        assert result.exit_code == 0, result.output
        assert "$8,678.23" in result.output

    def test_json_export(self, runner, tmp_path):
        path = tmp_path / "summary.json"
        result = runner.invoke(cli, ["summary", *LOAN_ARGS, "--output", str(path)])
        assert result.exit_code == 0, result.output
        data = json.loads(path.read_text(encoding="utf-8"))
        assert round(data["summary"]["emi"]) == 8678
        assert "schedule" not in data

    def test_rejects_non_json_export(self, runner, tmp_path):
        result = runner.invoke(cli, ["summary", *LOAN_ARGS, "--output", str(tmp_path / "s.csv")])
        assert result.exit_code == 2

    @pytest.mark.parametrize(
        "args",
        [
            ["-a", "0", "-r", "8.5", "-t", "20"],
            ["-a", "1000000", "-r", "0", "-t", "20"],
            ["-a", "1000000", "-r", "8.5", "-t", "0"],
        ],
    )
    def test_non_positive_inputs(self, runner, args):
        result = runner.invoke(cli, ["summary", *args])
        assert result.exit_code == 2
        assert "must all be positive" in result.output

    def test_malformed_amount(self, runner):
        result = runner.invoke(cli, ["summary", "-a", "lots", "-r", "8.5", "-t", "20"])
        assert result.exit_code == 2
        assert "Invalid amount" in result.output


class TestScheduleCommand:
    def test_truncates_terminal_output(self, runner):
        result = runner.invoke(cli, ["schedule", *LOAN_ARGS, "--max-rows", "3"])
        assert result.exit_code == 0, result.output
        assert "Schedule has 240 rows; showing first 3 rows." in result.output
        assert "\n2\t2024\t₹8,678\t" in result.output
        assert "\n5\t2024\t" not in result.output

    def test_json_export(self, runner, tmp_path):
        path = tmp_path / "schedule.json"
        result = runner.invoke(cli, ["schedule", *LOAN_ARGS, "--output", str(path)])
        assert result.exit_code == 0, result.output
        data = json.loads(path.read_text(encoding="utf-8"))
        assert len(data["schedule"]) == 240
        assert data["schedule"][0]["month"] == 2
        assert data["schedule"][-1]["balance"] == 0

    def test_csv_export(self, runner, tmp_path):
        path = tmp_path / "schedule.csv"
        result = runner.invoke(cli, ["schedule", *LOAN_ARGS, "--output", str(path)])
        assert result.exit_code == 0, result.output
        with path.open(newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0] == ["Period", "Month", "Year", "Principal", "Interest", "Balance"]
        assert len(rows) == 241
        assert float(rows[-1][5]) == 0

    def test_start_from_environment(self, runner, tmp_path):
        path = tmp_path / "schedule.json"
        result = runner.invoke(
            cli,
            ["schedule", "-a", "1000000", "-r", "8.5", "-t", "1", "--output", str(path)],
            env={"EMI_CALC_SCHEDULE_START": "2030-12"},
        )
        assert result.exit_code == 0, result.output
        first = json.loads(path.read_text(encoding="utf-8"))["schedule"][0]
        assert (first["month"], first["year"]) == (1, 2031)

    def test_invalid_start(self, runner):
        result = runner.invoke(cli, ["schedule", "-a", "1000", "-r", "8", "-t", "1", "--start", "2024-14"])
        assert result.exit_code == 2


class TestCompareCommand:
    def test_compare(self, runner):
        result = runner.invoke(
            cli,
            ["compare", "--scenario1", "-a 1m -r 8.5 -t 20", "--scenario2", "-a 1m -r 8.5 -t 10"],
        )
        assert result.exit_code == 0, result.output
        assert "Comparison" in result.output
        assert "₹8,678" in result.output

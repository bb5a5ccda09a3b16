"""Tests for CLI commands."""

import json

import pytest
import yaml
from click.testing import CliRunner

from enrollsched.cli import main
from tests.conftest import make_form_dict, make_record_dict


@pytest.fixture
def cli_runner():
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run commands where no engine config can be discovered."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ENROLLSCHED_CONFIG", raising=False)


@pytest.fixture
def rollover_config(tmp_path):
    """Create a config file selecting the rollover month overflow policy."""
    path = tmp_path / "rollover.yaml"
    path.write_text("month_overflow: rollover\n", encoding="utf-8")
    return path


def write_form(tmp_path, **overrides):
    path = tmp_path / "form.yaml"
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(make_form_dict(**overrides), f, allow_unicode=True)
    return path


@pytest.mark.usefixtures("isolated_config")
class TestPreviewCommand:
    """Tests for the preview command."""

    def test_weekly(self, cli_runner):
        result = cli_runner.invoke(
            main, ["preview", "04/03/2024", "--frequency", "WEEKLY", "--day", "1", "--day", "3"]
        )
        assert result.exit_code == 0
        assert "04/03/2024 (Segunda)" in result.output

    def test_weekly_scans_forward(self, cli_runner):
        result = cli_runner.invoke(main, ["preview", "05/03/2024", "--frequency", "weekly", "--day", "0"])
        assert result.exit_code == 0
        assert "10/03/2024 (Domingo)" in result.output

    def test_monthly(self, cli_runner):
        result = cli_runner.invoke(
            main, ["preview", "20/03/2024", "--frequency", "MONTHLY", "--day-of-month", "5"]
        )
        assert result.exit_code == 0
        assert "05/04/2024 (Mensal)" in result.output

    def test_iso_start_date(self, cli_runner):
        result = cli_runner.invoke(main, ["preview", "2024-03-09", "--frequency", "DAILY"])
        assert result.exit_code == 0
        assert "09/03/2024 (Diário)" in result.output

    def test_no_frequency_is_one_time(self, cli_runner):
        result = cli_runner.invoke(main, ["preview", "04/03/2024"])
        assert result.exit_code == 0
        assert "04/03/2024 (Data Única)" in result.output

    def test_weekly_without_days_shows_hint(self, cli_runner):
        """Test that a calculation failure is shown as a hint, not a crash."""
        result = cli_runner.invoke(main, ["preview", "04/03/2024", "--frequency", "WEEKLY"])
        assert result.exit_code == 0
        assert "Selecione os dias da semana" in result.output

    def test_weekly_with_only_invalid_days_shows_hint(self, cli_runner):
        result = cli_runner.invoke(main, ["preview", "04/03/2024", "--frequency", "WEEKLY", "--day", "9"])
        assert result.exit_code == 0
        assert "Seleção de dias inválida" in result.output

    def test_custom_days_shows_hint(self, cli_runner):
        result = cli_runner.invoke(main, ["preview", "04/03/2024", "--frequency", "CUSTOM_DAYS"])
        assert result.exit_code == 0
        assert "Selecione uma Frequência válida" in result.output

    def test_invalid_day_of_month_shows_hint(self, cli_runner):
        result = cli_runner.invoke(
            main, ["preview", "04/03/2024", "--frequency", "MONTHLY", "--day-of-month", "40"]
        )
        assert result.exit_code == 0
        assert "Dia do Mês inválido (1-31)" in result.output

    def test_invalid_start_date(self, cli_runner):
        result = cli_runner.invoke(main, ["preview", "31/02/2024", "--frequency", "DAILY"])
        assert result.exit_code == 1
        assert "Defina uma Data de Início válida" in result.output

    def test_clamp_by_default(self, cli_runner):
        result = cli_runner.invoke(
            main, ["preview", "10/02/2024", "--frequency", "MONTHLY", "--day-of-month", "31"]
        )
        assert result.exit_code == 0
        assert "29/02/2024 (Mensal)" in result.output

    def test_rollover_from_config(self, cli_runner, rollover_config):
        result = cli_runner.invoke(
            main,
            [
                "--config",
                str(rollover_config),
                "preview",
                "10/02/2024",
                "--frequency",
                "MONTHLY",
                "--day-of-month",
                "31",
            ],
        )
        assert result.exit_code == 0
        assert "02/03/2024 (Mensal)" in result.output

    def test_rollover_from_env(self, cli_runner, rollover_config, monkeypatch):
        monkeypatch.setenv("ENROLLSCHED_CONFIG", str(rollover_config))
        result = cli_runner.invoke(
            main, ["preview", "10/02/2024", "--frequency", "MONTHLY", "--day-of-month", "31"]
        )
        assert result.exit_code == 0
        assert "02/03/2024 (Mensal)" in result.output


@pytest.mark.usefixtures("isolated_config")
class TestNormalizeCommand:
    """Tests for the normalize command."""

    def test_json_output(self, cli_runner, form_file):
        result = cli_runner.invoke(main, ["normalize", str(form_file)])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["startDate"] == "2024-03-04"
        assert data["price"] == 1234.56
        assert data["chargeSchedule"]["chargeDay"] == 10
        assert data["serviceSchedules"]["daysOfWeek"] == ["1", "3"]

    def test_yaml_output(self, cli_runner, form_file):
        result = cli_runner.invoke(main, ["normalize", str(form_file), "--format", "yaml"])
        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert data["clientId"] == "cli-1"
        assert data["chargeSchedule"]["recurrenceInterval"] == "MONTHLY"

    def test_invalid_form(self, cli_runner, tmp_path):
        form_path = write_form(tmp_path, startDate="2024-03-04")
        result = cli_runner.invoke(main, ["normalize", str(form_path)])
        assert result.exit_code == 1
        assert "startDate" in result.output

    def test_file_not_found(self, cli_runner):
        result = cli_runner.invoke(main, ["normalize", "/nonexistent/form.yaml"])
        assert result.exit_code != 0


@pytest.mark.usefixtures("isolated_config")
class TestValidateCommand:
    """Tests for the validate command."""

    def test_success(self, cli_runner, form_file):
        result = cli_runner.invoke(main, ["validate", str(form_file)])
        assert result.exit_code == 0
        assert "Validation successful" in result.output
        assert "Charge: Mensal (dia 10)" in result.output
        assert "Service: Semanal (Seg, Qua) 09:00 - 10:30" in result.output
        assert "First occurrence: 04/03/2024 (Segunda)" in result.output

    def test_with_verbose_flag(self, cli_runner, form_file):
        result = cli_runner.invoke(main, ["-v", "validate", str(form_file)])
        assert result.exit_code == 0
        assert "Validation successful" in result.output

    def test_missing_client(self, cli_runner, tmp_path):
        form_path = write_form(tmp_path, clientId="")
        result = cli_runner.invoke(main, ["validate", str(form_path)])
        assert result.exit_code == 1
        assert "Validation failed: clientId: Cliente é obrigatório." in result.output

    def test_bad_charge_day(self, cli_runner, tmp_path):
        charge = make_form_dict()["chargeSchedule"]
        charge["chargeDay"] = "32"
        form_path = write_form(tmp_path, chargeSchedule=charge)
        result = cli_runner.invoke(main, ["validate", str(form_path)])
        assert result.exit_code == 1
        assert "Validation failed" in result.output
        assert "chargeSchedule.chargeDay" in result.output

    def test_unreadable_form(self, cli_runner, tmp_path):
        bad_file = tmp_path / "form.yaml"
        bad_file.write_text("startDate: [unclosed\n", encoding="utf-8")
        result = cli_runner.invoke(main, ["validate", str(bad_file)])
        assert result.exit_code == 1
        assert "Could not read form" in result.output

    def test_one_time_without_service(self, cli_runner, tmp_path):
        form_path = write_form(
            tmp_path,
            chargeSchedule={"billingModel": "ONE_TIME", "chargeDay": "1", "dueDate": "10/04/2024"},
            serviceSchedule=None,
        )
        result = cli_runner.invoke(main, ["validate", str(form_path)])
        assert result.exit_code == 0
        assert "Charge: Única (10/04/2024)" in result.output
        assert "Service: Não definido" in result.output
        assert "First occurrence: 04/03/2024 (Data Única)" in result.output


@pytest.mark.usefixtures("isolated_config")
class TestSummarizeCommand:
    """Tests for the summarize command."""

    def test_table_format(self, cli_runner, records_file):
        result = cli_runner.invoke(main, ["summarize", str(records_file)])
        assert result.exit_code == 0
        assert "ID" in result.output
        assert "First occurrence" in result.output
        assert "enr-1" in result.output
        assert "Maria Souza" in result.output
        assert "Mensal (dia 10)" in result.output
        assert "enr-2" in result.output
        assert "Única (10/04/2024)" in result.output
        assert "Total: 2 enrollments" in result.output

    def test_json_format(self, cli_runner, records_file):
        result = cli_runner.invoke(main, ["summarize", str(records_file), "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert len(data) == 2
        assert data[0] == {
            "id": "enr-1",
            "client": "Maria Souza",
            "charge": "Mensal (dia 10)",
            "service": "Semanal (Seg, Qua) 09:00 - 10:30",
            "first_occurrence": "04/03/2024 (Segunda)",
        }
        assert data[1]["client"] == "cli-2"
        assert data[1]["service"] == "Não definido"
        assert data[1]["first_occurrence"] == "04/03/2024 (Data Única)"

    def test_empty_file(self, cli_runner, tmp_path):
        empty_file = tmp_path / "empty.yaml"
        empty_file.write_text("", encoding="utf-8")
        result = cli_runner.invoke(main, ["summarize", str(empty_file)])
        assert result.exit_code == 0
        assert "No enrollments found" in result.output

    def test_odd_record_does_not_hide_the_others(self, cli_runner, tmp_path):
        """Test that a stored record the form would reject is still summarized."""
        records = [
            make_record_dict(),
            make_record_dict(
                id="enr-odd",
                chargeSchedule={"billingModel": "RECURRING", "recurrenceInterval": "MONTHLY", "chargeDay": 0},
                serviceSchedules=[{"frequency": "BIWEEKLY"}],
            ),
        ]
        path = tmp_path / "records.json"
        path.write_text(json.dumps(records), encoding="utf-8")

        result = cli_runner.invoke(main, ["summarize", str(path), "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [row["id"] for row in data] == ["enr-1", "enr-odd"]
        assert data[0]["charge"] == "Mensal (dia 10)"
        assert data[1]["charge"] == "Mensal"
        assert data[1]["service"] == "BIWEEKLY"
        assert data[1]["first_occurrence"] == "Selecione uma Frequência válida"

    def test_odd_record_in_table(self, cli_runner, tmp_path):
        records = [
            make_record_dict(),
            make_record_dict(id="enr-odd", price="abc", serviceSchedules=[{"frequency": "BIWEEKLY"}]),
        ]
        path = tmp_path / "records.json"
        path.write_text(json.dumps(records), encoding="utf-8")

        result = cli_runner.invoke(main, ["summarize", str(path)])

        assert result.exit_code == 0
        assert "enr-1" in result.output
        assert "enr-odd" in result.output
        assert "Total: 2 enrollments" in result.output

    def test_invalid_records(self, cli_runner, tmp_path):
        bad_file = tmp_path / "records.yaml"
        bad_file.write_text("- 1\n- 2\n", encoding="utf-8")
        result = cli_runner.invoke(main, ["summarize", str(bad_file)])
        assert result.exit_code == 1
        assert "Error" in result.output


def test_version(cli_runner):
    result = cli_runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "1.0.0" in result.output

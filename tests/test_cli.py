"""Tests for the click command surface in cpf_cli.cli."""

import json
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from cpf_cli import __version__
from cpf_cli.checksum import normalize, validate
from cpf_cli.cli import main


@pytest.fixture
def runner():
    return CliRunner()


# ---- validate ----

class TestValidateCommand:
    def test_single_valid(self, runner):
        result = runner.invoke(main, ["validate", "529.982.247-25"])
        assert result.exit_code == 0
        assert json.loads(result.output) == [
            {"value": "529.982.247-25", "valid": True, "original": "529.982.247-25"}
        ]

    def test_single_invalid_still_exits_zero(self, runner):
        result = runner.invoke(main, ["validate", "113.111.111-11"])
        assert result.exit_code == 0
        assert json.loads(result.output)[0]["valid"] is False

    def test_length_only(self, runner):
        result = runner.invoke(main, ["validate", "--length-only", "12345678901"])
        assert json.loads(result.output)[0]["valid"] is True

    def test_file(self, runner, cpf_file):
        result = runner.invoke(main, ["validate", "--file", str(cpf_file)])
        assert result.exit_code == 0
        records = json.loads(result.output)
        assert [r["valid"] for r in records] == [True, False, True]

    def test_file_to_output(self, runner, cpf_file, tmp_path):
        out = tmp_path / "results.json"
        result = runner.invoke(main, ["validate", "--file", str(cpf_file), "--output", str(out)])
        assert result.exit_code == 0
        assert result.output == ""
        assert len(json.loads(out.read_text())) == 3

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, ["validate", "--file", str(tmp_path / "nope.txt")])
        assert result.exit_code == 1
        assert "failed to read" in result.output

    def test_missing_argument(self, runner):
        result = runner.invoke(main, ["validate"])
        assert result.exit_code == 2
        assert "Missing CPF to validate" in result.output


# ---- format ----

class TestFormatCommand:
    def test_single(self, runner):
        result = runner.invoke(main, ["format", "52998224725"])
        assert result.exit_code == 0
        assert result.output == "529.982.247-25\n"

    def test_single_bad_length(self, runner):
        result = runner.invoke(main, ["format", "123"])
        assert result.exit_code == 1
        assert "11 digits" in result.output

    def test_file_reports_per_line(self, runner, tmp_path):
        path = tmp_path / "in.txt"
        path.write_text("52998224725\n\n123\n")
        result = runner.invoke(main, ["format", "--file", str(path)])
        assert result.exit_code == 0
        records = json.loads(result.output)
        assert records[0] == {"value": "529.982.247-25", "original": "52998224725"}
        assert records[1]["value"] == "123"
        assert "error" in records[1]

    def test_single_to_output(self, runner, tmp_path):
        out = tmp_path / "nested" / "formatted.txt"
        result = runner.invoke(main, ["format", "52998224725", "--output", str(out)])
        assert result.exit_code == 0
        assert result.output == ""
        assert out.read_text() == "529.982.247-25\n"

    def test_single_bad_length_writes_nothing(self, runner, tmp_path):
        out = tmp_path / "formatted.txt"
        result = runner.invoke(main, ["format", "123", "-o", str(out)])
        assert result.exit_code == 1
        assert not out.exists()

    def test_missing_argument(self, runner):
        result = runner.invoke(main, ["format"])
        assert result.exit_code == 2


# ---- generate ----

class TestGenerateCommand:
    def test_default_one_formatted(self, runner):
        result = runner.invoke(main, ["generate"])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert len(lines) == 1
        assert len(lines[0]) == 14
        assert validate(lines[0])

    def test_count_unformatted(self, runner):
        result = runner.invoke(main, ["generate", "--count", "5", "--unformatted"])
        lines = result.output.splitlines()
        assert len(lines) == 5
        assert all(len(line) == 11 and line.isdigit() for line in lines)
        assert all(validate(line) for line in lines)

    def test_custom_separator_no_trailing_newline(self, runner):
        result = runner.invoke(main, ["generate", "-n", "3", "--separator", ","])
        assert not result.output.endswith("\n")
        assert len(result.output.split(",")) == 3

    def test_json(self, runner):
        result = runner.invoke(main, ["generate", "--json", "--count", "2", "--invalid"])
        records = json.loads(result.output)
        assert len(records) == 2
        assert all(list(r) == ["value"] for r in records)
        assert all(len(normalize(r["value"])) == 11 for r in records)

    def test_plain_output_file(self, runner, tmp_path):
        out = tmp_path / "cpfs.txt"
        result = runner.invoke(main, ["generate", "-n", "4", "--output", str(out)])
        assert result.exit_code == 0
        assert len(out.read_text().splitlines()) == 4

    def test_plain_output_creates_parent_dirs(self, runner, tmp_path):
        out = tmp_path / "new" / "dir" / "cpfs.txt"
        result = runner.invoke(main, ["generate", "-n", "2", "-o", str(out)])
        assert result.exit_code == 0
        assert len(out.read_text().splitlines()) == 2

    @pytest.mark.parametrize("count", ["0", "-2", "abc"])
    def test_bad_count(self, runner, count):
        result = runner.invoke(main, ["generate", "--count", count])
        assert result.exit_code == 2

    def test_unknown_option(self, runner):
        result = runner.invoke(main, ["generate", "--bogus"])
        assert result.exit_code == 2


# ---- version / telemetry ----

class TestVersionAndTelemetry:
    def test_version_command(self, runner):
        result = runner.invoke(main, ["version"])
        assert result.exit_code == 0
        assert f"CPF Tool version {__version__}" in result.output

    def test_bad_log_level_in_env(self, runner, monkeypatch):
        monkeypatch.setenv("CPF_LOG_LEVEL", "LOUD")
        result = runner.invoke(main, ["format", "52998224725"])
        assert result.exit_code == 1
        assert "invalid configuration" in result.output
        assert not isinstance(result.exception, AttributeError)

    def test_version_option(self, runner):
        result = runner.invoke(main, ["--version"])
        assert __version__ in result.output

    def test_status_defaults_to_disabled(self, runner):
        result = runner.invoke(main, ["telemetry", "status"])
        assert result.exit_code == 0
        assert "Telemetry is disabled" in result.output

    def test_enable_disable_roundtrip(self, runner, isolated_config):
        assert runner.invoke(main, ["telemetry", "enable"]).exit_code == 0
        assert json.loads((isolated_config / "telemetry.json").read_text()) == {"enabled": True}

        result = runner.invoke(main, ["telemetry", "status"])
        assert "no PostHog key" in result.output

        assert runner.invoke(main, ["telemetry", "disable"]).exit_code == 0
        result = runner.invoke(main, ["telemetry", "status"])
        assert "Telemetry is disabled" in result.output

    def test_commands_tracked_without_cpf_values(self, runner, isolated_config, monkeypatch):
        monkeypatch.setenv("CPF_POSTHOG_API_KEY", "test-key")
        isolated_config.mkdir(parents=True)
        (isolated_config / "telemetry.json").write_text('{"enabled": true}')

        resp = MagicMock()
        with patch("cpf_cli.telemetry.httpx.post", return_value=resp) as post:
            result = runner.invoke(main, ["validate", "529.982.247-25"])

        assert result.exit_code == 0
        post.assert_called_once()
        payload = json.dumps(post.call_args.kwargs["json"])
        assert "529.982.247-25" not in payload
        assert "52998224725" not in payload
        assert post.call_args.kwargs["json"]["properties"]["command"] == "validate"

    def test_failure_tracked(self, runner, isolated_config, monkeypatch):
        monkeypatch.setenv("CPF_POSTHOG_API_KEY", "test-key")
        isolated_config.mkdir(parents=True)
        (isolated_config / "telemetry.json").write_text('{"enabled": true}')

        with patch("cpf_cli.telemetry.httpx.post", return_value=MagicMock()) as post:
            result = runner.invoke(main, ["format", "123"])

        assert result.exit_code == 1
        properties = post.call_args.kwargs["json"]["properties"]
        assert properties["success"] is False
        assert "11 digits" in properties["error"]

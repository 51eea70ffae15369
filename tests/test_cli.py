"""Tests for the command-line interface."""

import json

import pytest
import yaml
from click.testing import CliRunner

from safetylayer import __version__
from safetylayer.cli import main
from safetylayer.tokens import SYSTEM_INSTRUCTION


SCENARIO = (
    "Contact john@example.com or 555-123-4567, card 4532015112830366, SSN 123-45-6789"
)
SANITIZED = "Contact [EMAIL_1] or [PHONE_1], card [CC_1], SSN [ID_1]"


@pytest.fixture
def runner():
    """Create CLI runner."""
    return CliRunner()


class TestScrubCommand:
    """Tests for the scrub command."""

    def test_scrub_text(self, runner):
        result = runner.invoke(main, ["scrub", "--text", SCENARIO])

        assert result.exit_code == 0
        assert SANITIZED in result.output
        assert "john@example.com" not in result.output

    def test_scrub_file_to_file(self, runner, tmp_path):
        """Test file input and output with a written secret map."""
        source = tmp_path / "in.txt"
        source.write_text(SCENARIO, encoding="utf-8")
        out = tmp_path / "out.txt"
        map_file = tmp_path / "map.json"

        result = runner.invoke(
            main,
            ["scrub", "-f", str(source), "--out", str(out), "--map-out", str(map_file)],
        )

        assert result.exit_code == 0
        assert out.read_text(encoding="utf-8") == SANITIZED
        entries = json.loads(map_file.read_text(encoding="utf-8"))
        assert [e["token"] for e in entries] == ["[EMAIL_1]", "[PHONE_1]", "[CC_1]", "[ID_1]"]

    def test_disable(self, runner):
        result = runner.invoke(
            main, ["scrub", "-t", SCENARIO, "--disable", "email", "--disable", "credit-card"]
        )

        assert result.exit_code == 0
        assert "john@example.com" in result.output
        assert "4532015112830366" in result.output
        assert "[PHONE_1]" in result.output

    def test_intensity(self, runner):
        result = runner.invoke(
            main, ["scrub", "-t", "4111-1111-1111-1112", "--intensity", "aggressive"]
        )

        assert result.exit_code == 0
        assert "[CC_1]" in result.output

    def test_json_output(self, runner, tmp_path):
        out = tmp_path / "out.json"
        result = runner.invoke(
            main, ["scrub", "-t", SCENARIO, "--output", "json", "--out", str(out)]
        )

        assert result.exit_code == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["sanitized_text"] == SANITIZED
        assert data["intensity"] == "standard"
        assert data["categories_scanned"] == ["EMAIL", "CC", "PHONE", "ID"]
        assert len(data["secret_map"]) == 4

    def test_smart_copy(self, runner, tmp_path):
        out = tmp_path / "out.txt"
        result = runner.invoke(
            main, ["scrub", "-t", SCENARIO, "--smart-copy", "--out", str(out)]
        )

        assert result.exit_code == 0
        assert out.read_text(encoding="utf-8") == SYSTEM_INSTRUCTION + SANITIZED

    def test_stats(self, runner):
        result = runner.invoke(main, ["scrub", "-t", SCENARIO, "--stats"])

        assert result.exit_code == 0
        assert "Tokenized 4 items" in result.output

    def test_config_file(self, runner, tmp_path):
        """Test settings taken from a configuration file."""
        config = tmp_path / "safetylayer.yml"
        config.write_text(yaml.dump({"options": {"ssn": False}}), encoding="utf-8")

        result = runner.invoke(main, ["scrub", "-t", SCENARIO, "-c", str(config)])

        assert result.exit_code == 0
        assert "123-45-6789" in result.output

    def test_strict_all_disabled(self, runner):
        """Test that strict mode turns an all-disabled scrub into an error."""
        args = ["scrub", "-t", SCENARIO, "--strict"]
        for name in ["email", "credit-card", "phone", "ssn"]:
            args += ["--disable", name]

        result = runner.invoke(main, args)

        assert result.exit_code == 2
        assert "No PII categories are enabled" in result.output

    def test_missing_input(self, runner):
        result = runner.invoke(main, ["scrub"])

        assert result.exit_code == 1
        assert "Must provide --text or --file" in result.output


class TestRestoreCommand:
    """Tests for the restore command."""

    def test_round_trip(self, runner, tmp_path):
        """Test scrubbing then restoring through the CLI."""
        map_file = tmp_path / "map.json"
        scrubbed = runner.invoke(
            main, ["scrub", "-t", SCENARIO, "--map-out", str(map_file), "--out", str(tmp_path / "s.txt")]
        )
        assert scrubbed.exit_code == 0

        result = runner.invoke(main, ["restore", "-t", SANITIZED, "--map", str(map_file)])

        assert result.exit_code == 0
        assert SCENARIO in result.output

    def test_restore_file(self, runner, tmp_path):
        map_file = tmp_path / "map.json"
        map_file.write_text(
            json.dumps([{"token": "[EMAIL_1]", "type": "EMAIL", "value": "a@b.com"}]),
            encoding="utf-8",
        )
        source = tmp_path / "reply.txt"
        source.write_text("Reply to [EMAIL_1] and [EMAIL_2]", encoding="utf-8")
        out = tmp_path / "restored.txt"

        result = runner.invoke(
            main, ["restore", "--in", str(source), "-m", str(map_file), "--out", str(out)]
        )

        assert result.exit_code == 0
        assert out.read_text(encoding="utf-8") == "Reply to a@b.com and [EMAIL_2]"

    def test_bad_map(self, runner, tmp_path):
        map_file = tmp_path / "map.json"
        map_file.write_text("{}", encoding="utf-8")

        result = runner.invoke(main, ["restore", "-t", "[EMAIL_1]", "-m", str(map_file)])

        assert result.exit_code == 2
        assert "Error:" in result.output


class TestInfoCommands:
    """Tests for count, list-patterns and version."""

    def test_count(self, runner, tmp_path):
        map_file = tmp_path / "map.json"
        runner.invoke(
            main,
            ["scrub", "-t", "a@b.com c@d.com 555-123-4567", "--map-out", str(map_file)],
        )

        result = runner.invoke(main, ["count", "--map", str(map_file)])

        assert result.exit_code == 0
        assert "3 tokens" in result.output
        assert "EMAIL" in result.output
        assert "PHONE" in result.output

    def test_list_patterns(self, runner):
        result = runner.invoke(main, ["list-patterns"])

        assert result.exit_code == 0
        for tag in ["[EMAIL_N]", "[CC_N]", "[PHONE_N]", "[ID_N]"]:
            assert tag in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

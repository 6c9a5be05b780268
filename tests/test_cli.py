"""Tests for the command line interface."""

import json

import pytest

import cli
from config import Config


@pytest.fixture
def cli_config():
    return Config(database_url="memory://", log_level="WARNING", _env_file=None)


class TestCLI:
    """Each invocation gets a fresh in-memory store."""

    def test_shorten(self, cli_config, capsys):
        exit_code = cli.main(["shorten", "example.com/cli", "--code", "clicode"], config=cli_config)

        assert exit_code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["short_code"] == "clicode"
        assert data["original_url"] == "http://example.com/cli"
        assert data["visits"] == 0

    def test_shorten_invalid_url(self, cli_config, capsys):
        exit_code = cli.main(["shorten", "not a url"], config=cli_config)

        assert exit_code == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        error = json.loads(captured.err.strip().splitlines()[-1])
        assert error["kind"] == "validation"

    def test_get_missing(self, cli_config, capsys):
        exit_code = cli.main(["get", "missing"], config=cli_config)

        assert exit_code == 1
        error = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert error["kind"] == "not_found"

    def test_stats_empty(self, cli_config, capsys):
        assert cli.main(["stats"], config=cli_config) == 0

        data = json.loads(capsys.readouterr().out)
        assert data == {"total_urls": 0, "total_visits": 0, "last_created": None}

    def test_list_empty(self, cli_config, capsys):
        assert cli.main(["list", "--limit", "5"], config=cli_config) == 0

        assert json.loads(capsys.readouterr().out) == []

    def test_sweep(self, cli_config, capsys):
        assert cli.main(["sweep", "--max-age-days", "1"], config=cli_config) == 0

        assert json.loads(capsys.readouterr().out) == {"deleted": 0}

    def test_sweep_rejects_zero_age(self, cli_config, capsys):
        assert cli.main(["sweep", "--max-age-days", "0"], config=cli_config) == 1

    def test_requires_command(self, cli_config):
        with pytest.raises(SystemExit):
            cli.main([], config=cli_config)

"""
Tests for the Typer CLI
"""
from typer.testing import CliRunner

from docker_relay.main import app

runner = CliRunner()


def test_translate_prints_command():
    result = runner.invoke(app, ["translate", "list all networks"])

    assert result.exit_code == 0
    assert result.stdout.strip() == "docker network ls"


def test_translate_explain_shows_rule():
    result = runner.invoke(app, ["translate", "--explain", "pull image nginx"])

    assert result.exit_code == 0
    assert "image_pull" in result.stdout


def test_translate_empty_phrase_fails():
    result = runner.invoke(app, ["translate", "   "])

    assert result.exit_code == 1


def test_run_dry_run_does_not_execute():
    result = runner.invoke(app, ["run", "--dry-run", "show me running containers"])

    assert result.exit_code == 0
    assert "docker ps" in result.stdout


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "docker-mcp-server v1.0.0" in result.stdout


def test_serve_rejects_unknown_log_level():
    result = runner.invoke(app, ["serve", "--log-level", "LOUD"])

    assert result.exit_code == 1

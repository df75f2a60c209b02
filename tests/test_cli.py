"""Tests for the command-line interface."""

import json
import logging

import pytest
import structlog
from typer.testing import CliRunner

from autoply import __version__, cli
from autoply.core.models import JobPosting, OutcomeStatus, Platform, SubmissionOutcome
from autoply.platforms import get_adapter
from autoply.utils.logging import configure_logging

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda: None)


@pytest.fixture
def live_logging(monkeypatch):
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level

    def configure():
        configure_logging()
        # Keep lazy loggers unpinned so later tests see their own configuration
        structlog.configure(cache_logger_on_first_use=False)

    monkeypatch.setattr(cli, "configure_logging", configure)
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestCli:
    """Command wiring and output."""

    def test_version(self):
        result = runner.invoke(cli.app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_platforms_table(self):
        result = runner.invoke(cli.app, ["platforms"])

        assert result.exit_code == 0
        assert "greenhouse" in result.output
        assert "workday" in result.output

    def test_platform_for_url(self):
        result = runner.invoke(cli.app, ["platforms", "https://jobs.lever.co/acme/1"])

        assert result.exit_code == 0
        assert result.output.strip() == "lever"

    def test_scrape_json(self, monkeypatch):
        async def fake_scrape(url, platform=None):
            return JobPosting(url=url, platform=Platform.LEVER, title="Designer", company="Acme Corp")

        monkeypatch.setattr(cli, "scrape_posting", fake_scrape)

        result = runner.invoke(cli.app, ["scrape", "https://jobs.lever.co/acme/1", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output)["company"] == "Acme Corp"

    def test_apply(self, monkeypatch, tmp_path):
        profile = tmp_path / "profile.json"
        profile.write_text(json.dumps({"name": "Ada Lovelace", "email": "ada@example.com"}))
        answers = tmp_path / "answers.json"
        answers.write_text(json.dumps({"lever_q_0": "Yes"}))
        received = {}

        async def fake_submit(url, options, platform=None):
            received["options"] = options
            return SubmissionOutcome(success=False, status=OutcomeStatus.BLOCKED, message="Sign in first")

        monkeypatch.setattr(cli, "submit_application", fake_submit)

        result = runner.invoke(
            cli.app,
            ["apply", "https://jobs.lever.co/acme/1", "--profile", str(profile), "--answers", str(answers)],
        )

        assert result.exit_code == 1
        assert "BLOCKED" in result.output
        assert received["options"].profile.first_name == "Ada"
        assert received["options"].answers == {"lever_q_0": "Yes"}

    def test_scrape_json_keeps_stdout_clean_when_adapters_log(self, live_logging, monkeypatch):
        async def fake_scrape(url, platform=None):
            get_adapter(Platform.LEVER).logger.info("Extracted posting", title="Designer")
            return JobPosting(url=url, platform=Platform.LEVER, title="Designer", company="Acme Corp")

        monkeypatch.setattr(cli, "scrape_posting", fake_scrape)

        result = runner.invoke(cli.app, ["scrape", "https://jobs.lever.co/acme/1", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["title"] == "Designer"
        assert "Extracted posting" in result.stderr

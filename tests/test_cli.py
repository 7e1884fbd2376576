"""
ReadingList Sync v1 - CLI Tests
"""

import json

import pytest
from click.testing import CliRunner

from conftest import BASE_TIME, FakePlutil, bookmarks_document, minutes, reading_list_item
from readinglist import __version__
from readinglist import safari_parser
from readinglist.cli import cli


@pytest.fixture
def env(monkeypatch, settings_path, bookmarks_path):
    monkeypatch.setenv("READINGLIST_SETTINGS_PATH", str(settings_path))
    monkeypatch.setenv("SAFARI_BOOKMARKS_PATH", str(bookmarks_path))
    monkeypatch.setenv("NOTIFICATIONS_ENABLED", "false")


@pytest.fixture
def plutil(monkeypatch):
    """Replace the plutil conversion with a canned document."""

    def _install(items, include_reading_list=True) -> FakePlutil:
        fake = FakePlutil(bookmarks_document(items, include_reading_list=include_reading_list))
        monkeypatch.setattr(safari_parser.subprocess, "run", fake)
        return fake

    return _install


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def write_settings(settings_path, **values):
    record = {"last_sync": "1970-01-01T00:00:00Z", "username": None, "password": None}
    record.update(values)
    settings_path.write_text(json.dumps({"settings": record}))


@pytest.mark.usefixtures("env")
class TestSyncCommand:
    """Tests for the default sync pass."""

    def test_no_arguments_runs_sync(self, runner, plutil, settings_path):
        write_settings(settings_path, username="u", password="p")
        plutil([])

        result = runner.invoke(cli, [])

        assert result.exit_code == 0
        assert "No links to transfer." in result.output
        saved = json.loads(settings_path.read_text())["settings"]
        assert saved["last_sync"] != "1970-01-01T00:00:00Z"

    def test_first_run_creates_settings(self, runner, plutil, settings_path):
        plutil([])

        result = runner.invoke(cli, ["sync"])

        assert result.exit_code == 0
        assert "Please add your Instapaper credentials" in result.output
        assert settings_path.exists()

    def test_missing_credentials_exits_nonzero(self, runner, plutil):
        plutil([reading_list_item("https://a.example.com/", added=BASE_TIME)])

        result = runner.invoke(cli, [])

        assert result.exit_code == 1
        assert "Username required" in result.output

    def test_reading_list_not_found_exits_nonzero(self, runner, plutil, settings_path):
        write_settings(settings_path, username="u", password="p")
        plutil(None, include_reading_list=False)

        result = runner.invoke(cli, [])

        assert result.exit_code == 1
        assert "Error:" in result.output


@pytest.mark.usefixtures("env")
class TestStatusCommand:
    """Tests for the read-only status view."""

    def test_lists_pending_items(self, runner, plutil, settings_path):
        write_settings(settings_path)
        plutil([
            reading_list_item("https://a.example.com/", added=BASE_TIME),
            reading_list_item("https://b.example.com/", added=BASE_TIME, viewed=BASE_TIME + minutes(1)),
        ])

        result = runner.invoke(cli, ["status"])

        assert result.exit_code == 0
        assert "https://a.example.com/" in result.output
        assert "https://b.example.com/" not in result.output
        assert "missing" in result.output

    def test_nothing_pending(self, runner, plutil, settings_path):
        write_settings(settings_path, last_sync="2100-01-01T00:00:00Z")
        plutil([reading_list_item("https://a.example.com/", added=BASE_TIME)])

        result = runner.invoke(cli, ["status"])

        assert result.exit_code == 0
        assert "No links to transfer." in result.output

    def test_does_not_move_watermark(self, runner, plutil, settings_path):
        write_settings(settings_path)
        plutil([])

        runner.invoke(cli, ["status"])

        assert json.loads(settings_path.read_text())["settings"]["last_sync"] == "1970-01-01T00:00:00Z"


@pytest.mark.usefixtures("env")
def test_credentials_command(runner, settings_path):
    result = runner.invoke(cli, ["credentials"], input="me@example.com\nhunter2\n")

    assert result.exit_code == 0
    saved = json.loads(settings_path.read_text())["settings"]
    assert saved["username"] == "me@example.com"
    assert saved["password"] == "hunter2"


def test_version(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output

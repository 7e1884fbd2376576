"""
ReadingList Sync v1 - Test Configuration and Fixtures

Shared fixtures for the unit tests.
"""

import io
import plistlib
import subprocess
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from rich.console import Console

from readinglist.config import AppSettings, PathSettings, SyncConfig
from readinglist.notifier import Notifier
from readinglist.safari_parser import SafariReadingListParser
from readinglist.settings_store import SettingsStore

# Naive UTC, the way plistlib returns Safari dates
BASE_TIME = datetime(2024, 3, 1, 12, 0, 0)


def reading_list_item(
    url: str,
    added: datetime | None = None,
    viewed: datetime | None = None,
    title: str | None = None,
    with_metadata: bool = True,
) -> dict:
    """Build a Reading List child node as it appears in Bookmarks.plist."""
    item = {"URLString": url, "WebBookmarkType": "WebBookmarkTypeLeaf"}
    if title:
        item["URIDictionary"] = {"title": title}
    if with_metadata:
        metadata = {"PreviewText": f"Preview of {url}"}
        if added is not None:
            metadata["DateAdded"] = added
        if viewed is not None:
            metadata["DateLastViewed"] = viewed
        item["ReadingList"] = metadata
    return item


def bookmarks_document(items: list[dict] | None, include_reading_list: bool = True) -> dict:
    """Build a Bookmarks.plist root with a bookmarks bar and a reading list."""
    children = [
        {
            "Title": "BookmarksBar",
            "WebBookmarkType": "WebBookmarkTypeList",
            "Children": [{"URLString": "https://bar.example.com/"}],
        }
    ]
    if include_reading_list:
        children.append(
            {
                "Title": "com.apple.ReadingList",
                "WebBookmarkType": "WebBookmarkTypeList",
                "Children": items or [],
            }
        )
    return {"Title": "", "WebBookmarkType": "WebBookmarkTypeList", "Children": children}


class FakePlutil:
    """Stands in for subprocess.run when invoking plutil."""

    def __init__(self, document: dict | None = None, returncode: int = 0, stdout: bytes | None = None):
        self.document = document
        self.returncode = returncode
        self.stdout = stdout
        self.calls: list[list[str]] = []

    def __call__(self, args, **kwargs) -> subprocess.CompletedProcess:
        self.calls.append(list(args))
        if self.stdout is not None:
            stdout = self.stdout
        elif self.document is not None:
            stdout = plistlib.dumps(self.document, fmt=plistlib.FMT_XML)
        else:
            stdout = b""
        stderr = b"" if self.returncode == 0 else b"conversion failed"
        return subprocess.CompletedProcess(args, self.returncode, stdout=stdout, stderr=stderr)


class RecordingNotifier(Notifier):
    """Notifier that records calls instead of launching anything."""

    def __init__(self):
        super().__init__(icon_path=None, enabled=True)
        self.calls: list[tuple[str, str]] = []

    def notify(self, subtitle: str, message: str) -> None:
        self.calls.append((subtitle, message))


@pytest.fixture
def console() -> Console:
    """Console writing to an in-memory buffer, read back with console.file.getvalue()."""
    return Console(file=io.StringIO(), width=300, color_system=None)


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    return tmp_path / "readinglist_instapaper.json"


@pytest.fixture
def bookmarks_path(tmp_path: Path) -> Path:
    path = tmp_path / "Bookmarks.plist"
    path.write_bytes(b"bplist00")
    return path


@pytest.fixture
def store(settings_path: Path, console: Console) -> SettingsStore:
    return SettingsStore(settings_path, console=console)


@pytest.fixture
def config(settings_path: Path, bookmarks_path: Path) -> SyncConfig:
    return SyncConfig(
        paths=PathSettings(settings_path=settings_path, bookmarks_path=bookmarks_path),
        app=AppSettings(notifications_enabled=False),
    )


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def make_source(bookmarks_path: Path):
    """Factory for a parser fed by a FakePlutil."""

    def _make(items: list[dict] | None = None, **kwargs) -> SafariReadingListParser:
        fake = FakePlutil(bookmarks_document(items), **kwargs)
        return SafariReadingListParser(bookmarks_path, run=fake)

    return _make


def minutes(n: int) -> timedelta:
    return timedelta(minutes=n)

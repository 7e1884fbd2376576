"""
ReadingList Sync v1 - Safari Reading List Parser

Reads Safari's Bookmarks.plist and extracts the Reading List entries.
The binary plist is converted to XML with plutil before parsing.
"""

import logging
import plistlib
import subprocess
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterator
from xml.parsers.expat import ExpatError

from .errors import ReadingListNotFound, SourceUnavailable

logger = logging.getLogger(__name__)

# Stands in for a DateLastViewed value that is present but not a date
VIEWED_AT_UNKNOWN_TIME = datetime.min.replace(tzinfo=timezone.utc)


@dataclass
class BookmarkEntry:
    """Represents a single Reading List item"""
    url: str
    date_added: datetime | None
    date_last_viewed: datetime | None = None
    title: str | None = None
    preview_text: str | None = None

    def __post_init__(self):
        # Normalize URL by stripping whitespace
        self.url = self.url.strip()
        if self.title:
            self.title = self.title.strip() or None

    @property
    def is_unread(self) -> bool:
        return self.date_last_viewed is None


def _as_utc(value: Any) -> datetime | None:
    """plistlib yields naive datetimes that are already in UTC"""
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SafariReadingListParser:
    """
    Parser for the Safari bookmarks property list.

    The document root has a ``Children`` list of top-level categories. The
    Reading List is the category titled ``com.apple.ReadingList``; each of
    its children carries a ``ReadingList`` sub-record with the dates.

    Example structure:
        Children
            - Title: BookmarksBar
            - Title: com.apple.ReadingList
                Children
                    - URLString: https://...
                      ReadingList: {DateAdded, DateLastViewed, PreviewText}
    """

    READING_LIST_TITLE = "com.apple.ReadingList"

    def __init__(
        self,
        file_path: str | Path,
        plutil_path: str = "/usr/bin/plutil",
        run: Callable[..., subprocess.CompletedProcess] | None = None,
    ):
        self.file_path = Path(file_path)
        self.plutil_path = plutil_path
        self._run = run or subprocess.run

    def fetch_reading_list(self) -> list[BookmarkEntry]:
        """
        Convert the bookmarks file and return all valid Reading List entries.

        Raises:
            SourceUnavailable: If the file cannot be converted or parsed
            ReadingListNotFound: If there is no Reading List category
        """
        document = self.load_document()
        return self.parse(document)

    def load_document(self) -> dict:
        """Run plutil and parse its XML output into a dictionary"""
        if not self.file_path.exists():
            raise SourceUnavailable(f"Bookmarks file not found: {self.file_path}")

        logger.info(f"Converting {self.file_path} with {self.plutil_path}")
        try:
            result = self._run(
                [self.plutil_path, "-convert", "xml1", "-o", "-", str(self.file_path)],
                capture_output=True,
            )
        except OSError as e:
            raise SourceUnavailable(f"Cannot run {self.plutil_path}: {e}") from e

        if result.returncode != 0:
            stderr = (result.stderr or b"").decode("utf-8", "replace").strip()
            raise SourceUnavailable(
                f"{self.plutil_path} exited with status {result.returncode}: {stderr}"
            )

        try:
            document = plistlib.loads(result.stdout)
        except (plistlib.InvalidFileException, ExpatError, ValueError) as e:
            raise SourceUnavailable(f"Cannot parse bookmarks plist: {e}") from e

        if not isinstance(document, dict):
            raise SourceUnavailable("Bookmarks plist root is not a dictionary")
        return document

    def parse(self, document: dict) -> list[BookmarkEntry]:
        """
        Extract Reading List entries from an already loaded document.

        Returns:
            List of BookmarkEntry objects in document order
        """
        return list(self._iter_entries(self.find_reading_list(document)))

    def find_reading_list(self, document: dict) -> dict:
        """Locate the Reading List category node"""
        for category in document.get("Children") or []:
            if isinstance(category, dict) and category.get("Title") == self.READING_LIST_TITLE:
                return category

        raise ReadingListNotFound(
            f"No '{self.READING_LIST_TITLE}' category in {self.file_path}"
        )

    def _iter_entries(self, reading_list: dict) -> Iterator[BookmarkEntry]:
        for child in reading_list.get("Children") or []:
            if not isinstance(child, dict):
                logger.debug(f"Skipping non-dictionary child: {child!r}")
                continue

            metadata = child.get("ReadingList")
            if not isinstance(metadata, dict):
                logger.debug(f"Skipping child without ReadingList record: {child.get('URLString')}")
                continue

            url = child.get("URLString")
            if not url:
                continue

            date_added = _as_utc(metadata.get("DateAdded"))
            if date_added is None:
                logger.debug(f"Skipping {url}: no DateAdded")
                continue

            date_last_viewed = None
            if "DateLastViewed" in metadata:
                date_last_viewed = _as_utc(metadata["DateLastViewed"]) or VIEWED_AT_UNKNOWN_TIME

            yield BookmarkEntry(
                url=url,
                date_added=date_added,
                date_last_viewed=date_last_viewed,
                title=(child.get("URIDictionary") or {}).get("title"),
                preview_text=metadata.get("PreviewText"),
            )

    def get_stats(self, entries: list[BookmarkEntry] | None = None) -> dict:
        """
        Summarize the Reading List.

        Returns:
            Dictionary with total, unread and read counts
        """
        if entries is None:
            entries = self.fetch_reading_list()
        unread = sum(1 for entry in entries if entry.is_unread)
        return {
            "file_path": str(self.file_path),
            "total": len(entries),
            "unread": unread,
            "read": len(entries) - unread,
        }

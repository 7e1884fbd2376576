"""
ReadingList Sync v1 - Sync Orchestrator

Runs one sync pass: read settings, select new unread Reading List items,
publish each one to Instapaper, notify, and move the watermark.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

import httpx
from rich.console import Console
from rich.markup import escape

from .config import SyncConfig
from .errors import ErrorKind, SyncError
from .instapaper import InstapaperClient
from .notifier import Notifier
from .safari_parser import SafariReadingListParser
from .settings_store import Credentials, SettingsStore
from .sync_filter import select

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Result of a sync run"""
    watermark: datetime | None = None
    new_watermark: datetime | None = None
    selected: list[str] = field(default_factory=list)
    published: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    error: ErrorKind | None = None
    error_message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SyncOrchestrator:
    """
    Ties the settings store, Reading List source, Instapaper client and
    notifier together.

    Fatal errors raised by the collaborators are returned as
    ``SyncResult.error``. Errors hit before publishing leave the watermark
    untouched. A transport error stops the batch, but the watermark still
    moves to the time captured when the run started.
    """

    def __init__(
        self,
        config: SyncConfig,
        store: SettingsStore | None = None,
        source: SafariReadingListParser | None = None,
        client: InstapaperClient | None = None,
        notifier: Notifier | None = None,
        console: Console | None = None,
    ):
        self.config = config
        self.console = console or Console()
        self.store = store or SettingsStore(config.settings_path, console=self.console)
        self.source = source or SafariReadingListParser(
            config.bookmarks_path, plutil_path=config.paths.plutil_path
        )
        self.client = client
        self.notifier = notifier or Notifier(
            icon_path=config.icon_path, enabled=config.app.notifications_enabled
        )

    def run(self, now: datetime | None = None) -> SyncResult:
        """
        Perform one sync pass.

        Args:
            now: Override for the run start time, used as the new watermark

        Returns:
            SyncResult describing what happened
        """
        result = SyncResult()
        now = now or datetime.now(timezone.utc)

        try:
            settings = self.store.read()
            result.watermark = settings.last_sync

            self.console.print(
                f"Fetching Reading List from {escape(str(self.config.bookmarks_path))}...",
                highlight=False,
            )
            entries = self.source.fetch_reading_list()
            urls = select(entries, result.watermark)
            result.selected = urls
            logger.info(f"{len(urls)} of {len(entries)} entries selected since {result.watermark}")

            credentials = settings.credentials() if urls else None
        except SyncError as e:
            return self._fail(result, e.kind, e)

        if urls:
            try:
                self._publish_all(urls, credentials, result)
            except httpx.TransportError as e:
                self._fail(result, ErrorKind.TRANSPORT, e)
        else:
            self.console.print("No links to transfer.")

        try:
            self.store.save_last_sync(now)
        except SyncError as e:
            return self._fail(result, e.kind, e)

        result.new_watermark = now
        return result

    def _publish_all(self, urls: list[str], credentials: Credentials, result: SyncResult) -> None:
        client = self.client or InstapaperClient(
            api_base=self.config.instapaper.api_base,
            timeout=self.config.instapaper.timeout,
            console=self.console,
        )
        try:
            for index, url in enumerate(urls):
                try:
                    success = client.publish(url, credentials)
                except httpx.TransportError:
                    result.skipped = urls[index:]
                    raise

                if success:
                    result.published.append(url)
                    self.notifier.notify("Added to Instapaper", f"Successfully added {url}")
                else:
                    result.failed.append(url)
                    self.notifier.notify("Error Adding to Instapaper", f"Could not add {url}")
        finally:
            if client is not self.client:
                client.close()

    def _fail(self, result: SyncResult, kind: ErrorKind, error: Exception) -> SyncResult:
        logger.error(f"Sync failed ({kind.value}): {error}")
        result.error = kind
        result.error_message = str(error)
        return result

"""
ReadingList Sync v1 - Settings Store

Persists the sync watermark and Instapaper credentials in a single JSON
record. All access goes through a locked read-apply-commit transaction.
"""

import fcntl
import json
import logging
import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterator

from pydantic import BaseModel, ValidationError, field_validator
from rich.console import Console
from rich.markup import escape

from .errors import MissingCredentials, SettingsStoreError

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class Credentials:
    """Instapaper basic auth pair"""
    username: str
    password: str


class Settings(BaseModel):
    """The persisted settings record"""
    last_sync: datetime = EPOCH
    username: str | None = None
    password: str | None = None

    @field_validator("last_sync")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        # Hand-edited files may carry naive timestamps
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @property
    def has_credentials(self) -> bool:
        return bool(self.username) and bool(self.password)

    def credentials(self) -> Credentials:
        """
        Return the configured credentials.

        Raises:
            MissingCredentials: If username or password is unset
        """
        if not self.username:
            raise MissingCredentials("Username required for syncing")
        if not self.password:
            raise MissingCredentials("Password required for syncing")
        return Credentials(self.username, self.password)


@dataclass
class StoreRecord:
    """Mutable view of the stored record inside a transaction"""
    settings: Settings | None


class SettingsStore:
    """
    JSON-backed settings record.

    The file holds a single top-level ``settings`` key. Writes go to a
    temporary file that then replaces the record file.
    """

    ROOT_KEY = "settings"

    def __init__(self, path: str | Path, console: Console | None = None):
        self.path = Path(path)
        self.lock_path = self.path.with_name(self.path.name + ".lock")
        self.console = console or Console()

    @contextmanager
    def transaction(self) -> Iterator[StoreRecord]:
        """
        Open the store under an exclusive lock and yield its record.

        Changes made to ``record.settings`` are committed when the block
        exits normally. Nothing is written if the block raises.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            lock_file = open(self.lock_path, "a")
        except OSError as e:
            raise SettingsStoreError(f"Cannot open settings lock {self.lock_path}: {e}") from e

        with lock_file:
            fcntl.flock(lock_file, fcntl.LOCK_EX)
            try:
                loaded = self._load()
                record = StoreRecord(settings=loaded.model_copy() if loaded else None)
                yield record
                if record.settings is not None and record.settings != loaded:
                    self._write(record.settings)
            finally:
                fcntl.flock(lock_file, fcntl.LOCK_UN)

    def read(self) -> Settings:
        """
        Return the stored settings, creating the default record on first use.
        """
        with self.transaction() as record:
            if record.settings is None:
                record.settings = Settings()
                self._announce_first_run()
            return record.settings

    def update(self, mutator: Callable[[Settings], Settings]) -> Settings:
        """Apply ``mutator`` to the current record and persist the result"""
        with self.transaction() as record:
            record.settings = mutator(record.settings or Settings())
            return record.settings

    def save_last_sync(self, when: datetime) -> Settings:
        return self.update(lambda s: s.model_copy(update={"last_sync": when}))

    def save_credentials(self, username: str, password: str) -> Settings:
        return self.update(
            lambda s: s.model_copy(update={"username": username, "password": password})
        )

    def _announce_first_run(self) -> None:
        logger.warning(f"Created default settings at {self.path}")
        self.console.print(
            f"[yellow]Please add your Instapaper credentials in {escape(str(self.path))} file![/yellow]"
        )

    def _load(self) -> Settings | None:
        if not self.path.exists():
            return None

        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            raise SettingsStoreError(f"Cannot read settings file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise SettingsStoreError(f"Settings file {self.path} is not a JSON object")

        raw = data.get(self.ROOT_KEY)
        if not raw:
            return None

        try:
            return Settings.model_validate(raw)
        except ValidationError as e:
            raise SettingsStoreError(f"Invalid settings in {self.path}: {e}") from e

    def _write(self, settings: Settings) -> None:
        payload = {self.ROOT_KEY: settings.model_dump(mode="json")}

        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            # The record holds a password
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            raise SettingsStoreError(f"Cannot write settings file {self.path}: {e}") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

        logger.debug(f"Wrote settings to {self.path}")

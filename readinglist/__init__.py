"""
ReadingList Sync v1 - Reading List to Instapaper

This module reads Safari's Reading List and sends unread items added
since the last run to Instapaper.
"""

__version__ = "1.0.0"

from .errors import (
    ErrorKind,
    MissingCredentials,
    ReadingListNotFound,
    SettingsStoreError,
    SourceUnavailable,
    SyncError,
)
from .safari_parser import BookmarkEntry, SafariReadingListParser
from .settings_store import Credentials, Settings, SettingsStore
from .sync import SyncOrchestrator, SyncResult

__all__ = [
    "BookmarkEntry",
    "Credentials",
    "ErrorKind",
    "MissingCredentials",
    "ReadingListNotFound",
    "SafariReadingListParser",
    "Settings",
    "SettingsStore",
    "SettingsStoreError",
    "SourceUnavailable",
    "SyncError",
    "SyncOrchestrator",
    "SyncResult",
]

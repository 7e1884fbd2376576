"""
ReadingList Sync v1 - Error Types

Every failure a sync run can hit carries an ErrorKind so the orchestrator
can report it as a result instead of letting it escape.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Fatal failure categories of a sync run"""
    MISSING_CREDENTIALS = "missing_credentials"
    READING_LIST_NOT_FOUND = "reading_list_not_found"
    SOURCE_UNAVAILABLE = "source_unavailable"
    SETTINGS_UNAVAILABLE = "settings_unavailable"
    TRANSPORT = "transport"


class SyncError(Exception):
    """Base class for fatal sync errors."""
    kind: ErrorKind


class MissingCredentials(SyncError):
    """Instapaper username or password has not been configured."""
    kind = ErrorKind.MISSING_CREDENTIALS


class ReadingListNotFound(SyncError):
    """The bookmarks document has no reading list node."""
    kind = ErrorKind.READING_LIST_NOT_FOUND


class SourceUnavailable(SyncError):
    """The bookmarks file could not be converted or parsed."""
    kind = ErrorKind.SOURCE_UNAVAILABLE


class SettingsStoreError(SyncError):
    """The settings file could not be read or written."""
    kind = ErrorKind.SETTINGS_UNAVAILABLE

"""
ReadingList Sync v1 - Sync Filter

Selects the Reading List entries that still have to be sent to Instapaper.
"""

from datetime import datetime
from typing import Iterable

from .safari_parser import BookmarkEntry


def select(entries: Iterable[BookmarkEntry], watermark: datetime) -> list[str]:
    """
    Pick unread entries added after the watermark, oldest first.

    Args:
        entries: Reading List entries in any order
        watermark: Time of the previous sync

    Returns:
        URLs ordered by date added
    """
    pending = [
        entry
        for entry in entries
        if entry.date_last_viewed is None
        and entry.date_added is not None
        and entry.date_added > watermark
    ]
    pending.sort(key=lambda entry: entry.date_added)
    return [entry.url for entry in pending]

"""
ReadingList Sync v1 - Desktop Notifications

Best-effort macOS notifications for each transfer outcome.
"""

import logging
import shutil
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


def _applescript_escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


class Notifier:
    """
    Sends a notification through terminal-notifier when it is installed,
    otherwise through osascript. Launch failures are logged and ignored.
    """

    TITLE = "Instapaper"
    OSASCRIPT = "/usr/bin/osascript"

    def __init__(self, icon_path: Path | None = None, enabled: bool = True):
        self.icon_path = icon_path
        self.enabled = enabled

    def notify(self, subtitle: str, message: str) -> None:
        if not self.enabled:
            return

        command = self.build_command(subtitle, message)
        try:
            subprocess.Popen(
                command,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except (OSError, ValueError) as e:
            logger.warning(f"Notification failed ({e})")

    def build_command(self, subtitle: str, message: str) -> list[str]:
        terminal_notifier = shutil.which("terminal-notifier")
        if terminal_notifier:
            command = [
                terminal_notifier,
                "-title", self.TITLE,
                "-subtitle", subtitle,
                "-message", message,
            ]
            if self.icon_path and self.icon_path.exists():
                command += ["-appIcon", str(self.icon_path)]
            return command

        script = (
            f'display notification "{_applescript_escape(message)}" '
            f'with title "{self.TITLE}" '
            f'subtitle "{_applescript_escape(subtitle)}"'
        )
        return [self.OSASCRIPT, "-e", script]

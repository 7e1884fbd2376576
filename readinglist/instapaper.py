"""
ReadingList Sync v1 - Instapaper Client

Submits URLs to Instapaper's simple API, one request per URL.
"""

import logging

import httpx
from rich.console import Console
from rich.markup import escape

from .settings_store import Credentials

logger = logging.getLogger(__name__)


class InstapaperClient:
    """
    Client for ``GET /api/add`` with HTTP basic auth.

    Non-2xx responses are reported as ``False``. Transport errors
    (connection, TLS, timeout) are raised as ``httpx.TransportError``.
    """

    ADD_PATH = "/api/add"

    def __init__(
        self,
        api_base: str = "https://www.instapaper.com",
        timeout: float = 30.0,
        console: Console | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.console = console or Console()
        self._client = httpx.Client(
            base_url=api_base,
            timeout=timeout,
            verify=True,
            transport=transport,
        )

    def __enter__(self) -> "InstapaperClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def publish(self, url: str, credentials: Credentials) -> bool:
        """
        Save a URL to Instapaper.

        Args:
            url: The page to save
            credentials: Instapaper username and password

        Returns:
            True if Instapaper answered with a 2xx status
        """
        response = self._client.get(
            self.ADD_PATH,
            params={"url": url},
            auth=(credentials.username, credentials.password),
        )

        success = response.is_success
        status = "[green]completed[/green]" if success else "[red]failed[/red]"
        self.console.print(f"Saving '{escape(url)}' to Instapaper...\t{status}", highlight=False)

        if not success:
            logger.warning(f"Instapaper returned status {response.status_code} for {url}")
        return success

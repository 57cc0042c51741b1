"""HTTP page fetching shared by the release page services."""

import logging
import time

import requests
from bs4 import BeautifulSoup

from ..config import HttpConfig
from ..exceptions import AlbumFetchError

logger = logging.getLogger(__name__)


class PageFetcher:
    """Downloads release pages with a browser User-Agent and retry logic."""

    def __init__(self, config: HttpConfig | None = None) -> None:
        self._config = config or HttpConfig()

    def fetch_html(self, url: str) -> str:
        """Download a page and return its body.

        Connection failures are retried with exponential backoff. A response
        other than 200 is not retried.

        Raises:
            AlbumFetchError: if the page cannot be downloaded.
        """
        max_retries = max(1, self._config.max_retries)
        for attempt in range(max_retries):
            try:
                response = requests.get(
                    url,
                    headers={"User-Agent": self._config.user_agent},
                    timeout=self._config.timeout,
                )
            except requests.RequestException as e:
                if attempt < max_retries - 1:
                    sleep_time = 2**attempt  # Exponential backoff: 1, 2, 4 seconds
                    logger.debug(
                        f"Request for {url} failed (attempt {attempt + 1}/{max_retries}), "
                        f"retrying in {sleep_time}s: {e}"
                    )
                    time.sleep(sleep_time)
                    continue
                raise AlbumFetchError(f"request failed for {url}: {e}") from e

            if response.status_code != 200:
                raise AlbumFetchError(
                    f"status code error: {response.status_code} {response.reason}"
                )
            return response.text

        raise AlbumFetchError(f"request failed for {url}")

    def fetch_document(self, url: str) -> BeautifulSoup:
        """Download and parse a page."""
        return parse_html(self.fetch_html(url))


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")

"""Remote notice catalog client for cdk-notices."""

import asyncio
import json
import ssl
from typing import Any, List, Optional

import aiohttp
import certifi
from aiohttp import ClientTimeout

from ..core.matcher import Notice
from ..utils.logging import get_logger


NOTICES_URL = "https://cli.cdk.dev-tools.aws.dev/notices.json"
DEFAULT_TIMEOUT_SECONDS = 3.0


class WebsiteNoticeDataSource:
    """Downloads the notice catalog published on the notices website.

    Any failure (network error, timeout, unexpected status, bad JSON or an
    unexpected document shape) yields an empty catalog instead of an error.
    """

    def __init__(
        self,
        url: str = NOTICES_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[aiohttp.ClientSession] = None
    ) -> None:
        """Initialize the website data source.

        Args:
            url: Location of the notices document
            timeout: Total request timeout in seconds
            session: Optional aiohttp session for connection reuse
        """
        self.url = url
        self.timeout = ClientTimeout(total=timeout)
        self.logger = get_logger("WebsiteNoticeDataSource")
        self._session = session
        self._ssl_context = ssl.create_default_context(cafile=certifi.where())

    async def fetch(self) -> List[Notice]:
        """Fetch the notice catalog.

        Returns:
            Parsed notices, or an empty list on any failure
        """
        try:
            if self._session is not None:
                return await self._fetch_with(self._session)

            connector = aiohttp.TCPConnector(ssl=self._ssl_context)
            async with aiohttp.ClientSession(timeout=self.timeout, connector=connector) as session:
                return await self._fetch_with(session)
        except asyncio.TimeoutError:
            self.logger.debug(f"Timed out fetching notices from {self.url}")
        except aiohttp.ClientError as e:
            self.logger.debug(f"Failed to fetch notices from {self.url}: {e}")
        return []

    async def _fetch_with(self, session: aiohttp.ClientSession) -> List[Notice]:
        async with session.get(self.url, timeout=self.timeout) as response:
            if response.status != 200:
                self.logger.debug(f"Notices endpoint returned status {response.status}")
                return []

            body = await response.read()

        try:
            data = json.loads(body)
        except ValueError as e:
            # Covers undecodable bytes as well as malformed JSON
            self.logger.debug(f"Notices endpoint returned invalid JSON: {e}")
            return []

        return self._parse_notices(data)

    def _parse_notices(self, data: Any) -> List[Notice]:
        """Parse the `{"notices": [...]}` document.

        Args:
            data: Decoded JSON document

        Returns:
            List of parsed notices; malformed entries are skipped
        """
        if not isinstance(data, dict) or not isinstance(data.get("notices"), list):
            self.logger.debug("Notices document does not have the expected structure")
            return []

        notices = []
        for raw in data["notices"]:
            try:
                notices.append(Notice.from_dict(raw))
            except ValueError as e:
                self.logger.warning(f"Skipping malformed notice: {e}")

        return notices

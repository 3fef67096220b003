import logging
from collections.abc import Callable
from typing import Any

import httpx

from fantasy_tier_board.candidates._retry import default_http_retry
from fantasy_tier_board.domain.errors import FetchError

logger = logging.getLogger(__name__)

SLEEPER_PLAYERS_URL = "https://api.sleeper.app/v1/players/nfl"


class SleeperCandidateSource:
    """Fetches the full NFL player map from the Sleeper public API.

    Never raises: transport failures and unparseable payloads are logged and
    reported as an empty pool.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        url: str = SLEEPER_PLAYERS_URL,
        timeout: float = 30.0,
        retry: Callable[[Callable[..., Any]], Callable[..., Any]] | None = None,
    ) -> None:
        self._client = client
        self._url = url
        self._timeout = timeout
        self._fetch_with_retry = (retry or default_http_retry("Sleeper players request"))(self._fetch_once)
        self._last_error: FetchError | None = None

    @property
    def url(self) -> str:
        return self._url

    @property
    def last_error(self) -> FetchError | None:
        """The failure behind the most recent empty result, if any."""
        return self._last_error

    async def _fetch_once(self, client: httpx.AsyncClient) -> httpx.Response:
        response = await client.get(self._url)
        response.raise_for_status()
        return response

    async def fetch_all(self) -> dict[str, dict[str, Any]]:
        logger.debug("GET %s", self._url)
        self._last_error = None
        try:
            if self._client is not None:
                response = await self._fetch_with_retry(self._client)
            else:
                async with httpx.AsyncClient(timeout=httpx.Timeout(self._timeout, connect=5.0)) as client:
                    response = await self._fetch_with_retry(client)
        except httpx.HTTPError as e:
            logger.warning("Error fetching players from %s: %s", self._url, e)
            self._last_error = FetchError(message=str(e), url=self._url)
            return {}
        logger.debug("Sleeper responded %d", response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            logger.warning("Sleeper returned unparseable player data: %s", e)
            self._last_error = FetchError(message=f"unparseable response: {e}", url=self._url)
            return {}
        if not isinstance(data, dict):
            logger.warning("Sleeper returned %s instead of a player map", type(data).__name__)
            self._last_error = FetchError(message="response is not a player map", url=self._url)
            return {}

        records = {str(k): v for k, v in data.items() if isinstance(v, dict)}
        logger.info("Fetched %d player records from Sleeper", len(records))
        return records

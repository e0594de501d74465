"""SerpAPI Google Scholar author client."""

from __future__ import annotations

from typing import Any

import requests

from PaperPortal.core.errors import ConfigError, ImportProviderError
from PaperPortal.utils.log import log

SERPAPI_SEARCH_URL = "https://serpapi.com/search.json"
SCHOLAR_AUTHOR_ENGINE = "google_scholar_author"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RESULTS = 100

HEADERS = {
    "User-Agent": "paper-portal/0.1",
    "Accept": "application/json",
}


class ScholarApiClient:
    """Low-level HTTP client for one author-profile request.

    One request per call; failures are not retried.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = SERPAPI_SEARCH_URL,
        max_results: int = DEFAULT_MAX_RESULTS,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the client with a reusable HTTP session.

        Raises:
            ConfigError: If ``api_key`` is empty.
        """
        if not api_key:
            raise ConfigError("SerpAPI key not configured")
        self._api_key = api_key
        self.base_url = base_url
        self.max_results = max_results
        self.timeout = timeout
        self._session = requests.Session()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def fetch_author(self, author_id: str) -> dict[str, Any]:
        """Fetch the raw author payload.

        Args:
            author_id: Google Scholar author id (the ``user=`` URL parameter).

        Returns:
            Decoded JSON payload with ``author`` and ``articles`` keys.

        Raises:
            ImportProviderError: On transport failure, a non-success status,
                or an in-band ``error`` field.
        """
        params = {
            "engine": SCHOLAR_AUTHOR_ENGINE,
            "author_id": author_id,
            "api_key": self._api_key,
            "num": str(self.max_results),
        }
        log.info("Fetching Google Scholar profile for ID: %s", author_id)
        try:
            response = self._session.get(self.base_url, params=params, headers=HEADERS, timeout=self.timeout)
        except requests.RequestException as error:
            raise ImportProviderError(str(error)) from error

        payload = _decode(response)
        if not response.ok:
            message = _error_message(payload) or response.text or f"HTTP {response.status_code}"
            log.error("SerpAPI error: %d - %s", response.status_code, message)
            raise ImportProviderError(message, status_code=response.status_code)

        if not isinstance(payload, dict):
            raise ImportProviderError("Unexpected response from citation provider")
        if payload.get("error"):
            log.error("SerpAPI returned error: %s", payload["error"])
            raise ImportProviderError(str(payload["error"]), status_code=response.status_code)
        return payload


def _decode(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(payload: Any) -> str:
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return ""

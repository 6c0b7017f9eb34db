"""HTTP transport for OpenTSDB queries."""

from __future__ import annotations

import requests

from tsgraph.exceptions import TransportError

# Default timeout for HTTP requests in seconds
_DEFAULT_TIMEOUT = 300.0


class TsdbClient:
    """HTTP client for fetching raw query output from OpenTSDB."""

    def __init__(self, timeout: float = _DEFAULT_TIMEOUT) -> None:
        """Initialize the client.

        Args:
            timeout: Request timeout in seconds; bounds how long a slow
                OpenTSDB can block a caller
        """
        self.timeout = timeout
        self.session = requests.Session()

    def fetch(self, url: str) -> str:
        """Fetch the raw response body for ``url``.

        Args:
            url: Full OpenTSDB query URL

        Returns:
            Response body as text

        Raises:
            TransportError: If the request fails or OpenTSDB answers with an error status
        """
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(str(e), url=url) from e

        if not response.ok:
            message = response.text or f"HTTP {response.status_code} {response.reason}"
            raise TransportError(message, url=url, status_code=response.status_code)

        return response.text

    def close(self) -> None:
        self.session.close()

"""HTTP transport for the Wallos endpoints.

Wraps a requests.Session: joins paths onto the base URL, attaches the
session cookie, applies the timeout, and converts transport failures into
``NetworkError``.
"""

import logging
from typing import Any

import requests

from wallosctl.errors import NetworkError, RemoteValidationError

DEFAULT_TIMEOUT = 10.0
SESSION_COOKIE = "PHPSESSID"

logger = logging.getLogger(__name__)


class Transport:
    """One HTTP round trip at a time against a single Wallos instance."""

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT, http: Any = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = http if http is not None else requests.Session()

    def send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        json: Any = None,
        session_token: str | None = None,
        allow_redirects: bool = True,
    ) -> Any:
        """Send a request and return the raw response.

        Raises:
            NetworkError: On connection failure, timeout, or an HTTP error status.
            RemoteValidationError: On an HTTP error status carrying a backend title.
        """
        url = f"{self.base_url}{path}"
        cookies = {SESSION_COOKIE: session_token} if session_token else None
        logger.debug("%s %s", method, path)

        try:
            response = self.http.request(
                method,
                url,
                params=params,
                data=data,
                json=json,
                cookies=cookies,
                timeout=self.timeout,
                allow_redirects=allow_redirects,
            )
        except requests.Timeout as e:
            raise NetworkError(f"{method} {path} timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise NetworkError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 400:
            title = _error_title(response)
            if title:
                raise RemoteValidationError(title)
            raise NetworkError(f"{method} {path} returned HTTP {response.status_code}")

        return response

    def send_json(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and decode its JSON body.

        Raises:
            RemoteValidationError: If the body is not JSON.
        """
        response = self.send(method, path, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise RemoteValidationError(f"{method} {path} returned a non-JSON response") from e


def _error_title(response: Any) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("title"):
        return str(body["title"])
    return None

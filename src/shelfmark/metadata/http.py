# ABOUTME: HTTP client abstraction for bibliographic source API calls.
# ABOUTME: Per-host request spacing, retry with backoff honoring Retry-After, injectable transport.

import logging
import time
from typing import Any, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
USER_AGENT = "shelfmark/0.1.0"

# Upper bound on a server-requested Retry-After wait, in seconds.
MAX_RETRY_AFTER = 60.0


class MetadataFetchError(Exception):
    """Raised when a request to a bibliographic source fails."""


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP GET operations returning JSON."""

    def get(self, url: str, params: dict[str, str] | None = None) -> Any: ...


def _retry_after(response: httpx.Response) -> float | None:
    """Seconds from a numeric Retry-After header, capped."""
    value = response.headers.get("retry-after")
    if value is None:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    return min(max(seconds, 0.0), MAX_RETRY_AFTER)


class ShelfmarkHttpClient:
    """HTTP client shared by the candidate sources.

    Sources live on different hosts, so request spacing is tracked per host:
    two consecutive calls to loc.gov are ``min_request_interval`` apart, a
    call to Open Library in between does not wait. Transient failures (429,
    5xx) are retried with exponential backoff, or after the server's
    Retry-After when that is longer.
    """

    def __init__(
        self,
        *,
        min_request_interval: float = 0.2,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        client_kwargs: dict[str, Any] = {
            "headers": {"User-Agent": USER_AGENT, "Accept": "application/json"},
            "timeout": timeout,
            "follow_redirects": True,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.Client(**client_kwargs)
        self._min_interval = min_request_interval
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._last_request: dict[str, float] = {}

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ShelfmarkHttpClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def get(self, url: str, params: dict[str, str] | None = None) -> Any:
        """Send a GET request and decode the JSON body.

        Raises:
            MetadataFetchError: On transport errors, non-retryable statuses,
                undecodable bodies, or exhausted retries.
        """
        host = httpx.URL(url).host
        attempts = 1 + self._max_retries
        last_status = 0
        for attempt in range(attempts):
            self._wait_for_host(host)
            try:
                response = self._client.get(url, params=params)
            except httpx.HTTPError as exc:
                raise MetadataFetchError(f"Request failed: {url}: {exc}") from exc
            last_status = response.status_code

            if response.status_code == 200:
                try:
                    return response.json()
                except ValueError as exc:
                    raise MetadataFetchError(f"Invalid JSON from {url}: {exc}") from exc

            if response.status_code not in _RETRYABLE_STATUS_CODES:
                raise MetadataFetchError(f"HTTP {response.status_code} from {url}")

            if attempt < attempts - 1:
                delay = self._retry_delay * (2**attempt)
                requested = _retry_after(response)
                if requested is not None and requested > delay:
                    delay = requested
                logger.warning(
                    "HTTP %d from %s, retrying in %.1fs (attempt %d/%d)",
                    response.status_code,
                    host,
                    delay,
                    attempt + 1,
                    self._max_retries,
                )
                time.sleep(delay)

        raise MetadataFetchError(f"HTTP {last_status} from {url} after {attempts} attempts")

    def _wait_for_host(self, host: str) -> None:
        if self._min_interval <= 0:
            return
        last = self._last_request.get(host)
        if last is not None:
            elapsed = time.monotonic() - last
            if elapsed < self._min_interval:
                time.sleep(self._min_interval - elapsed)
        self._last_request[host] = time.monotonic()

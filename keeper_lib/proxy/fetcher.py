"""Same-origin fetch proxy for external character sheets.

The browser cannot read most third-party character pages directly, so the
frontend asks the backend to GET the page and hand back the raw body.

A fetch is bounded twice: `timeout` is the wall-clock budget for the whole
exchange (connect, headers and body), and `max_bytes` caps the body that is
buffered for relay.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

import requests
import urllib3

from keeper_lib.errors import ReadError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_MAX_BYTES = 5 * 1024 * 1024
CHUNK_SIZE = 64 * 1024
ALLOWED_SCHEMES = ("http", "https")

# Raised by requests/urllib3 for hosts that pass our syntax check but cannot
# be parsed or IDNA-encoded (LocationParseError, "label too long").
REQUEST_ERRORS = (requests.RequestException, urllib3.exceptions.HTTPError, ValueError)


@dataclass(frozen=True)
class FetchResult:
    url: str
    content: str


def validate_url(url: Optional[str]) -> str:
    if not url:
        raise ValidationError("url parameter is required")
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise ValidationError("invalid url format") from e
    if parts.scheme.lower() not in ALLOWED_SCHEMES or not parts.netloc:
        raise ValidationError("invalid url format")
    return url


class CharacterFetcher:
    """Performs a single outbound GET per call. No retries."""

    def __init__(
        self,
        session: Optional[Any] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        max_bytes: int = DEFAULT_MAX_BYTES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.max_bytes = max_bytes
        self._clock = clock

    def fetch(self, url: str) -> FetchResult:
        url = validate_url(url)
        deadline = self._clock() + self.timeout
        try:
            resp = self._session.get(url, timeout=self.timeout, stream=True)
        except REQUEST_ERRORS as e:
            logger.warning("Fetching %s failed: %s", url, e)
            raise UpstreamError(f"failed to fetch url: {e}") from e

        try:
            if resp.status_code >= 400:
                logger.info("Upstream %s answered %s; relaying body", url, resp.status_code)
            body = self._read_body(url, resp, deadline)
        finally:
            resp.close()

        return FetchResult(url=url, content=body.decode("utf-8", errors="replace"))

    def _read_body(self, url: str, resp: Any, deadline: float) -> bytes:
        chunks = []
        received = 0
        try:
            for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                received += len(chunk)
                if received > self.max_bytes:
                    logger.warning("Body from %s exceeds %d bytes; aborting", url, self.max_bytes)
                    raise ReadError(f"failed to read response: body exceeds {self.max_bytes} bytes")
                if self._clock() > deadline:
                    logger.warning("Reading body from %s overran %ss; aborting", url, self.timeout)
                    raise ReadError(f"failed to read response: timed out after {self.timeout}s")
                chunks.append(chunk)
        except REQUEST_ERRORS as e:
            logger.warning("Reading body from %s failed: %s", url, e)
            raise ReadError(f"failed to read response: {e}") from e
        return b"".join(chunks)

    def close(self) -> None:
        self._session.close()

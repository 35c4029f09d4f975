"""Shared HTTP primitive for the ChurchSuite and Brevo tools.

Fixed-delay retry: every failed attempt (network error, non-2xx status or a
body that is not JSON) waits ``delay`` seconds and tries again until the
retry budget is spent, then the last failure is raised to the caller.
"""
import logging
import time
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_RETRIES = 3
DEFAULT_DELAY = 1.0
DEFAULT_TIMEOUT = 30


class HttpStatusError(Exception):
    """Raised when a response comes back with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}: {body}")


def _send(
    method: str,
    url: str,
    headers: Optional[Dict[str, str]],
    params: Optional[Dict[str, Any]],
    json: Optional[Any],
    timeout: float,
) -> Any:
    resp = requests.request(
        method,
        url,
        headers=headers,
        params=params,
        json=json,
        timeout=timeout,
    )
    if not resp.ok:
        raise HttpStatusError(resp.status_code, resp.text)
    if resp.status_code == 204 or not resp.content:
        return {}
    return resp.json()


def fetch_with_retry(
    method: str,
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, Any]] = None,
    json: Optional[Any] = None,
    retries: int = DEFAULT_RETRIES,
    delay: float = DEFAULT_DELAY,
    timeout: float = DEFAULT_TIMEOUT,
) -> Any:
    """Perform an HTTP request and return its parsed JSON body.

    Args:
        method: HTTP verb (GET, POST, ...).
        url: Absolute URL.
        headers: Request headers.
        params: Query string parameters.
        json: JSON-serialisable request body.
        retries: Extra attempts after the first one (default 3, so 4 in total).
        delay: Fixed pause in seconds between attempts.
        timeout: Per-attempt transport timeout in seconds.

    Returns:
        The decoded JSON body, or {} for an empty response.

    Raises:
        HttpStatusError, requests.RequestException or ValueError from the
        final attempt once the budget is exhausted.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return _send(method, url, headers, params, json, timeout)
        except (requests.RequestException, HttpStatusError, ValueError) as exc:
            if attempt > retries:
                logger.error("%s %s failed after %d attempts: %s", method, url, attempt, exc)
                raise
            logger.warning(
                "%s %s failed (attempt %d/%d): %s; retrying in %.1fs",
                method, url, attempt, retries + 1, exc, delay,
            )
            time.sleep(delay)

"""Bounded polling for a freshly created application to start answering.

A new application's route needs time to resolve and its gear time to start.
Until then the router answers 503 (or DNS fails). The poll ends on the first
response that is neither a 404 nor a server error.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    import threading

logger = logging.getLogger(__name__)

DEFAULT_CHECK_TIMEOUT = 10.0


def is_accessible(client: httpx.Client, url: str) -> bool:
    """Single request to *url*. Transport failures count as not yet accessible."""
    try:
        response = client.get(url)
    except httpx.HTTPError as exc:
        logger.debug("Request to %s failed: %s", url, exc)
        return False
    return response.status_code != 404 and response.status_code < 500


def wait_until_accessible(
    url: str,
    *,
    timeout: float,
    interval: float = 5.0,
    cancel: threading.Event | None = None,
    client: httpx.Client | None = None,
    verify: bool = True,
    clock: Callable[[], float] = time.monotonic,
) -> bool:
    """Poll *url* until it answers, *timeout* seconds pass, or *cancel* is set.

    Always makes at least one attempt. Returns True once accessible, False on
    deadline or cancellation.
    """
    owns_client = client is None
    http = client or httpx.Client(
        follow_redirects=True,
        timeout=DEFAULT_CHECK_TIMEOUT,
        verify=verify,
    )
    deadline = clock() + timeout
    attempts = 0
    try:
        while True:
            attempts += 1
            if is_accessible(http, url):
                logger.debug("%s accessible after %d attempt(s)", url, attempts)
                return True
            if cancel is not None and cancel.is_set():
                logger.debug("Wait for %s cancelled", url)
                return False
            remaining = deadline - clock()
            if remaining <= 0:
                logger.debug("%s still inaccessible after %.1fs", url, timeout)
                return False
            pause = min(interval, remaining)
            if cancel is not None:
                if cancel.wait(pause):
                    return False
            elif pause > 0:
                time.sleep(pause)
    finally:
        if owns_client:
            http.close()

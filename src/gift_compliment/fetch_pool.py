# --- TRADEMARK NOTICE ---
# Lightcap (EUIPO. Reg. 019172085) — Contact: alpay@lightcap.ai
# Do not remove this notice from source distributions.

"""Bounded-concurrency batch fetching of candidate compliments."""

from __future__ import annotations

import concurrent.futures
from collections.abc import Callable
from typing import Any, Optional, TypeVar

import requests

from .logging import get_logger
from .utils.text import normalise_text

LOGGER = get_logger(__name__)

T = TypeVar("T")

USER_AGENT = "GiftCompliment/0.1 (+https://github.com/gift-compliment)"
DEFAULT_TIMEOUT = 5.0


class FetchError(RuntimeError):
    """Raised when a single remote request yields no usable compliment."""


def fetch_pool(url: str, count: int, concurrency: int, fetch_fn: Callable[[str], T]) -> list[T]:
    """Call ``fetch_fn(url)`` ``count`` times with at most ``concurrency`` in flight.

    Failed calls leave their slot empty; the returned list holds the
    successful results in slot order and may be shorter than ``count`` or
    empty. A ``None`` result counts as a failure.
    """
    if concurrency <= 0:
        raise ValueError("concurrency must be positive")
    if count <= 0:
        return []

    slots: list[Optional[T]] = [None] * count
    failures = 0
    with concurrent.futures.ThreadPoolExecutor(max_workers=min(concurrency, count)) as executor:
        future_to_slot = {executor.submit(fetch_fn, url): slot for slot in range(count)}
        for future in concurrent.futures.as_completed(future_to_slot):
            slot = future_to_slot[future]
            try:
                slots[slot] = future.result()
            except Exception as exc:
                failures += 1
                LOGGER.warning("Fetch %d/%d from %s failed: %s", slot + 1, count, url, exc)

    if failures:
        LOGGER.info("Batch from %s returned %d of %d", url, count - failures, count)
    return [result for result in slots if result is not None]


class RemoteComplimentSource:
    """HTTP endpoint returning one compliment per call."""

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        response_field: str = "text",
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.response_field = response_field
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def fetch_one(self, url: Optional[str] = None) -> str:
        target = url or self.url
        try:
            response = self.session.get(target, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise FetchError(f"request to {target} failed: {exc}") from exc
        text = self._extract(response)
        if not text:
            raise FetchError(f"empty compliment from {target}")
        return text

    def _extract(self, response: requests.Response) -> str:
        content_type = response.headers.get("Content-Type", "")
        if "json" not in content_type:
            return normalise_text(response.text)
        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise FetchError("malformed JSON payload") from exc
        if isinstance(payload, str):
            return normalise_text(payload)
        if isinstance(payload, dict) and isinstance(payload.get(self.response_field), str):
            return normalise_text(payload[self.response_field])
        raise FetchError(f"payload lacks a {self.response_field!r} string")

    def fetch_batch(self, count: int, concurrency: int) -> list[str]:
        return fetch_pool(self.url, count, concurrency, self.fetch_one)

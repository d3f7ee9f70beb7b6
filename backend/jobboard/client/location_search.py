"""Debounced address search feeding a dropdown of geocoder results."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

import httpx

from .api import ApiError

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 3
DEBOUNCE_SECONDS = 0.3

Fetch = Callable[[str], Awaitable[List[Dict[str, Any]]]]


class LocationSearch:
    """State of one location search box.

    `type()` is called on every keystroke. A search only fires once the
    input has been quiet for `debounce` seconds, and only the most recently
    fired search may update `results`.
    """

    def __init__(self, fetch: Fetch, debounce: float = DEBOUNCE_SECONDS, min_length: int = MIN_QUERY_LENGTH):
        self.fetch = fetch
        self.debounce = debounce
        self.min_length = min_length
        self.query = ""
        self.results: List[Dict[str, Any]] = []
        self.open = False
        self.loading = False
        self._pending: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()
        self._latest = 0

    def type(self, query: str) -> None:
        self.query = query
        self.cancel()
        if len(query.strip()) < self.min_length:
            self._latest += 1  # in-flight results no longer apply
            self.loading = False
            self.results = []
            self.open = False
            return
        task = asyncio.get_running_loop().create_task(self._run(query.strip()))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._pending = task

    def cancel(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def _run(self, query: str) -> None:
        await asyncio.sleep(self.debounce)
        # fired: from here on a newer keystroke no longer cancels this search
        self._pending = None
        self._latest += 1
        request_id = self._latest
        self.loading = True
        try:
            results = await self.fetch(query)
        except (ApiError, httpx.HTTPError, ValueError) as exc:
            logger.debug("Location search for %r failed: %s", query, exc)
            results = []
        if request_id != self._latest:
            logger.debug("Dropping stale results for %r", query)
            return
        self.loading = False
        self.results = results
        self.open = bool(results)

    async def settle(self) -> None:
        """Wait until every scheduled or in-flight search has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def select(self, result: Dict[str, Any]) -> Dict[str, Any]:
        self.query = result.get("displayName", self.query)
        self.open = False
        return location_from_result(result)

    def click_outside(self) -> None:
        self.open = False


def location_from_result(result: Dict[str, Any]) -> Dict[str, Any]:
    """Structured address and coordinates from one geocoder search result."""
    address = result.get("address") or {}
    return {
        "address": {
            "street": address.get("street", ""),
            "city": address.get("city", ""),
            "state": address.get("state", ""),
            "postalCode": address.get("postalCode", ""),
            "country": (address.get("country") or "").upper(),
        },
        "coordinates": {"latitude": result["latitude"], "longitude": result["longitude"]},
        "displayName": result.get("displayName", ""),
    }

"""
HTTP client for the history REST API.

Collection loads are isolated from each other: a failed collection
degrades to an empty list and is reported in `LoadResult.errors`, so a
page still renders whatever did load. Single-entity fetches raise.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from app.config import get_settings

logger = logging.getLogger(__name__)

PERIODS = "/periods"
SUB_PERIODS = "/subperiods"
EVENTS = "/events"


class ApiError(Exception):
    """Non-2xx response or transport failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(ApiError):
    pass


@dataclass
class LoadResult:
    periods: list = field(default_factory=list)
    sub_periods: list = field(default_factory=list)
    events: list = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


class HistoryApiClient:
    """Async client; pass `transport` to run against a mock or an ASGI app."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.client_timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def fetch(self, endpoint: str, client: Optional[httpx.AsyncClient] = None) -> Any:
        """GET `endpoint` and decode JSON; raises ApiError on any failure."""
        if client is None:
            async with self._client() as own_client:
                return await self.fetch(endpoint, own_client)

        url = f"{self.base_url}{endpoint}"
        logger.debug("Fetching %s", url)
        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            raise ApiError(f"Request to {endpoint} failed: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(f"{endpoint} not found", status_code=404)
        if response.is_error:
            raise ApiError(
                f"{endpoint} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"{endpoint} returned invalid JSON") from e

    async def fetch_collection(self, endpoint: str, client: Optional[httpx.AsyncClient] = None) -> list:
        """A list endpoint; anything that is not a list is treated as empty."""
        data = await self.fetch(endpoint, client)
        if not isinstance(data, list):
            logger.warning("Expected a list from %s, got %s", endpoint, type(data).__name__)
            return []
        logger.debug("Received %s: %d items", endpoint, len(data))
        return data

    async def load_collections(
        self,
        periods: bool = True,
        sub_periods: bool = True,
        events: bool = True,
    ) -> LoadResult:
        """Fetch the requested collections concurrently and wait for all of them."""
        wanted = {
            "periods": (periods, PERIODS),
            "sub_periods": (sub_periods, SUB_PERIODS),
            "events": (events, EVENTS),
        }
        names = [name for name, (enabled, _) in wanted.items() if enabled]

        async with self._client() as client:
            outcomes = await asyncio.gather(
                *(self.fetch_collection(wanted[name][1], client) for name in names),
                return_exceptions=True,
            )

        result = LoadResult()
        for name, outcome in zip(names, outcomes):
            if isinstance(outcome, ApiError):
                logger.error("Error fetching %s: %s", name, outcome)
                result.errors[name] = str(outcome)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                setattr(result, name, outcome)
        return result

    async def get_event(self, event_id: str) -> dict:
        data = await self.fetch(f"{EVENTS}/{event_id}")
        if not isinstance(data, dict) or not (data.get("_id") or data.get("id")):
            raise NotFoundError("Event not found", status_code=404)
        return data

    async def health(self) -> dict:
        return await self.fetch("/health")

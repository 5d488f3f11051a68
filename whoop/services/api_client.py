"""
WHOOP API Client
================
Authenticated read access to the WHOOP REST API (v2, plus the v1
activity-mapping lookup).

Every read follows the same pattern: GET a fixed path, require a 2xx, parse
the JSON body into the matching model. Nothing is cached or retried; a
non-2xx surfaces as WhoopAPIError with the status and body intact.

Build a client with one of the two factories:
- WhoopClient.from_access_token(): creates and owns its httpx client
- WhoopClient.from_http_client(): uses a caller-owned httpx client
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import AsyncIterator, Awaitable, Callable, Optional, TypeVar
from urllib.parse import quote

import httpx

from whoop.config import Settings, get_settings
from whoop.models.common import PaginatedResponse, WhoopRecord
from whoop.models.cycle import Cycle
from whoop.models.profile import BodyMeasurement, UserProfile
from whoop.models.recovery import Recovery
from whoop.models.sleep import Sleep
from whoop.models.workout import ActivityMapping, Workout
from whoop.services.http import BASE_URL, ModelT, parse_response, require_text

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=WhoopRecord)

PageFetcher = Callable[..., Awaitable[Optional[PaginatedResponse[RecordT]]]]


# ---------------------------------------------------------------------------
# Query-string helpers
# ---------------------------------------------------------------------------


def format_timestamp(value: datetime) -> str:
    """Render ``value`` as UTC ``yyyy-MM-ddTHH:mm:ss.fffZ``. Naive values are taken as UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return f"{value:%Y-%m-%dT%H:%M:%S}.{value.microsecond // 1000:03d}Z"


def build_page_query(
    limit: Optional[int] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    next_token: Optional[str] = None,
) -> str:
    """
    Query string for a collection endpoint, including the leading "?".

    Parameters appear in the order limit, start, end, nextToken and are
    left out entirely when unset. Returns "" when nothing is set.
    """
    params = []
    if limit is not None:
        params.append(f"limit={limit}")
    if start is not None:
        params.append(f"start={format_timestamp(start)}")
    if end is not None:
        params.append(f"end={format_timestamp(end)}")
    if next_token:
        params.append(f"nextToken={quote(next_token, safe='')}")
    return "?" + "&".join(params) if params else ""


# ---------------------------------------------------------------------------
# WhoopClient
# ---------------------------------------------------------------------------


class WhoopClient:
    """Makes authenticated requests to the WHOOP REST API."""

    def __init__(self, http_client: httpx.AsyncClient, *, owns_http_client: bool) -> None:
        # Prefer the factories; this only records the client and who closes it
        self._http = http_client
        self._owns_http_client = owns_http_client
        self._closed = False

    @classmethod
    def from_http_client(cls, http_client: httpx.AsyncClient) -> "WhoopClient":
        """
        Wrap a caller-supplied httpx client.

        The WHOOP base URL is set if the client has none. The caller keeps
        ownership: closing this WhoopClient leaves ``http_client`` open.
        """
        if http_client is None:
            raise ValueError("http_client cannot be None")
        if not str(http_client.base_url):
            http_client.base_url = BASE_URL
        return cls(http_client, owns_http_client=False)

    @classmethod
    def from_access_token(
        cls, access_token: str, *, settings: Settings | None = None
    ) -> "WhoopClient":
        """Create a client that owns its httpx client and sends ``access_token`` as a Bearer token."""
        require_text(access_token, "access_token")
        settings = settings or get_settings()

        http_client = httpx.AsyncClient(
            base_url=settings.whoop_api_base_url,
            timeout=settings.whoop_timeout_seconds,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        return cls(http_client, owns_http_client=True)

    def set_access_token(self, access_token: str) -> None:
        """Replace the Bearer token used by subsequent requests."""
        require_text(access_token, "access_token")
        self._http.headers["Authorization"] = f"Bearer {access_token}"

    # ---- User ------------------------------------------------------------

    async def get_user_profile(self) -> Optional[UserProfile]:
        """GET /v2/user/profile/basic"""
        return await self._get("/v2/user/profile/basic", UserProfile)

    async def get_body_measurement(self) -> Optional[BodyMeasurement]:
        """GET /v2/user/measurement/body"""
        return await self._get("/v2/user/measurement/body", BodyMeasurement)

    # ---- Cycles ----------------------------------------------------------

    async def get_cycle(self, cycle_id: int) -> Optional[Cycle]:
        """GET /v2/cycle/{cycle_id}"""
        return await self._get(f"/v2/cycle/{cycle_id}", Cycle)

    async def get_cycles(
        self,
        limit: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        next_token: Optional[str] = None,
    ) -> Optional[PaginatedResponse[Cycle]]:
        """GET /v2/cycle, one page."""
        query = build_page_query(limit, start, end, next_token)
        return await self._get(f"/v2/cycle{query}", PaginatedResponse[Cycle])

    # ---- Recovery --------------------------------------------------------

    async def get_recovery(self, cycle_id: int) -> Optional[Recovery]:
        """GET /v2/recovery/{cycle_id}. Recovery is looked up by its cycle."""
        return await self._get(f"/v2/recovery/{cycle_id}", Recovery)

    async def get_recoveries(
        self,
        limit: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        next_token: Optional[str] = None,
    ) -> Optional[PaginatedResponse[Recovery]]:
        """GET /v2/recovery, one page."""
        query = build_page_query(limit, start, end, next_token)
        return await self._get(f"/v2/recovery{query}", PaginatedResponse[Recovery])

    # ---- Workouts --------------------------------------------------------

    async def get_workout(self, workout_id: int) -> Optional[Workout]:
        """GET /v2/activity/workout/{workout_id}"""
        return await self._get(f"/v2/activity/workout/{workout_id}", Workout)

    async def get_workouts(
        self,
        limit: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        next_token: Optional[str] = None,
    ) -> Optional[PaginatedResponse[Workout]]:
        """GET /v2/activity/workout, one page."""
        query = build_page_query(limit, start, end, next_token)
        return await self._get(f"/v2/activity/workout{query}", PaginatedResponse[Workout])

    # ---- Sleep -----------------------------------------------------------

    async def get_sleep(self, sleep_id: int) -> Optional[Sleep]:
        """GET /v2/activity/sleep/{sleep_id}"""
        return await self._get(f"/v2/activity/sleep/{sleep_id}", Sleep)

    async def get_sleeps(
        self,
        limit: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        next_token: Optional[str] = None,
    ) -> Optional[PaginatedResponse[Sleep]]:
        """GET /v2/activity/sleep, one page."""
        query = build_page_query(limit, start, end, next_token)
        return await self._get(f"/v2/activity/sleep{query}", PaginatedResponse[Sleep])

    # ---- Activity mapping ------------------------------------------------

    async def get_activity_mapping(self, activity_v1_id: int) -> Optional[ActivityMapping]:
        """GET /v1/activity-mapping/{activity_v1_id}"""
        return await self._get(f"/v1/activity-mapping/{activity_v1_id}", ActivityMapping)

    # ---- Pagination ------------------------------------------------------

    def iter_cycles(
        self,
        limit: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> AsyncIterator[Cycle]:
        """Yield every cycle in the range, following next_token across pages."""
        return _iter_records(self.get_cycles, limit, start, end)

    def iter_recoveries(
        self,
        limit: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> AsyncIterator[Recovery]:
        return _iter_records(self.get_recoveries, limit, start, end)

    def iter_workouts(
        self,
        limit: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> AsyncIterator[Workout]:
        return _iter_records(self.get_workouts, limit, start, end)

    def iter_sleeps(
        self,
        limit: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> AsyncIterator[Sleep]:
        return _iter_records(self.get_sleeps, limit, start, end)

    # ---- Transport -------------------------------------------------------

    async def _get(self, path: str, model: type[ModelT]) -> Optional[ModelT]:
        """Shared GET. Raises WhoopAPIError on non-2xx."""
        logger.debug("GET %s", path)
        response = await self._http.get(path)
        return parse_response(response, model)

    async def aclose(self) -> None:
        """Close the httpx client if this instance created it. Safe to call twice."""
        if self._owns_http_client and not self._closed:
            await self._http.aclose()
        self._closed = True

    async def __aenter__(self) -> "WhoopClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


async def _iter_records(
    fetch_page: PageFetcher[RecordT],
    limit: Optional[int],
    start: Optional[datetime],
    end: Optional[datetime],
) -> AsyncIterator[RecordT]:
    """Walk a collection endpoint page by page until next_token runs out."""
    next_token: Optional[str] = None
    while True:
        page = await fetch_page(limit=limit, start=start, end=end, next_token=next_token)
        if page is None or not page.records:
            return
        for record in page.records:
            yield record
        next_token = page.next_token
        if not next_token:
            return

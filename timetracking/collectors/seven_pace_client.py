"""
7pace Timetracker API Client

Reads the 7pace user directory from the REST API and per-user worklogs from
the OData reporting API. The OData endpoint filters by user server-side,
which the REST worklog endpoint does not.

Usage:
    from timetracking.collectors.seven_pace_client import get_seven_pace_client

    client = get_seven_pace_client()  # None when 7pace is not configured
    if client:
        users = await client.get_users()
        result = await client.get_worklogs_for_user("jane@contoso.com", start, end)

Endpoints:
    GET {base_url}/users?api-version=3.2
    GET {origin}/api/odata/v3.2/workLogsOnly?$apply=filter(...)&worklogsFilter=User/Email eq '...'
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from urllib.parse import urlencode

import httpx

from ..async_http_client import AsyncSecureHTTPClient
from ..core import get_logger
from ..domain.constants import api_config
from ..domain.time_entries import PaginationInfo, RawTimeEntry
from ..secure_config import get_config
from ..utils.datetime_utils import to_odata_timestamp
from ..utils.error_handling import (
    API_ERROR,
    AUTH_ERROR,
    MALFORMED_RESPONSE,
    TIMEOUT,
    UNAVAILABLE,
    UpstreamAPIError,
)
from .ado_rest_transformers import WorklogTransformer

logger = get_logger(__name__)


class SevenPaceApiError(UpstreamAPIError):
    """Raised when a 7pace REST or OData call fails."""

    pass


@dataclass(frozen=True)
class SevenPaceWorklogPage:
    """Worklogs fetched for one user, with the pagination outcome."""

    worklogs: list[RawTimeEntry]
    request_url: str
    pagination: PaginationInfo

    @property
    def raw_count(self) -> int:
        return len(self.worklogs)


class SevenPaceClient:
    """
    7pace Timetracker client.

    Features:
    - Bearer token authentication
    - OData pagination via @odata.nextLink with a page safety cap
    - Typed errors (SevenPaceApiError); no retries
    """

    API_VERSION = api_config.SEVEN_PACE_API_VERSION
    MAX_PAGES = api_config.WORKLOG_MAX_PAGES

    def __init__(self, base_url: str, api_token: str, timeout: float = api_config.DEFAULT_TIMEOUT_SECONDS):
        """
        Initialize 7pace client.

        Args:
            base_url: 7pace REST base (e.g., https://contoso.timehub.7pace.com/api/rest)
            api_token: 7pace API token
            timeout: Per-request timeout in seconds (default: 30)
        """
        if not base_url or not api_token:
            raise ValueError("base_url and api_token are required")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {
            "Authorization": f"Bearer {api_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    @property
    def odata_base(self) -> str:
        """OData worklogs endpoint derived from the REST base URL."""
        origin = re.sub(r"/api/rest/?$", "", self.base_url).rstrip("/")
        return f"{origin}/api/odata/v{self.API_VERSION}/workLogsOnly"

    async def _get_json(self, url: str) -> dict[str, Any]:
        """
        Execute a GET and return the parsed JSON body.

        Raises:
            SevenPaceApiError: AUTH_ERROR for 401/403, API_ERROR for other HTTP errors,
                TIMEOUT (504) on timeout, UNAVAILABLE (503) on network failure,
                MALFORMED_RESPONSE (502) when the body is not JSON
        """
        logger.debug(f"7pace GET {url}")
        try:
            async with AsyncSecureHTTPClient(timeout=self.timeout) as client:
                response = await client.get(url, headers=self.headers)
        except httpx.TimeoutException as e:
            logger.warning("7pace request timed out", extra={"url": url})
            raise SevenPaceApiError("7pace API request timed out", 504, TIMEOUT, url) from e
        except httpx.RequestError as e:
            logger.warning(f"7pace request failed: {e}", extra={"url": url})
            raise SevenPaceApiError("7pace unavailable", 503, UNAVAILABLE, url) from e

        if response.status_code in (401, 403):
            logger.error(f"7pace authentication failed (HTTP {response.status_code})", extra={"url": url})
            raise SevenPaceApiError("Invalid 7pace token or missing scope", response.status_code, AUTH_ERROR, url)

        if response.is_error:
            logger.warning(
                f"7pace API error (HTTP {response.status_code})", extra={"url": url, "status": response.status_code}
            )
            raise SevenPaceApiError(
                f"7pace API error: {response.status_code} {response.reason_phrase}",
                response.status_code,
                API_ERROR,
                url,
            )

        try:
            return response.json()  # type: ignore[no-any-return]
        except ValueError as e:
            logger.warning("7pace returned a non-JSON response", extra={"url": url})
            raise SevenPaceApiError("7pace API error: non-JSON response", 502, MALFORMED_RESPONSE, url) from e

    async def get_users(self) -> dict[str, str]:
        """
        Get the 7pace user directory.

        Returns:
            Mapping of 7pace user id to unique name (uniqueName, falling back to email)
        """
        url = f"{self.base_url}/users?{urlencode({'api-version': self.API_VERSION})}"
        users = WorklogTransformer.transform_users_response(await self._get_json(url))
        logger.debug(f"Loaded {len(users)} 7pace users")
        return users

    def build_worklogs_url(self, email: str, start: datetime, end: datetime) -> str:
        """First-page OData URL for one user's worklogs in [start, end)."""
        # OData string literals escape a quote by doubling it
        email_literal = email.replace("'", "''")
        filter_expr = f"Timestamp ge {to_odata_timestamp(start)} and Timestamp lt {to_odata_timestamp(end)}"
        params = {
            "$apply": f"filter({filter_expr})",
            "worklogsFilter": f"User/Email eq '{email_literal}'",
        }
        return f"{self.odata_base}?{urlencode(params, safe='$')}"

    async def get_worklogs_for_user(self, email: str, start: datetime, end: datetime) -> SevenPaceWorklogPage:
        """
        Fetch one user's worklogs, following @odata.nextLink up to MAX_PAGES pages.

        Args:
            email: User's unique name (filtered server-side)
            start: Window start (inclusive)
            end: Window end (exclusive)

        Returns:
            SevenPaceWorklogPage with worklogs, first-page URL and pagination info.
            pagination.hit_safety_cap is True when a next page remained after MAX_PAGES.

        Raises:
            SevenPaceApiError: On any failed page; no partial result is returned
        """
        request_url = self.build_worklogs_url(email, start, end)
        worklogs: list[RawTimeEntry] = []
        next_url: str | None = request_url
        pages_fetched = 0

        while next_url and pages_fetched < self.MAX_PAGES:
            page = await self._get_json(next_url)
            worklogs.extend(WorklogTransformer.transform_odata_response(page, fallback_unique_name=email))
            pages_fetched += 1
            next_url = page.get("@odata.nextLink")

        hit_safety_cap = bool(next_url)
        if hit_safety_cap:
            logger.warning(
                f"Worklog pagination safety cap reached for {email}",
                extra={"pages_fetched": pages_fetched, "records": len(worklogs)},
            )

        return SevenPaceWorklogPage(
            worklogs=worklogs,
            request_url=request_url,
            pagination=PaginationInfo(
                pages_fetched=pages_fetched, total_records=len(worklogs), hit_safety_cap=hit_safety_cap
            ),
        )


def get_seven_pace_client() -> SevenPaceClient | None:
    """
    Get 7pace client with credentials from config.

    Returns:
        SevenPaceClient, or None when SEVENPACE_BASE_URL and SEVENPACE_API_TOKEN are both unset

    Raises:
        ConfigurationError: If the configuration is partial or invalid
    """
    seven_pace_config = get_config().get_seven_pace_config()
    if seven_pace_config is None:
        return None
    return SevenPaceClient(base_url=seven_pace_config.base_url, api_token=seven_pace_config.api_token)

"""
Per-Member Worklog Fetcher

Fetches each roster member's 7pace worklogs for a window, five members at a
time. Any member's failure fails the whole fetch; there are no per-member
retries and no partial results.
"""

from datetime import datetime

from ..core import get_logger
from ..domain.constants import api_config
from ..domain.team import TeamMember
from ..domain.time_entries import MemberWorklogResult
from ..utils.batch_utils import run_batched
from .seven_pace_client import SevenPaceClient

logger = get_logger(__name__)


class PerMemberWorklogFetcher:
    """Fetch worklogs for every roster member under a concurrency bound."""

    def __init__(self, client: SevenPaceClient, concurrency: int = api_config.WORKLOG_FETCH_CONCURRENCY):
        self.client = client
        self.concurrency = concurrency

    async def _fetch_member(self, member: TeamMember, start: datetime, end: datetime) -> MemberWorklogResult:
        page = await self.client.get_worklogs_for_user(member.unique_name, start, end)
        logger.debug(
            f"Fetched {page.raw_count} worklogs for {member.unique_name}",
            extra={"pages_fetched": page.pagination.pages_fetched},
        )
        return MemberWorklogResult(
            member=member,
            worklogs=page.worklogs,
            raw_count=page.raw_count,
            request_url=page.request_url,
            pagination=page.pagination,
        )

    async def fetch_all(self, roster: list[TeamMember], start: datetime, end: datetime) -> list[MemberWorklogResult]:
        """
        Fetch worklogs for every member of the roster.

        Args:
            roster: Team members to fetch for
            start: Window start (inclusive)
            end: Window end (exclusive)

        Returns:
            One MemberWorklogResult per roster member, in roster order

        Raises:
            SevenPaceApiError: The first failure among the members
        """
        logger.info(f"Fetching worklogs for {len(roster)} members")
        results = await run_batched(
            [lambda member=member: self._fetch_member(member, start, end) for member in roster],
            concurrency=self.concurrency,
            logger=logger,
        )

        capped = [r.member.unique_name for r in results if r.pagination.hit_safety_cap]
        if capped:
            logger.warning(f"{len(capped)} members hit the worklog pagination safety cap: {', '.join(capped)}")
        return results

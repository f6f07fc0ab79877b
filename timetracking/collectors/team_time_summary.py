#!/usr/bin/env python3
"""
Team Time Summary Collector

Builds the CapEx/OpEx time report for one Azure DevOps team:

    roster + 7pace users -> per-member worklogs -> work item hierarchy
    -> aggregation -> governance + diagnostics -> TeamTimeReport

A run is all-or-nothing: any upstream failure fails the run and no partial
report is produced. When 7pace is not configured the report is degraded
(zeroed, seven_pace_connected=False) instead of failing.

Usage:
    python -m timetracking.collectors.team_time_summary --team "Platform Team" --range 14

Exit codes:
    0  report written
    1  upstream failure (or unknown team)
    2  upstream authorization failure
    3  configuration error
"""

import argparse
import asyncio
import re
import sys
from collections.abc import Callable
from datetime import datetime

from ..core import (
    ConfigurationError,
    get_config,
    get_logger,
    log_with_context,
    setup_logging,
    validate_config_on_startup,
)
from ..domain.governance import compute_governance
from ..domain.report import ReportPeriod, TeamDescriptor, TeamTimeReport, TimeSummary
from ..utils.datetime_utils import SUPPORTED_RANGES, count_business_days, resolve_range
from ..utils.error_handling import UpstreamAPIError, log_and_raise
from ..utils_atomic_json import atomic_json_save
from .ado_rest_client import AzureDevOpsRESTClient, get_ado_rest_client
from .diagnostics import build_diagnostics
from .exclusion_loader import MemberExclusionLoader
from .seven_pace_client import SevenPaceClient, get_seven_pace_client
from .team_roster import TeamNotFoundError, TeamRosterProvider
from .time_aggregation import aggregate_time_entries
from .work_item_hierarchy import FeatureResolver, HierarchyCache, WorkItemBatchFetcher
from .worklog_fetcher import PerMemberWorklogFetcher

logger = get_logger(__name__)

DEFAULT_OUTPUT_DIR = ".tmp/observatory"


class TeamTimeSummaryCollector:
    """
    Orchestrates one time tracking run for a team.

    Example:
        collector = TeamTimeSummaryCollector.from_config()
        report = await collector.collect("Platform Team", range_key="mtd")
    """

    def __init__(
        self,
        ado_client: AzureDevOpsRESTClient,
        seven_pace_client: SevenPaceClient | None,
        project: str,
        exclusion_loader: MemberExclusionLoader | None = None,
        now: Callable[[], datetime] | None = None,
    ):
        """
        Args:
            ado_client: Azure DevOps client (rosters and work items)
            seven_pace_client: 7pace client, or None when 7pace is not configured
            project: Azure DevOps project owning the teams
            exclusion_loader: Source of member exclusions (default: settings file)
            now: Clock used to resolve the reporting window (default: current UTC time)
        """
        self.ado_client = ado_client
        self.seven_pace_client = seven_pace_client
        self.project = project
        self.exclusion_loader = exclusion_loader or MemberExclusionLoader()
        self.now = now

    @classmethod
    def from_config(cls) -> "TeamTimeSummaryCollector":
        """
        Build a collector from environment configuration.

        Raises:
            ConfigurationError: If Azure DevOps configuration is missing/invalid or 7pace is partially configured
        """
        ado_config = get_config().get_ado_config()
        return cls(
            ado_client=get_ado_rest_client(),
            seven_pace_client=get_seven_pace_client(),
            project=ado_config.project or "",
        )

    async def collect(self, team_name: str, range_key: str = "14") -> TeamTimeReport:
        """
        Build the time report for a team.

        Args:
            team_name: Azure DevOps team name (case-insensitive)
            range_key: "7", "14" or "mtd" (anything else falls back to "14")

        Returns:
            TeamTimeReport (degraded when 7pace is not configured)

        Raises:
            ValueError: If team_name is empty
            TeamNotFoundError: If the team does not exist
            UpstreamAPIError: If any Azure DevOps or 7pace call fails
        """
        if not team_name or not team_name.strip():
            raise ValueError("No team specified")

        resolved = resolve_range(range_key, now=self.now() if self.now else None)
        period = ReportPeriod.from_range(resolved)

        if self.seven_pace_client is None:
            logger.warning("7pace is not configured, returning degraded report", extra={"team": team_name})
            return TeamTimeReport.degraded(period, team_name)

        try:
            return await self._collect(self.seven_pace_client, team_name, period)
        except UpstreamAPIError as e:
            log_and_raise(logger, e, {"team": team_name, "range": range_key}, "Time tracking collection")

    async def _collect(
        self, seven_pace_client: SevenPaceClient, team_name: str, period: ReportPeriod
    ) -> TeamTimeReport:
        roster_provider = TeamRosterProvider(self.ado_client, self.project)
        roster, seven_pace_users = await asyncio.gather(
            roster_provider.get_members(team_name),
            seven_pace_client.get_users(),
        )
        exclusions = self.exclusion_loader.load_exclusions()

        member_results = await PerMemberWorklogFetcher(seven_pace_client).fetch_all(
            roster, period.start, period.end
        )
        worklogs = [worklog for result in member_results for worklog in result.worklogs]

        # Fresh cache per run
        resolver = FeatureResolver(WorkItemBatchFetcher(self.ado_client, self.project), HierarchyCache())
        aggregation = await aggregate_time_entries(roster, exclusions, worklogs, resolver)

        non_excluded = aggregation.non_excluded_members
        summary = TimeSummary.from_members(non_excluded, wrong_level_count=len(aggregation.wrong_level_entries))
        governance = compute_governance(non_excluded, count_business_days(period.start, period.end))

        log_with_context(
            logger,
            "info",
            f"Team {team_name}: {summary.total_hours}h logged, {governance.compliance_pct}% of expected",
            team=team_name,
            members=len(aggregation.members),
            is_compliant=governance.is_compliant,
        )

        return TeamTimeReport(
            period=period,
            team=TeamDescriptor(name=team_name, total_members=len(non_excluded)),
            summary=summary,
            members=aggregation.members,
            wrong_level_entries=aggregation.wrong_level_entries,
            seven_pace_connected=True,
            governance=governance,
            diagnostics=build_diagnostics(seven_pace_users, roster, member_results),
        )


def default_output_file(team_name: str) -> str:
    """Report path for a team, e.g. .tmp/observatory/time_tracking_platform_team.json"""
    slug = re.sub(r"[^a-z0-9]+", "_", team_name.lower()).strip("_") or "team"
    return f"{DEFAULT_OUTPUT_DIR}/time_tracking_{slug}.json"


def save_report(report: TeamTimeReport, output_file: str | None = None) -> str:
    """
    Write the report atomically.

    Returns:
        Path the report was written to
    """
    path = output_file or default_output_file(report.team.name)
    atomic_json_save(report.to_dict(), path)
    logger.info(f"Report saved to {path}")
    return path


def _print_summary(report: TeamTimeReport, path: str) -> None:
    print("\n" + "=" * 60)
    print(f"Time Tracking Summary: {report.team.name} ({report.period.label})")
    print("=" * 60)
    if not report.seven_pace_connected:
        print("  [WARNING] 7pace is not configured - report is empty")
    else:
        summary = report.summary
        print(f"  Total hours:         {summary.total_hours}")
        print(f"  CapEx / OpEx:        {summary.cap_ex_hours} / {summary.op_ex_hours}")
        print(f"  Unclassified:        {summary.unclassified_hours}")
        print(f"  Members logging:     {summary.members_logging} (not logging: {summary.members_not_logging})")
        print(f"  Wrong-level entries: {summary.wrong_level_count}")
        if report.governance:
            status = "compliant" if report.governance.is_compliant else "NOT compliant"
            print(
                f"  Compliance:          {report.governance.compliance_pct}% of "
                f"{report.governance.expected_hours}h expected ({status})"
            )
            if report.governance.missing_hours:
                print(f"  Missing hours:       {report.governance.missing_hours}")
    print(f"\nReport: {path}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Collect CapEx/OpEx time tracking summary for an Azure DevOps team")
    parser.add_argument("--team", required=True, help="Azure DevOps team name")
    parser.add_argument("--range", dest="range_key", choices=SUPPORTED_RANGES, default="14", help="Reporting window")
    parser.add_argument("--output", help="Output JSON path (default: .tmp/observatory/time_tracking_<team>.json)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(level="DEBUG" if args.verbose else "INFO", json_output=args.json_logs)

    try:
        validate_config_on_startup(["ado"])
        collector = TeamTimeSummaryCollector.from_config()
        report = asyncio.run(collector.collect(args.team, range_key=args.range_key))
    except ConfigurationError as e:
        print(f"[ERROR] Configuration error: {e}", file=sys.stderr)
        return 3
    except UpstreamAPIError as e:
        if e.is_authorization_error:
            print(f"[ERROR] Authorization failed: {e}", file=sys.stderr)
            return 2
        print(f"[ERROR] Upstream failure: {e}", file=sys.stderr)
        return 1
    except (TeamNotFoundError, ValueError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    path = save_report(report, args.output)
    _print_summary(report, path)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Team time report domain models

The structured result of one time tracking run for a team:
    - ReportPeriod: the reporting window
    - TeamDescriptor: team name and active member count
    - TimeSummary: team totals over non-excluded members
    - PipelineDiagnostics: record counts and samples for troubleshooting
    - TeamTimeReport: everything above plus the member breakdown
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from ..utils.datetime_utils import ResolvedRange
from ..utils.statistics import round_half_up
from .governance import GovernanceSnapshot
from .time_entries import MemberTimeEntry, WrongLevelEntry


@dataclass(frozen=True)
class ReportPeriod:
    """
    Reporting window.

    Attributes:
        start: Window start (inclusive)
        end: Window end (exclusive)
        days: Calendar days covered
        label: "last 7 days", "last 14 days" or "month to date"
    """

    start: datetime
    end: datetime
    days: int
    label: str

    @classmethod
    def from_range(cls, resolved: ResolvedRange) -> "ReportPeriod":
        return cls(start=resolved.start, end=resolved.end, days=resolved.days, label=resolved.label)

    def to_dict(self) -> dict[str, Any]:
        return {
            "days": self.days,
            "from": self.start.isoformat(),
            "to": self.end.isoformat(),
            "label": self.label,
        }


@dataclass(frozen=True)
class TeamDescriptor:
    """Team name and number of members counted towards team totals."""

    name: str
    total_members: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "total_members": self.total_members}


@dataclass(frozen=True)
class TimeSummary:
    """
    Team totals, summed over non-excluded members only.

    Attributes:
        total_hours: All hours logged
        cap_ex_hours: Hours attributed to CapEx Features
        op_ex_hours: Hours attributed to OpEx Features
        unclassified_hours: Hours without a classified Feature
        members_logging: Active members with any hours
        members_not_logging: Active members with no hours
        wrong_level_count: Worklogs attached below the Feature level (all members)
    """

    total_hours: float = 0.0
    cap_ex_hours: float = 0.0
    op_ex_hours: float = 0.0
    unclassified_hours: float = 0.0
    members_logging: int = 0
    members_not_logging: int = 0
    wrong_level_count: int = 0

    @classmethod
    def from_members(
        cls, non_excluded_members: Sequence[MemberTimeEntry], wrong_level_count: int
    ) -> "TimeSummary":
        """Sum finalized member figures and round the totals once."""
        return cls(
            total_hours=round_half_up(sum(m.total_hours for m in non_excluded_members)),
            cap_ex_hours=round_half_up(sum(m.cap_ex_hours for m in non_excluded_members)),
            op_ex_hours=round_half_up(sum(m.op_ex_hours for m in non_excluded_members)),
            unclassified_hours=round_half_up(sum(m.unclassified_hours for m in non_excluded_members)),
            members_logging=sum(1 for m in non_excluded_members if m.is_logging),
            members_not_logging=sum(1 for m in non_excluded_members if not m.is_logging),
            wrong_level_count=wrong_level_count,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_hours": self.total_hours,
            "cap_ex_hours": self.cap_ex_hours,
            "op_ex_hours": self.op_ex_hours,
            "unclassified_hours": self.unclassified_hours,
            "members_logging": self.members_logging,
            "members_not_logging": self.members_not_logging,
            "wrong_level_count": self.wrong_level_count,
        }


@dataclass(frozen=True)
class PaginationSummary:
    """Pagination outcome across all per-member worklog fetches."""

    pages_fetched: int = 0
    total_records: int = 0
    hit_safety_cap: bool = False
    members_hit_safety_cap: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "pages_fetched": self.pages_fetched,
            "total_records": self.total_records,
            "hit_safety_cap": self.hit_safety_cap,
            "members_hit_safety_cap": list(self.members_hit_safety_cap),
        }


@dataclass(frozen=True)
class PipelineDiagnostics:
    """
    Observability payload for identity-matching and pagination problems.

    Never used for control flow.

    Attributes:
        seven_pace_users_total: Users known to 7pace
        seven_pace_users: Sample of {id, unique_name} user mappings
        total_worklogs: Raw worklogs received across all members
        worklogs_matched_to_team: Worklogs whose owner is on the roster
        unmapped_user_id_count: Distinct 7pace user ids without a unique name
        mapped_but_not_on_team_count: Distinct identities seen in worklogs but not on the roster
        mapped_but_not_on_team: Sample of those identities
        roster_unique_names: Normalized roster identities
        sample_worklogs: Sample of raw worklogs with their resolved identity
        worklogs_request_urls: Sample of per-member request URLs
        pagination: Aggregate pagination outcome
    """

    seven_pace_users_total: int
    seven_pace_users: list[dict[str, str]]
    total_worklogs: int
    worklogs_matched_to_team: int
    unmapped_user_id_count: int
    mapped_but_not_on_team_count: int
    mapped_but_not_on_team: list[str]
    roster_unique_names: list[str]
    sample_worklogs: list[dict[str, Any]]
    worklogs_request_urls: list[str]
    pagination: PaginationSummary

    def to_dict(self) -> dict[str, Any]:
        return {
            "seven_pace_users_total": self.seven_pace_users_total,
            "seven_pace_users": self.seven_pace_users,
            "total_worklogs": self.total_worklogs,
            "worklogs_matched_to_team": self.worklogs_matched_to_team,
            "unmapped_user_id_count": self.unmapped_user_id_count,
            "mapped_but_not_on_team_count": self.mapped_but_not_on_team_count,
            "mapped_but_not_on_team": self.mapped_but_not_on_team,
            "roster_unique_names": self.roster_unique_names,
            "sample_worklogs": self.sample_worklogs,
            "worklogs_request_urls": self.worklogs_request_urls,
            "pagination": self.pagination.to_dict(),
        }


@dataclass(frozen=True)
class TeamTimeReport:
    """
    CapEx/OpEx time report for one team over one period.

    Attributes:
        period: Reporting window
        team: Team descriptor
        summary: Team totals (non-excluded members)
        members: Every roster member, non-excluded first, then by total hours
        wrong_level_entries: Worklogs attached below the Feature level
        seven_pace_connected: False when 7pace is not configured
        governance: Compliance snapshot (None in a degraded report)
        diagnostics: Pipeline diagnostics (None in a degraded report)
        generated_at: Report creation time

    Example:
        report = await collector.collect("Platform Team", range_key="14")
        print(f"{report.summary.total_hours}h logged, {report.governance.compliance_pct}% compliant")
    """

    period: ReportPeriod
    team: TeamDescriptor
    summary: TimeSummary
    members: list[MemberTimeEntry]
    wrong_level_entries: list[WrongLevelEntry]
    seven_pace_connected: bool = True
    governance: GovernanceSnapshot | None = None
    diagnostics: PipelineDiagnostics | None = None
    generated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def degraded(cls, period: ReportPeriod, team_name: str) -> "TeamTimeReport":
        """Zeroed report for when 7pace is not configured."""
        return cls(
            period=period,
            team=TeamDescriptor(name=team_name),
            summary=TimeSummary(),
            members=[],
            wrong_level_entries=[],
            seven_pace_connected=False,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "period": self.period.to_dict(),
            "team": self.team.to_dict(),
            "summary": self.summary.to_dict(),
            "members": [member.to_dict() for member in self.members],
            "wrong_level_entries": [entry.to_dict() for entry in self.wrong_level_entries],
            "seven_pace_connected": self.seven_pace_connected,
            "governance": self.governance.to_dict() if self.governance else None,
            "diagnostics": self.diagnostics.to_dict() if self.diagnostics else None,
            "generated_at": self.generated_at.isoformat(),
        }

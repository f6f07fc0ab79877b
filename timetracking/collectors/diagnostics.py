"""
Pipeline Diagnostics Builder

Summarizes intermediate pipeline state so identity-matching and pagination
problems can be diagnosed from the report alone.
"""

from collections.abc import Sequence

from ..domain.constants import diagnostics_config
from ..domain.identity import NormalizedIdentity
from ..domain.report import PaginationSummary, PipelineDiagnostics
from ..domain.team import TeamMember
from ..domain.time_entries import MemberWorklogResult


def build_diagnostics(
    seven_pace_users: dict[str, str],
    roster: Sequence[TeamMember],
    member_results: Sequence[MemberWorklogResult],
) -> PipelineDiagnostics:
    """
    Assemble the diagnostics payload.

    Args:
        seven_pace_users: 7pace user id -> unique name
        roster: Team roster
        member_results: Per-member worklog fetch results

    Returns:
        PipelineDiagnostics
    """
    roster_identities = {member.identity for member in roster}
    worklogs = [worklog for result in member_results for worklog in result.worklogs]

    matched = 0
    unmapped_user_ids: set[str] = set()
    not_on_team: dict[NormalizedIdentity, None] = {}
    for worklog in worklogs:
        identity = worklog.identity
        if identity is None:
            unmapped_user_ids.add(worklog.user_id)
        elif identity in roster_identities:
            matched += 1
        else:
            not_on_team.setdefault(identity, None)

    sample_worklogs = [
        {
            "user_id": worklog.user_id,
            "resolved_unique_name": worklog.unique_name or None,
            "work_item_id": worklog.work_item_id,
            "hours": worklog.hours,
        }
        for worklog in worklogs[: diagnostics_config.WORKLOG_SAMPLE_SIZE]
    ]

    capped_members = [r.member.unique_name for r in member_results if r.pagination.hit_safety_cap]
    pagination = PaginationSummary(
        pages_fetched=sum(r.pagination.pages_fetched for r in member_results),
        total_records=sum(r.pagination.total_records for r in member_results),
        hit_safety_cap=bool(capped_members),
        members_hit_safety_cap=capped_members,
    )

    return PipelineDiagnostics(
        seven_pace_users_total=len(seven_pace_users),
        seven_pace_users=[
            {"id": user_id, "unique_name": unique_name}
            for user_id, unique_name in list(seven_pace_users.items())[: diagnostics_config.USER_SAMPLE_SIZE]
        ],
        total_worklogs=len(worklogs),
        worklogs_matched_to_team=matched,
        unmapped_user_id_count=len(unmapped_user_ids),
        mapped_but_not_on_team_count=len(not_on_team),
        mapped_but_not_on_team=[str(i) for i in list(not_on_team)[: diagnostics_config.NOT_ON_TEAM_SAMPLE_SIZE]],
        roster_unique_names=[str(member.identity) for member in roster],
        sample_worklogs=sample_worklogs,
        worklogs_request_urls=[r.request_url for r in member_results[: diagnostics_config.REQUEST_URL_SAMPLE_SIZE]],
        pagination=pagination,
    )

"""
Time Aggregation Engine

Folds 7pace worklogs into per-member CapEx/OpEx breakdowns:

1. One accumulator per roster member, tagged with exclusion settings
2. Referenced work items are batch-fetched into the run's hierarchy cache
3. Each worklog is attributed to a Feature; worklogs on anything other than
   a Feature are recorded as wrong-level entries
4. Totals are rounded once, features sorted by hours, members sorted with
   non-excluded members first and then by total hours

The fold is order-independent: shuffling the worklogs gives the same totals.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from ..core import get_logger
from ..domain.identity import NormalizedIdentity
from ..domain.team import MemberExclusion, TeamMember
from ..domain.time_entries import MemberAccumulator, MemberTimeEntry, RawTimeEntry, WrongLevelEntry
from ..domain.work_items import ResolvedFeature
from .work_item_hierarchy import FeatureResolver

logger = get_logger(__name__)

UNKNOWN_WORK_ITEM_TYPE = "Unknown"


@dataclass(frozen=True)
class AggregationResult:
    """
    Output of aggregate_time_entries.

    Attributes:
        members: Every roster member exactly once, sorted for display
        wrong_level_entries: One entry per worklog logged below the Feature level
        matched_entry_count: Worklogs that belonged to a roster member
    """

    members: list[MemberTimeEntry]
    wrong_level_entries: list[WrongLevelEntry]
    matched_entry_count: int

    @property
    def non_excluded_members(self) -> list[MemberTimeEntry]:
        return [member for member in self.members if not member.is_excluded]


def _build_accumulators(
    roster: Iterable[TeamMember], exclusions: Iterable[MemberExclusion]
) -> dict[NormalizedIdentity, MemberAccumulator]:
    exclusions_by_identity = {exclusion.identity: exclusion for exclusion in exclusions}
    accumulators: dict[NormalizedIdentity, MemberAccumulator] = {}
    for member in roster:
        identity = member.identity
        if identity in accumulators:
            logger.debug(f"Duplicate roster entry ignored: {identity}")
            continue
        accumulators[identity] = MemberAccumulator.for_member(member, exclusions_by_identity.get(identity))
    return accumulators


async def aggregate_time_entries(
    roster: list[TeamMember],
    exclusions: Iterable[MemberExclusion],
    worklogs: Iterable[RawTimeEntry],
    resolver: FeatureResolver,
) -> AggregationResult:
    """
    Aggregate worklogs into per-member time breakdowns.

    Args:
        roster: Team members (each appears in the result, even with no worklogs)
        exclusions: Role/exclusion records used to tag members
        worklogs: Raw worklogs; entries not owned by a roster member are discarded
        resolver: Feature resolver bound to this run's hierarchy cache

    Returns:
        AggregationResult

    Raises:
        AdoApiError: If fetching work items fails
    """
    accumulators = _build_accumulators(roster, exclusions)

    team_worklogs: list[tuple[MemberAccumulator, RawTimeEntry]] = []
    for worklog in worklogs:
        identity = worklog.identity
        accumulator = accumulators.get(identity) if identity else None
        if accumulator is not None:
            team_worklogs.append((accumulator, worklog))

    await resolver.prefetch(wl.work_item_id for _, wl in team_worklogs if wl.work_item_id is not None)

    wrong_level_entries: list[WrongLevelEntry] = []
    for accumulator, worklog in team_worklogs:
        work_item_id = worklog.work_item_id
        if work_item_id is None:
            accumulator.add(worklog.hours, ResolvedFeature.none())
            continue

        item = resolver.cached_item(work_item_id)
        if item is not None and item.is_feature:
            accumulator.add(worklog.hours, ResolvedFeature.from_feature(item))
            continue

        feature = await resolver.resolve(work_item_id)
        item_type = item.work_item_type if item is not None and item.work_item_type else UNKNOWN_WORK_ITEM_TYPE
        accumulator.add(worklog.hours, feature, wrong_level_item_id=work_item_id, wrong_level_item_type=item_type)
        wrong_level_entries.append(
            WrongLevelEntry(
                work_item_id=work_item_id,
                title=(item.title if item is not None else "") or f"Work item {work_item_id}",
                work_item_type=item_type,
                member_name=accumulator.display_name,
                hours=worklog.hours,
                resolved_feature_id=feature.feature_id,
                resolved_feature_title=feature.feature_title if feature.has_feature else None,
            )
        )

    members = sorted(
        (accumulator.finalize() for accumulator in accumulators.values()),
        key=lambda m: (m.is_excluded, -m.total_hours),
    )

    logger.info(
        f"Aggregated {len(team_worklogs)} worklogs for {len(members)} members "
        f"({len(wrong_level_entries)} logged below Feature level)"
    )
    return AggregationResult(
        members=members, wrong_level_entries=wrong_level_entries, matched_entry_count=len(team_worklogs)
    )

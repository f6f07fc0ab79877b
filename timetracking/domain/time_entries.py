"""
Time tracking domain models - worklogs and per-member accumulation

Represents 7pace worklogs and the per-member CapEx/OpEx breakdown built
from them:
    - RawTimeEntry: one worklog as returned by 7pace
    - MemberWorklogResult: everything fetched for one member, with pagination info
    - MemberAccumulator: running totals for one member during a run
    - MemberTimeEntry / FeatureTimeBreakdown: finalized, rounded output
    - WrongLevelEntry: a worklog attached below the Feature level
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..utils.statistics import round_half_up
from .identity import NormalizedIdentity
from .team import MemberExclusion, TeamMember
from .work_items import ExpenseType, ResolvedFeature


@dataclass(frozen=True)
class RawTimeEntry:
    """
    A single 7pace worklog.

    Attributes:
        id: 7pace worklog ID
        user_id: 7pace user ID
        unique_name: Owner's unique name as reported by 7pace (may be empty)
        display_name: Owner's display name as reported by 7pace
        work_item_id: Referenced Azure DevOps work item, or None
        hours: Logged duration in hours
        logged_at: Worklog timestamp, or None if 7pace sent an unparseable value
        activity_type: 7pace activity type name, if any
    """

    id: str
    user_id: str
    unique_name: str
    display_name: str
    work_item_id: int | None
    hours: float
    logged_at: datetime | None = None
    activity_type: str | None = None

    def __post_init__(self) -> None:
        if self.hours < 0:
            raise ValueError(f"hours must be non-negative, got {self.hours}")

    @property
    def identity(self) -> NormalizedIdentity | None:
        return NormalizedIdentity.of_optional(self.unique_name)


@dataclass(frozen=True)
class PaginationInfo:
    """
    Pagination outcome of a worklog fetch.

    Attributes:
        pages_fetched: Number of pages requested
        total_records: Worklogs received across all pages
        hit_safety_cap: True when pages remained after the safety cap was reached
    """

    pages_fetched: int = 0
    total_records: int = 0
    hit_safety_cap: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "pages_fetched": self.pages_fetched,
            "total_records": self.total_records,
            "hit_safety_cap": self.hit_safety_cap,
        }


@dataclass(frozen=True)
class MemberWorklogResult:
    """
    Worklogs fetched for one roster member.

    Attributes:
        member: The roster member the request was filtered by
        worklogs: Worklogs returned
        raw_count: Number of records received before any filtering
        request_url: First page URL (for diagnostics)
        pagination: Pagination outcome
    """

    member: TeamMember
    worklogs: list[RawTimeEntry]
    raw_count: int
    request_url: str
    pagination: PaginationInfo


@dataclass(frozen=True)
class FeatureTimeBreakdown:
    """
    Hours a member logged against one Feature (finalized).

    Attributes:
        feature_id: Feature ID, or None for work without a Feature
        feature_title: Feature title
        expense_type: Feature classification
        hours: Rounded hours
        logged_at_wrong_level: True when the first entry for this Feature was logged on a child item
        original_work_item_id: Child item of that first wrong-level entry
        original_work_item_type: Type of that child item
    """

    feature_id: int | None
    feature_title: str
    expense_type: ExpenseType
    hours: float
    logged_at_wrong_level: bool = False
    original_work_item_id: int | None = None
    original_work_item_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "feature_id": self.feature_id,
            "feature_title": self.feature_title,
            "expense_type": self.expense_type.value,
            "hours": self.hours,
            "logged_at_wrong_level": self.logged_at_wrong_level,
            "original_work_item_id": self.original_work_item_id,
            "original_work_item_type": self.original_work_item_type,
        }


@dataclass
class FeatureAccumulator:
    """Running hours for one Feature within a MemberAccumulator."""

    feature: ResolvedFeature
    hours: float = 0.0
    logged_at_wrong_level: bool = False
    original_work_item_id: int | None = None
    original_work_item_type: str | None = None

    def finalize(self) -> FeatureTimeBreakdown:
        return FeatureTimeBreakdown(
            feature_id=self.feature.feature_id,
            feature_title=self.feature.feature_title,
            expense_type=self.feature.expense_type,
            hours=round_half_up(self.hours),
            logged_at_wrong_level=self.logged_at_wrong_level,
            original_work_item_id=self.original_work_item_id,
            original_work_item_type=self.original_work_item_type,
        )


@dataclass(frozen=True)
class MemberTimeEntry:
    """
    Finalized time breakdown for one roster member.

    All hour figures are rounded half-up to two decimals; features are sorted
    by hours, largest first.
    """

    display_name: str
    unique_name: str
    total_hours: float
    cap_ex_hours: float
    op_ex_hours: float
    unclassified_hours: float
    wrong_level_hours: float
    wrong_level_count: int
    entry_count: int
    is_excluded: bool
    role: str | None
    features: list[FeatureTimeBreakdown]

    @property
    def is_logging(self) -> bool:
        """True when the member logged any time in the period."""
        return self.total_hours > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "display_name": self.display_name,
            "unique_name": self.unique_name,
            "total_hours": self.total_hours,
            "cap_ex_hours": self.cap_ex_hours,
            "op_ex_hours": self.op_ex_hours,
            "unclassified_hours": self.unclassified_hours,
            "wrong_level_hours": self.wrong_level_hours,
            "wrong_level_count": self.wrong_level_count,
            "entry_count": self.entry_count,
            "is_excluded": self.is_excluded,
            "role": self.role,
            "features": [feature.to_dict() for feature in self.features],
        }


@dataclass
class MemberAccumulator:
    """
    Mutable running totals for one roster member during a single run.

    Sums are kept unrounded; rounding happens once in finalize().

    Example:
        acc = MemberAccumulator.for_member(member, exclusion=None)
        acc.add(5.0, resolved_feature)
        entry = acc.finalize()
    """

    display_name: str
    unique_name: str
    is_excluded: bool = False
    role: str | None = None
    total_hours: float = 0.0
    cap_ex_hours: float = 0.0
    op_ex_hours: float = 0.0
    unclassified_hours: float = 0.0
    wrong_level_hours: float = 0.0
    wrong_level_count: int = 0
    entry_count: int = 0
    features: dict[str, FeatureAccumulator] = field(default_factory=dict)

    @classmethod
    def for_member(cls, member: TeamMember, exclusion: MemberExclusion | None) -> "MemberAccumulator":
        """Create an empty accumulator tagged with the member's exclusion settings."""
        return cls(
            display_name=member.display_name,
            unique_name=member.unique_name,
            is_excluded=bool(exclusion and exclusion.exclude_from_metrics),
            role=exclusion.role if exclusion and exclusion.exclude_from_metrics else None,
        )

    def add(
        self,
        hours: float,
        feature: ResolvedFeature,
        wrong_level_item_id: int | None = None,
        wrong_level_item_type: str | None = None,
    ) -> None:
        """
        Add one worklog's hours.

        Args:
            hours: Logged hours
            feature: Feature the worklog is attributed to
            wrong_level_item_id: Work item the worklog was attached to, when below Feature level
            wrong_level_item_type: Type of that work item
        """
        logged_at_wrong_level = wrong_level_item_id is not None
        self.entry_count += 1
        self.total_hours += hours

        if feature.expense_type is ExpenseType.CAPEX:
            self.cap_ex_hours += hours
        elif feature.expense_type is ExpenseType.OPEX:
            self.op_ex_hours += hours
        else:
            self.unclassified_hours += hours

        if logged_at_wrong_level:
            self.wrong_level_hours += hours
            self.wrong_level_count += 1

        key = feature.breakdown_key
        breakdown = self.features.get(key)
        if breakdown is None:
            breakdown = FeatureAccumulator(
                feature=feature,
                logged_at_wrong_level=logged_at_wrong_level,
                original_work_item_id=wrong_level_item_id,
                original_work_item_type=wrong_level_item_type,
            )
            self.features[key] = breakdown
        breakdown.hours += hours

    def finalize(self) -> MemberTimeEntry:
        """Round every figure and sort the feature breakdown by hours, largest first."""
        features = sorted(
            (breakdown.finalize() for breakdown in self.features.values()),
            key=lambda f: f.hours,
            reverse=True,
        )
        return MemberTimeEntry(
            display_name=self.display_name,
            unique_name=self.unique_name,
            total_hours=round_half_up(self.total_hours),
            cap_ex_hours=round_half_up(self.cap_ex_hours),
            op_ex_hours=round_half_up(self.op_ex_hours),
            unclassified_hours=round_half_up(self.unclassified_hours),
            wrong_level_hours=round_half_up(self.wrong_level_hours),
            wrong_level_count=self.wrong_level_count,
            entry_count=self.entry_count,
            is_excluded=self.is_excluded,
            role=self.role,
            features=features,
        )


@dataclass(frozen=True)
class WrongLevelEntry:
    """
    A worklog attached to a work item below the Feature level.

    Attributes:
        work_item_id: Work item the time was logged on
        title: Its title
        work_item_type: Its type ("Task", "Bug", ..., "Unknown" if it could not be fetched)
        member_name: Display name of the member who logged it
        hours: Logged hours (unrounded)
        resolved_feature_id: Feature the time was attributed to, if any
        resolved_feature_title: Title of that Feature, if any
    """

    work_item_id: int
    title: str
    work_item_type: str
    member_name: str
    hours: float
    resolved_feature_id: int | None = None
    resolved_feature_title: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "work_item_id": self.work_item_id,
            "title": self.title,
            "work_item_type": self.work_item_type,
            "member_name": self.member_name,
            "hours": round_half_up(self.hours),
            "resolved_feature_id": self.resolved_feature_id,
            "resolved_feature_title": self.resolved_feature_title,
        }

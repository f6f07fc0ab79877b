"""
Domain Models - Type-safe data structures for time tracking

This package contains dataclasses representing business domain concepts:
    - identity: NormalizedIdentity
    - work_items: WorkItem, ResolvedFeature, ExpenseType
    - team: TeamMember, MemberExclusion
    - time_entries: RawTimeEntry, MemberAccumulator, MemberTimeEntry, WrongLevelEntry
    - governance: GovernanceSnapshot, compute_governance
    - report: TeamTimeReport and its parts

Usage:
    from timetracking.domain.work_items import WorkItem

    item = WorkItem(id=1001, title="Checkout revamp", work_item_type="Feature", expense_classification="CapEx")
    if item.is_feature:
        print(f"{item.display_title}: {item.expense_type.value}")
"""

# Import domain models for convenient access
from .governance import GovernanceSnapshot, compute_governance
from .identity import NormalizedIdentity
from .report import (
    PaginationSummary,
    PipelineDiagnostics,
    ReportPeriod,
    TeamDescriptor,
    TeamTimeReport,
    TimeSummary,
)
from .team import MemberExclusion, TeamMember
from .time_entries import (
    FeatureTimeBreakdown,
    MemberAccumulator,
    MemberTimeEntry,
    MemberWorklogResult,
    PaginationInfo,
    RawTimeEntry,
    WrongLevelEntry,
)
from .work_items import ExpenseType, ResolvedFeature, WorkItem

__all__ = [
    # Identity
    "NormalizedIdentity",
    # Work items
    "ExpenseType",
    "WorkItem",
    "ResolvedFeature",
    # Team
    "TeamMember",
    "MemberExclusion",
    # Time entries
    "RawTimeEntry",
    "PaginationInfo",
    "MemberWorklogResult",
    "FeatureTimeBreakdown",
    "MemberAccumulator",
    "MemberTimeEntry",
    "WrongLevelEntry",
    # Governance
    "GovernanceSnapshot",
    "compute_governance",
    # Report
    "ReportPeriod",
    "TeamDescriptor",
    "TimeSummary",
    "PaginationSummary",
    "PipelineDiagnostics",
    "TeamTimeReport",
]

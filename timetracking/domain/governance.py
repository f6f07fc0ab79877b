"""
Governance domain model - time logging compliance

Compares hours actually logged by active (non-excluded) members against
the hours expected for the period:

    expected_hours = business_days x hours_per_day x active_members
    compliance_pct = actual / expected x 100, rounded half-up to 2 decimals
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ..utils.statistics import percentage, round_half_up
from .constants import time_tracking
from .time_entries import MemberTimeEntry


@dataclass(frozen=True)
class GovernanceSnapshot:
    """
    Time logging compliance for a team over a period.

    Attributes:
        business_days: Monday-Friday days in the period
        hours_per_day: Expected hours per business day per member
        active_members: Non-excluded roster members
        expected_hours: business_days x hours_per_day x active_members
        actual_hours: Hours logged by active members
        compliance_pct: actual / expected as a percentage (0 when nothing is expected)
        is_compliant: compliance_pct >= 95

    Example:
        snapshot = compute_governance(active_members, business_days=10)
        if not snapshot.is_compliant:
            print(f"Only {snapshot.compliance_pct}% of expected hours logged")
    """

    business_days: int
    hours_per_day: int
    active_members: int
    expected_hours: float
    actual_hours: float
    compliance_pct: float
    is_compliant: bool

    @property
    def missing_hours(self) -> float:
        """Hours still needed to reach the expected total (never negative)."""
        return round_half_up(max(self.expected_hours - self.actual_hours, 0.0))

    def to_dict(self) -> dict[str, Any]:
        return {
            "business_days": self.business_days,
            "hours_per_day": self.hours_per_day,
            "active_members": self.active_members,
            "expected_hours": self.expected_hours,
            "actual_hours": self.actual_hours,
            "compliance_pct": self.compliance_pct,
            "is_compliant": self.is_compliant,
        }


def compute_governance(
    non_excluded_members: Sequence[MemberTimeEntry],
    business_days: int,
    hours_per_day: int = time_tracking.HOURS_PER_DAY,
) -> GovernanceSnapshot:
    """
    Derive the compliance snapshot from finalized, non-excluded members.

    Args:
        non_excluded_members: Finalized members that count towards team totals
        business_days: Business days in the period
        hours_per_day: Expected hours per business day (default: 8)

    Returns:
        GovernanceSnapshot
    """
    active_members = len(non_excluded_members)
    expected_hours = business_days * hours_per_day * active_members
    actual_hours = round_half_up(sum(member.total_hours for member in non_excluded_members))
    compliance_pct = percentage(actual_hours, expected_hours)

    return GovernanceSnapshot(
        business_days=business_days,
        hours_per_day=hours_per_day,
        active_members=active_members,
        expected_hours=expected_hours,
        actual_hours=actual_hours,
        compliance_pct=compliance_pct,
        is_compliant=compliance_pct >= time_tracking.COMPLIANCE_THRESHOLD_PCT,
    )

"""
Team domain models - roster members and metric exclusions
"""

from dataclasses import dataclass

from .identity import NormalizedIdentity


@dataclass(frozen=True)
class TeamMember:
    """
    A member of an Azure DevOps team.

    Attributes:
        id: Azure DevOps identity ID
        display_name: Display name
        unique_name: Unique name (usually the member's email)
    """

    id: str
    display_name: str
    unique_name: str

    @property
    def identity(self) -> NormalizedIdentity:
        return NormalizedIdentity.of(self.unique_name)


@dataclass(frozen=True)
class MemberExclusion:
    """
    A role assignment from the settings store.

    Members flagged with exclude_from_metrics (e.g. managers, designers) still
    appear in the report, but are tagged and left out of team totals.

    Attributes:
        unique_name: Unique name of the member
        role: Role label ("Engineering Manager", "QA", ...)
        exclude_from_metrics: Whether the member is left out of team totals
    """

    unique_name: str
    role: str | None = None
    exclude_from_metrics: bool = False

    @property
    def identity(self) -> NormalizedIdentity:
        return NormalizedIdentity.of(self.unique_name)

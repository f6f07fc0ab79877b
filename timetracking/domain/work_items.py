"""
Work item domain models

Represents the Azure DevOps work item hierarchy as far as time attribution
needs it: each item's type, title, parent link and (for Features) the
CapEx/OpEx classification.
"""

from dataclasses import dataclass
from enum import Enum

from .constants import time_tracking


class ExpenseType(str, Enum):
    """Expense classification of a Feature."""

    CAPEX = "CapEx"
    OPEX = "OpEx"
    UNCLASSIFIED = "Unclassified"

    @classmethod
    def from_raw(cls, raw: str | None) -> "ExpenseType":
        """
        Map the raw classification field to an ExpenseType.

        Only the exact strings "CapEx" and "OpEx" are recognized; anything else
        (missing, blank, different casing) is Unclassified.
        """
        if raw == cls.CAPEX.value:
            return cls.CAPEX
        if raw == cls.OPEX.value:
            return cls.OPEX
        return cls.UNCLASSIFIED


@dataclass(frozen=True)
class WorkItem:
    """
    A work item as fetched from Azure DevOps.

    Attributes:
        id: Work item ID
        title: System.Title (may be empty)
        work_item_type: System.WorkItemType ("Feature", "User Story", "Task", "Bug", ...)
        parent_id: System.Parent, or None for a root item
        expense_classification: Raw Custom.FeatureExpense value (only meaningful on Features)

    Example:
        task = WorkItem(id=1002, title="Wire up API", work_item_type="Task", parent_id=1001)
        if not task.is_feature:
            print(f"Walk up to {task.parent_id}")
    """

    id: int
    title: str
    work_item_type: str
    parent_id: int | None = None
    expense_classification: str | None = None

    @property
    def is_feature(self) -> bool:
        """True when this item is the classifiable unit."""
        return self.work_item_type == time_tracking.FEATURE_WORK_ITEM_TYPE

    @property
    def expense_type(self) -> ExpenseType:
        """Expense classification (Unclassified for anything that is not a Feature)."""
        if not self.is_feature:
            return ExpenseType.UNCLASSIFIED
        return ExpenseType.from_raw(self.expense_classification)

    @property
    def display_title(self) -> str:
        """Title, or a synthesized "Feature {id}" when the title is empty."""
        return self.title or f"{time_tracking.FEATURE_WORK_ITEM_TYPE} {self.id}"


@dataclass(frozen=True)
class ResolvedFeature:
    """
    The Feature that owns a work item, as found by walking the parent chain.

    Attributes:
        feature_id: Feature work item ID, or None when no Feature was found
        feature_title: Feature title ("No Feature" when none was found)
        expense_type: CapEx, OpEx or Unclassified
    """

    feature_id: int | None
    feature_title: str
    expense_type: ExpenseType

    @classmethod
    def none(cls) -> "ResolvedFeature":
        """The result for work that no Feature owns."""
        return cls(feature_id=None, feature_title=time_tracking.NO_FEATURE_TITLE, expense_type=ExpenseType.UNCLASSIFIED)

    @classmethod
    def from_feature(cls, item: WorkItem) -> "ResolvedFeature":
        """Build the result for a Feature work item."""
        return cls(feature_id=item.id, feature_title=item.display_title, expense_type=item.expense_type)

    @property
    def has_feature(self) -> bool:
        return self.feature_id is not None

    @property
    def breakdown_key(self) -> str:
        """Key under which hours are accumulated per member ("none" without a Feature)."""
        return str(self.feature_id) if self.feature_id is not None else time_tracking.NO_FEATURE_KEY

#!/usr/bin/env python3
"""
Tests for work item domain models
"""

import pytest

from timetracking.domain.work_items import ExpenseType, ResolvedFeature, WorkItem


class TestExpenseType:
    """Test ExpenseType.from_raw"""

    @pytest.mark.parametrize("raw,expected", [("CapEx", ExpenseType.CAPEX), ("OpEx", ExpenseType.OPEX)])
    def test_exact_values(self, raw, expected):
        """Test exact strings map to CapEx/OpEx"""
        assert ExpenseType.from_raw(raw) is expected

    @pytest.mark.parametrize("raw", [None, "", "capex", "OPEX", "Capital", " CapEx"])
    def test_anything_else_is_unclassified(self, raw):
        """Test missing or differently cased values are Unclassified"""
        assert ExpenseType.from_raw(raw) is ExpenseType.UNCLASSIFIED

    def test_serializes_as_string(self):
        """Test the enum value is the display string"""
        assert ExpenseType.CAPEX.value == "CapEx"
        assert ExpenseType.UNCLASSIFIED == "Unclassified"


class TestWorkItem:
    """Test WorkItem properties"""

    def test_feature_expense_type(self):
        """Test a Feature exposes its classification"""
        item = WorkItem(id=1, title="Checkout", work_item_type="Feature", expense_classification="OpEx")
        assert item.is_feature
        assert item.expense_type is ExpenseType.OPEX

    def test_non_feature_is_always_unclassified(self):
        """Test classification on a Task is ignored"""
        item = WorkItem(id=2, title="Task", work_item_type="Task", parent_id=1, expense_classification="CapEx")
        assert not item.is_feature
        assert item.expense_type is ExpenseType.UNCLASSIFIED

    def test_display_title_falls_back(self):
        """Test an empty title becomes 'Feature {id}'"""
        assert WorkItem(id=42, title="", work_item_type="Feature").display_title == "Feature 42"

    def test_immutable(self):
        """Test fetched work items cannot be changed"""
        item = WorkItem(id=1, title="x", work_item_type="Feature")
        with pytest.raises(AttributeError):
            item.title = "y"  # type: ignore[misc]


class TestResolvedFeature:
    """Test ResolvedFeature constructors"""

    def test_none_sentinel(self):
        """Test the no-feature result"""
        none = ResolvedFeature.none()
        assert none.feature_id is None
        assert none.feature_title == "No Feature"
        assert none.expense_type is ExpenseType.UNCLASSIFIED
        assert not none.has_feature
        assert none.breakdown_key == "none"

    def test_from_feature(self):
        """Test building from a Feature work item"""
        feature = ResolvedFeature.from_feature(
            WorkItem(id=1001, title="", work_item_type="Feature", expense_classification="CapEx")
        )
        assert feature == ResolvedFeature(1001, "Feature 1001", ExpenseType.CAPEX)
        assert feature.breakdown_key == "1001"

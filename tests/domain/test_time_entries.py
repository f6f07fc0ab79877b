#!/usr/bin/env python3
"""
Tests for time entry domain models

Covers RawTimeEntry validation and MemberAccumulator accumulation/finalization.
"""

import pytest

from timetracking.domain.team import MemberExclusion, TeamMember
from timetracking.domain.time_entries import MemberAccumulator, RawTimeEntry, WrongLevelEntry
from timetracking.domain.work_items import ExpenseType, ResolvedFeature

CAPEX_FEATURE = ResolvedFeature(1001, "Checkout", ExpenseType.CAPEX)
OPEX_FEATURE = ResolvedFeature(2001, "Support", ExpenseType.OPEX)


@pytest.fixture
def member():
    return TeamMember(id="m-1", display_name="Alice", unique_name="Alice@Contoso.com")


class TestRawTimeEntry:
    """Test RawTimeEntry"""

    def test_negative_hours_rejected(self):
        """Test durations must be non-negative"""
        with pytest.raises(ValueError, match="non-negative"):
            RawTimeEntry(id="w", user_id="u", unique_name="a@x.com", display_name="A", work_item_id=None, hours=-1)

    def test_identity_is_normalized(self):
        """Test identity lower-cases the unique name"""
        entry = RawTimeEntry(id="w", user_id="u", unique_name="A@X.com", display_name="A", work_item_id=1, hours=1)
        assert str(entry.identity) == "a@x.com"

    def test_missing_unique_name_has_no_identity(self):
        """Test blank unique name gives None"""
        entry = RawTimeEntry(id="w", user_id="u", unique_name="", display_name="", work_item_id=1, hours=1)
        assert entry.identity is None


class TestMemberAccumulator:
    """Test MemberAccumulator"""

    def test_for_member_without_exclusion(self, member):
        """Test defaults when the member has no exclusion record"""
        acc = MemberAccumulator.for_member(member, None)
        assert not acc.is_excluded
        assert acc.role is None

    def test_for_member_with_exclusion(self, member):
        """Test exclusion and role are copied"""
        exclusion = MemberExclusion(unique_name="alice@contoso.com", role="Engineering Manager", exclude_from_metrics=True)
        acc = MemberAccumulator.for_member(member, exclusion)
        assert acc.is_excluded
        assert acc.role == "Engineering Manager"

    def test_role_without_exclusion(self, member):
        """Test a role record that does not exclude keeps the member counted and untagged"""
        acc = MemberAccumulator.for_member(member, MemberExclusion(unique_name="alice@contoso.com", role="QA"))
        assert not acc.is_excluded
        assert acc.role is None

    def test_hours_split_by_expense_type(self, member):
        """Test totals decompose into CapEx/OpEx/Unclassified"""
        acc = MemberAccumulator.for_member(member, None)
        acc.add(5.0, CAPEX_FEATURE)
        acc.add(2.0, OPEX_FEATURE)
        acc.add(1.5, ResolvedFeature.none())

        entry = acc.finalize()
        assert entry.total_hours == 8.5
        assert entry.cap_ex_hours == 5.0
        assert entry.op_ex_hours == 2.0
        assert entry.unclassified_hours == 1.5
        assert entry.entry_count == 3
        assert entry.wrong_level_count == 0

    def test_wrong_level_tracking(self, member):
        """Test wrong-level hours/count and first-entry original item"""
        acc = MemberAccumulator.for_member(member, None)
        acc.add(3.0, CAPEX_FEATURE, wrong_level_item_id=1002, wrong_level_item_type="Task")
        acc.add(1.0, CAPEX_FEATURE)

        entry = acc.finalize()
        assert entry.wrong_level_hours == 3.0
        assert entry.wrong_level_count == 1
        assert len(entry.features) == 1
        breakdown = entry.features[0]
        assert breakdown.hours == 4.0
        assert breakdown.logged_at_wrong_level
        assert breakdown.original_work_item_id == 1002
        assert breakdown.original_work_item_type == "Task"

    def test_rounding_applied_once_at_finalize(self, member):
        """Test sums are kept unrounded until finalize"""
        acc = MemberAccumulator.for_member(member, None)
        for _ in range(3):
            acc.add(1 / 3, CAPEX_FEATURE)

        assert acc.total_hours == pytest.approx(1.0)
        assert acc.finalize().total_hours == 1.0

    def test_features_sorted_descending(self, member):
        """Test the feature breakdown is sorted by hours, largest first"""
        acc = MemberAccumulator.for_member(member, None)
        acc.add(1.0, CAPEX_FEATURE)
        acc.add(4.0, OPEX_FEATURE)
        acc.add(2.0, ResolvedFeature.none())

        assert [f.feature_id for f in acc.finalize().features] == [2001, None, 1001]

    def test_to_dict_serializes_expense_type(self, member):
        """Test the breakdown is JSON friendly"""
        acc = MemberAccumulator.for_member(member, None)
        acc.add(2.0, CAPEX_FEATURE)

        data = acc.finalize().to_dict()
        assert data["unique_name"] == "Alice@Contoso.com"
        assert data["features"][0]["expense_type"] == "CapEx"


class TestWrongLevelEntry:
    """Test WrongLevelEntry"""

    def test_to_dict_rounds_hours(self):
        """Test hours are rounded in the serialized form"""
        entry = WrongLevelEntry(work_item_id=1, title="t", work_item_type="Task", member_name="Alice", hours=1 / 3)
        assert entry.to_dict()["hours"] == 0.33

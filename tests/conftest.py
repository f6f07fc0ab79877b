"""
Pytest configuration and shared fixtures

Provides domain object factories and mocked Azure DevOps / 7pace clients
backed by in-memory stores.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock

import pytest

from timetracking.collectors.seven_pace_client import SevenPaceWorklogPage
from timetracking.domain.team import TeamMember
from timetracking.domain.time_entries import PaginationInfo, RawTimeEntry

# ===== Domain Model Fixtures =====


@pytest.fixture
def fixed_now():
    """Wednesday 2026-02-11 12:00 UTC"""
    return datetime(2026, 2, 11, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def make_member():
    """Factory for TeamMember objects"""

    def _make(unique_name: str, display_name: str | None = None) -> TeamMember:
        return TeamMember(
            id=f"id-{unique_name}",
            display_name=display_name or unique_name.split("@")[0].title(),
            unique_name=unique_name,
        )

    return _make


@pytest.fixture
def make_worklog():
    """Factory for RawTimeEntry objects"""
    counter = {"n": 0}

    def _make(unique_name: str, hours: float, work_item_id: int | None = None, user_id: str | None = None):
        counter["n"] += 1
        return RawTimeEntry(
            id=f"wl-{counter['n']}",
            user_id=user_id or f"u-{unique_name}",
            unique_name=unique_name,
            display_name=unique_name,
            work_item_id=work_item_id,
            hours=hours,
        )

    return _make


@pytest.fixture
def ado_work_item():
    """Factory for Azure DevOps work item JSON"""

    def _make(
        item_id: int,
        work_item_type: str,
        title: str = "",
        parent: int | None = None,
        expense: str | None = None,
    ) -> dict:
        fields = {"System.Title": title or f"{work_item_type} {item_id}", "System.WorkItemType": work_item_type}
        if parent is not None:
            fields["System.Parent"] = parent
        if expense is not None:
            fields["Custom.FeatureExpense"] = expense
        return {"id": item_id, "fields": fields}

    return _make


# ===== Mocked Upstream Clients =====


@pytest.fixture
def work_item_store():
    """Work item JSON keyed by id, served by mock_ado_client"""
    return {}


@pytest.fixture
def team_store():
    """Teams and their members' identity JSON, served by mock_ado_client"""
    return {"teams": [], "members": {}}


@pytest.fixture
def mock_ado_client(work_item_store, team_store):
    """Mock AzureDevOpsRESTClient backed by work_item_store and team_store"""
    client = Mock()

    def get_work_items(ids, fields, project):
        value = [work_item_store[i] for i in ids if i in work_item_store]
        return {"count": len(value), "value": value}

    def get_team_members(project, team_id):
        members = team_store["members"].get(team_id, [])
        return {"count": len(members), "value": [{"identity": m} for m in members]}

    client.get_work_items = AsyncMock(side_effect=get_work_items)
    client.get_project_teams = AsyncMock(side_effect=lambda project: list(team_store["teams"]))
    client.get_team_members = AsyncMock(side_effect=get_team_members)
    return client


@pytest.fixture
def worklog_store():
    """RawTimeEntry lists keyed by member email, served by mock_seven_pace_client"""
    return {}


@pytest.fixture
def mock_seven_pace_client(worklog_store):
    """Mock SevenPaceClient backed by worklog_store"""
    client = Mock()

    def get_worklogs_for_user(email, start, end):
        worklogs = worklog_store.get(email, [])
        return SevenPaceWorklogPage(
            worklogs=list(worklogs),
            request_url=f"https://contoso.timehub.7pace.com/api/odata/v3.2/workLogsOnly?user={email}",
            pagination=PaginationInfo(pages_fetched=1, total_records=len(worklogs)),
        )

    client.get_users = AsyncMock(return_value={})
    client.get_worklogs_for_user = AsyncMock(side_effect=get_worklogs_for_user)
    return client

"""
REST API Response Transformers

Converts raw Azure DevOps and 7pace JSON responses into domain objects.
Clients return the JSON as received; collectors call these transformers so
that field names and quirks of each upstream API live in one place.

Usage:
    from timetracking.collectors.ado_rest_transformers import WorkItemTransformer

    # REST API returns:
    rest_response = {"count": 1, "value": [{"id": 1001, "fields": {...}}]}

    work_items = WorkItemTransformer.transform_work_items_response(rest_response)
    # Result: [WorkItem(id=1001, ...)]
"""

from typing import Any

from ..core import get_logger
from ..domain.constants import time_tracking
from ..domain.team import TeamMember
from ..domain.time_entries import RawTimeEntry
from ..domain.work_items import WorkItem
from ..utils.datetime_utils import parse_ado_timestamp
from ..utils.error_handling import log_and_continue

logger = get_logger(__name__)


def _optional_int(value: Any) -> int | None:
    """Convert an upstream id to int, mapping None/0/"" to None."""
    if value in (None, "", 0):
        return None
    return int(value)


class WorkItemTransformer:
    """
    Transform work item REST responses to WorkItem domain objects.
    """

    @staticmethod
    def transform_work_item(raw: dict[str, Any]) -> WorkItem:
        """
        Transform a single work item.

        REST Shape:
        {
            "id": 1002,
            "fields": {
                "System.Title": "Wire up API",
                "System.WorkItemType": "Task",
                "System.Parent": 1001,
                "Custom.FeatureExpense": "CapEx"
            }
        }
        """
        fields = raw.get("fields", {})
        return WorkItem(
            id=int(raw["id"]),
            title=fields.get("System.Title") or "",
            work_item_type=fields.get("System.WorkItemType") or "",
            parent_id=_optional_int(fields.get("System.Parent")),
            expense_classification=fields.get(time_tracking.EXPENSE_FIELD),
        )

    @staticmethod
    def transform_work_items_response(rest_response: dict[str, Any]) -> list[WorkItem]:
        """
        Transform a work items batch response.

        Items without an id are skipped; ids that do not exist upstream are
        simply absent from the response.

        Args:
            rest_response: Raw REST API response dict ({"count": n, "value": [...]})

        Returns:
            List of WorkItem objects
        """
        return [
            WorkItemTransformer.transform_work_item(item)
            for item in rest_response.get("value", [])
            if item and item.get("id") is not None
        ]


class TeamTransformer:
    """
    Transform team and team member REST responses.
    """

    @staticmethod
    def transform_teams_response(rest_response: dict[str, Any]) -> list[dict[str, str]]:
        """
        Transform a project teams page to [{"id": ..., "name": ...}].

        REST Response:
        {
            "count": 2,
            "value": [{"id": "a1b2...", "name": "Platform Team", "description": "..."}]
        }
        """
        return [
            {"id": team["id"], "name": team.get("name", "")}
            for team in rest_response.get("value", [])
            if team.get("id")
        ]

    @staticmethod
    def transform_team_members_response(rest_response: dict[str, Any]) -> list[TeamMember]:
        """
        Transform a team members response to TeamMember objects.

        REST Response:
        {
            "count": 1,
            "value": [
                {"identity": {"id": "c3d4...", "displayName": "Jane Doe", "uniqueName": "jane@contoso.com"}}
            ]
        }

        Members without a unique name cannot be matched to worklogs and are skipped.
        """
        members = []
        for entry in rest_response.get("value", []):
            identity = entry.get("identity", {})
            unique_name = identity.get("uniqueName") or ""
            if not unique_name.strip():
                logger.debug(f"Skipping team member without unique name: {identity.get('id')}")
                continue
            members.append(
                TeamMember(
                    id=identity.get("id", ""),
                    display_name=identity.get("displayName") or unique_name,
                    unique_name=unique_name,
                )
            )
        return members


class WorklogTransformer:
    """
    Transform 7pace responses (users list and OData worklogs).
    """

    @staticmethod
    def transform_users_response(rest_response: dict[str, Any]) -> dict[str, str]:
        """
        Map 7pace user id to unique name.

        REST Response:
        {
            "data": [{"id": "u-1", "uniqueName": "jane@contoso.com", "email": "jane@contoso.com"}]
        }

        uniqueName falls back to email; users with neither are left out.
        """
        users: dict[str, str] = {}
        for user in rest_response.get("data") or []:
            unique_name = user.get("uniqueName") or user.get("email")
            if user.get("id") and unique_name:
                users[user["id"]] = unique_name
        return users

    @staticmethod
    def transform_odata_worklog(row: dict[str, Any], fallback_unique_name: str = "") -> RawTimeEntry:
        """
        Transform one OData workLogsOnly row.

        OData Row:
        {
            "Id": "w-1",
            "UserId": "u-1",
            "WorkItemId": 1002,
            "PeriodLength": 18000,
            "Timestamp": "2026-02-10T10:00:00Z",
            "User": {"Id": "u-1", "Name": "Jane Doe", "Email": "jane@contoso.com"},
            "ActivityType": {"Id": "a-1", "Name": "Development"}
        }

        Args:
            row: OData row
            fallback_unique_name: Unique name to use when the row carries no User.Email
                (the request was filtered by that identity)

        Returns:
            RawTimeEntry with hours = PeriodLength / 3600
        """
        user = row.get("User") or {}
        activity = row.get("ActivityType") or {}

        logged_at = None
        try:
            logged_at = parse_ado_timestamp(row.get("Timestamp"))
        except ValueError as e:
            log_and_continue(
                logger,
                e,
                context={"worklog_id": row.get("Id"), "timestamp": row.get("Timestamp")},
                error_type="Worklog timestamp parsing",
            )

        seconds = row.get("PeriodLength") or 0
        if seconds < 0:
            logger.warning(f"Worklog {row.get('Id')} has negative length {seconds}s, counting as 0")
            seconds = 0

        return RawTimeEntry(
            id=str(row.get("Id", "")),
            user_id=str(row.get("UserId") or user.get("Id") or ""),
            unique_name=user.get("Email") or fallback_unique_name,
            display_name=user.get("Name") or "",
            work_item_id=_optional_int(row.get("WorkItemId")),
            hours=seconds / 3600,
            logged_at=logged_at,
            activity_type=activity.get("Name"),
        )

    @staticmethod
    def transform_odata_response(
        odata_response: dict[str, Any], fallback_unique_name: str = ""
    ) -> list[RawTimeEntry]:
        """Transform an OData page ({"value": [...], "@odata.nextLink": ...})."""
        return [
            WorklogTransformer.transform_odata_worklog(row, fallback_unique_name)
            for row in odata_response.get("value", [])
        ]

"""
Team Roster Provider

Looks up an Azure DevOps team by name (case-insensitive) and returns its members.
"""

from ..core import get_logger
from ..domain.team import TeamMember
from .ado_rest_client import AzureDevOpsRESTClient
from .ado_rest_transformers import TeamTransformer

logger = get_logger(__name__)


class TeamNotFoundError(LookupError):
    """Raised when no team in the project has the requested name."""

    pass


class TeamRosterProvider:
    """Load team rosters from Azure DevOps."""

    def __init__(self, client: AzureDevOpsRESTClient, project: str):
        self.client = client
        self.project = project

    async def list_teams(self) -> list[dict[str, str]]:
        """All teams in the project, sorted by name."""
        teams = TeamTransformer.transform_teams_response({"value": await self.client.get_project_teams(self.project)})
        return sorted(teams, key=lambda t: t["name"].lower())

    async def find_team(self, team_name: str) -> dict[str, str]:
        """
        Find a team by name, ignoring case.

        Raises:
            TeamNotFoundError: If the project has no such team
        """
        wanted = team_name.strip().lower()
        for team in await self.list_teams():
            if team["name"].lower() == wanted:
                return team
        raise TeamNotFoundError(f'Team "{team_name}" not found in project {self.project}')

    async def get_members(self, team_name: str) -> list[TeamMember]:
        """
        Get the roster of a team.

        Args:
            team_name: Team name (case-insensitive)

        Returns:
            Team members in the order Azure DevOps returns them

        Raises:
            TeamNotFoundError: If the team does not exist
            AdoApiError: If an Azure DevOps call fails
        """
        team = await self.find_team(team_name)
        members = TeamTransformer.transform_team_members_response(
            await self.client.get_team_members(self.project, team["id"])
        )
        logger.info(f"Loaded {len(members)} members for team {team['name']}")
        return members

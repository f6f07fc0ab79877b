"""
Unit Tests for Azure DevOps REST Client

Test Coverage:
- Authentication header building
- URL construction
- Work item, team and team member APIs
- Error mapping (401/403, 404, 500, timeout, network, non-JSON)
- No retries
"""

import base64
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from timetracking.collectors.ado_rest_client import AdoApiError, AzureDevOpsRESTClient, get_ado_rest_client
from timetracking.utils.error_handling import API_ERROR, AUTH_ERROR, MALFORMED_RESPONSE, TIMEOUT, UNAVAILABLE

ORG_URL = "https://dev.azure.com/test-org"
HTTP_CLIENT = "timetracking.collectors.ado_rest_client.AsyncSecureHTTPClient"


def _response(status: int = 200, json_body=None, text: str = "") -> httpx.Response:
    request = httpx.Request("GET", f"{ORG_URL}/_apis/test")
    if json_body is not None:
        return httpx.Response(status, json=json_body, request=request)
    return httpx.Response(status, text=text, request=request)


def _mock_http_client(response=None, side_effect=None) -> AsyncMock:
    mock_http_client = AsyncMock()
    mock_http_client.get = AsyncMock(return_value=response, side_effect=side_effect)
    mock_http_client.__aenter__ = AsyncMock(return_value=mock_http_client)
    mock_http_client.__aexit__ = AsyncMock(return_value=None)
    return mock_http_client


@pytest.fixture
def client():
    return AzureDevOpsRESTClient(organization_url=ORG_URL, pat="test-pat-token-123")


class TestClientInitialization:
    """Test client initialization and configuration"""

    def test_init_strips_trailing_slash_from_url(self):
        """Test that trailing slash is removed from organization URL"""
        client = AzureDevOpsRESTClient(organization_url=f"{ORG_URL}/", pat="test-pat")
        assert client.organization_url == ORG_URL

    @pytest.mark.parametrize("url,pat", [("", "pat"), (ORG_URL, "")])
    def test_init_with_missing_credentials_raises_error(self, url, pat):
        """Test that empty organization URL or PAT raises ValueError"""
        with pytest.raises(ValueError, match="organization_url and pat are required"):
            AzureDevOpsRESTClient(organization_url=url, pat=pat)

    def test_auth_header_base64_encoding(self, client):
        """Test that PAT is encoded as Basic auth with empty username"""
        encoded = client.auth_header["Authorization"].replace("Basic ", "")
        assert base64.b64decode(encoded).decode() == ":test-pat-token-123"


class TestURLBuilding:
    """Test URL construction"""

    def test_build_url_with_project(self, client):
        """Test URL building for project-level API"""
        url = client._build_url("MyProject", "wit/workitems", ids="1,2", **{"api-version": "7.1"})
        assert url == f"{ORG_URL}/MyProject/_apis/wit/workitems?ids=1%2C2&api-version=7.1"

    def test_build_url_quotes_project_name(self, client):
        """Test that spaces in project names are escaped"""
        url = client._build_url("My Project", "wit/workitems", **{"api-version": "7.1"})
        assert url.startswith(f"{ORG_URL}/My%20Project/_apis/")

    def test_build_url_filters_none_params(self, client):
        """Test that None parameters are excluded from query string"""
        url = client._build_url(None, "projects", skip=None, **{"api-version": "7.1"})
        assert url == f"{ORG_URL}/_apis/projects?api-version=7.1"


class TestWorkItemAPIs:
    """Test work item API methods"""

    @pytest.mark.asyncio
    async def test_get_work_items_success(self, client):
        """Test successful work items fetch with field projection"""
        body = {"count": 1, "value": [{"id": 1001, "fields": {"System.WorkItemType": "Feature"}}]}
        mock_http_client = _mock_http_client(_response(json_body=body))

        with patch(HTTP_CLIENT, return_value=mock_http_client):
            result = await client.get_work_items([1001, 1002], ["System.Title", "System.Parent"], "MyProject")

        assert result == body
        url = mock_http_client.get.call_args[0][0]
        assert url.startswith(f"{ORG_URL}/MyProject/_apis/wit/workitems?")
        assert "ids=1001%2C1002" in url
        assert "fields=System.Title%2CSystem.Parent" in url
        assert "errorPolicy=omit" in url
        assert "api-version=7.1" in url

    @pytest.mark.asyncio
    async def test_get_work_items_empty_ids_skips_request(self, client):
        """Test no request is made for an empty id list"""
        mock_http_client = _mock_http_client()

        with patch(HTTP_CLIENT, return_value=mock_http_client):
            result = await client.get_work_items([], ["System.Title"], "MyProject")

        assert result == {"count": 0, "value": []}
        mock_http_client.get.assert_not_called()


class TestTeamAPIs:
    """Test team API methods"""

    @pytest.mark.asyncio
    async def test_get_project_teams_follows_paging(self, client):
        """Test $top/$skip paging continues while pages are full"""
        full_page = {"value": [{"id": f"t{i}", "name": f"Team {i}"} for i in range(500)]}
        last_page = {"value": [{"id": "t500", "name": "Team 500"}]}
        mock_http_client = _mock_http_client(side_effect=[_response(json_body=full_page), _response(json_body=last_page)])

        with patch(HTTP_CLIENT, return_value=mock_http_client):
            teams = await client.get_project_teams("MyProject")

        assert len(teams) == 501
        assert mock_http_client.get.call_count == 2
        second_url = mock_http_client.get.call_args_list[1][0][0]
        assert second_url.startswith(f"{ORG_URL}/_apis/projects/MyProject/teams?")
        assert "skip=500" in second_url

    @pytest.mark.asyncio
    async def test_get_team_members(self, client):
        """Test team members endpoint"""
        body = {"value": [{"identity": {"id": "1", "displayName": "Jane", "uniqueName": "jane@contoso.com"}}]}
        mock_http_client = _mock_http_client(_response(json_body=body))

        with patch(HTTP_CLIENT, return_value=mock_http_client):
            result = await client.get_team_members("MyProject", "team-id")

        assert result == body
        url = mock_http_client.get.call_args[0][0]
        assert url == f"{ORG_URL}/_apis/projects/MyProject/teams/team-id/members?api-version=7.1"


class TestErrorHandling:
    """Test mapping of failures to AdoApiError"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403])
    async def test_auth_errors(self, client, status):
        """Test 401/403 raise AUTH_ERROR without retrying"""
        mock_http_client = _mock_http_client(_response(status, text="denied"))

        with patch(HTTP_CLIENT, return_value=mock_http_client):
            with pytest.raises(AdoApiError) as exc_info:
                await client.get_team_members("MyProject", "team-id")

        assert exc_info.value.code == AUTH_ERROR
        assert exc_info.value.status == status
        assert exc_info.value.is_authorization_error
        assert mock_http_client.get.call_count == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [404, 429, 500, 503])
    async def test_http_errors_are_not_retried(self, client, status):
        """Test other HTTP errors raise API_ERROR after a single attempt"""
        mock_http_client = _mock_http_client(_response(status, text="error"))

        with patch(HTTP_CLIENT, return_value=mock_http_client):
            with pytest.raises(AdoApiError) as exc_info:
                await client.get_team_members("MyProject", "team-id")

        assert exc_info.value.code == API_ERROR
        assert exc_info.value.status == status
        assert not exc_info.value.is_authorization_error
        assert mock_http_client.get.call_count == 1

    @pytest.mark.asyncio
    async def test_timeout(self, client):
        """Test timeouts raise TIMEOUT with status 504"""
        mock_http_client = _mock_http_client(side_effect=httpx.ReadTimeout("timed out"))

        with patch(HTTP_CLIENT, return_value=mock_http_client):
            with pytest.raises(AdoApiError) as exc_info:
                await client.get_team_members("MyProject", "team-id")

        assert exc_info.value.code == TIMEOUT
        assert exc_info.value.status == 504

    @pytest.mark.asyncio
    async def test_network_error(self, client):
        """Test connection failures raise UNAVAILABLE with status 503"""
        mock_http_client = _mock_http_client(side_effect=httpx.ConnectError("refused"))

        with patch(HTTP_CLIENT, return_value=mock_http_client):
            with pytest.raises(AdoApiError) as exc_info:
                await client.get_team_members("MyProject", "team-id")

        assert exc_info.value.code == UNAVAILABLE
        assert exc_info.value.status == 503

    @pytest.mark.asyncio
    async def test_non_json_response(self, client):
        """Test an HTML body raises MALFORMED_RESPONSE"""
        mock_http_client = _mock_http_client(_response(200, text="<html>sign in</html>"))

        with patch(HTTP_CLIENT, return_value=mock_http_client):
            with pytest.raises(AdoApiError) as exc_info:
                await client.get_team_members("MyProject", "team-id")

        assert exc_info.value.code == MALFORMED_RESPONSE
        assert exc_info.value.status == 502


class TestFactoryFunction:
    """Test get_ado_rest_client() factory function"""

    @patch("timetracking.collectors.ado_rest_client.get_config")
    def test_get_ado_rest_client_loads_from_config(self, mock_get_config):
        """Test that factory function loads credentials from config"""
        mock_config = Mock()
        mock_ado_config = Mock()
        mock_ado_config.organization_url = "https://dev.azure.com/my-org"
        mock_ado_config.pat = "my-secret-pat"
        mock_config.get_ado_config = Mock(return_value=mock_ado_config)
        mock_get_config.return_value = mock_config

        client = get_ado_rest_client()

        assert client.organization_url == "https://dev.azure.com/my-org"
        mock_config.get_ado_config.assert_called_once()

import httpx
import pytest

from devmetrics.clients.vendors import (
    github_api_root,
    github_graphql_client,
    github_rest_url,
    gitlab_rest_client,
    graphql_query,
    jira_client,
    require_configured,
)
from devmetrics.core.config import Settings
from devmetrics.core.errors import ConfigurationError, UpstreamError


def _settings(**kw) -> Settings:
    base = dict(
        jira_base_url="https://jira.example.test/", jira_pat="jpat",
        gitlab_base_url="https://gitlab.example.test", gitlab_token="gtok",
        github_base_url="https://github.com", github_token="ghtok",
        retry_max_retries=1,
    )
    base.update(kw)
    return Settings(_env_file=None, **base)


def test_github_urls():
    assert github_api_root("https://github.com") == "https://api.github.com"
    assert github_rest_url("https://www.github.com") == "https://api.github.com"
    assert github_api_root("https://ghe.example.test/") == "https://ghe.example.test/api"
    assert github_rest_url("https://ghe.example.test") == "https://ghe.example.test/api/v3"


def test_require_configured():
    require_configured("Jira", JIRA_PAT="x", JIRA_BASE_URL="y")
    with pytest.raises(ConfigurationError, match="JIRA_PAT"):
        require_configured("Jira", JIRA_PAT=None, JIRA_BASE_URL="y")


def test_jira_client_needs_credentials():
    with pytest.raises(ConfigurationError):
        jira_client(_settings(jira_pat=None))


@pytest.mark.asyncio
async def test_clients_carry_settings():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        return httpx.Response(200, json={"ok": True})

    client = gitlab_rest_client(_settings(), transport=httpx.MockTransport(handler))
    async with client:
        await client.get("/projects/1/merge_requests")
    assert seen["url"] == "https://gitlab.example.test/api/v4/projects/1/merge_requests"
    assert seen["headers"]["private-token"] == "gtok"
    assert client.max_retries == 1


@pytest.mark.asyncio
async def test_graphql_query_returns_data_or_raises():
    replies = [
        {"data": {"viewer": {"login": "dev"}}},
        {"errors": [{"message": "Field 'x' doesn't exist"}]},
    ]

    def handler(request):
        assert str(request.url) == "https://api.github.com/graphql"
        return httpx.Response(200, json=replies.pop(0))

    client = github_graphql_client(_settings(), transport=httpx.MockTransport(handler))
    async with client:
        assert await graphql_query(client, "{ viewer { login } }") == {"viewer": {"login": "dev"}}
        with pytest.raises(UpstreamError, match="GitHub GraphQL error: Field 'x' doesn't exist"):
            await graphql_query(client, "{ x }")

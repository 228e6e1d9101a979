# devmetrics/clients/vendors.py
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from ..core.config import Settings
from ..core.errors import ConfigurationError, UpstreamError
from .api import ApiClient

_PUBLIC_GITHUB = ("https://github.com", "https://www.github.com")
GRAPHQL_PATH = "/graphql"


def github_api_root(base_url: str) -> str:
    """github.com is served from api.github.com; Enterprise hosts serve it under /api."""
    if base_url in _PUBLIC_GITHUB:
        return "https://api.github.com"
    return base_url.rstrip("/") + "/api"


def github_rest_url(base_url: str) -> str:
    if base_url in _PUBLIC_GITHUB:
        return "https://api.github.com"
    return base_url.rstrip("/") + "/api/v3"


def _common(settings: Settings) -> Dict[str, Any]:
    return {
        "timeout": settings.http_timeout_seconds,
        "max_retries": settings.retry_max_retries,
        "base_delay": settings.retry_base_delay_seconds,
        "default_retry_after": settings.retry_default_after_seconds,
    }


def jira_client(settings: Settings, **kw: Any) -> ApiClient:
    return ApiClient(
        "Jira", settings.jira_base_url, settings.jira_pat,
        headers={"Accept": "application/json"}, **{**_common(settings), **kw},
    )


def gitlab_rest_client(settings: Settings, **kw: Any) -> ApiClient:
    return ApiClient(
        "GitLab", f"{settings.gitlab_base_url.rstrip('/')}/api/v4", settings.gitlab_token,
        auth_type="Token", auth_header="PRIVATE-TOKEN", **{**_common(settings), **kw},
    )


def gitlab_graphql_client(settings: Settings, **kw: Any) -> ApiClient:
    return ApiClient(
        "GitLab", f"{settings.gitlab_base_url.rstrip('/')}/api", settings.gitlab_token,
        **{**_common(settings), **kw},
    )


def github_rest_client(settings: Settings, **kw: Any) -> ApiClient:
    return ApiClient(
        "GitHub", github_rest_url(settings.github_base_url), settings.github_token,
        headers={"Accept": "application/vnd.github.v3+json"}, **{**_common(settings), **kw},
    )


def github_graphql_client(settings: Settings, **kw: Any) -> ApiClient:
    return ApiClient(
        "GitHub", github_api_root(settings.github_base_url), settings.github_token,
        **{**_common(settings), **kw},
    )


def require_configured(service: str, **values: Optional[str]) -> None:
    """Fail fast at startup when an integration is missing its settings."""
    missing = sorted(k for k, v in values.items() if not v)
    if missing:
        raise ConfigurationError(f"{service} credentials not configured: {', '.join(missing)}", service=service)


async def graphql_query(
    client: ApiClient,
    query: str,
    variables: Optional[Mapping[str, Any]] = None,
    *,
    path: str = GRAPHQL_PATH,
    timeout: Optional[float] = None,
) -> Dict[str, Any]:
    """POST a GraphQL query and return its `data`; GraphQL-level errors raise."""
    body = await client.post(path, json={"query": query, "variables": dict(variables or {})}, timeout=timeout)
    body = body or {}
    errors = body.get("errors")
    if errors:
        first = errors[0] if isinstance(errors, list) and errors else errors
        msg = first.get("message") if isinstance(first, dict) else str(first)
        raise UpstreamError(f"{client.service} GraphQL error: {msg}", service=client.service)
    return body.get("data") or {}

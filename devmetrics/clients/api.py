# devmetrics/clients/api.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

import httpx

from ..core.errors import ConfigurationError, UpstreamError, translate_http_error
from ..core.retry import DEFAULT_BASE_DELAY, DEFAULT_RETRY_AFTER, retry_with_backoff

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def auth_value(token: str, auth_type: str = "Bearer") -> str:
    if auth_type == "Bearer":
        return f"Bearer {token}"
    if auth_type == "Token":
        return token
    return f"{auth_type} {token}"


class ApiClient:
    """
    Thin async wrapper over one vendor REST/GraphQL API (Jira, GitLab,
    GitHub, Adobe Analytics).

    - auth header built once: `Authorization: Bearer <token>` by default,
      raw token for auth_type="Token", "<type> <token>" otherwise
    - every call carries a timeout (client default, per-call override for
      heavy aggregate queries)
    - 429 responses are retried with backoff; every other failure is
      translated to a ServiceError and raised at once
    """

    # ------------ lifecycle ------------
    def __init__(
        self,
        service: str,
        base_url: Optional[str],
        token: Optional[str],
        *,
        auth_type: str = "Bearer",
        auth_header: str = "Authorization",
        headers: Optional[Mapping[str, str]] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = 3,
        base_delay: float = DEFAULT_BASE_DELAY,
        default_retry_after: float = DEFAULT_RETRY_AFTER,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        if not base_url or not token:
            raise ConfigurationError(f"{service}: base URL and token are required", service=service)
        self.service = service
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self._base_delay = base_delay
        self._default_retry_after = default_retry_after
        self._sleep = sleep
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                auth_header: auth_value(token, auth_type),
                "Content-Type": "application/json",
                **dict(headers or {}),
            },
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *_exc) -> None:
        await self.aclose()

    # ------------ requests ------------
    async def _send(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]],
        json: Any,
        timeout: Optional[float],
    ) -> Any:
        extra: Dict[str, Any] = {}
        if timeout is not None:
            extra["timeout"] = timeout
        try:
            resp = await self._http.request(method, path, params=_clean(params), json=json, **extra)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise translate_http_error(e, self.service) from e
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            # SSO login pages and proxy error pages come back as 200 HTML
            log.error("%s returned a non-JSON response (%s %s)", self.service, method, path)
            raise UpstreamError(f"{self.service} returned a non-JSON response", service=self.service,
                                status=resp.status_code) from e

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Decoded JSON body (None when the body is empty)."""
        return await retry_with_backoff(
            lambda: self._send(method, path, params, json, timeout),
            self.max_retries,
            base_delay=self._base_delay,
            default_retry_after=self._default_retry_after,
            sleep=self._sleep,
        )

    async def get(self, path: str, *, params: Optional[Mapping[str, Any]] = None,
                  timeout: Optional[float] = None) -> Any:
        return await self.request("GET", path, params=params, timeout=timeout)

    async def post(self, path: str, *, json: Any = None, params: Optional[Mapping[str, Any]] = None,
                   timeout: Optional[float] = None) -> Any:
        return await self.request("POST", path, params=params, json=json, timeout=timeout)


def _clean(d: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    return {k: v for k, v in (d or {}).items() if v is not None}

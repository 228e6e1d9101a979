# devmetrics/core/errors.py
from __future__ import annotations

import logging
import math
from typing import Any, Dict, Optional

import httpx

log = logging.getLogger(__name__)


class ServiceError(RuntimeError):
    """Failure talking to an upstream vendor API (Jira, GitLab, GitHub, Adobe)."""
    def __init__(self, message: str, *, service: str = "", status: Optional[int] = None):
        super().__init__(message)
        self.service = service
        self.status = status


class ConfigurationError(ServiceError):
    pass


class AuthenticationError(ServiceError):
    pass


class PermissionDeniedError(ServiceError):
    pass


class RateLimitError(ServiceError):
    def __init__(self, message: str, *, service: str = "", retry_after_seconds: Optional[float] = None):
        super().__init__(message, service=service, status=429)
        self.retry_after_seconds = retry_after_seconds


class RequestTimeoutError(ServiceError):
    pass


class UpstreamError(ServiceError):
    pass


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Retry-After in seconds, or None when missing, negative or not a finite number."""
    if value is None:
        return None
    try:
        secs = float(value.strip())
    except (TypeError, ValueError):
        return None
    return secs if math.isfinite(secs) and secs >= 0 else None


def _body_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text
    if isinstance(data, dict):
        return str(data.get("message") or data.get("error") or data.get("errorMessages") or data)
    return str(data)


def translate_http_error(exc: Exception, service: str) -> ServiceError:
    """
    Map an httpx failure to the ServiceError taxonomy with a user-facing
    message. The caller raises the result (`raise ... from exc`).
    """
    if isinstance(exc, ServiceError):
        return exc

    if isinstance(exc, httpx.HTTPStatusError):
        resp = exc.response
        status = resp.status_code
        if status == 401:
            err: ServiceError = AuthenticationError(
                f"{service} authentication failed. Check credentials.", service=service, status=status
            )
        elif status == 403:
            err = PermissionDeniedError(
                f"{service} permission denied. Check API token permissions.", service=service, status=status
            )
        elif status == 429:
            err = RateLimitError(
                f"{service} rate limit exceeded. Please retry later.",
                service=service,
                retry_after_seconds=parse_retry_after(resp.headers.get("retry-after")),
            )
        elif status >= 500:
            err = UpstreamError(
                f"{service} server error ({status}). Please try again later.", service=service, status=status
            )
        else:
            reason = f" {resp.reason_phrase}" if resp.reason_phrase else ""
            err = UpstreamError(
                f"{service} API error ({status}{reason}): {_body_message(resp)}", service=service, status=status
            )
    elif isinstance(exc, httpx.TimeoutException):
        err = RequestTimeoutError(f"{service} request timed out: {exc}", service=service)
    else:
        err = UpstreamError(f"{service} request failed: {exc}", service=service)

    if isinstance(err, RateLimitError):
        log.warning(str(err))
    else:
        log.error(str(err))
    return err


def soft_error(exc: BaseException) -> Dict[str, Any]:
    """The `{"error": message}` payload sections return instead of raising."""
    return {"error": str(exc) or exc.__class__.__name__}

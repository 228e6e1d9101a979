# devmetrics/core/config.py
from __future__ import annotations

from functools import lru_cache
from typing import Dict, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


# ----- App settings (env-driven) -----
class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="", env_file=".env", case_sensitive=False, extra="ignore")

    # cache
    cache_default_ttl_seconds: int = 60
    cache_sweep_interval_seconds: float = 60.0
    cache_max_items: Optional[int] = None

    # outbound calls
    retry_max_retries: int = 3
    retry_base_delay_seconds: float = 2.0
    retry_default_after_seconds: float = 2.0
    http_timeout_seconds: float = 30.0

    log_level: str = "INFO"

    # vendor credentials (all optional; integrations refuse to start without theirs)
    jira_base_url: Optional[str] = None
    jira_pat: Optional[str] = None
    gitlab_base_url: str = "https://gitlab.com"
    gitlab_token: Optional[str] = None
    gitlab_username: Optional[str] = None
    github_base_url: str = "https://github.com"
    github_token: Optional[str] = None
    github_username: Optional[str] = None
    adobe_client_id: Optional[str] = None
    adobe_client_secret: Optional[str] = None
    adobe_org_id: Optional[str] = None
    adobe_report_suite_id: Optional[str] = None

    def credential_status(self) -> Dict[str, str]:
        """Which credentials are present. Secrets are reported as set/not set only."""
        secret = lambda v: "set" if v else "not set"  # noqa: E731
        return {
            "GITLAB_USERNAME": secret(self.gitlab_username),
            "GITLAB_TOKEN": secret(self.gitlab_token),
            "GITLAB_BASE_URL": self.gitlab_base_url or "not set",
            "GITHUB_USERNAME": secret(self.github_username),
            "GITHUB_TOKEN": secret(self.github_token),
            "JIRA_PAT": secret(self.jira_pat),
            "JIRA_BASE_URL": self.jira_base_url or "not set",
            "ADOBE_CLIENT_ID": secret(self.adobe_client_id),
            "ADOBE_CLIENT_SECRET": secret(self.adobe_client_secret),
            "ADOBE_ORG_ID": secret(self.adobe_org_id),
            "ADOBE_REPORT_SUITE_ID": self.adobe_report_suite_id or "not set",
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

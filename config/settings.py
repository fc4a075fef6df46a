"""Application settings using Pydantic Settings."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str

    # OpenID Connect
    openid_config_url: str
    valid_audience: str
    valid_issuer: str
    client_id: str | None = None
    tenant_id: str | None = None

    # Timezone
    timezone: str = "UTC"

    # Organization chart fallback root, used when no CEO is on record
    org_chart_default_root_id: str = "default-ceo"
    org_chart_default_root_first_name: str = "Jason"
    org_chart_default_root_last_name: str = "McKee"
    org_chart_default_root_title: str = "Chief Executive Officer"
    org_chart_default_root_email: str = "jason.mckee@company.com"
    org_chart_default_root_team_name: str = "Executive"

    # What to do with members that do not hang off the root
    org_chart_orphan_policy: Literal["drop", "attach"] = "drop"

    # Pagination defaults
    teams_page_size: int = 10
    members_page_size: int = 50


settings = Settings()

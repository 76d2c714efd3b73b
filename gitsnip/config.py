from __future__ import annotations

import json
from typing import Annotated, List, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    DotEnvSettingsSource,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class GitSnipConfig(BaseSettings):
    """
    Application configuration based on Pydantic Settings.

    - Reads environment variables, then `.env.local`, then `.env`.
    - Performs type coercion and clear validation.
    """

    # Backing repository
    GITHUB_OWNER: str = Field(default="", description="Owner of the snippets repository")
    GITHUB_REPO: str = Field(default="", description="Name of the snippets repository")
    GITHUB_BRANCH: str = Field(default="main", description="Branch used for reads and writes")
    SNIPPETS_PATH: str = Field(default="snippets", description="Root directory holding one folder per snippet")
    GITHUB_TOKEN: Optional[str] = Field(
        default=None, description="Service token used when the viewer has no delegated credential"
    )
    GITHUB_API_URL: str = Field(default="https://api.github.com", description="GitHub API base URL")
    GITHUB_TIMEOUT: int = Field(default=15, ge=1, le=300, description="Per-request timeout (seconds)")

    # History
    REVISIONS_LIMIT: int = Field(default=50, ge=1, le=100, description="Max revisions fetched per snippet")

    # Access
    ALLOWED_GITHUB_USERS: Annotated[List[str], NoDecode] = Field(
        default_factory=list, description="GitHub logins allowed to write; empty means everyone"
    )

    # Web
    SECRET_KEY: str = Field(default="dev-secret", description="Flask session signing key")
    LOG_LEVEL: str = Field(default="INFO", description="Minimum log level")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def repository_full_name(self) -> str:
        return f"{self.GITHUB_OWNER}/{self.GITHUB_REPO}"

    @field_validator("SNIPPETS_PATH")
    @classmethod
    def _normalize_snippets_path(cls, v: str) -> str:
        normalized = (v or "").strip().strip("/")
        if not normalized:
            raise ValueError("SNIPPETS_PATH must not be empty")
        return normalized

    @field_validator("ALLOWED_GITHUB_USERS", mode="before")
    @classmethod
    def _parse_allowed_users(cls, v):
        """Parse ALLOWED_GITHUB_USERS from a CSV string, JSON list string, or list.

        Accepted formats:
        - "alice,bob" (CSV) -> ["alice", "bob"]
        - '["alice", "bob"]' (JSON) -> ["alice", "bob"]
        - ["alice", " bob "] -> ["alice", "bob"]
        - empty/None -> []
        """
        if v is None:
            return []
        if isinstance(v, (list, tuple, set)):
            return [str(item).strip() for item in v if str(item).strip()]
        if isinstance(v, str):
            s = v.strip()
            if s == "":
                return []
            if s.startswith("["):
                try:
                    parsed = json.loads(s)
                except ValueError as exc:
                    raise ValueError(f"ALLOWED_GITHUB_USERS is not valid JSON: {exc}") from exc
                if not isinstance(parsed, list):
                    raise ValueError("ALLOWED_GITHUB_USERS JSON must be a list of strings")
                return [str(item).strip() for item in parsed if str(item).strip()]
            return [part.strip() for part in s.split(",") if part.strip()]
        raise ValueError("ALLOWED_GITHUB_USERS must be a CSV string, JSON list or list")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Chain of .env files: .env.local first, then .env, after real env vars."""
        return (
            init_settings,
            env_settings,
            DotEnvSettingsSource(settings_cls, env_file=".env.local", case_sensitive=True),
            DotEnvSettingsSource(settings_cls, env_file=".env", case_sensitive=True),
            file_secret_settings,
        )


def load_config(**overrides) -> GitSnipConfig:
    """Build a fresh configuration; validation errors surface as ValueError."""
    try:
        return GitSnipConfig(**overrides)
    except ValidationError as exc:
        raise ValueError(str(exc)) from exc


_config: Optional[GitSnipConfig] = None


def get_config() -> GitSnipConfig:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    global _config
    _config = None

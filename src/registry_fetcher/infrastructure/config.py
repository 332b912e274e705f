"""Application configuration: loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from registry_fetcher.domain.value_objects import RegistryLayout, RepoRef


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_personal_access_token: SecretStr | None = None
    repo_owner: str = "huntabyte"
    repo_name: str = "shadcn-svelte"
    repo_branch: str = "main"
    registry_base_path: str = "docs/src/lib/registry"
    source_extensions: tuple[str, ...] = (".svelte", ".ts")
    request_timeout_seconds: float = 30.0
    breaker_failure_threshold: int = 5
    breaker_timeout_ms: int = 60_000
    breaker_success_threshold: int = 2
    tree_max_depth: int = 3
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @property
    def repo(self) -> RepoRef:
        return RepoRef(owner=self.repo_owner, repo=self.repo_name, branch=self.repo_branch)

    @property
    def layout(self) -> RegistryLayout:
        return RegistryLayout(base=self.registry_base_path.strip("/"))

    @property
    def token(self) -> str | None:
        if self.github_personal_access_token is None:
            return None
        return self.github_personal_access_token.get_secret_value() or None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()

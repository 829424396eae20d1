from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):  # type: ignore[misc]
    model_config = SettingsConfigDict(
        env_prefix="GHPULLS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "ghpulls"
    app_version: str = "0.1.0"

    # GitHub
    github_token: SecretStr | None = None
    github_api_url: str = "https://api.github.com"
    github_api_version: str = "2022-11-28"
    user_agent: str = "ghpulls/0.1.0"
    request_timeout: float = 30.0

    # Pagination
    default_page_size: int = Field(default=100, ge=1, le=100)


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

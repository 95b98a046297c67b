from typing import List, Optional

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from errors import ConfigError
from path_filter import parse_exclude_patterns


def _input(name: str, default=None, **kwargs):
    # GitHub Actions exposes `with:` inputs as INPUT_<NAME>; those win over <NAME>
    return Field(default, validation_alias=AliasChoices(f"INPUT_{name}", name), **kwargs)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    github_token: Optional[str] = _input("GITHUB_TOKEN")
    github_api_url: str = _input("GITHUB_API_URL", "https://api.github.com")
    gemini_api_key: Optional[str] = _input("GEMINI_API_KEY")
    gemini_model: str = _input("GEMINI_MODEL", "gemini-2.0-flash")
    gemini_api_endpoint: Optional[str] = _input("GEMINI_API_ENDPOINT")
    teams_webhook_url: Optional[str] = _input("TEAMS_WEBHOOK_URL")
    exclude: str = _input("EXCLUDE", "")
    llm_timeout: Optional[float] = _input("LLM_TIMEOUT", gt=0)
    max_concurrency: int = _input("MAX_CONCURRENCY", 1, ge=1)
    restrict_to_hunk: bool = _input("RESTRICT_TO_HUNK", False)
    notify_on_empty: bool = _input("NOTIFY_ON_EMPTY", False)
    log_level: str = _input("LOG_LEVEL", "INFO")

    @field_validator("github_token", "gemini_api_key", "gemini_api_endpoint", "teams_webhook_url",
                     mode="before")
    @classmethod
    def _blank_is_unset(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v

    @property
    def exclude_patterns(self) -> List[str]:
        return parse_exclude_patterns(self.exclude)

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        try:
            return cls(**overrides)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def require(self, *names: str):
        missing = [n.upper() for n in names if not getattr(self, n)]
        if missing:
            raise ConfigError("Missing required configuration: " + ", ".join(missing))

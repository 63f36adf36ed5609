"""Runtime settings.

Settings are read from ``PAYDESK_*`` environment variables (the OpenAI key
also from ``OPENAI_API_KEY``) and from an optional ``.env`` file in the
working directory. Values passed in explicitly, such as the CLI's global
options, win over both.
"""

from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_DIR = Path.home() / ".paydesk"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_ORGANIZATION = "Marine Edge"
DEFAULT_LOG_LEVEL = "WARNING"


class Settings(BaseSettings):
    """Settings for one paydesk session.

    ``database_url`` of None means no remote store is configured and the
    session runs on local snapshots.
    """

    model_config = SettingsConfigDict(
        env_prefix="PAYDESK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    database_url: Optional[str] = None
    data_dir: Path = DEFAULT_DATA_DIR
    openai_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "PAYDESK_OPENAI_API_KEY"),
    )
    openai_model: str = DEFAULT_OPENAI_MODEL
    organization: str = DEFAULT_ORGANIZATION
    log_level: str = DEFAULT_LOG_LEVEL

    @field_validator("database_url", "openai_api_key")
    @classmethod
    def _blank_is_unset(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @field_validator("data_dir")
    @classmethod
    def _expand_home(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


def load_settings(**overrides: Optional[str]) -> Settings:
    """Resolve settings, letting overrides that are not None win.

    Raises:
        TypeError: If an override names an unknown setting
    """
    unknown = set(overrides) - set(Settings.model_fields)
    if unknown:
        raise TypeError(f"Unknown setting(s): {', '.join(sorted(unknown))}")
    return Settings(**{key: value for key, value in overrides.items() if value is not None})

from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from autocomplete.services.opensearch.modes import Mode


PROJECT_ROOT = Path(__file__).parent.parent
ENV_FILE_PATH = PROJECT_ROOT / ".env"


class DefaultSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        frozen=True,
        env_nested_delimiter="__")


class AutocompleteSettings(DefaultSettings):
    """Defaults applied to every autocomplete-enabled model."""
    model_config = SettingsConfigDict(
        env_file=[".env", str(ENV_FILE_PATH)],
        env_prefix="AUTOCOMPLETE__",
        extra="ignore",
        frozen=True,
        case_sensitive=False,
    )

    attr: str = "name"
    localized: bool = False
    mode: Mode = Mode.WORD
    # Tuples keep the frozen settings hashable
    locales: Tuple[str, ...] = ("en",)
    search_attrs: Optional[Tuple[str, ...]] = None  # overrides attr/locales when set
    index_prefix: Optional[str] = None
    commit_callbacks: bool = True  # fire writes on commit instead of on flush
    per_page: int = 50
    geo_field: str = "lat_lon"

    @field_validator("locales", "search_attrs", mode="before")
    @classmethod
    def parse_comma_list(cls, value):
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


class OpenSearchSettings(DefaultSettings):
    """Opensearch settings"""
    model_config = SettingsConfigDict(
        env_file=[".env", str(ENV_FILE_PATH)],
        env_prefix="OPENSEARCH__",
        extra="ignore",
        frozen=True,
        case_sensitive=False,
    )

    host: str = "http://localhost:9200"
    use_ssl: bool = False
    verify_certs: bool = False
    refresh: bool = False  # make writes immediately searchable


class Settings(DefaultSettings):
    autocomplete: AutocompleteSettings = Field(default_factory=AutocompleteSettings)
    opensearch: OpenSearchSettings = Field(default_factory=OpenSearchSettings)


@lru_cache
def get_settings() -> Settings:
    return Settings()

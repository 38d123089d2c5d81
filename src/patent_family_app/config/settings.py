"""Application configuration via Pydantic settings."""

from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from patent_family_app.families.preference import DEFAULT_AUTHORITIES, PreferenceOrder

ROOT_DIR = Path(__file__).resolve().parents[3]
ENV_FILE = ROOT_DIR / ".env"


class AppSettings(BaseSettings):
    """Global application configuration."""

    environment: str = Field(alias="ENVIRONMENT", default="development")
    preferred_authorities: str = Field(
        alias="PREFERRED_AUTHORITIES",
        default=" ".join(DEFAULT_AUTHORITIES),
    )
    filter_family_duplicates: bool = Field(alias="FILTER_FAMILY_DUPLICATES", default=True)
    log_level: str = Field(alias="LOG_LEVEL", default="INFO")
    log_json: bool = Field(alias="LOG_JSON", default=False)

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        extra="ignore",
        env_file_encoding="utf-8",
        populate_by_name=True,
    )

    def preference_order(self) -> PreferenceOrder:
        """Jurisdiction preference used when picking a family representative."""
        return PreferenceOrder.from_string(self.preferred_authorities)

    def snapshot(self) -> dict[str, Any]:
        """Return a dictionary of public settings."""
        return {
            "environment": self.environment,
            "preferred_authorities": list(self.preference_order().codes),
            "filter_family_duplicates": self.filter_family_duplicates,
            "log_level": self.log_level,
            "log_json": self.log_json,
        }


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Load settings once per process."""
    return AppSettings()

"""Application settings and shared constants."""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_name: str = "Jewel Cost"
    database_url: str = Field("sqlite:///./jewel_cost.db")
    # Remote data service; unset means the UI runs fully local
    api_url: Optional[str] = Field(None)
    local_store_dir: str = Field("./.jewel_store")
    fetch_timeout_seconds: float = Field(2.0)
    currency_symbol: str = Field("₹")
    openai_api_key: Optional[str] = Field(None)
    advisor_model: str = Field("gpt-4o-mini")
    log_level: str = Field("INFO")

    @field_validator("api_url")
    @classmethod
    def normalize_api_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip().rstrip("/")

    @field_validator("fetch_timeout_seconds")
    @classmethod
    def validate_fetch_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("fetch_timeout_seconds must be positive")
        return v


DEFAULT_UNITS = ["pcs", "gram", "meter", "pack"]
DEFAULT_UNIT = "pcs"
DEFAULT_CATEGORY = "General"


@lru_cache
def get_settings() -> Settings:
    return Settings()

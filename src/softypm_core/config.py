"""Process configuration read once from the environment (and an optional .env file)."""
import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_BASE_URL = "https://softypm.com/api"
DEFAULT_TIMEOUT = 30.0


class Settings(BaseModel):
    """Immutable server settings."""

    base_url: str = DEFAULT_BASE_URL
    api_token: str = ""
    default_project_id: Optional[int] = Field(None, gt=0)
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0)
    log_level: str = "INFO"

    model_config = ConfigDict(frozen=True)

    @field_validator("default_project_id", mode="before")
    @classmethod
    def _empty_project_id(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()


def load_settings(environ: Optional[dict] = None) -> Settings:
    """Build Settings from an environment mapping (defaults to os.environ)."""
    env = os.environ if environ is None else environ
    return Settings(
        base_url=env.get("SOFTYPM_BASE_URL") or DEFAULT_BASE_URL,
        api_token=env.get("SOFTYPM_API_TOKEN", ""),
        default_project_id=env.get("DEFAULT_PROJECT_ID"),
        timeout=env.get("SOFTYPM_TIMEOUT") or DEFAULT_TIMEOUT,
        log_level=env.get("SOFTYPM_LOG_LEVEL") or "INFO",
    )


@lru_cache()
def get_settings() -> Settings:
    """Load .env (without overriding real environment variables) and cache the settings."""
    load_dotenv()
    return load_settings()

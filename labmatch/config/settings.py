from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    taxonomy_overrides_path: Path | None = None

    default_sex: str = "male"

    @field_validator("default_sex")
    @classmethod
    def _check_default_sex(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in ("male", "female"):
            raise ValueError(f"default_sex must be 'male' or 'female', got {value!r}")
        return normalized

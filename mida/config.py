"""
Library configuration module.
Loads environment variables and provides library-wide settings.

Only ambient concerns are configurable here. Decimal semantics (default
scale, rounding policy) are fixed constants in mida.utils.decimals.
"""
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

# Get project root (one level up from this package)
PROJECT_ROOT = Path(__file__).parent.parent


class Settings(BaseSettings):
    """
    Library settings loaded from environment variables or .env file.
    (Note: Environment variables take precedence over .env file)

    Variables are prefixed with MIDA_, e.g. MIDA_LOG_LEVEL=DEBUG.
    """
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True  # False switches to the human-readable console renderer
    LOG_FILE: Optional[Path] = None  # Enables weekly rotated file logging when set

    model_config = SettingsConfigDict(
        env_prefix="MIDA_",
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        )


def get_settings() -> Settings:
    """
    Get settings instance.

    Settings are read at call time, so changes to the environment are
    picked up by the next call.

    Returns:
        Settings: Library settings
    """
    return Settings()

import logging
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # HTTP Configuration
    http_timeout_seconds: float = Field(
        30.0, gt=0, description="Timeout applied to every upstream request."
    )
    http_max_attempts: int = Field(
        4, ge=1, description="Total attempts per request (first try + retries)."
    )
    user_agent: str = Field(
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
        description="User-Agent header sent to upstream providers.",
    )

    # Provider endpoints that differ between deployments
    nhl_predictions_url: str = Field(
        "https://moneypuck.com/moneypuck/simulations/simulations_recent.csv",
        description="Delimited-text export carrying NHL team strength predictions.",
    )

    # Pipeline Configuration
    sports: List[str] = Field(
        default_factory=lambda: ["nba", "ncaambb", "mlb", "nhl", "nfl", "ncaaf"],
        description="Sports processed by the runner.",
    )
    update_days: int = Field(
        2, ge=1, description="Number of dates (starting today) refreshed per run."
    )
    timezone: str = Field(
        "America/New_York", description="Timezone used to decide what 'today' is."
    )
    reference_data_dir: Optional[Path] = Field(
        None,
        description="Directory overriding the packaged popularity/conference tables.",
    )

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )
    log_file: Optional[Path] = Field(
        None, description="Optional path for a rotating file sink."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()

# app/core/config.py

import os
from functools import lru_cache
from typing import Optional
from pydantic import ConfigDict, field_validator
from pydantic_settings import BaseSettings

# WholeCell allows at most 2 requests per second
MIN_REQUEST_DELAY_SECONDS = 0.5


class Settings(BaseSettings):
    """
    Application settings.
    Loads values from environment variables (.env file)
    """
    # Database settings
    DATABASE_URL: str = ""

    # WholeCell API
    WHOLECELL_APP_KEY: str = ""
    WHOLECELL_APP_SECRET: str = ""
    WHOLECELL_BASE_URL: str = "https://api.wholecell.io/api/v1"
    WHOLECELL_STATUS_FILTER: str = "Needs eBay Draft"  # Empty string disables the filter
    WHOLECELL_REQUEST_DELAY_SECONDS: float = MIN_REQUEST_DELAY_SECONDS
    WHOLECELL_TIMEOUT: float = 30.0

    # Sync behaviour
    SYNC_PRESERVE_LOCAL_STATUS: bool = False  # Never move status backwards on re-sync
    SYNC_HISTORY_LIMIT: int = 25

    # Listing defaults
    LISTING_DEFAULT_CATEGORY: str = "Cell Phones & Accessories > Cell Phones & Smartphones"
    LISTING_DEFAULT_PRICE: float = 999.0

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    model_config = ConfigDict(
        env_file=os.environ.get('ENV_FILE', '.env') if os.path.exists('.env') else None,
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator('WHOLECELL_REQUEST_DELAY_SECONDS')
    @classmethod
    def validate_request_delay(cls, v):
        if v < MIN_REQUEST_DELAY_SECONDS:
            raise ValueError(
                f'WHOLECELL_REQUEST_DELAY_SECONDS must be at least {MIN_REQUEST_DELAY_SECONDS}s '
                f'to stay under the WholeCell rate limit, got {v}'
            )
        return v

    @property
    def wholecell_status_filter(self) -> Optional[str]:
        return self.WHOLECELL_STATUS_FILTER or None


@lru_cache()
def get_settings():
    """Cached settings to avoid loading .env file for every request"""
    return Settings()

def clear_settings_cache():
    """Clear the settings cache - useful when switching between environments"""
    get_settings.cache_clear()

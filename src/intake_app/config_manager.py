"""Configuration Manager for the Field Intake app."""
import os
from pydantic_settings import BaseSettings

from shared.utils import MAX_TOTAL_UPLOAD_BYTES


class ConfigManager(BaseSettings):
    """Manages application configuration settings using Pydantic BaseSettings."""

    # API settings
    api_base_url: str = 'http://localhost:3000/api'
    api_timeout: float = 10.0
    upload_timeout: float = 60.0  # multipart submissions carry photos
    max_retries: int = 3
    retry_delay: float = 1.0

    # Search settings
    search_debounce: float = 0.5  # seconds
    village_search_debounce: float = 0.8  # village lookups are slower
    salesman_min_query: int = 2
    village_min_query: int = 3

    # Upload settings
    max_upload_bytes: int = MAX_TOTAL_UPLOAD_BYTES
    thumbnail_max_size: int = 120

    # GPS settings
    location_timeout: float = 10.0

    class Config:
        env_prefix = 'INTAKE_'
        case_sensitive = False

    def __init__(self, **kwargs):
        """Initialize config, honouring the legacy API URL variables."""
        super().__init__(**kwargs)
        if 'api_base_url' not in kwargs and not os.getenv('INTAKE_API_BASE_URL'):
            self.api_base_url = os.getenv('NEXT_PUBLIC_API_URL', os.getenv('API_URL', self.api_base_url))

    def get(self, key, default=None):
        """Get a configuration value (backward compatibility)."""
        return getattr(self, key, default)

    def set(self, key, value):
        """Set a configuration value (backward compatibility)."""
        setattr(self, key, value)

    def get_all(self):
        """Get all configuration values as dictionary."""
        return self.model_dump()

"""
Service configuration using pydantic-settings.
Loads OFFER_* variables from the environment or a .env file.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    segment_service_url: str = Field(
        default="http://localhost:1080", description="Base URL of the user-segment service"
    )
    segment_lookup_timeout: float = Field(default=2.0, description="Segment lookup timeout, seconds")
    segment_fallback_to_no_segment: bool = Field(
        default=False,
        description="Treat segment lookup failures as 'no segment' instead of failing the request",
    )
    log_level: str = Field(default="INFO")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)

    model_config = {
        "env_prefix": "OFFER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings

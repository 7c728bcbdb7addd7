from pydantic_settings import BaseSettings
from typing import Any, Dict, List, Optional
from functools import lru_cache
from pydantic import field_validator

from .utils.logger import normalize_level


DEFAULT_LOCATIONS: List[Dict[str, Any]] = [
    {"name": "North Field", "latitude": 28.6139, "longitude": 77.2090},
    {"name": "South Field", "latitude": 13.0827, "longitude": 80.2707},
]


class Settings(BaseSettings):
    """Monitor settings loaded from environment variables"""

    # Weather provider
    OPENWEATHER_API_KEY: Optional[str] = None
    OPENWEATHER_URL: str = "https://api.openweathermap.org/data/2.5/weather"
    REQUEST_TIMEOUT: int = 30  # seconds

    # Backend (location registry and reading/alert sinks)
    BACKEND_URL: Optional[str] = None

    # "static" reads LOCATIONS, "backend" reads {BACKEND_URL}/api/entities/Location
    LOCATION_SOURCE: str = "static"
    LOCATIONS: List[Dict[str, Any]] = DEFAULT_LOCATIONS

    # "file" writes bounded JSON files, "backend" posts to the backend entities
    SINK: str = "file"
    READINGS_FILE: str = "data/readings.json"
    ALERTS_FILE: str = "data/alerts.json"
    MAX_HISTORY: int = 500

    # Rate limiting toward the weather provider
    INTER_LOCATION_DELAY_SECONDS: float = 2.0

    # Estimation
    SOIL_MOISTURE_VARIANT: str = "humidity"  # "humidity" or "basic"
    APPLY_JITTER: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    @field_validator('LOCATION_SOURCE', 'SINK', 'SOIL_MOISTURE_VARIANT', mode='before')
    @classmethod
    def normalize_choice(cls, v):
        """Accept choices in any case"""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator('LOCATION_SOURCE')
    @classmethod
    def validate_location_source(cls, v: str) -> str:
        if v not in ("static", "backend"):
            raise ValueError(f"LOCATION_SOURCE must be 'static' or 'backend', got {v!r}")
        return v

    @field_validator('SINK')
    @classmethod
    def validate_sink(cls, v: str) -> str:
        if v not in ("file", "backend"):
            raise ValueError(f"SINK must be 'file' or 'backend', got {v!r}")
        return v

    @field_validator('SOIL_MOISTURE_VARIANT')
    @classmethod
    def validate_variant(cls, v: str) -> str:
        if v not in ("humidity", "basic"):
            raise ValueError(f"SOIL_MOISTURE_VARIANT must be 'humidity' or 'basic', got {v!r}")
        return v

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return normalize_level(v)

    @field_validator('MAX_HISTORY')
    @classmethod
    def validate_max_history(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"MAX_HISTORY must be positive, got {v}")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance"""
    return Settings()

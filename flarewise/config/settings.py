"""
Configuration Settings.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # App info
    app_name: str = "FlareWise"
    app_version: str = "1.0.0"
    debug: bool = True

    # Storage
    local_storage_path: str = "./data"
    storage_profile: str = "default"

    # LLM Provider settings
    llm_provider: str = "groq"  # "groq" or "openai"
    llm_api_key: Optional[str] = None
    llm_model: Optional[str] = None  # uses provider default if not set
    llm_base_url: Optional[str] = None  # uses provider default if not set
    llm_timeout: float = 60.0
    llm_temperature: float = 0.3

    # Legacy key (still accepted)
    groq_api_key: Optional[str] = None

    # Weather (OpenWeatherMap, defaults to Brisbane)
    openweathermap_api_key: Optional[str] = None
    weather_latitude: float = -27.470125
    weather_longitude: float = 153.021072
    weather_timeout: float = 10.0

    # Fallback insight confidence scores (hand-assigned, not computed)
    fallback_confidence_severity: int = 80
    fallback_confidence_frequency: int = 75
    fallback_confidence_medication: int = 70
    fallback_confidence_weather: int = 65
    fallback_confidence_encouragement: int = 90

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file_path: str = "./logs/flarewise.log"
    log_file_enabled: bool = True
    log_console_enabled: bool = True
    log_json_format: bool = True  # JSON format for files, human-readable for console
    log_api_requests: bool = True  # Log all API requests/responses

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def resolved_llm_api_key(self) -> Optional[str]:
        """API key for the generation service, falling back to the legacy name."""
        return self.llm_api_key or self.groq_api_key


settings = Settings()

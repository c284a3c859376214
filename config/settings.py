"""Centralized configuration using pydantic-settings. All values are env-configurable."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ANALYZER_")

    # Anomaly detection
    anomaly_z_threshold: float = 1.5
    anomaly_window_size: int = 7  # trailing days, current day included

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Monitoring
    log_level: str = "INFO"

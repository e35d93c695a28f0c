"""
Configuration settings using Pydantic BaseSettings.

Mission risk backend - configuration module
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Application configuration settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application
    app_name: str = "Interplanetary Mission Risk Assessment"
    app_version: str = "1.0.0"
    debug: bool = True
    log_level: str = "info"

    # Server
    host: str = "0.0.0.0"
    port: int = 5000

    # Database (assessment history, training samples, risk factor registry).
    # In-memory by default: entities live for the process lifetime only.
    database_url: str = "sqlite://"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5000",
    ]

    # Estimator
    default_estimator: str = "perceptron"
    estimator_seed: Optional[int] = None
    learning_rate: float = 0.1
    max_training_steps: int = 2000
    synthetic_sample_count: int = 100

    # Optimizer
    optimizer_population: int = 50
    optimizer_generations: int = 100
    optimizer_mutation_rate: float = 0.3
    optimizer_crossover_rate: float = 0.9
    optimizer_time_budget_seconds: Optional[float] = 5.0

    # Events
    event_history_size: int = 500


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

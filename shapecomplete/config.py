"""Process configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    shapecomplete_env: str = "development"
    shapecomplete_log_level: str = "info"

    # Completion defaults (see CompletionConfig)
    default_connectivity: int = 4
    default_tolerance: float = 1.0
    default_max_iterations: int = 64
    default_fill_enclosed: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()

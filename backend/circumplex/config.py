"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    circumplex_env: str = "development"
    circumplex_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Rendering
    blob_resolution: int = 400
    render_workers: int = 4
    band_rows: int = 128

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()

"""Runtime settings, read from WNDB_* environment variables or a .env file."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="WNDB_", env_file=".env", extra="ignore",
    )

    # --- Database ---
    # None means the bundled <package>/db directory.
    DATABASE_DIR: Path | None = None

    # --- Readers ---
    # The longest record in the stock data files is around 13 kB.
    READ_WINDOW: int = Field(default=16384, gt=0)
    MAX_READ_WINDOW: int = Field(default=1 << 20, gt=0)
    STREAM_CHUNK_SIZE: int = Field(default=65536, gt=0)

    # --- Logging ---
    LOG_LEVEL: str = "WARNING"
    LOG_FORMAT: str = "console"


settings = Settings()

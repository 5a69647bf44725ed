"""
Central configuration loaded from environment variables with sensible defaults.
Variables are read when a ``Settings`` is built, so ``get_settings.cache_clear()``
picks up a changed environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

BUNDLED_DATA_DIR = Path(__file__).resolve().parent / "data"


@dataclass(frozen=True)
class DataConfig:
    # Directory holding countries.json, states.json, cities.json, regions.json, languages.json
    data_dir: Path = field(
        default_factory=lambda: Path(os.getenv("GEO_DATA_DIR", str(BUNDLED_DATA_DIR)))
    )


@dataclass(frozen=True)
class APIConfig:
    host: str = field(default_factory=lambda: os.getenv("API_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("API_PORT", "8000")))
    # Cap on list responses from the search endpoints
    max_results: int = field(default_factory=lambda: int(os.getenv("API_MAX_RESULTS", "500")))


@dataclass(frozen=True)
class Settings:
    data: DataConfig = field(default_factory=DataConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    env: str = field(default_factory=lambda: os.getenv("APP_ENV", "development"))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()

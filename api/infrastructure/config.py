# api/infrastructure/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    duckdb_path: str
    rate_limit_per_minute: int
    api_key: str
    http_timeout: float
    cors_origins: tuple[str, ...]
    debug: bool


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        duckdb_path=os.environ.get("GABINETE_DUCKDB_PATH", ":memory:"),
        rate_limit_per_minute=int(os.environ.get("GABINETE_API_RATE_LIMIT", "30")),
        api_key=os.environ.get("GABINETE_API_KEY", ""),
        http_timeout=float(os.environ.get("GABINETE_HTTP_TIMEOUT", "15")),
        cors_origins=tuple(
            origem.strip()
            for origem in os.environ.get("GABINETE_CORS_ORIGINS", "http://localhost:5173").split(",")
            if origem.strip()
        ),
        debug=os.environ.get("GABINETE_API_DEBUG", "false").lower() == "true",
    )

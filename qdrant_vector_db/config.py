"""Qdrant client settings, read from the environment (and a local .env file)."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from dotenv import load_dotenv


load_dotenv()

T = TypeVar("T")


def _env(name: str) -> Optional[str]:
    # Unset and empty both mean "use the default".
    return os.getenv(name) or None


def _env_typed(name: str, default: T, cast: Callable[[str], T]) -> T:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid {cast.__name__} for {name}: {raw}") from exc


@dataclass(frozen=True)
class Settings:
    qdrant_url: str
    qdrant_api_key: Optional[str]
    request_timeout_s: float
    vector_size: int
    distance: str
    page_size: int
    log_level: str

    @classmethod
    def load(cls) -> "Settings":
        page_size = _env_typed("QDRANT_PAGE_SIZE", 100, int)
        if page_size < 1:
            raise ValueError(f"QDRANT_PAGE_SIZE must be positive, got {page_size}")
        return cls(
            qdrant_url=_env("QDRANT_URL") or "http://localhost:6333",
            qdrant_api_key=_env("QDRANT_API_KEY"),
            request_timeout_s=_env_typed("QDRANT_TIMEOUT_S", 30.0, float),
            vector_size=_env_typed("QDRANT_VECTOR_SIZE", 1536, int),
            distance=_env("QDRANT_DISTANCE") or "Cosine",
            page_size=page_size,
            log_level=(_env("QDRANT_LOG_LEVEL") or "INFO").upper(),
        )


settings = Settings.load()

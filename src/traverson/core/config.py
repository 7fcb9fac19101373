from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Tuple

from dotenv import load_dotenv

from .client import HttpxTransport, RetryConfig
from .media import MediaType
from .traversal import Traverson

DEFAULT_MEDIA_TYPES = "application/hal+json"


@dataclass(frozen=True)
class TraversonSettings:
    base_url: str
    media_types: Tuple[MediaType, ...]
    timeout_seconds: float = 10.0
    max_retries: int = 2
    log_level: str = "INFO"


def _get_number_env(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be a {cast.__name__}, got {raw!r}") from exc


def _split_csv_env(name: str, default: str) -> list[str]:
    raw = os.getenv(name) or default
    return [part.strip() for part in raw.split(",") if part.strip()]


def load_env_config(*, use_dotenv: bool = True) -> TraversonSettings:
    """Load traversal settings from environment (optional .env)."""
    if use_dotenv:
        load_dotenv()
    media_types = tuple(
        MediaType.parse(value)
        for value in _split_csv_env("TRAVERSON_MEDIA_TYPES", DEFAULT_MEDIA_TYPES)
    )
    return TraversonSettings(
        base_url=os.getenv("TRAVERSON_BASE_URL", "").strip(),
        media_types=media_types or (MediaType.parse(DEFAULT_MEDIA_TYPES),),
        timeout_seconds=_get_number_env("TRAVERSON_TIMEOUT_SECONDS", 10.0, float),
        max_retries=_get_number_env("TRAVERSON_MAX_RETRIES", 2, int),
        log_level=os.getenv("TRAVERSON_LOG_LEVEL", "INFO").strip() or "INFO",
    )


def create_traverson_from_env(**kwargs) -> Traverson:
    """Create a Traverson wired with an HttpxTransport from environment variables."""
    settings = load_env_config()
    if not settings.base_url:
        raise ValueError("Missing TRAVERSON_BASE_URL in environment.")
    if "transport" not in kwargs:
        kwargs["transport"] = HttpxTransport(
            timeout_seconds=settings.timeout_seconds,
            retry=RetryConfig(max_retries=settings.max_retries),
        )
        kwargs.setdefault("owns_transport", True)
    return Traverson(settings.base_url, *settings.media_types, **kwargs)


__all__ = ["TraversonSettings", "load_env_config", "create_traverson_from_env"]

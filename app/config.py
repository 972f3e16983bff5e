"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


class SalesFallbackMode(str, Enum):
    """
    Filler used when a row has no usable sales value at all.
    """

    RANDOM = "random"
    ZERO = "zero"


@dataclass(frozen=True)
class CSVIngestionSettings:
    """
    Runtime settings for CSV ingestion and normalization.
    """

    max_upload_bytes: int = 50 * 1024 * 1024
    sample_scan_limit: int = 10
    sample_size: int = 5
    sales_fallback_mode: SalesFallbackMode = SalesFallbackMode.RANDOM
    sales_random_fallback_max: float = 10000.0


@dataclass(frozen=True)
class SessionSettings:
    """
    Dashboard session store settings.
    """

    max_sessions: int = 1000


@dataclass(frozen=True)
class ExportSettings:
    """
    Report export settings.
    """

    raw_row_limit: int = 1000


@dataclass(frozen=True)
class LLMSettings:
    """
    Insight generator settings.
    """

    adapter: str = "openai"
    api_key: str | None = None
    model: str = "gpt-3.5-turbo"
    base_url: str | None = None
    max_tokens: int = 1000
    temperature: float = 0.3


def _get_sales_fallback_mode() -> SalesFallbackMode:
    raw = _get_str_env("SALES_FALLBACK_MODE", SalesFallbackMode.RANDOM.value).lower()
    try:
        return SalesFallbackMode(raw)
    except ValueError:
        return SalesFallbackMode.RANDOM


@lru_cache(maxsize=1)
def get_csv_ingestion_settings() -> CSVIngestionSettings:
    """
    Return cached CSV ingestion settings from environment variables.
    """

    return CSVIngestionSettings(
        max_upload_bytes=max(1, _get_int_env("CSV_MAX_UPLOAD_BYTES", 50 * 1024 * 1024)),
        sample_scan_limit=max(1, _get_int_env("PROFILE_SAMPLE_SCAN_LIMIT", 10)),
        sample_size=max(1, _get_int_env("PROFILE_SAMPLE_SIZE", 5)),
        sales_fallback_mode=_get_sales_fallback_mode(),
        sales_random_fallback_max=max(0.0, _get_float_env("SALES_RANDOM_FALLBACK_MAX", 10000.0)),
    )


@lru_cache(maxsize=1)
def get_session_settings() -> SessionSettings:
    """
    Return cached session store settings.
    """

    return SessionSettings(
        max_sessions=max(1, _get_int_env("SESSION_MAX_COUNT", 1000)),
    )


@lru_cache(maxsize=1)
def get_export_settings() -> ExportSettings:
    """
    Return cached report export settings.
    """

    return ExportSettings(
        raw_row_limit=max(1, _get_int_env("EXPORT_RAW_ROW_LIMIT", 1000)),
    )


@lru_cache(maxsize=1)
def get_llm_settings() -> LLMSettings:
    """
    Return cached insight generator settings.

    ``LLM_API_KEY`` takes precedence over ``OPENAI_API_KEY``.
    """

    return LLMSettings(
        adapter=_get_str_env("LLM_ADAPTER", "openai").lower(),
        api_key=_get_optional_str_env("LLM_API_KEY") or _get_optional_str_env("OPENAI_API_KEY"),
        model=_get_str_env("LLM_MODEL", "gpt-3.5-turbo"),
        base_url=_get_optional_str_env("LLM_BASE_URL"),
        max_tokens=max(1, _get_int_env("LLM_MAX_TOKENS", 1000)),
        temperature=min(2.0, max(0.0, _get_float_env("LLM_TEMPERATURE", 0.3))),
    )

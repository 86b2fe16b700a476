"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
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


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


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


@dataclass(frozen=True)
class AppSettings:
    """
    Top-level application settings.
    """

    title: str = "CRM Funnel Import API"
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """
    Return cached application settings.
    """

    return AppSettings(
        title=_get_str_env("APP_TITLE", "CRM Funnel Import API"),
        log_level=_get_str_env("LOG_LEVEL", "INFO").upper(),
    )


@dataclass(frozen=True)
class CRMImportSettings:
    """
    Runtime settings for CRM report imports.
    """

    max_row_messages: int = 5000
    log_row_messages: bool = False
    default_service_type_name: str = "General Service"
    default_lead_source_name: str = "Direct"


@lru_cache(maxsize=1)
def get_crm_import_settings() -> CRMImportSettings:
    """
    Return cached CRM import settings from environment variables.
    """

    return CRMImportSettings(
        max_row_messages=max(1, _get_int_env("CRM_IMPORT_MAX_ROW_MESSAGES", 5000)),
        log_row_messages=_get_bool_env("CRM_IMPORT_LOG_ROW_MESSAGES", False),
        default_service_type_name=_get_str_env("CRM_IMPORT_DEFAULT_SERVICE_TYPE", "General Service"),
        default_lead_source_name=_get_str_env("CRM_IMPORT_DEFAULT_LEAD_SOURCE", "Direct"),
    )

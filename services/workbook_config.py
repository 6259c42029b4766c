"""Centralized workbook engine configuration.

Single source of truth for parser and serializer settings.
Reads from environment variables with sensible defaults.
"""
from __future__ import annotations

import os
from dataclasses import dataclass


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class WorkbookSettings:
    """Workbook settings loaded from environment.

    Usage:
        settings = get_workbook_settings()
        print(settings.placeholder)  # "-"
    """
    # Text written for the corner cell and for unset cells
    placeholder: str = "-"

    # Parsing
    treat_placeholder_as_blank: bool = True
    blank_cells_advance_cursor: bool = True

    # Guardrails
    max_document_chars: int = 5_000_000

    # Output
    pretty_print: bool = True

    log_level: str = "INFO"


def _load_settings_from_env() -> WorkbookSettings:
    """Load workbook settings from environment variables."""
    settings = WorkbookSettings()

    settings.placeholder = os.getenv("WORKBOOK_PLACEHOLDER", settings.placeholder)
    settings.treat_placeholder_as_blank = _env_flag(
        "WORKBOOK_PLACEHOLDER_IS_BLANK", settings.treat_placeholder_as_blank
    )
    settings.blank_cells_advance_cursor = _env_flag(
        "WORKBOOK_BLANK_CELLS_ADVANCE", settings.blank_cells_advance_cursor
    )
    settings.pretty_print = _env_flag("WORKBOOK_PRETTY_PRINT", settings.pretty_print)

    if os.getenv("WORKBOOK_MAX_DOCUMENT_CHARS"):
        settings.max_document_chars = int(os.getenv("WORKBOOK_MAX_DOCUMENT_CHARS"))

    settings.log_level = os.getenv("WORKBOOK_LOG_LEVEL", settings.log_level).upper()

    return settings


# Singleton instance
_settings: WorkbookSettings | None = None


def get_workbook_settings() -> WorkbookSettings:
    """Get the workbook settings singleton.

    Settings are loaded once from environment on first access.
    """
    global _settings
    if _settings is None:
        _settings = _load_settings_from_env()
    return _settings


def reload_workbook_settings() -> WorkbookSettings:
    """Force reload settings from environment.

    Useful for testing or after env changes.
    """
    global _settings
    _settings = _load_settings_from_env()
    return _settings

"""Tests for environment-driven workbook settings."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from services.workbook_config import (
    WorkbookSettings,
    get_workbook_settings,
    reload_workbook_settings,
)


@pytest.fixture
def env(monkeypatch):
    yield monkeypatch
    monkeypatch.undo()
    reload_workbook_settings()


def test_defaults(env):
    for name in [
        "WORKBOOK_PLACEHOLDER",
        "WORKBOOK_PLACEHOLDER_IS_BLANK",
        "WORKBOOK_BLANK_CELLS_ADVANCE",
        "WORKBOOK_PRETTY_PRINT",
        "WORKBOOK_MAX_DOCUMENT_CHARS",
        "WORKBOOK_LOG_LEVEL",
    ]:
        env.delenv(name, raising=False)

    settings = reload_workbook_settings()

    assert settings == WorkbookSettings()
    assert settings.placeholder == "-"
    assert settings.blank_cells_advance_cursor is True


def test_env_overrides(env):
    env.setenv("WORKBOOK_PLACEHOLDER", "~")
    env.setenv("WORKBOOK_PLACEHOLDER_IS_BLANK", "false")
    env.setenv("WORKBOOK_BLANK_CELLS_ADVANCE", "0")
    env.setenv("WORKBOOK_PRETTY_PRINT", "no")
    env.setenv("WORKBOOK_MAX_DOCUMENT_CHARS", "1000")
    env.setenv("WORKBOOK_LOG_LEVEL", "debug")

    settings = reload_workbook_settings()

    assert settings.placeholder == "~"
    assert settings.treat_placeholder_as_blank is False
    assert settings.blank_cells_advance_cursor is False
    assert settings.pretty_print is False
    assert settings.max_document_chars == 1000
    assert settings.log_level == "DEBUG"


def test_singleton(env):
    assert get_workbook_settings() is get_workbook_settings()
    first = get_workbook_settings()

    assert reload_workbook_settings() is not first

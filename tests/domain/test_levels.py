from __future__ import annotations

import pytest

from structured_messaging.domain.errors import ConfigurationError
from structured_messaging.domain.levels import LevelTable, LogLevel, level_name


def test_standard_levels_follow_npm_priorities() -> None:
    assert [level.severity for level in sorted(LogLevel, key=lambda item: item.value)] == [
        "error",
        "warn",
        "info",
        "http",
        "verbose",
        "debug",
        "silly",
    ]
    assert dict(LevelTable()) == {"error": 0, "warn": 1, "info": 2, "http": 3, "verbose": 4, "debug": 5, "silly": 6}


@pytest.mark.parametrize(
    ("level", "threshold", "expected"),
    [("error", "info", True), ("info", "info", True), ("debug", "info", False), ("silly", "silly", True)],
)
def test_threshold_admits_equal_or_more_severe_levels(level: str, threshold: str, expected: bool) -> None:
    assert LevelTable().enabled(level, threshold=threshold) is expected


def test_from_name_is_case_insensitive_and_strict() -> None:
    assert LogLevel.from_name(" Warn ") is LogLevel.WARN
    with pytest.raises(ValueError, match="Unknown log level"):
        LogLevel.from_name("fatal")


def test_is_standard() -> None:
    assert LogLevel.is_standard("HTTP")
    assert not LogLevel.is_standard("notice")


def test_custom_table_replaces_standard_levels() -> None:
    table = LevelTable({"Fatal": 0, "notice": 3})
    assert list(table) == ["fatal", "notice"]
    assert table.enabled("fatal", threshold="notice")
    with pytest.raises(ConfigurationError, match="Unknown log level"):
        table.priority("info")


@pytest.mark.parametrize("levels", [{"": 1}, {"x": "1"}, {"x": True}, {3: 1}])
def test_custom_table_validates_entries(levels: dict) -> None:
    with pytest.raises(ConfigurationError):
        LevelTable(levels)


def test_level_name_accepts_enum_and_text() -> None:
    assert level_name(LogLevel.SILLY) == "silly"
    assert level_name("  DEBUG") == "debug"

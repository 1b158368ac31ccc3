from __future__ import annotations

import pytest

from structured_messaging.domain.errors import ConfigurationError
from structured_messaging.domain.format_spec import DEFAULT_FORMAT, DEFAULT_SPEC, FORMAT_LEVELS, Branch, FormatSpec, Leaf, Literal, parse_node
from structured_messaging.domain.levels import LogLevel


def test_parse_keeps_key_order_and_node_kinds() -> None:
    spec = FormatSpec.parse({"message": "log.message", 8: 8, "flag": False, "nested": {"a": "x"}, "skip": None})

    assert [key for key, _ in spec.root] == ["message", 8, "flag", "nested"]
    nodes = dict(spec.root.entries)
    assert nodes["message"] == Leaf("log.message")
    assert nodes[8] == Literal(8)
    assert nodes["flag"] == Literal(False)
    assert nodes["nested"] == Branch((("a", Leaf("x")),))


def test_unsupported_values_are_ignored() -> None:
    assert parse_node(["a"]) is None
    assert parse_node(object()) is None


def test_parse_rejects_non_mappings() -> None:
    with pytest.raises(ConfigurationError):
        FormatSpec.parse(["level"])  # type: ignore[arg-type]


def test_parse_is_idempotent_for_parsed_specs() -> None:
    assert FormatSpec.parse(DEFAULT_SPEC) is DEFAULT_SPEC


def test_specs_compare_by_structure() -> None:
    assert FormatSpec.parse({"a": "b"}) == FormatSpec.parse({"a": "b"})
    assert FormatSpec.parse({"a": "b", "c": "d"}) != FormatSpec.parse({"c": "d", "a": "b"})


def test_source_is_isolated_from_later_mutation() -> None:
    source = {"time": {"created": "log.timestamp"}}
    spec = FormatSpec.parse(source)
    source["time"]["created"] = "changed"
    assert spec.to_mapping() == {"time": {"created": "log.timestamp"}}


def test_default_format_lists_documented_fields() -> None:
    assert list(DEFAULT_FORMAT) == [
        "id",
        "level",
        "message",
        "topics",
        "priority",
        "template",
        "transactionId",
        "sessionId",
        "traceId",
        "time",
        "pii",
        "dataSchema",
        "data",
        "context",
    ]
    assert list(DEFAULT_FORMAT["context"]["app"]) == ["env", "name", "platform", "file", "line", "column"]


def test_every_standard_level_has_the_default_spec() -> None:
    assert set(FORMAT_LEVELS) == {level.severity for level in LogLevel}
    assert all(spec is DEFAULT_SPEC for spec in FORMAT_LEVELS.values())

from __future__ import annotations

import pytest

from structured_messaging.domain.data_context import DataContext
from structured_messaging.domain.splat import PLACEHOLDER_PATTERN, render_value, substitute


@pytest.mark.parametrize("message", ["", "plain text", "100% sure", "%{ spaced }", "{curly}", "%{unclosed"])
def test_messages_without_placeholders_are_unchanged(message: str) -> None:
    result = substitute(message, DataContext({"curly": "x"}))
    assert result.message == message
    assert result.had_template is False


def test_unresolved_placeholders_stay_verbatim_and_null_prints_null() -> None:
    message = "Data is %{no.value} and %{novalue} but %{nullValue} is null."
    result = substitute(message, DataContext({"nullValue": None}))

    assert result.had_template is True
    assert result.message == "Data is %{no.value} and %{novalue} but null is null."


def test_had_template_is_true_even_when_nothing_resolves() -> None:
    result = substitute("missing %{nope}", DataContext({}))
    assert result.had_template is True
    assert result.message == "missing %{nope}"


def test_substituted_text_is_not_rescanned() -> None:
    message = "Both of these are not resolved %{log.message} and %{log.template}"
    ctx = DataContext({"log": {"message": message}})

    result = substitute(message, ctx)

    assert result.message == f"Both of these are not resolved {message} and %{{log.template}}"


def test_values_are_rendered_by_kind() -> None:
    ctx = DataContext(
        {
            "name": "Alan",
            "count": 3,
            "ratio": 0.5,
            "flag": True,
            "items": [1, "two"],
            "query": {"sql": "SELECT 1", "name": "Alan"},
        }
    )
    result = substitute("%{name} %{count} %{ratio} %{flag} %{items} %{query}", ctx)
    assert result.message == 'Alan 3 0.5 true [1,"two"] {"sql":"SELECT 1","name":"Alan"}'


def test_each_placeholder_uses_the_memoised_provider_value() -> None:
    calls: list[int] = []

    def count() -> int:
        calls.append(1)
        return len(calls)

    result = substitute("%{count} and %{count}", DataContext({"count": count}))
    assert result.message == "1 and 1"


def test_throwing_provider_leaves_placeholder() -> None:
    def broken() -> str:
        raise ValueError("x")

    result = substitute("value: %{broken}", DataContext({"broken": broken}))
    assert result.message == "value: %{broken}"


def test_placeholder_pattern_captures_key_path() -> None:
    assert PLACEHOLDER_PATTERN.findall("a %{x.y} b %{z}") == ["x.y", "z"]


def test_render_value_falls_back_to_str() -> None:
    class Thing:
        def __str__(self) -> str:
            return "thing"

    assert render_value(Thing()) == "thing"


def test_unencodable_containers_fall_back_to_their_text() -> None:
    loop: dict = {"name": "loop"}
    loop["self"] = loop
    ctx = DataContext({"pairs": {(1, 2): "pair"}, "loop": loop})

    result = substitute("%{pairs} / %{loop}", ctx)

    assert result.message == "{(1, 2): 'pair'} / {'name': 'loop', 'self': {...}}"

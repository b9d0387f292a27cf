from __future__ import annotations

from apisource.domain.merge import MERGE_RULES, append, deep_merge, replace


def test_append_concatenates_lists_in_order() -> None:
    assert append([1, 2], [3]) == [1, 2, 3]


def test_append_wraps_non_list_pages() -> None:
    assert append({"page": 1}, {"page": 2}) == [{"page": 1}, {"page": 2}]
    assert append([{"page": 1}], {"page": 2}) == [{"page": 1}, {"page": 2}]


def test_deep_merge_concatenates_nested_lists() -> None:
    first = {"data": {"items": [1, 2], "cursor": "a"}, "meta": {"page": 1}}
    second = {"data": {"items": [3], "cursor": None}, "meta": {"page": 2, "last": True}}

    assert deep_merge(first, second) == {
        "data": {"items": [1, 2, 3], "cursor": None},
        "meta": {"page": 2, "last": True},
    }


def test_deep_merge_does_not_mutate_inputs() -> None:
    first = {"items": [1]}
    second = {"items": [2]}

    deep_merge(first, second)

    assert first == {"items": [1]}
    assert second == {"items": [2]}


def test_replace_keeps_newest_page() -> None:
    assert replace({"a": 1}, {"b": 2}) == {"b": 2}


def test_merge_rules_by_name() -> None:
    assert MERGE_RULES["append"] is append
    assert MERGE_RULES["deep"] is deep_merge
    assert MERGE_RULES["replace"] is replace

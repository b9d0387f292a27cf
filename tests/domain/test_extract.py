from __future__ import annotations

import copy

import pytest

from apisource.domain.errors import InvalidShapeError, PathResolutionError
from apisource.domain.extract import extract_entities, parse_selector


def test_document_without_selector_is_the_collection() -> None:
    document = [{"a": 1}, {"a": 2}]

    assert extract_entities(document) == [{"a": 1}, {"a": 2}]


def test_single_object_becomes_singleton_collection() -> None:
    assert extract_entities({"a": 1}) == [{"a": 1}]


def test_dotted_selector() -> None:
    document = {"data": {"items": [{"n": 1}, {"n": 2}]}}

    assert extract_entities(document, "data.items") == [{"n": 1}, {"n": 2}]


def test_indexed_selector() -> None:
    document = {"results": [{"rows": [{"n": 1}]}, {"rows": [{"n": 2}]}]}

    assert extract_entities(document, "results[1].rows") == [{"n": 2}]
    assert extract_entities(document, "results.0.rows") == [{"n": 1}]


def test_selector_pointing_at_object_is_wrapped() -> None:
    document = {"data": {"profile": {"name": "x"}}}

    assert extract_entities(document, "data.profile") == [{"name": "x"}]


def test_parse_selector_segments() -> None:
    assert parse_selector("results[0].rows") == ("results", 0, "rows")
    assert parse_selector("a[1][2]") == ("a", 1, 2)
    assert parse_selector("pages.0.items") == ("pages", "0", "items")


@pytest.mark.parametrize("selector", ["a..b", "a[x]", "a]b", ".a", "a."])
def test_malformed_selector_raises(selector: str) -> None:
    with pytest.raises(PathResolutionError):
        parse_selector(selector)


def test_missing_key_raises_with_segment() -> None:
    with pytest.raises(PathResolutionError) as excinfo:
        extract_entities({"data": {}}, "data.items")

    assert excinfo.value.segment == "items"
    assert excinfo.value.selector == "data.items"


def test_index_out_of_range_raises() -> None:
    with pytest.raises(PathResolutionError):
        extract_entities({"results": []}, "results[0]")


def test_stepping_into_scalar_raises() -> None:
    with pytest.raises(PathResolutionError):
        extract_entities({"data": 3}, "data.items")


@pytest.mark.parametrize("document", ["text", 3, None, True])
def test_scalar_candidate_is_invalid_shape(document: object) -> None:
    with pytest.raises(InvalidShapeError):
        extract_entities(document)  # pyright: ignore[reportArgumentType]


def test_list_with_scalar_member_is_invalid_shape() -> None:
    with pytest.raises(InvalidShapeError, match="position 1"):
        extract_entities([{"a": 1}, "b"])


def test_extraction_does_not_mutate_document() -> None:
    document = {"data": {"items": {"n": 1}}}
    snapshot = copy.deepcopy(document)

    extract_entities(document, "data.items")

    assert document == snapshot

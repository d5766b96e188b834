"""Tests for dot-path payload extraction."""

from __future__ import annotations

import pytest

from src.fetch.transform import apply_transform

PAYLOAD = {
    "data": {
        "results": [{"id": 7, "name": "seven"}, {"id": 8, "name": "eight"}],
        "count": 2,
    }
}


@pytest.mark.parametrize(
    "path, expected",
    [
        ("data.count", 2),
        ("data.results.1.name", "eight"),
        ("data.results.0", {"id": 7, "name": "seven"}),
    ],
)
def test_resolves_path(path, expected):
    assert apply_transform(PAYLOAD, path) == expected


@pytest.mark.parametrize(
    "path",
    ["data.missing", "data.results.5", "data.results.-1", "data.count.deeper", "data.results.x"],
)
def test_unresolved_path_returns_original(path):
    assert apply_transform(PAYLOAD, path) is PAYLOAD


def test_empty_path_is_identity():
    assert apply_transform(PAYLOAD, "") is PAYLOAD


def test_list_root():
    assert apply_transform([{"a": 1}], "0.a") == 1

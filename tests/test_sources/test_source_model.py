"""Tests for Source input normalisation."""

from __future__ import annotations

from src.core.enums import AuthType, HttpMethod
from src.sources.models import DEFAULT_CACHE_TTL, Source, slugify_name


class TestSlugifyName:
    def test_lowercases_and_strips(self) -> None:
        assert slugify_name("My Weather!") == "myweather"

    def test_keeps_dash_and_underscore(self) -> None:
        assert slugify_name("wx_feed-2") == "wx_feed-2"

    def test_none_is_empty(self) -> None:
        assert slugify_name(None) == ""


class TestSourceDefaults:
    def test_defaults(self) -> None:
        source = Source(name="weather", url="https://api.example.com/wx")
        assert source.method is HttpMethod.GET
        assert source.auth_type is AuthType.NONE
        assert source.cache_ttl == DEFAULT_CACHE_TTL
        assert source.headers == {}
        assert source.cache_key == "source_weather"
        assert source.is_persistable

    def test_missing_url_is_not_persistable(self) -> None:
        assert not Source(name="weather").is_persistable
        assert not Source(url="https://api.example.com").is_persistable


class TestSourceNormalisation:
    def test_method_uppercased(self) -> None:
        assert Source(method="post").method is HttpMethod.POST

    def test_unknown_method_falls_back_to_get(self) -> None:
        assert Source(method="DELETE").method is HttpMethod.GET

    def test_unknown_auth_type_falls_back_to_none(self) -> None:
        assert Source(auth_type="oauth").auth_type is AuthType.NONE

    def test_headers_from_json_string(self) -> None:
        source = Source(headers='{"Accept": "application/json", "X-N": 1}')
        assert source.headers == {"Accept": "application/json", "X-N": "1"}

    def test_invalid_headers_string_is_empty(self) -> None:
        assert Source(headers="not json").headers == {}
        assert Source(headers="[1, 2]").headers == {}

    def test_cache_ttl_absolute_integer(self) -> None:
        assert Source(cache_ttl=-600).cache_ttl == 600
        assert Source(cache_ttl="120").cache_ttl == 120
        assert Source(cache_ttl="abc").cache_ttl == 0

    def test_non_http_url_rejected(self) -> None:
        assert Source(url="javascript:alert(1)").url == ""
        assert Source(url="  https://ok.example.com  ").url == "https://ok.example.com"


class TestSourceSerialisation:
    def test_repr_hides_credential(self) -> None:
        source = Source(name="x", url="https://x.example.com", auth_value="s3cret")
        assert "s3cret" not in repr(source)

    def test_public_dict_hides_credential(self) -> None:
        source = Source(
            name="x",
            url="https://x.example.com",
            auth_type="bearer",
            auth_value="s3cret",
        )
        data = source.public_dict()
        assert "auth_value" not in data
        assert data["has_credential"] is True
        assert data["auth_type"] == "bearer"
        assert data["method"] == "GET"

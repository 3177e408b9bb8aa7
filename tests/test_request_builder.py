"""Tests for request construction."""

import pytest

from json_form_builder.models.core import HttpMethod
from json_form_builder.models.errors import InvalidRequestException
from json_form_builder.services.request_builder import (
    ABSENT, append_query, build_request, coerce_method, flatten_query_params, stringify_value
)

BASE_URL = "https://api.example.test/items"


class TestStringifyValue:

    @pytest.mark.parametrize("value, expected", [
        (None, "null"),
        (True, "true"),
        (False, "false"),
        (3, "3"),
        (1.0, "1"),
        (1.5, "1.5"),
        (1e-7, "1e-7"),
        (1e21, "1e+21"),
        ("text", "text"),
        ([1, 2], "1,2"),
        ([1, [2, 3], None], "1,2,3,"),
        ([{"a": 1}], "[object Object]"),
        ([], ""),
    ])
    def test_coercion(self, value, expected):
        assert stringify_value(value) == expected


class TestFlattenQueryParams:

    def test_nested_objects_use_dotted_paths(self):
        params = flatten_query_params({"a": {"b": 1}, "c": [1, 2]})
        assert params == [("a.b", "1"), ("c", "1,2")]

    def test_insertion_order_is_kept(self):
        params = flatten_query_params({"z": 1, "a": {"y": True, "b": None}})
        assert params == [("z", "1"), ("a.y", "true"), ("a.b", "null")]

    def test_top_level_array_is_expanded_by_index(self):
        assert flatten_query_params(["a", "b"]) == [("0", "a"), ("1", "b")]

    def test_top_level_scalar_yields_nothing(self):
        assert flatten_query_params(5) == []
        assert flatten_query_params(None) == []

    def test_empty_object_yields_nothing(self):
        assert flatten_query_params({}) == []


class TestAppendQuery:

    def test_question_mark_when_no_query(self):
        assert append_query(BASE_URL, [("a", "1")]) == f"{BASE_URL}?a=1"

    def test_ampersand_when_query_exists(self):
        assert append_query(f"{BASE_URL}?x=1", [("a", "1")]) == f"{BASE_URL}?x=1&a=1"

    def test_no_params_leaves_url_unchanged(self):
        assert append_query(BASE_URL, []) == BASE_URL

    def test_values_are_form_encoded(self):
        assert append_query(BASE_URL, [("q", "a b&c")]) == f"{BASE_URL}?q=a+b%26c"


class TestBuildRequest:

    def test_get_flattens_document_into_query(self):
        spec = build_request("GET", BASE_URL, {"a": {"b": 1}, "c": [1, 2]})
        assert spec.method == HttpMethod.GET
        assert spec.url == f"{BASE_URL}?a.b=1&c=1%2C2"
        assert spec.base_url == BASE_URL
        assert spec.body is None
        assert spec.headers == {"Accept": "application/json"}

    def test_get_without_document_sends_bare_url(self):
        spec = build_request(HttpMethod.GET, BASE_URL)
        assert spec.url == BASE_URL
        assert spec.body is None

    def test_get_with_null_document_sends_bare_url(self):
        spec = build_request(HttpMethod.GET, BASE_URL, None)
        assert spec.url == BASE_URL

    @pytest.mark.parametrize("method", ["POST", "PUT"])
    def test_body_methods_send_compact_json(self, method):
        spec = build_request(method, BASE_URL, {"name": "Ann", "tags": [1, 2]})
        assert spec.url == BASE_URL
        assert spec.body == '{"name":"Ann","tags":[1,2]}'
        assert spec.headers["Content-Type"] == "application/json"
        assert spec.headers["Accept"] == "application/json"

    def test_post_null_document_is_a_body(self):
        spec = build_request("POST", BASE_URL, None)
        assert spec.body == "null"

    def test_url_is_trimmed(self):
        spec = build_request("POST", f"  {BASE_URL}\n", {"a": 1})
        assert spec.url == BASE_URL

    def test_extra_headers_are_kept(self):
        spec = build_request("GET", BASE_URL, {}, extra_headers={"X-Trace": "1"})
        assert spec.headers == {"X-Trace": "1", "Accept": "application/json"}

    @pytest.mark.parametrize("url", ["", "   ", None])
    def test_blank_url_is_rejected(self, url):
        with pytest.raises(InvalidRequestException) as exc_info:
            build_request("GET", url, {"a": 1})
        assert exc_info.value.error_code == "MISSING_URL"

    @pytest.mark.parametrize("method", ["POST", "PUT"])
    def test_body_methods_require_a_document(self, method):
        with pytest.raises(InvalidRequestException) as exc_info:
            build_request(method, BASE_URL, ABSENT)
        assert exc_info.value.error_code == "MISSING_BODY"
        assert exc_info.value.details["method"] == method

    def test_unsupported_method_is_rejected(self):
        with pytest.raises(InvalidRequestException) as exc_info:
            build_request("DELETE", BASE_URL, {"a": 1})
        assert exc_info.value.error_code == "UNSUPPORTED_METHOD"


def test_coerce_method_normalises_case():
    assert coerce_method(" put ") == HttpMethod.PUT


def test_absent_is_falsy_and_distinct_from_none():
    assert not ABSENT
    assert ABSENT is not None
    assert repr(ABSENT) == "ABSENT"

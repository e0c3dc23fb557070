"""Tests for the naming module."""

import re

import pytest

from wxapigen.naming import build_function_name, is_identifier, local_name, normalize_identifier

_VALID = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

_RAW_NAMES = [
    "lastId",
    "page_size",
    "X-Request-Id",
    "2fa-code",
    "user.name",
    "__private",
    "a__b",
    "trailing_",
    "$filter",
    "with space",
    "ünïcode",
    "-",
    "",
    "123",
    "_1_a",
]


class TestNormalizeIdentifier:
    """Test parameter name -> JavaScript identifier conversion."""

    def test_plain_name_unchanged(self):
        assert normalize_identifier("lastId") == "lastId"

    def test_snake_case(self):
        assert normalize_identifier("page_size") == "pageSize"

    def test_kebab_case(self):
        assert normalize_identifier("X-Request-Id") == "XRequestId"

    def test_leading_digit(self):
        assert normalize_identifier("2fa-code") == "_2faCode"

    def test_invalid_characters(self):
        assert normalize_identifier("user.name") == "userName"

    def test_dollar_kept(self):
        assert normalize_identifier("$filter") == "$filter"

    def test_underscore_before_digit_kept(self):
        assert normalize_identifier("v_2") == "v_2"

    def test_empty(self):
        assert normalize_identifier("") == "_"

    @pytest.mark.parametrize("raw", _RAW_NAMES)
    def test_always_valid(self, raw):
        assert _VALID.match(normalize_identifier(raw))

    @pytest.mark.parametrize("raw", _RAW_NAMES)
    def test_idempotent(self, raw):
        once = normalize_identifier(raw)
        assert normalize_identifier(once) == once


class TestBuildFunctionName:
    """Test client method names from HTTP method + path."""

    def test_operation_id_verbatim(self):
        assert build_function_name("get", "/moment/list", "fetchMoments") == "fetchMoments"

    def test_operation_id_not_normalized(self):
        assert build_function_name("get", "/pets", "list-pets") == "list-pets"

    def test_from_path(self):
        assert build_function_name("get", "/moment/list") == "getMomentList"

    def test_method_lowercased(self):
        assert build_function_name("POST", "/moment") == "postMoment"

    def test_path_params_unwrapped(self):
        assert build_function_name("delete", "/users/{userId}/avatar") == "deleteUsersUseridAvatar"

    def test_segment_casing_normalized(self):
        assert build_function_name("get", "/MOMENT/List") == "getMomentList"

    def test_every_segment_capitalised(self):
        assert build_function_name("get", "/moment") == "getMoment"
        assert build_function_name("put", "/moment/{moment-id}/like") == "putMomentMoment-idLike"

    def test_root_path(self):
        assert build_function_name("get", "/") == "get"


class TestIsIdentifier:

    def test_identifier(self):
        assert is_identifier("getMomentList")

    def test_not_identifier(self):
        assert not is_identifier("list-pets")
        assert not is_identifier("1st")


class TestLocalName:
    """Test local variable names for options fields."""

    def test_plain_identifier_unchanged(self):
        assert local_name("lastId") == "lastId"

    @pytest.mark.parametrize("name", ["default", "class", "new", "delete", "undefined"])
    def test_reserved_word_suffixed(self, name):
        assert local_name(name) == name + "_"

    @pytest.mark.parametrize("name", ["url", "options", "request", "params", "queryString", "BASE_URL"])
    def test_generated_name_suffixed(self, name):
        assert local_name(name) == name + "_"

    def test_taken_names_skipped(self):
        assert local_name("url", {"url_"}) == "url__"
        assert local_name("id", {"id"}) == "id_"

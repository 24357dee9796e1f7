"""
Unit tests for the Method, Version and URI value types.
"""

import pytest

from minihttp.http.errors import (
    InvalidURIError,
    InvalidVersionError,
    RequestLineError,
    UnknownMethodError,
)
from minihttp.http.methods import Method, METHOD_TOKENS, method_from_str, method_to_str
from minihttp.http.uri import URI
from minihttp.http.version import HTTP_1_0, HTTP_1_1, MAX_COMPONENT, Version


class TestMethod:
    """Tests for Method and its conversion functions."""

    def test_eight_methods(self):
        assert METHOD_TOKENS == (
            "GET", "POST", "PUT", "DELETE", "OPTIONS", "HEAD", "TRACE", "CONNECT",
        )

    @pytest.mark.parametrize("method", list(Method))
    def test_round_trip(self, method: Method):
        """Test method_from_str(method_to_str(m)) == m for every method."""
        assert method_from_str(method_to_str(method)) is method

    def test_str(self):
        assert str(Method.DELETE) == "DELETE"

    def test_parse_alias(self):
        assert Method.parse("OPTIONS") is Method.OPTIONS

    @pytest.mark.parametrize("token", ["get", "Get", "PATCH", "", " GET"])
    def test_unknown_token(self, token: str):
        """Test that lookup is case-sensitive and never defaults."""
        with pytest.raises(UnknownMethodError) as exc_info:
            method_from_str(token)
        assert exc_info.value.token == token
        assert exc_info.value.status_code == 400


class TestVersion:
    """Tests for Version."""

    def test_default_is_1_1(self):
        assert Version() == HTTP_1_1
        assert str(Version()) == "HTTP/1.1"

    @pytest.mark.parametrize("version", [HTTP_1_0, HTTP_1_1, Version(2, 0), Version(0, 9)])
    def test_round_trip(self, version: Version):
        assert Version.parse(str(version)) == version

    def test_from_digits(self):
        assert Version.from_digits("1", "0") == HTTP_1_0

    def test_leading_zeros(self):
        """Test that leading zeros are read as decimal numbers."""
        assert Version.from_digits("01", "001") == Version(1, 1)

    def test_max_component(self):
        version = Version.from_digits(str(MAX_COMPONENT), "0")
        assert version.major == MAX_COMPONENT

    @pytest.mark.parametrize("major,minor", [
        (str(MAX_COMPONENT + 1), "1"),
        ("1", str(MAX_COMPONENT + 1)),
        ("9" * 100, "1"),
    ])
    def test_overflow(self, major: str, minor: str):
        """Test that oversized numbers raise instead of being truncated."""
        with pytest.raises(InvalidVersionError):
            Version.from_digits(major, minor)

    def test_non_digits(self):
        with pytest.raises(InvalidVersionError):
            Version.from_digits("1", "x")

    @pytest.mark.parametrize("text", ["HTTP/1", "HTTP/1.1 ", "http/1.1", "1.1", ""])
    def test_parse_invalid(self, text: str):
        with pytest.raises(InvalidVersionError):
            Version.parse(text)

    def test_constructor_validates(self):
        with pytest.raises(InvalidVersionError):
            Version(-1, 0)
        with pytest.raises(InvalidVersionError):
            Version(True, 0)

    def test_immutable(self):
        with pytest.raises(AttributeError):
            HTTP_1_1.major = 2

    def test_errors_share_base(self):
        assert issubclass(InvalidVersionError, RequestLineError)


class TestURI:
    """Tests for URI."""

    def test_default(self):
        assert str(URI()) == "/"

    @pytest.mark.parametrize("token", [
        "/",
        "/a/b?x=1",
        "/search?q=hello%20world",
        "*",
        "http://example.com/path",
        "/users/",
    ])
    def test_round_trip(self, token: str):
        """Test that str() gives back the exact token."""
        assert str(URI.parse(token)) == token
        assert URI.parse(str(URI.parse(token))) == URI.parse(token)

    def test_percent_encoding_preserved(self):
        assert str(URI.parse("/a%2Fb")) == "/a%2Fb"

    def test_no_normalization(self):
        assert URI.parse("/users") != URI.parse("/users/")
        assert str(URI.parse("/a/../b")) == "/a/../b"

    @pytest.mark.parametrize("token", [
        "",
        "/a b",
        "/a\tb",
        "/a\x00",
        "/a\x7f",
        "/café",
    ])
    def test_invalid(self, token: str):
        """Test rejection of empty, whitespace, control and non-ASCII."""
        with pytest.raises(InvalidURIError):
            URI.parse(token)

    def test_path_and_query(self):
        uri = URI.parse("/a/b?x=1&y=2")
        assert uri.path == "/a/b"
        assert uri.query == "x=1&y=2"

    def test_no_query(self):
        assert URI.parse("/a").query == ""

"""Tests for URL normalization and code validation."""

import pytest

from nanolink.common.validators import MAX_URL_LENGTH, is_valid_code, normalize_url
from nanolink.errors import ValidationError


class TestNormalizeURL:
    """Test URL normalization."""

    def test_adds_missing_scheme(self):
        assert normalize_url("example.com/page") == "http://example.com/page"

    def test_keeps_https(self):
        assert normalize_url("https://example.com/a?b=1#c") == "https://example.com/a?b=1#c"

    def test_scheme_is_case_insensitive(self):
        """An upper-case scheme is recognised and left as submitted."""
        assert normalize_url("HTTP://Example.com") == "HTTP://Example.com"

    def test_query_order_preserved(self):
        assert normalize_url("example.com/?b=2&a=1") == "http://example.com/?b=2&a=1"

    def test_localhost_allowed(self):
        assert normalize_url("localhost/x") == "http://localhost/x"
        assert normalize_url("http://localhost") == "http://localhost"

    @pytest.mark.parametrize("raw", ["localhost:8080/x", "http://LOCALHOST/", "http://intranet:8080/"])
    def test_host_checked_with_port_and_case(self, raw):
        """Only a bare lower-case ``localhost`` escapes the dotted domain rule."""
        with pytest.raises(ValidationError, match="valid domain"):
            normalize_url(raw)

    def test_userinfo_ignored_for_domain_check(self):
        assert normalize_url("http://user:pw@example.com/") == "http://user:pw@example.com/"

    @pytest.mark.parametrize(
        "raw",
        [
            "https://example.com/a\r\nX-Evil: 1",
            "https://example.com/\x00",
            "http://exa\tmple.com/",
            "https://example.com/\x7f",
            "https://example.com/\x1b[31m",
        ],
    )
    def test_control_characters_rejected(self, raw):
        with pytest.raises(ValidationError, match="Invalid URL format"):
            normalize_url(raw)

    def test_dotted_host_with_port(self):
        assert normalize_url("http://example.com:8080/") == "http://example.com:8080/"

    @pytest.mark.parametrize("raw", ["", None])
    def test_empty_rejected(self, raw):
        with pytest.raises(ValidationError, match="cannot be empty"):
            normalize_url(raw)

    def test_too_long_rejected(self):
        raw = "https://example.com/" + "a" * MAX_URL_LENGTH
        with pytest.raises(ValidationError, match="too long"):
            normalize_url(raw)

    def test_max_length_accepted(self):
        prefix = "https://example.com/"
        raw = prefix + "a" * (MAX_URL_LENGTH - len(prefix))
        assert normalize_url(raw) == raw

    def test_whitespace_rejected(self):
        with pytest.raises(ValidationError):
            normalize_url("not a url")

    def test_single_label_host_rejected(self):
        with pytest.raises(ValidationError, match="valid domain"):
            normalize_url("http://intranet/page")

    def test_missing_host_rejected(self):
        with pytest.raises(ValidationError, match="must have a host"):
            normalize_url("http:///path")

    def test_bad_port_rejected(self):
        with pytest.raises(ValidationError, match="Invalid URL format"):
            normalize_url("http://example.com:notaport/")

    def test_other_scheme_gets_http_prefix(self):
        """Only http and https count as schemes; anything else is treated as a host."""
        with pytest.raises(ValidationError):
            normalize_url("ftp://files.example.com")

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            normalize_url("")


class TestIsValidCode:
    """Test custom code validation."""

    @pytest.mark.parametrize("code", ["abcd", "ab_cd-12", "A1B2C3D4E5F6", "----"])
    def test_valid(self, code):
        assert is_valid_code(code)

    @pytest.mark.parametrize(
        "code",
        ["", "ab", "abc", "thisistoolongcode123", "has space", "bad!code", "abcd\n", "héllo"],
    )
    def test_invalid(self, code):
        assert not is_valid_code(code)

    def test_none(self):
        assert not is_valid_code(None)

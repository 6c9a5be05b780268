"""Tests for short URL construction."""

from nanolink.common.urls import build_short_url, resolve_base_url


class TestResolveBaseURL:
    """Test base URL resolution order."""

    def test_forwarded_headers_win(self):
        headers = {"X-Forwarded-Proto": "https", "X-Forwarded-Host": "sho.rt"}
        assert resolve_base_url(headers, "http://fallback", "http", "internal:3000") == "https://sho.rt"

    def test_forwarded_chain_uses_first_hop(self):
        headers = {"x-forwarded-proto": "https, http", "x-forwarded-host": "sho.rt, proxy.local"}
        assert resolve_base_url(headers, "http://fallback") == "https://sho.rt"

    def test_request_host(self):
        assert resolve_base_url({}, "http://fallback", "http", "localhost:3000") == "http://localhost:3000"

    def test_partial_forwarded_headers_ignored(self):
        headers = {"X-Forwarded-Proto": "https"}
        assert resolve_base_url(headers, "http://fallback", "http", "h.example.com") == "http://h.example.com"

    def test_fallback(self):
        assert resolve_base_url({}, "https://sho.rt/") == "https://sho.rt"


class TestBuildShortURL:
    """Test joining base, prefix and code."""

    def test_no_prefix(self):
        assert build_short_url("abc123", "https://sho.rt/") == "https://sho.rt/abc123"

    def test_prefix(self):
        assert build_short_url("abc123", "https://sho.rt", "/s/") == "https://sho.rt/s/abc123"
        assert build_short_url("abc123", "https://sho.rt", "s") == "https://sho.rt/s/abc123"

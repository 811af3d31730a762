"""
Tests for redirect link sterilization (open redirect prevention)
"""
import pytest

from requestguard.security import INVALID_LINK, LinkSterilizer, safe_redirect, sterilize_link


class TestSterilizeLinkAllowed:
    """Targets returned unchanged"""

    @pytest.mark.parametrize("url", [
        "https://www.example.com",
        "http://www.example.com",
        "https://subdomain.example.com/path/to/resource",
        "https://example.com:443/page?query=value",
        "https://example.com/page?q=1",
        "HTTPS://EXAMPLE.COM/Upper",
    ])
    def test_public_absolute_urls(self, url):
        assert sterilize_link(url) == url

    @pytest.mark.parametrize("url", [
        "http://8.8.8.8",
        "http://1.1.1.1",
        "http://93.184.216.34",
        "http://172.15.0.1",
        "http://172.32.0.1",
        "http://191.168.1.1",
        "http://193.168.1.1",
    ])
    def test_public_ipv4_hosts(self, url):
        assert sterilize_link(url) == url

    @pytest.mark.parametrize("url", [
        "/",
        "/home",
        "/path/to/page",
        "/page?query=value",
        "/page#anchor",
    ])
    def test_local_paths(self, url):
        assert sterilize_link(url) == url


class TestSterilizeLinkRejected:
    """Targets replaced by the sentinel"""

    @pytest.mark.parametrize("url", [None, "", "   ", "\t", "\n"])
    def test_empty_input(self, url):
        assert sterilize_link(url) == "#"

    @pytest.mark.parametrize("url", ["//", "//example.com", "//evil.com", "/\\", "/\\example.com"])
    def test_protocol_relative_and_backslash(self, url):
        assert sterilize_link(url) == "#"

    @pytest.mark.parametrize("url", [
        "http://localhost",
        "http://localhost:8080",
        "https://localhost",
        "http://LOCALHOST/admin",
        "http://127.0.0.1",
        "http://127.0.0.1:3000",
        "https://127.0.0.1",
        "http://127.1.2.3/",
        "http://[::1]/",
        "http://[::1]:8080/path",
    ])
    def test_loopback(self, url):
        assert sterilize_link(url) == "#"

    @pytest.mark.parametrize("url", [
        "http://192.168.1.1",
        "http://192.168.0.100",
        "http://192.168.255.255",
        "http://10.0.0.1",
        "http://10.255.255.255",
        "http://172.16.0.1",
        "http://172.31.255.255",
        "http://172.20.0.1",
        "https://10.0.0.1:8443/internal?x=1",
    ])
    def test_private_ipv4(self, url):
        assert sterilize_link(url) == "#"

    @pytest.mark.parametrize("url", [
        "http://127.1/",
        "http://10.1/",
        "http://192.168.1/",
        "http://2130706433/",
        "http://0x7f.0.0.1/",
        "http://0177.0.0.1/",
        "http://10.0.0.1./",
        "http://[::ffff:127.0.0.1]/",
        "http://[::ffff:192.168.0.1]/",
    ])
    def test_non_canonical_ipv4_hosts(self, url):
        # Browsers normalize these hosts to loopback or LAN addresses
        assert sterilize_link(url) == "#"

    @pytest.mark.parametrize("url", [
        "invalid-url",
        "not a url",
        "javascript:alert('xss')",
        "ftp://example.com",
        "data:text/html,<script>alert(1)</script>",
        "http:/example.com",
        "http://",
        "http://example.com:notaport/",
    ])
    def test_invalid_urls(self, url):
        assert sterilize_link(url) == "#"


class TestSterilizeLinkRuleSetDiscrepancy:
    """
    Link-local and "this network" IPv4 hosts are not rejected for redirects,
    although the client IP rules treat them as private.
    """

    @pytest.mark.parametrize("url", ["http://169.254.169.254/latest", "http://0.0.0.0/"])
    def test_reserved_ipv4_passes(self, url):
        assert sterilize_link(url) == url

    def test_non_loopback_ipv6_passes(self):
        url = "http://[2001:db8::1]/"
        assert sterilize_link(url) == url


class TestLinkSterilizer:
    """Injectable wrapper"""

    def test_sterilize_delegates(self):
        sterilizer = LinkSterilizer()
        assert sterilizer.sterilize("https://example.com") == "https://example.com"
        assert sterilizer.sterilize("//evil.com") == INVALID_LINK

    def test_is_safe(self):
        sterilizer = LinkSterilizer()
        assert sterilizer.is_safe("/account") is True
        assert sterilizer.is_safe("http://192.168.1.1") is False


class TestSafeRedirect:
    """RedirectResponse construction"""

    def test_safe_target(self):
        response = safe_redirect("https://example.com/next")
        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/next"

    def test_unsafe_target_uses_fallback(self):
        response = safe_redirect("//evil.com", fallback="/home", status_code=303)
        assert response.status_code == 303
        assert response.headers["location"] == "/home"

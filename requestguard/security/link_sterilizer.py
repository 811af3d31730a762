"""
Link Sterilization
Open redirect prevention for caller-supplied redirect targets

Allows:
- Site-relative paths ("/", "/account?tab=1")
- Absolute http(s) URLs pointing at public hosts

Blocks (returns "#"):
- Empty or whitespace-only input
- Protocol-relative and backslash tricks ("//evil.com", "/\\evil.com")
- Non-http(s) schemes (javascript:, data:, ftp:)
- Loopback hosts (localhost, 127.0.0.1, [::1])
- Private IPv4 hosts (10.0.0.0/8, 172.16.0.0/12, 192.168.0.0/16)
"""
import logging
from typing import Optional

from prometheus_client import Counter
from starlette.responses import RedirectResponse

from .ip_classifier import is_private_ip
from .urls import is_loopback_host, parse_absolute_url, parse_host_address

logger = logging.getLogger(__name__)

INVALID_LINK = "#"

links_rejected = Counter(
    'sterilized_links_rejected_total',
    'Total number of redirect targets rejected by link sterilization',
    ['reason']
)


def _is_local_path(raw_url: str) -> bool:
    """Allows "/" or "/foo" but not "//" or "/\\"."""
    if not raw_url.startswith('/'):
        return False

    if len(raw_url) == 1:
        return True

    return raw_url[1] not in ('/', '\\')


def _reject(raw_url: str, reason: str) -> str:
    links_rejected.labels(reason=reason).inc()
    logger.debug(f"Rejected redirect target ({reason}): {raw_url!r}")
    return INVALID_LINK


def sterilize_link(raw_url: Optional[str]) -> str:
    """
    Validate a redirect target supplied by an untrusted source

    Args:
        raw_url: Redirect target from a query parameter, form field, etc.

    Returns:
        raw_url unchanged if it is safe to redirect to, otherwise "#"
    """
    if raw_url is None or not isinstance(raw_url, str) or not raw_url.strip():
        return _reject(str(raw_url), "empty")

    parsed = parse_absolute_url(raw_url)
    if parsed is None:
        if _is_local_path(raw_url):
            return raw_url
        return _reject(raw_url, "invalid")

    host = parsed.hostname
    if is_loopback_host(host):
        return _reject(raw_url, "loopback")

    # Shorthand, numeric and IPv4-mapped hosts are classified by their
    # dotted-quad form; other IPv6 hosts are not checked against LAN ranges
    ip = parse_host_address(host)
    if ip is not None and ip.version == 4 and is_private_ip(str(ip)):
        return _reject(raw_url, "private_ip")

    return raw_url


class LinkSterilizer:
    """Injectable wrapper around sterilize_link"""

    invalid_link = INVALID_LINK

    def sterilize(self, raw_url: Optional[str]) -> str:
        return sterilize_link(raw_url)

    def is_safe(self, raw_url: Optional[str]) -> bool:
        """True if raw_url survives sterilization"""
        return self.sterilize(raw_url) != self.invalid_link


def safe_redirect(raw_url: Optional[str], fallback: str = "/", status_code: int = 302) -> RedirectResponse:
    """
    Build a redirect response for an untrusted target

    Args:
        raw_url: Untrusted redirect target
        fallback: Target used when raw_url is rejected
        status_code: HTTP redirect status code

    Returns:
        RedirectResponse to raw_url if safe, otherwise to fallback
    """
    target = sterilize_link(raw_url)
    if target == INVALID_LINK:
        target = fallback

    return RedirectResponse(url=target, status_code=status_code)

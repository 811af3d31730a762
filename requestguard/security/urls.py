"""
URL helpers
Scheme-restricted absolute URL validation, URL joining and localhost detection
"""
import ipaddress
import logging
import socket
from enum import Enum
from typing import Optional, Union
from urllib.parse import SplitResult, urlsplit

logger = logging.getLogger(__name__)

LOOPBACK_HOSTNAMES = ('localhost', 'loopback')


class UrlScheme(str, Enum):
    """Schemes accepted by is_valid_url"""
    HTTP = "http"
    HTTPS = "https"
    ALL = "all"


def parse_absolute_url(url: Optional[str], scheme: UrlScheme = UrlScheme.ALL) -> Optional[SplitResult]:
    """
    Parse an absolute http(s) URL

    Returns:
        The split URL, or None if url is not an absolute URL with an
        accepted scheme and a well-formed host
    """
    if not url or not isinstance(url, str):
        return None

    try:
        parsed = urlsplit(url)
        # Accessing port validates it
        parsed.port
    except ValueError:
        return None

    if scheme == UrlScheme.ALL:
        allowed = (UrlScheme.HTTP.value, UrlScheme.HTTPS.value)
    else:
        allowed = (scheme.value,)

    if parsed.scheme.lower() not in allowed:
        return None

    host = parsed.hostname
    if not host:
        return None

    # Whitespace and control characters are never part of a valid authority
    if any(c.isspace() or ord(c) < 32 for c in parsed.netloc):
        return None

    if '\\' in parsed.netloc:
        return None

    return parsed


def is_valid_url(url: Optional[str], scheme: UrlScheme = UrlScheme.ALL) -> bool:
    """
    Validate whether url is an absolute URL with the given scheme

    Args:
        url: URL to validate
        scheme: HTTP, HTTPS or ALL (either)

    Returns:
        True if url is absolute and matches the scheme
    """
    return parse_absolute_url(url, scheme) is not None


def combine_url(url: str, path: str) -> str:
    """
    Join a base URL and a path with exactly one slash between them

    Raises:
        ValueError: if url or path is blank
    """
    if not url or not url.strip() or not path or not path.strip():
        raise ValueError("url and path must not be blank")

    url = url.strip()
    path = path.strip()

    return url.rstrip('/') + '/' + path.lstrip('/')


def parse_host_address(host: Optional[str]) -> Optional[Union[ipaddress.IPv4Address, ipaddress.IPv6Address]]:
    """
    Parse a URL host as an IP address the way browsers resolve it

    Accepts the IPv4 forms inet_aton understands (127.1, 2130706433,
    0x7f.0.0.1, 0177.0.0.1), one trailing dot, and unwraps IPv4-mapped
    IPv6 addresses.

    Returns:
        The address, or None if host is a name
    """
    if not host:
        return None

    host = host.lower()
    if host.endswith('.'):
        host = host[:-1]

    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        ip = None

    if ip is None:
        # Numeric IPv4 shorthands always start with a digit
        if not host or not host[0].isdigit():
            return None
        try:
            ip = ipaddress.IPv4Address(socket.inet_aton(host))
        except (OSError, ValueError):
            return None

    if ip.version == 6 and ip.ipv4_mapped is not None:
        return ip.ipv4_mapped

    return ip


def is_loopback_host(host: Optional[str]) -> bool:
    """
    Check if a URL host refers to the local machine by name or loopback address

    Accepts hosts as returned by urlsplit (lowercase, IPv6 without brackets).
    """
    if not host:
        return False

    if host.lower().rstrip('.') in LOOPBACK_HOSTNAMES:
        return True

    ip = parse_host_address(host)
    return ip is not None and ip.is_loopback


def is_localhost_url(url: str) -> bool:
    """
    Determine whether a URL points at this machine

    Checks:
    - Loopback addresses (localhost, 127.0.0.1, [::1])
    - Local machine hostname
    - IP addresses assigned to the local machine

    Returns:
        True if the URL host is local, False otherwise or if url can't be parsed
    """
    try:
        parsed = urlsplit(url)
        host = parsed.hostname
    except ValueError:
        return False

    if not host:
        return False

    if is_loopback_host(host):
        return True

    local_hostname = socket.gethostname()
    if host.lower() == local_hostname.lower():
        return True

    try:
        addr_info = socket.getaddrinfo(local_hostname, None)
    except socket.gaierror as e:
        logger.debug(f"Could not resolve local hostname {local_hostname}: {e}")
        return False

    local_ips = {info[4][0] for info in addr_info}
    return host in local_ips

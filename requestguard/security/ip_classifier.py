"""
IP Address Classification

Two rule sets are exposed:
- LAN rules (default): 10.0.0.0/8, 127.0.0.0/8, 172.16.0.0/12, 192.168.0.0/16
- Reserved rules (include_reserved=True): LAN rules plus 169.254.0.0/16 (link-local),
  0.0.0.0/8 (this network) and IPv6 link-local, site-local, multicast, loopback
  and unspecified addresses

Redirect sterilization uses the LAN rules, client IP resolution uses the reserved rules.
"""
import ipaddress
from typing import Optional, Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


class IPParseError(ValueError):
    """Raised when text is not a valid IPv4 or IPv6 literal"""

    def __init__(self, ip_text: Optional[str]):
        self.ip_text = ip_text
        super().__init__(f"Invalid IP address: {ip_text!r}")


def parse_ip(ip_text: Optional[str]) -> IPAddress:
    """
    Parse an IP literal

    Raises:
        IPParseError: if ip_text is None, blank or not an IP literal
    """
    if ip_text is None or not isinstance(ip_text, str) or not ip_text.strip():
        raise IPParseError(ip_text)

    try:
        return ipaddress.ip_address(ip_text.strip())
    except ValueError:
        raise IPParseError(ip_text) from None


def _is_lan_ipv4(octets: bytes) -> bool:
    return (
        octets[0] == 10 or                                  # 10.0.0.0/8
        octets[0] == 127 or                                 # 127.0.0.0/8 (loopback)
        (octets[0] == 172 and 16 <= octets[1] <= 31) or     # 172.16.0.0/12
        (octets[0] == 192 and octets[1] == 168)             # 192.168.0.0/16
    )


def _is_reserved_ipv4(octets: bytes) -> bool:
    return (
        _is_lan_ipv4(octets) or
        (octets[0] == 169 and octets[1] == 254) or          # 169.254.0.0/16 (link-local)
        octets[0] == 0                                      # 0.0.0.0/8
    )


def _is_reserved_ipv6(ip: ipaddress.IPv6Address) -> bool:
    return (
        ip.is_link_local or
        ip.is_site_local or
        ip.is_multicast or
        ip.is_loopback or
        ip.is_unspecified
    )


def is_private_ip(ip_text: str, include_reserved: bool = False) -> bool:
    """
    Test whether an IP address is private

    Args:
        ip_text: IPv4 or IPv6 literal
        include_reserved: Also treat link-local, "this network" and the
            special IPv6 ranges as private

    Returns:
        True if the address falls in a private range of the selected rule set.
        Without include_reserved, IPv6 addresses are never private.

    Raises:
        IPParseError: if ip_text is not a valid IP literal
    """
    ip = parse_ip(ip_text)

    if ip.version == 4:
        octets = ip.packed
        if include_reserved:
            return _is_reserved_ipv4(octets)
        return _is_lan_ipv4(octets)

    if include_reserved:
        return _is_reserved_ipv6(ip)
    return False


def is_public_ip(ip_text: Optional[str]) -> bool:
    """
    Test whether text is a valid, publicly routable IP address

    Uses the reserved rule set. Never raises: blank or malformed
    input is simply not a public IP.
    """
    try:
        return not is_private_ip(ip_text, include_reserved=True)
    except IPParseError:
        return False

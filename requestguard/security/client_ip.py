"""
Client IP Resolution
Determines the most trustworthy client IP from proxy headers and the transport address

Headers are checked in order of preference:
- X-Azure-ClientIP (Azure Front Door)
- CF-Connecting-IP (Cloudflare)
- X-Forwarded-For (standard proxy header)
- X-Real-IP (Nginx)
- X-Client-IP (Apache)
- True-Client-IP (Akamai and Cloudflare Enterprise)
- HTTP_X_FORWARDED_FOR (IIS)
- HTTP_CLIENT_IP (alternative)

The first public IP found wins. If none is found, the transport remote address is
returned as-is, even when private (direct access on an intranet is legitimate).
"""
import logging
from typing import Mapping, Optional, Union

from prometheus_client import Counter
from pydantic import BaseModel, ConfigDict
from starlette.datastructures import Headers
from starlette.requests import HTTPConnection

from .ip_classifier import is_public_ip

logger = logging.getLogger(__name__)

FORWARDED_HEADERS = (
    "X-Azure-ClientIP",
    "CF-Connecting-IP",
    "X-Forwarded-For",
    "X-Real-IP",
    "X-Client-IP",
    "True-Client-IP",
    "HTTP_X_FORWARDED_FOR",
    "HTTP_CLIENT_IP",
)

client_ip_resolutions = Counter(
    'client_ip_resolutions_total',
    'Client IP resolutions by source of the resolved address',
    ['source']
)


class ClientIPOptions(BaseModel):
    """
    Read-only client IP settings, produced once at startup

    trusted_header_configured is True when a trusted proxy layer already
    rewrote the remote address from a custom forwarded header.
    """
    model_config = ConfigDict(frozen=True)

    trusted_header_configured: bool = False
    header_name: Optional[str] = None


def _header_ips(value: str):
    for token in value.split(","):
        token = token.strip()
        if token:
            yield token


class ClientIPResolver:
    """
    Resolve the client IP for a request

    Stateless apart from the trusted header flag given at construction,
    safe to share across requests and threads.
    """

    def __init__(self, trusted_header_configured: bool = False):
        self.trusted_header_configured = trusted_header_configured

    @classmethod
    def from_options(cls, options: Optional[ClientIPOptions]) -> "ClientIPResolver":
        if options is None:
            return cls()
        return cls(trusted_header_configured=options.trusted_header_configured)

    def resolve(
        self,
        headers: Union[Headers, Mapping[str, str], None],
        remote_address: Optional[str]
    ) -> Optional[str]:
        """
        Resolve the client IP

        Args:
            headers: Request headers (case-insensitive lookup)
            remote_address: Transport-level peer address

        Returns:
            First public IP found in the forwarded headers, otherwise
            remote_address. None if there is no remote address.
        """
        if not remote_address:
            return None

        if self.trusted_header_configured:
            client_ip_resolutions.labels(source="trusted_proxy").inc()
            return remote_address

        if headers is None:
            headers = Headers()
        elif not isinstance(headers, Headers):
            # Plain mappings may carry values Starlette can't latin-1 encode
            headers = {str(name).lower(): value for name, value in headers.items()}

        for header in FORWARDED_HEADERS:
            value = headers.get(header.lower())
            if not isinstance(value, str) or not value.strip():
                continue

            for candidate in _header_ips(value):
                if is_public_ip(candidate):
                    logger.debug(f"Client IP {candidate} resolved from {header}")
                    client_ip_resolutions.labels(source="header").inc()
                    return candidate

        client_ip_resolutions.labels(source="remote").inc()
        return remote_address


def resolve_client_ip(
    headers: Union[Headers, Mapping[str, str], None],
    remote_address: Optional[str],
    trusted_header_configured: bool = False
) -> Optional[str]:
    """Resolve the client IP without constructing a resolver"""
    return ClientIPResolver(trusted_header_configured).resolve(headers, remote_address)


def get_client_ip(connection: HTTPConnection) -> Optional[str]:
    """
    Resolve the client IP of a Starlette/FastAPI request or websocket

    Reads ClientIPOptions from app.state.client_ip_options when the
    application was set up with configure_forwarded_headers.

    Usable as a FastAPI dependency::

        client_ip: Optional[str] = Depends(get_client_ip)
    """
    options = None
    app = connection.scope.get("app")
    if app is not None:
        options = getattr(app.state, "client_ip_options", None)

    remote_address = connection.client.host if connection.client else None

    return ClientIPResolver.from_options(options).resolve(connection.headers, remote_address)

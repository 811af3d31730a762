"""
Middleware package for requestguard
Exports forwarded headers, client IP and rate limiting components
"""
from .forwarded_headers import (
    ForwardedHeadersConfig,
    ForwardedHeadersMiddleware,
    configure_forwarded_headers,
    get_forwarded_headers_config,
    is_valid_header_name,
)
from .client_ip import ClientIPMiddleware
from .rate_limiting import (
    RateLimitConfig,
    create_limiter,
    get_client_identifier,
    get_rate_limit_config,
)

__all__ = [
    # Forwarded headers
    "ForwardedHeadersConfig",
    "ForwardedHeadersMiddleware",
    "configure_forwarded_headers",
    "get_forwarded_headers_config",
    "is_valid_header_name",

    # Client IP
    "ClientIPMiddleware",

    # Rate limiting
    "RateLimitConfig",
    "create_limiter",
    "get_client_identifier",
    "get_rate_limit_config",
]

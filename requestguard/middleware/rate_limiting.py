"""
Rate limiting keyed by resolved client IP
Uses slowapi with in-memory storage

NOTE: Counters live in application memory and reset on restart.
"""
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address
import os
import logging
from pydantic import BaseModel, Field

from requestguard.security.client_ip import get_client_ip

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"


class RateLimitConfig(BaseModel):
    """
    Rate limiting configuration with validation
    """
    enabled: bool = Field(
        default=True,
        description="Enable/disable rate limiting globally"
    )
    default_limit: str = Field(
        default="100/minute",
        description="Default rate limit for all endpoints"
    )


def get_rate_limit_config() -> RateLimitConfig:
    """
    Load rate limit configuration from environment

    Reads from:
    - RATE_LIMIT_ENABLED: "true" or "false"
    - RATE_LIMIT_DEFAULT: slowapi limit string, e.g. "100/minute"
    """
    return RateLimitConfig(
        enabled=os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true",
        default_limit=os.getenv("RATE_LIMIT_DEFAULT", "100/minute")
    )


def get_client_identifier(request: Request) -> str:
    """
    Get client identifier for rate limiting

    Uses the resolved client IP (first public IP from proxy headers,
    otherwise the remote address).
    """
    client_ip = get_client_ip(request)
    if not client_ip:
        # slowapi's own fallback, covers test clients without a peer
        client_ip = get_remote_address(request) or UNKNOWN_CLIENT

    logger.debug(f"Rate limit check for client: {client_ip}")
    return client_ip


def create_limiter(config: RateLimitConfig = None) -> Limiter:
    """
    Factory function to create a configured rate limiter

    Args:
        config: Rate limit configuration (read from environment if None)
    """
    if config is None:
        config = get_rate_limit_config()

    logger.info(f"Initializing in-memory rate limiting (default {config.default_limit})")
    return Limiter(
        key_func=get_client_identifier,
        default_limits=[config.default_limit],
        enabled=config.enabled,
        headers_enabled=True
    )

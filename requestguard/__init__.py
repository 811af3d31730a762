"""
requestguard
Request-processing security helpers for FastAPI/Starlette applications
"""
from .security import (
    IPParseError,
    is_private_ip,
    is_public_ip,
    sterilize_link,
    ClientIPResolver,
    resolve_client_ip,
    get_client_ip,
)

__all__ = [
    "IPParseError",
    "is_private_ip",
    "is_public_ip",
    "sterilize_link",
    "ClientIPResolver",
    "resolve_client_ip",
    "get_client_ip",
]

"""
Security module for requestguard
Open redirect prevention, IP classification and client IP resolution
"""
from .ip_classifier import IPParseError, parse_ip, is_private_ip, is_public_ip
from .link_sterilizer import INVALID_LINK, LinkSterilizer, sterilize_link, safe_redirect
from .client_ip import (
    FORWARDED_HEADERS,
    ClientIPOptions,
    ClientIPResolver,
    resolve_client_ip,
    get_client_ip,
)
from .urls import UrlScheme, is_valid_url, combine_url, is_localhost_url, parse_host_address
from .passwords import generate_salt, hash_password, verify_password
from .error_handler import SafeErrorHandler, register_error_handlers

__all__ = [
    "IPParseError",
    "parse_ip",
    "is_private_ip",
    "is_public_ip",
    "INVALID_LINK",
    "LinkSterilizer",
    "sterilize_link",
    "safe_redirect",
    "FORWARDED_HEADERS",
    "ClientIPOptions",
    "ClientIPResolver",
    "resolve_client_ip",
    "get_client_ip",
    "UrlScheme",
    "is_valid_url",
    "combine_url",
    "is_localhost_url",
    "parse_host_address",
    "generate_salt",
    "hash_password",
    "verify_password",
    "SafeErrorHandler",
    "register_error_handlers",
]

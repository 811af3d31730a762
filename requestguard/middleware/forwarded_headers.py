"""
Forwarded Headers Configuration
Applies X-Forwarded-For / X-Forwarded-Proto from trusted reverse proxies

Startup configuration:
- Optional custom forwarded-for header name (validated, max 40 characters)
- Optional list of known proxy IP addresses
- Known proxies are ignored when running inside a container

When a custom header name is applied, the resulting ClientIPOptions mark the
remote address as already resolved, so ClientIPResolver returns it verbatim.
"""
import json
import logging
import os
from typing import Iterable, List, Optional

from fastapi import FastAPI
from pydantic import BaseModel, Field
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Receive, Scope, Send

from requestguard.security.client_ip import ClientIPOptions
from requestguard.security.ip_classifier import IPParseError, parse_ip
from requestguard.utils.environment import is_running_in_container

logger = logging.getLogger(__name__)

MAX_HEADER_NAME_LENGTH = 40
DEFAULT_FORWARDED_FOR_HEADER = "X-Forwarded-For"
FORWARDED_PROTO_HEADER = "X-Forwarded-Proto"

# Trusted when known proxies are configured but ignored (ASP.NET-style default)
LOOPBACK_PROXIES = ["127.0.0.1", "::1"]

# RFC 7230 token characters besides letters and digits
HEADER_NAME_SPECIALS = set("!#$%&'*+-.^_`|~")


class ForwardedHeadersConfig(BaseModel):
    """
    Forwarded headers configuration

    Read from environment by get_forwarded_headers_config()
    """
    header_name: Optional[str] = Field(
        default=None,
        description="Custom header carrying the forwarded client IP"
    )
    known_proxies: List[str] = Field(
        default_factory=list,
        description="IP addresses of trusted reverse proxies"
    )


def get_forwarded_headers_config() -> ForwardedHeadersConfig:
    """
    Load forwarded headers configuration from environment

    Reads from:
    - FORWARDED_HEADERS_HEADER_NAME: Custom forwarded-for header name
    - FORWARDED_HEADERS_KNOWN_PROXIES: Comma-separated proxy IP addresses
    """
    known_proxies = os.getenv("FORWARDED_HEADERS_KNOWN_PROXIES", "")

    return ForwardedHeadersConfig(
        header_name=os.getenv("FORWARDED_HEADERS_HEADER_NAME") or None,
        known_proxies=[p.strip() for p in known_proxies.split(",") if p.strip()]
    )


def is_valid_header_name(header_name: Optional[str]) -> bool:
    """
    Check that a header name is an HTTP token of at most 40 characters

    Allowed: ASCII letters, digits and ! # $ % & ' * + - . ^ _ ` | ~
    """
    if not header_name or len(header_name) > MAX_HEADER_NAME_LENGTH:
        return False

    return all(
        ('a' <= c <= 'z') or ('A' <= c <= 'Z') or ('0' <= c <= '9') or c in HEADER_NAME_SPECIALS
        for c in header_name
    )


class ForwardedHeadersMiddleware:
    """
    ASGI middleware rewriting the client address and scheme from proxy headers

    Only requests whose direct peer is trusted are rewritten. With no known
    proxies every peer is trusted and only the last forwarded entry is used;
    with known proxies the chain is walked from the right, skipping known
    proxies, and the first untrusted entry becomes the client.
    """

    def __init__(
        self,
        app: ASGIApp,
        header_name: str = DEFAULT_FORWARDED_FOR_HEADER,
        known_proxies: Optional[Iterable[str]] = None
    ):
        self.app = app
        self.header_name = header_name
        self.proto_header = FORWARDED_PROTO_HEADER

        if known_proxies is None:
            self.known_proxies = None
        else:
            self.known_proxies = {parse_ip(p) for p in known_proxies}

    def _is_trusted(self, host: Optional[str]) -> bool:
        if self.known_proxies is None:
            return True

        try:
            return parse_ip(host) in self.known_proxies
        except IPParseError:
            return False

    def _get_forwarded_client(self, value: str) -> Optional[str]:
        entries = [e.strip() for e in value.split(",") if e.strip()]
        if not entries:
            return None

        if self.known_proxies is None:
            candidate = entries[-1]
        else:
            candidate = entries[0]
            for entry in reversed(entries):
                if not self._is_trusted(entry):
                    candidate = entry
                    break

        try:
            return str(parse_ip(candidate))
        except IPParseError:
            logger.debug(f"Ignoring malformed forwarded address: {candidate!r}")
            return None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        client = scope.get("client")
        if client and self._is_trusted(client[0]):
            # Repeated headers form one chain, in arrival order
            headers = Headers(scope=scope)

            forwarded_for = ",".join(headers.getlist(self.header_name))
            if forwarded_for:
                host = self._get_forwarded_client(forwarded_for)
                if host:
                    scope["client"] = (host, 0)

            forwarded_proto = ",".join(headers.getlist(self.proto_header))
            if forwarded_proto:
                proto = forwarded_proto.split(",")[-1].strip().lower()
                if proto in ("http", "https"):
                    if scope["type"] == "websocket":
                        proto = "wss" if proto == "https" else "ws"
                    scope["scheme"] = proto

        await self.app(scope, receive, send)


def _collect_known_proxies(known_proxies: List[str]) -> Optional[List[str]]:
    if not known_proxies:
        return None

    if is_running_in_container():
        logger.warning("Running in a container, skip adding known proxies")
        return list(LOOPBACK_PROXIES)

    accepted = []
    for ip in known_proxies:
        try:
            accepted.append(str(parse_ip(ip)))
        except IPParseError:
            logger.warning(f"Invalid IP address '{ip}' in known proxies configuration")

    logger.info(f"Added known proxies ({len(known_proxies)}): {json.dumps(known_proxies)}")
    return accepted


def configure_forwarded_headers(
    app: FastAPI,
    config: Optional[ForwardedHeadersConfig] = None
) -> ClientIPOptions:
    """
    Configure forwarded headers handling for a FastAPI application

    Args:
        app: FastAPI application instance
        config: Forwarded headers configuration (read from environment if None)

    Returns:
        ClientIPOptions, also stored on app.state.client_ip_options

    Example:
        >>> app = FastAPI()
        >>> configure_forwarded_headers(app, ForwardedHeadersConfig(known_proxies=["10.0.0.2"]))
    """
    if config is None:
        config = get_forwarded_headers_config()

    header_name = None
    if config.header_name and config.header_name.strip():
        if is_valid_header_name(config.header_name):
            header_name = config.header_name
        else:
            logger.warning(f"XFF header name '{config.header_name}' is invalid, it will not be applied")

    options = ClientIPOptions(
        trusted_header_configured=header_name is not None,
        header_name=header_name
    )
    app.state.client_ip_options = options

    app.add_middleware(
        ForwardedHeadersMiddleware,
        header_name=header_name or DEFAULT_FORWARDED_FOR_HEADER,
        known_proxies=_collect_known_proxies(config.known_proxies)
    )

    return options

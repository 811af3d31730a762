"""
Client IP middleware
Resolves the client IP once per request and exposes it as request.state.client_ip
"""
import logging

from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Receive, Scope, Send

from requestguard.security.client_ip import get_client_ip

logger = logging.getLogger(__name__)


class ClientIPMiddleware:
    """
    ASGI middleware storing the resolved client IP in the request state

    Handlers read it with request.state.client_ip (None without a connection).
    Add it before calling configure_forwarded_headers: Starlette runs the most
    recently added middleware first, so the address is rewritten by then.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        client_ip = get_client_ip(HTTPConnection(scope))
        scope.setdefault("state", {})["client_ip"] = client_ip

        logger.debug(f"Client IP for {scope.get('path', 'unknown')}: {client_ip}")

        await self.app(scope, receive, send)

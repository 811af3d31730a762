"""
Reference FastAPI application wiring the requestguard components

Run with:
    uvicorn requestguard.main:app
"""
from logging import getLogger
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from requestguard.middleware import (
    ClientIPMiddleware,
    ForwardedHeadersConfig,
    RateLimitConfig,
    configure_forwarded_headers,
    create_limiter,
)
from requestguard.security import (
    is_private_ip,
    register_error_handlers,
    safe_redirect,
    sterilize_link,
)
from requestguard.utils import get_app_version, get_environment_tags

logger = getLogger(__name__)


def create_app(
    forwarded_headers_config: Optional[ForwardedHeadersConfig] = None,
    rate_limit_config: Optional[RateLimitConfig] = None,
    debug_mode: bool = False
) -> FastAPI:
    """
    Create the application

    Args:
        forwarded_headers_config: Proxy settings (read from environment if None)
        rate_limit_config: Rate limit settings (read from environment if None)
        debug_mode: Include exception messages in error responses
    """
    app = FastAPI()

    # slowapi reads the limiter from app state
    limiter = create_limiter(rate_limit_config)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    register_error_handlers(app, debug_mode=debug_mode)

    # Starlette runs the last added middleware first: forwarded headers must
    # rewrite the client address before the client IP is resolved
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(ClientIPMiddleware)
    configure_forwarded_headers(app, forwarded_headers_config)

    @app.get("/status")
    async def status(request: Request):
        return JSONResponse({
            "message": "requestguard is running",
            "version": get_app_version(),
            "tags": get_environment_tags(),
        })

    @app.get("/client-ip")
    async def client_ip(request: Request):
        return JSONResponse({"client_ip": request.state.client_ip})

    @app.get("/sterilize")
    async def sterilize(request: Request, url: Optional[str] = None):
        return JSONResponse({"url": sterilize_link(url)})

    @app.get("/redirect")
    async def redirect(request: Request, url: Optional[str] = None):
        """Redirect to a caller-supplied target, falling back to / when unsafe"""
        return safe_redirect(url)

    @app.get("/classify")
    async def classify(request: Request, ip: str = ""):
        # Malformed input raises IPParseError, mapped to 400 by the error handler
        return JSONResponse({
            "ip": ip,
            "private": is_private_ip(ip),
            "private_or_reserved": is_private_ip(ip, include_reserved=True),
        })

    logger.info("requestguard application created")
    return app


app = create_app()

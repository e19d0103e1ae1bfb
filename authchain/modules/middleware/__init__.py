"""
Authentication Middleware Module - Black Box Interface

Purpose: Guard ASGI applications with an authentication strategy
Interface: AuthMiddleware, create_auth_middleware(), create_composed_auth_middleware(),
           create_failure_handler()
Hidden: Receive-channel replay, error formatting, skip-path matching

Can be used by any FastAPI or Starlette app, or wrapped directly around any
ASGI application. Completely independent of the strategy in use.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..strategy import AuthenticationError, ComposedStrategy, Strategy

logger = logging.getLogger(__name__)

ERROR_FORMATS = ("json", "jsonrpc")
DEFAULT_FAILURE_MESSAGE = "Authentication failed: Invalid credentials"


def format_error(status_code: int, message: str, error_format: str = "json",
                 request_id: Optional[str] = None) -> Dict[str, Any]:
    """Format error response based on configured format."""
    if error_format == "jsonrpc":
        return {
            "jsonrpc": "2.0",
            "error": {
                "code": -32700 if status_code == 401 else -32603,
                "message": message
            },
            "id": request_id
        }
    else:
        return {
            "error": message,
            "status": status_code
        }


def create_failure_handler(
    status_code: int = 401,
    message: str = DEFAULT_FAILURE_MESSAGE,
    error_format: str = "json"
) -> ASGIApp:
    """
    Factory function to create the default failure handler.

    Args:
        status_code: HTTP status of the response
        message: Error message placed in the body
        error_format: "json" or "jsonrpc" error format

    Returns:
        ASGI application answering every request with the formatted error
    """
    if error_format not in ERROR_FORMATS:
        raise ValueError(f"unknown error format: {error_format}")
    content = format_error(status_code, message, error_format)

    async def fail_handler(scope: Scope, receive: Receive, send: Send) -> None:
        response = JSONResponse(status_code=status_code, content=content)
        await response(scope, receive, send)

    return fail_handler


class _RecordingReceive:
    """Receive channel that remembers what it handed out so it can be replayed."""

    def __init__(self, receive: Receive):
        self._receive = receive
        self.messages: List[Message] = []

    async def __call__(self) -> Message:
        message = await self._receive()
        self.messages.append(message)
        return message

    def replay(self) -> Receive:
        pending = list(self.messages)

        async def receive() -> Message:
            if pending:
                return pending.pop(0)
            return await self._receive()

        return receive


class AuthMiddleware:
    """
    Authentication middleware for ASGI applications.

    Each request is passed to the strategy. On success the original request
    goes to the wrapped application, on failure to the failure handler. The
    failure handler only learns that authentication failed, not why.
    No state is kept between requests.
    """

    def __init__(
        self,
        app: ASGIApp,
        strategy: Strategy,
        fail_handler: Optional[ASGIApp] = None,
        skip_paths: Optional[Dict[str, list]] = None,
        log_attempts: bool = True
    ):
        """
        Initialize authentication middleware.

        Args:
            app: Protected ASGI application
            strategy: Strategy (single or composed) deciding on each request
            fail_handler: ASGI application invoked when authentication fails
            skip_paths: Dict of {path: [methods]} to skip authentication
            log_attempts: Whether to log authentication attempts
        """
        if strategy is None:
            raise ValueError("strategy is required by AuthMiddleware")
        self.app = app
        self.strategy = strategy
        self.fail_handler = fail_handler or create_failure_handler()
        self.skip_paths = skip_paths or {}
        self.log_attempts = log_attempts

    def should_skip_auth(self, request: Request) -> bool:
        """Check if authentication should be skipped for this request."""
        path = str(request.url.path)
        method = request.method.upper()

        if path in self.skip_paths:
            allowed_methods = self.skip_paths[path]
            if "*" in allowed_methods or method in allowed_methods:
                return True

        return False

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Process the request through authentication middleware."""
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        recorder = _RecordingReceive(receive)
        request = Request(scope, recorder)

        if self.should_skip_auth(request):
            if self.log_attempts:
                logger.debug(f"Skipping auth for {request.method} {request.url.path}")
            await self.app(scope, receive, send)
            return

        try:
            await self.strategy.authenticate(request)
        except AuthenticationError as e:
            if self.log_attempts:
                logger.warning(f"Authentication failed for {request.url.path}: {e}")
            await self.fail_handler(scope, recorder.replay(), send)
            return

        if self.log_attempts:
            logger.info(f"Request authenticated for {request.method} {request.url.path}")

        await self.app(scope, recorder.replay(), send)


def create_auth_middleware(
    fail_handler: Optional[ASGIApp],
    strategy: Strategy,
    **kwargs: Any
) -> Callable[[ASGIApp], ASGIApp]:
    """
    Factory function to create a middleware taking only the protected app.

    Args:
        fail_handler: ASGI application invoked when authentication fails
        strategy: Strategy deciding on each request
        **kwargs: Extra AuthMiddleware options (skip_paths, log_attempts)

    Returns:
        Function wrapping an ASGI application in AuthMiddleware
    """
    def middleware(app: ASGIApp) -> ASGIApp:
        return AuthMiddleware(app, strategy, fail_handler=fail_handler, **kwargs)

    return middleware


def create_composed_auth_middleware(
    fail_handler: Optional[ASGIApp],
    strategies: Iterable[Strategy],
    **kwargs: Any
) -> Callable[[ASGIApp], ASGIApp]:
    """
    Factory function to create a middleware over several strategies.

    Authentication succeeds if any of the given strategies succeeds.
    """
    return create_auth_middleware(fail_handler, ComposedStrategy(strategies), **kwargs)


# Module interface - what this module provides
__all__ = [
    "AuthMiddleware",
    "create_auth_middleware",
    "create_composed_auth_middleware",
    "create_failure_handler",
    "format_error",
]

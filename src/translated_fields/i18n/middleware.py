"""Locale middleware resolving the request locale from its URL.

Sets the request locale based on the configured strategy:
1. First path segment ("/fr/...")
2. First host label ("fr.example.com")
3. Full domain ("mon-site.example" -> "fr")
4. A custom function

Uses pure ASGI middleware to avoid BaseHTTPMiddleware's contextvars issues.
See: https://github.com/encode/starlette/discussions/1729

Cross-thread communication:
Since FastAPI runs sync dependencies and endpoints in a threadpool,
contextvars changes made there aren't visible to async code. We use request
scope state as a shared dict that both threads can access.
"""

from starlette.datastructures import MutableHeaders
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from translated_fields.core.logging import get_logger
from translated_fields.i18n.config import LocaleConfig
from translated_fields.i18n.context import (
    LOCALE_STATE_KEY,
    reset_default_locale,
    reset_request_state,
    set_default_locale,
    set_request_state,
)
from translated_fields.i18n.resolver import resolve_locale

logger = get_logger(__name__)


class LocaleMiddleware:
    """Pure ASGI middleware to set the request locale from the request URL.

    Also adds Content-Language header to responses.

    Uses pure ASGI instead of BaseHTTPMiddleware to properly support
    contextvars propagation from route handlers back to middleware.

    Important: We capture the final locale when the response starts (before
    sending headers) rather than in a finally block, because the response
    may be sent before the finally block runs.
    """

    def __init__(self, app: ASGIApp, config: LocaleConfig) -> None:
        self.app = app
        self.config = config

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI interface."""
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        # Ensure scope has a state dict for cross-thread communication
        if "state" not in scope:
            scope["state"] = {}

        locale = resolve_locale(HTTPConnection(scope), self.config)
        logger.debug(
            "locale_resolved",
            locale=locale,
            strategy=self.config.strategy.value,
            path=scope.get("path"),
        )

        # Store in scope state first so set_default_locale sees the same value
        scope["state"][LOCALE_STATE_KEY] = locale
        state_token = set_request_state(scope["state"])
        token = set_default_locale(locale)

        async def send_with_locale(message: Message) -> None:
            """Wrapper to add Content-Language header to response."""
            if message["type"] == "http.response.start":
                # Read locale from scope state (may have been updated by sync deps)
                current_locale = scope["state"].get(LOCALE_STATE_KEY, locale)

                response_headers = MutableHeaders(raw=list(message.get("headers", [])))
                response_headers["Content-Language"] = current_locale
                message["headers"] = response_headers.raw

            await send(message)

        try:
            await self.app(scope, receive, send_with_locale)
        finally:
            reset_default_locale(token)
            reset_request_state(state_token)

"""Request-scoped ambient locale using contextvars.

This module provides a thread-safe way to access the current locale
for any request, similar to how structlog uses contextvars for request_id.
The translation engine reads it whenever no locale is passed explicitly.

Note: We use both contextvars (for async code) and a request-scoped
state dict (for sync dependencies that run in threadpools).
"""

from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any

from translated_fields.core.config import get_settings

# Context variable for the current locale (works in async code).
# None means "nothing set", in which case the configured default applies.
_locale_context: ContextVar[str | None] = ContextVar("locale", default=None)

# Request state reference for cross-thread communication
# This is set by middleware to point to request.scope["state"]
_request_state: ContextVar[dict[str, Any] | None] = ContextVar(
    "request_state", default=None
)

# Key used in request state for locale, readable as request.state.locale
LOCALE_STATE_KEY = "locale"


def _current_locale() -> str | None:
    state = _request_state.get()
    if state is not None:
        locale_value = state.get(LOCALE_STATE_KEY)
        if isinstance(locale_value, str) and locale_value:
            return locale_value
    return _locale_context.get()


def get_default_locale() -> str:
    """Get the ambient locale for the current request or task.

    First checks request state (for sync dependency updates),
    then falls back to contextvar, then the configured DEFAULT_LOCALE.
    """
    return _current_locale() or get_settings().DEFAULT_LOCALE


def add_locale_to_log(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor adding the ambient locale, when one is set."""
    locale = _current_locale()
    if locale is not None:
        event_dict.setdefault("locale", locale)
    return event_dict


def set_default_locale(locale: str) -> Token[str | None]:
    """Set the ambient locale for the current context.

    Updates both the contextvar (for async code) and request state
    (for visibility across threads).

    Args:
        locale: The locale identifier (e.g., "en", "fr", "en-GB")

    Returns:
        Token that can be used with reset_default_locale to restore the
        previous value.
    """
    if not locale:
        raise ValueError("locale must be a non-empty string")

    state = _request_state.get()
    if state is not None:
        state[LOCALE_STATE_KEY] = locale

    return _locale_context.set(locale)


def reset_default_locale(token: Token[str | None]) -> None:
    """Reset the ambient locale to its previous value.

    Args:
        token: The token returned from set_default_locale.
    """
    _locale_context.reset(token)


def set_request_state(state: dict[str, Any] | None) -> Token[dict[str, Any] | None]:
    """Set the request state reference for cross-thread locale sharing.

    Called by middleware to establish the shared state dict.

    Args:
        state: The request.scope["state"] dict, or None to clear.

    Returns:
        Token for resetting.
    """
    return _request_state.set(state)


def reset_request_state(token: Token[dict[str, Any] | None]) -> None:
    _request_state.reset(token)


@contextmanager
def use_locale(locale: str) -> Iterator[str]:
    """Temporarily switch the ambient locale, e.g. in jobs or scripts.

    Example:
        with use_locale("fr"):
            translate(post)  # translated to French
    """
    state = _request_state.get()
    previous_state_locale = state.get(LOCALE_STATE_KEY) if state is not None else None
    token = set_default_locale(locale)
    try:
        yield locale
    finally:
        reset_default_locale(token)
        if state is not None:
            if previous_state_locale is None:
                state.pop(LOCALE_STATE_KEY, None)
            else:
                state[LOCALE_STATE_KEY] = previous_state_locale

"""Centralized exception hierarchy for the library.

All custom exceptions inherit from AppException, which provides:
- Consistent error response format
- HTTP status codes
- Machine-readable error codes
- i18n support via message_key and params
- Optional details dict for additional context

The exception handler in main.py converts these to JSON responses.

Missing translations are not engine failures: MissingTranslationError is
raised only by the strict missing-translation handler.
"""

from collections.abc import Iterable
from typing import Any


class AppException(Exception):
    """Base exception for all library errors.

    Provides a consistent structure for error responses with:
    - message: Human-readable error description (fallback if translation fails)
    - message_key: Translation key for i18n (e.g., "error_malformed_field")
    - params: Interpolation parameters for the translation
    - error_code: Machine-readable code (e.g., "MALFORMED_TRANSLATABLE_FIELD")
    - status_code: HTTP status code
    - details: Optional dict with additional context
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
        *,
        message_key: str | None = None,
        params: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        self.message_key = message_key
        self.params = params or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dict for JSON serialization."""
        result: dict[str, Any] = {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }
        if self.message_key:
            result["message_key"] = self.message_key
        return result


class ConfigurationError(AppException):
    """A record kind or naming rule was declared inconsistently."""

    def __init__(self, message: str, kind: str | None = None):
        super().__init__(
            message,
            "CONFIGURATION_ERROR",
            500,
            {"kind": kind} if kind else {},
            message_key="error_configuration",
            params={"message": message},
        )


class InvalidRecordError(AppException):
    """Base for records whose declared attributes hold an unexpected shape."""

    def __init__(
        self,
        message: str,
        error_code: str,
        kind: str,
        attribute: str,
        found: str,
        *,
        message_key: str,
    ):
        self.kind = kind
        self.attribute = attribute
        super().__init__(
            message,
            error_code,
            500,
            {"kind": kind, "attribute": attribute, "found": found},
            message_key=message_key,
            params={"kind": kind, "attribute": attribute, "found": found},
        )


class MalformedFieldError(InvalidRecordError):
    """A declared translatable field does not hold a locale-keyed mapping."""

    def __init__(self, kind: str, attribute: str, found: str):
        super().__init__(
            f"{kind}.{attribute} is declared translatable but holds {found}",
            "MALFORMED_TRANSLATABLE_FIELD",
            kind,
            attribute,
            found,
            message_key="error_malformed_field",
        )


class MalformedAssociationError(InvalidRecordError):
    """A declared association holds neither records nor a collection of records."""

    def __init__(self, kind: str, attribute: str, found: str):
        super().__init__(
            f"{kind}.{attribute} is declared as an association but holds {found}",
            "MALFORMED_ASSOCIATION",
            kind,
            attribute,
            found,
            message_key="error_malformed_association",
        )


class MissingTranslationError(AppException):
    """No text exists for the requested locale (strict mode only)."""

    def __init__(self, locale: str, available: Iterable[str] = ()):
        self.locale = locale
        self.available = sorted(available)
        super().__init__(
            f"No translation available for locale {locale!r}",
            "MISSING_TRANSLATION",
            500,
            {"locale": locale, "available_locales": self.available},
            message_key="error_missing_translation",
            params={"requested_locale": locale},
        )

"""Message catalogue for localized error responses, using python-i18n.

These are the library's own messages (error texts), loaded from JSON files
next to this module. Record fields are not translated here; see
translated_fields.translations for that.
"""

from pathlib import Path
from typing import ClassVar

import i18n  # type: ignore[import-untyped]

from translated_fields.core.config import get_settings
from translated_fields.i18n.context import get_default_locale

# Path to translation files
TRANSLATIONS_DIR = Path(__file__).parent / "translations"

# Locales with a catalogue file in TRANSLATIONS_DIR
MESSAGE_LOCALES: frozenset[str] = frozenset(
    path.stem for path in TRANSLATIONS_DIR.glob("*.json")
)

# Catalogue used when a message is missing in the requested locale
MESSAGE_FALLBACK_LOCALE = "en"


class _MessageState:
    """Singleton to track catalogue initialization state.

    Uses class variable to avoid PLW0603 global statement warning.
    """

    initialized: ClassVar[bool] = False


def init_messages() -> None:
    """Initialize the i18n library with our message files.

    This should be called once at application startup.
    """
    if _MessageState.initialized:
        return

    i18n.set("file_format", "json")
    i18n.set("fallback", MESSAGE_FALLBACK_LOCALE)
    i18n.set("enable_memoization", True)
    # Skip the locale root element since our JSON files have flat keys
    i18n.set("skip_locale_root_data", True)
    # Use simple filename format: en.json, fr.json, etc.
    i18n.set("filename_format", "{locale}.{format}")

    i18n.load_path.append(str(TRANSLATIONS_DIR))

    _MessageState.initialized = True


def message_locale(locale: str) -> str:
    """Map a locale to one we ship messages for.

    Tries the exact code, then the base language ("fr-BE" -> "fr"), then the
    configured default, then English.
    """
    if locale in MESSAGE_LOCALES:
        return locale
    base = locale.split("-")[0].lower()
    if base in MESSAGE_LOCALES:
        return base
    default = get_settings().DEFAULT_LOCALE
    return default if default in MESSAGE_LOCALES else MESSAGE_FALLBACK_LOCALE


def translate_message(
    key: str,
    locale: str | None = None,
    **params: str | int | float,
) -> str:
    """Translate a message key to the specified locale.

    Interpolation uses %{variable} syntax in JSON files.

    Args:
        key: The message key (e.g., "error_malformed_field")
        locale: Target locale code. If None, uses the ambient locale.
        **params: Interpolation parameters (e.g., kind="Post")

    Returns:
        Translated string, or the key itself if not found.

    Example:
        translate_message("error_missing_translation", "fr", requested_locale="nl")
    """
    init_messages()

    target_locale = message_locale(locale or get_default_locale())

    # Passing the locale per call keeps concurrent requests independent
    result: str = i18n.t(key, locale=target_locale, **params)
    return result

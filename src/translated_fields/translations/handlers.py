"""Missing-translation handlers.

A handler is called as handler(translations, locale) whenever the requested
locale is absent from a translation map, before any fallback is applied.
It cannot change the translated result; it can only observe it, or raise.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Literal

from translated_fields.core.exceptions import MissingTranslationError
from translated_fields.core.logging import get_logger

logger = get_logger(__name__)

MissingTranslationHandler = Callable[[Mapping[str, str], str], None]

MissingTranslationMode = Literal["ignore", "log", "raise"]


def ignore_missing(translations: Mapping[str, str], locale: str) -> None:
    """Default handler: missing translations are silently tolerated."""
    return None


def log_missing(translations: Mapping[str, str], locale: str) -> None:
    """Log a warning naming the locale and the locales that do exist."""
    logger.warning(
        "missing_translation",
        locale=locale,
        available_locales=sorted(translations),
    )


def raise_missing(translations: Mapping[str, str], locale: str) -> None:
    """Strict handler: abort the translation with MissingTranslationError."""
    raise MissingTranslationError(locale, translations.keys())


@dataclass(frozen=True)
class MissingTranslation:
    translations: Mapping[str, str]
    locale: str


@dataclass
class MissingTranslationRecorder:
    """Handler collecting every report, e.g. to build a to-do list for translators."""

    reports: list[MissingTranslation] = field(default_factory=list)

    def __call__(self, translations: Mapping[str, str], locale: str) -> None:
        self.reports.append(MissingTranslation(translations, locale))

    @property
    def locales(self) -> list[str]:
        return [report.locale for report in self.reports]

    def clear(self) -> None:
        self.reports.clear()


_HANDLERS: dict[str, MissingTranslationHandler] = {
    "ignore": ignore_missing,
    "log": log_missing,
    "raise": raise_missing,
}


def handler_for_mode(mode: MissingTranslationMode) -> MissingTranslationHandler:
    """Return the handler for a MISSING_TRANSLATION_MODE setting value."""
    try:
        return _HANDLERS[mode]
    except KeyError:
        raise ValueError(
            f"unknown missing translation mode {mode!r}, expected one of {sorted(_HANDLERS)}"
        ) from None

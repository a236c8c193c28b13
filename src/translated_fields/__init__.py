"""Single-locale views of records with translatable fields."""

from translated_fields.i18n import (
    LocaleConfig,
    LocaleMiddleware,
    LocaleStrategy,
    get_default_locale,
    resolve_locale,
    set_default_locale,
    use_locale,
)
from translated_fields.translations import (
    NOT_LOADED,
    MissingTranslationRecorder,
    TranslationRegistry,
    ignore_missing,
    log_missing,
    raise_missing,
    registry,
    resolve_translation,
    translatable,
    translate,
)

__version__ = "0.1.0"

__all__ = [
    "NOT_LOADED",
    "LocaleConfig",
    "LocaleMiddleware",
    "LocaleStrategy",
    "MissingTranslationRecorder",
    "TranslationRegistry",
    "get_default_locale",
    "ignore_missing",
    "log_missing",
    "raise_missing",
    "registry",
    "resolve_locale",
    "resolve_translation",
    "set_default_locale",
    "translatable",
    "translate",
    "use_locale",
]

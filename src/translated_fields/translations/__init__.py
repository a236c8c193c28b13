"""Translation engine for records with locale-keyed fields.

Records declare which attributes hold {"en": ..., "fr": ...} maps and which
attributes hold nested records; translate() returns the same records
annotated with the text for one locale, with locale fallback and a
pluggable missing-translation handler.
"""

from translated_fields.translations.engine import (
    RecordTranslator,
    is_translation_map,
    resolve_translation,
    translate,
)
from translated_fields.translations.handlers import (
    MissingTranslation,
    MissingTranslationHandler,
    MissingTranslationRecorder,
    handler_for_mode,
    ignore_missing,
    log_missing,
    raise_missing,
)
from translated_fields.translations.loading import (
    NOT_LOADED,
    NotLoaded,
    attribute_value,
    is_mapped,
)
from translated_fields.translations.registry import (
    NamingRule,
    RecordSchema,
    TranslationRegistry,
    camel_prefixed,
    prefixed,
    registry,
    translatable,
)

__all__ = [
    "NOT_LOADED",
    "MissingTranslation",
    "MissingTranslationHandler",
    "MissingTranslationRecorder",
    "NamingRule",
    "NotLoaded",
    "RecordSchema",
    "RecordTranslator",
    "TranslationRegistry",
    "attribute_value",
    "camel_prefixed",
    "handler_for_mode",
    "ignore_missing",
    "is_mapped",
    "is_translation_map",
    "log_missing",
    "prefixed",
    "raise_missing",
    "registry",
    "resolve_translation",
    "translatable",
    "translate",
]

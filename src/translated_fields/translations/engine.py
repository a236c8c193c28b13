"""Translation engine: extract a single-locale view from translatable records.

A record's translatable fields hold locale-keyed maps such as
{"en": "The title", "fr": "Le titre"}. Translating a record writes the text
for one locale to each field's output attribute ("translated_title") and
recurses into the record's declared associations.

Resolution of one map:
1. The requested locale, if present.
2. Otherwise the missing-translation handler is called once with
   (translations, locale), then the fallback locale is used if present.
3. Otherwise None.

Locales are matched by exact string equality: "en-GB" never implies "en".
"""

from collections.abc import Collection, Mapping
import copy
from typing import Any

from translated_fields.core.config import get_settings
from translated_fields.core.exceptions import (
    MalformedAssociationError,
    MalformedFieldError,
)
from translated_fields.i18n.context import get_default_locale
from translated_fields.translations.handlers import (
    MissingTranslationHandler,
    ignore_missing,
)
from translated_fields.translations.loading import (
    NOT_LOADED,
    attribute_value,
    is_mapped,
)
from translated_fields.translations.registry import (
    RecordSchema,
    TranslationRegistry,
    registry as default_registry,
)

_TEXT_TYPES = (str, bytes, bytearray)


def is_translation_map(value: Any) -> bool:
    """Check whether value looks like {"en": "...", "fr": "..."}."""
    return isinstance(value, Mapping) and all(
        isinstance(key, str) and isinstance(text, str) for key, text in value.items()
    )


def resolve_translation(
    translations: Mapping[str, str],
    locale: str,
    fallback_locale: str | None = None,
    on_missing_translation: MissingTranslationHandler = ignore_missing,
) -> str | None:
    """Pick the text for locale out of a translation map.

    Args:
        translations: Locale-keyed map of texts
        locale: Requested locale
        fallback_locale: Locale used when the requested one is absent
        on_missing_translation: Called once when locale is absent, even if
            the fallback then succeeds

    Returns:
        The requested text, the fallback text, or None.
    """
    if locale in translations:
        return translations[locale]

    on_missing_translation(translations, locale)

    if (
        fallback_locale is not None
        and fallback_locale != locale
        and fallback_locale in translations
    ):
        return translations[fallback_locale]
    return None


def _describe(value: Any) -> str:
    return type(value).__name__


def _is_collection(value: Any) -> bool:
    return isinstance(value, Collection) and not isinstance(
        value, _TEXT_TYPES + (Mapping,)
    )


def _replaced(current: Any, translated: Any) -> bool:
    """Check whether translating an association produced new objects."""
    if not _is_collection(current):
        return translated is not current
    return len(translated) != len(current) or any(
        new is not old for new, old in zip(translated, current)
    )


def _assign(target: Any, updates: dict[str, Any]) -> None:
    """Write attributes without going through __setattr__.

    Writing to __dict__ keeps frozen dataclasses and pydantic models
    assignable and, on mapped instances, stays invisible to the ORM.
    """
    if not updates:
        return
    namespace = getattr(target, "__dict__", None)
    if namespace is None:
        for name, value in updates.items():
            object.__setattr__(target, name, value)
        return

    namespace.update(updates)
    fields_set = getattr(target, "__pydantic_fields_set__", None)
    if isinstance(fields_set, set):
        model_fields = getattr(type(target), "model_fields", {})
        fields_set.update(name for name in updates if name in model_fields)


class RecordTranslator:
    """One translation pass with a fixed locale, fallback, handler and registry.

    Each source record is translated at most once per pass, so shared
    records stay shared and reference cycles between loaded records are
    reproduced in the output instead of recursing forever.
    """

    def __init__(
        self,
        locale: str,
        fallback_locale: str | None,
        on_missing_translation: MissingTranslationHandler,
        registry: TranslationRegistry,
    ) -> None:
        self.locale = locale
        self.fallback_locale = fallback_locale
        self.on_missing_translation = on_missing_translation
        self.registry = registry
        self._translated: dict[int, tuple[Any, Any]] = {}

    def text(self, translations: Mapping[str, str]) -> str | None:
        return resolve_translation(
            translations,
            self.locale,
            self.fallback_locale,
            self.on_missing_translation,
        )

    def value(self, value: Any) -> Any:
        """Translate a record, a collection of values or a translation map.

        Tuples stay tuples; lists, sets and other collections become lists.
        Anything else is returned unchanged.
        """
        if value is None or value is NOT_LOADED or isinstance(value, _TEXT_TYPES):
            return value

        schema = self.registry.schema_for(value)
        if schema is not None:
            return self.record(value, schema)

        if isinstance(value, Mapping):
            return self.text(value) if is_translation_map(value) else value

        if _is_collection(value):
            items = [self.value(item) for item in value]
            return tuple(items) if type(value) is tuple else items

        return value

    def record(self, record: Any, schema: RecordSchema) -> Any:
        """Translate one record.

        Unmapped records are copied and the copy is annotated. Mapped
        (SQLAlchemy) instances are annotated in place, together with their
        loaded associations. An unmapped record held by a mapped one is
        replaced by its translated copy.

        Raises:
            MalformedFieldError: a declared field does not hold a mapping
            MalformedAssociationError: a declared association holds
                something other than records
        """
        key = id(record)
        if key in self._translated:
            return self._translated[key][1]

        in_place = is_mapped(record)
        target = record if in_place else copy.copy(record)
        # The source is kept alive so its id cannot be reused within the pass
        self._translated[key] = (record, target)

        updates: dict[str, Any] = {}
        for name in schema.fields:
            translations = attribute_value(record, name)
            if translations is NOT_LOADED:
                continue
            if translations is None:
                updates[schema.output_name(name)] = None
            elif isinstance(translations, Mapping):
                updates[schema.output_name(name)] = self.text(translations)
            else:
                raise MalformedFieldError(schema.kind_name, name, _describe(translations))

        for name in schema.associations:
            current = attribute_value(record, name)
            if current is None or current is NOT_LOADED:
                continue
            translated = self.association(schema, name, current)
            if not in_place or _replaced(current, translated):
                updates[name] = translated

        _assign(target, updates)
        return target

    def association(self, schema: RecordSchema, name: str, value: Any) -> Any:
        child_schema = self.registry.schema_for(value)
        if child_schema is not None:
            return self.record(value, child_schema)

        if not _is_collection(value):
            raise MalformedAssociationError(schema.kind_name, name, _describe(value))

        items = []
        for item in value:
            item_schema = self.registry.schema_for(item)
            if item_schema is None:
                raise MalformedAssociationError(
                    schema.kind_name, name, f"a collection containing {_describe(item)}"
                )
            items.append(self.record(item, item_schema))
        return tuple(items) if type(value) is tuple else items


def translate(
    value: Any,
    locale: str | None = None,
    *,
    fallback_locale: str | None = None,
    on_missing_translation: MissingTranslationHandler = ignore_missing,
    registry: TranslationRegistry | None = None,
) -> Any:
    """Translate a record, a collection of records or a bare translation map.

    Args:
        value: A registered record, a list/tuple of them, or a translation map
        locale: Requested locale; defaults to the ambient request locale
        fallback_locale: Defaults to the configured FALLBACK_LOCALE
            (DEFAULT_LOCALE when unset)
        on_missing_translation: Handler called as (translations, locale) for
            every map lacking the requested locale
        registry: Record declarations to use; defaults to the global registry

    Returns:
        A value of the same shape: text (or None) for a map, an annotated
        record for a record, a list (tuple for tuples) for a collection.
        Other values are returned unchanged.

    Example:
        translate({"en": "The title", "fr": "Le titre"}, "fr")  # "Le titre"
        translate(post, "fr").translated_title
    """
    translator = RecordTranslator(
        locale or get_default_locale(),
        fallback_locale
        if fallback_locale is not None
        else get_settings().effective_fallback_locale,
        on_missing_translation,
        registry if registry is not None else default_registry,
    )
    return translator.value(value)

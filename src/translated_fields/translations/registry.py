"""Registry of record kinds and their translatable declarations.

Each record kind (a Python class) declares:
- fields: attributes holding locale-keyed maps ({"en": "...", "fr": "..."})
- associations: attributes holding nested records or lists of records
- an output name for every field, where the extracted text is written

Declarations are looked up by class, walking the MRO, so subclasses of a
registered kind share its declaration unless they register their own.

Usage:
    @translatable(fields=("title",), associations=("comments",))
    @dataclass
    class Post:
        title: dict[str, str]
        comments: list[Comment]
        translated_title: str | None = None
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, TypeVar

from translated_fields.core.config import get_settings
from translated_fields.core.exceptions import ConfigurationError
from translated_fields.core.logging import get_logger

logger = get_logger(__name__)

KindT = TypeVar("KindT", bound=type)

# Maps a translatable field name to the attribute the translated text goes to
NamingRule = Callable[[str], str]


def prefixed(prefix: str) -> NamingRule:
    """Naming rule "title" -> f"{prefix}title" (e.g. "translated_title")."""

    def rule(name: str) -> str:
        return f"{prefix}{name}"

    return rule


def camel_prefixed(prefix: str) -> NamingRule:
    """Naming rule "title" -> "translatedTitle" for prefix "translated"."""

    def rule(name: str) -> str:
        head, *rest = name.split("_")
        return prefix + head[:1].upper() + head[1:] + "".join(p.title() for p in rest)

    return rule


def default_naming() -> NamingRule:
    return prefixed(get_settings().TRANSLATED_FIELD_PREFIX)


@dataclass(frozen=True)
class RecordSchema:
    """Translatable declaration of one record kind."""

    kind: type
    fields: tuple[str, ...] = ()
    associations: tuple[str, ...] = ()
    outputs: Mapping[str, str] = field(default_factory=dict)

    @property
    def kind_name(self) -> str:
        return self.kind.__name__

    def output_name(self, field_name: str) -> str:
        return self.outputs[field_name]


def _names(kind: type, label: str, names: Iterable[str]) -> tuple[str, ...]:
    if isinstance(names, str):
        names = (names,)
    result = tuple(names)
    for name in result:
        if not isinstance(name, str) or not name.isidentifier():
            raise ConfigurationError(
                f"{kind.__name__}: invalid {label} name {name!r}", kind.__name__
            )
    if len(set(result)) != len(result):
        raise ConfigurationError(
            f"{kind.__name__}: duplicate {label} names in {result!r}", kind.__name__
        )
    return result


def build_schema(
    kind: type,
    *,
    fields: Iterable[str] = (),
    associations: Iterable[str] = (),
    naming: NamingRule | None = None,
    outputs: Mapping[str, str] | None = None,
) -> RecordSchema:
    """Validate a declaration and compute its output names.

    Raises:
        ConfigurationError: names overlap, are invalid, or outputs collide
    """
    field_names = _names(kind, "field", fields)
    association_names = _names(kind, "association", associations)

    overlap = set(field_names) & set(association_names)
    if overlap:
        raise ConfigurationError(
            f"{kind.__name__}: {sorted(overlap)} declared as both field and association",
            kind.__name__,
        )

    overrides = dict(outputs or {})
    unknown = set(overrides) - set(field_names)
    if unknown:
        raise ConfigurationError(
            f"{kind.__name__}: output names given for undeclared fields {sorted(unknown)}",
            kind.__name__,
        )

    rule = naming or default_naming()
    resolved = {name: overrides.get(name) or rule(name) for name in field_names}

    declared = set(field_names) | set(association_names)
    targets = list(resolved.values())
    if len(set(targets)) != len(targets) or declared & set(targets):
        raise ConfigurationError(
            f"{kind.__name__}: output names {targets!r} collide with each other "
            "or with declared attributes",
            kind.__name__,
        )

    return RecordSchema(
        kind=kind,
        fields=field_names,
        associations=association_names,
        outputs=resolved,
    )


class TranslationRegistry:
    """Mapping from record kind to its RecordSchema.

    Populated at startup, read by the translation engine. Registration is
    guarded by a lock; lookups are plain dict reads.
    """

    def __init__(self) -> None:
        self._schemas: dict[type, RecordSchema] = {}
        self._lock = RLock()

    def register(
        self,
        kind: type,
        *,
        fields: Iterable[str] = (),
        associations: Iterable[str] = (),
        naming: NamingRule | None = None,
        outputs: Mapping[str, str] | None = None,
        replace: bool = False,
    ) -> RecordSchema:
        """Declare a record kind's translatable fields and associations.

        Args:
            kind: The record class
            fields: Attributes holding locale-keyed maps
            associations: Attributes holding nested records or lists of them
            naming: Rule deriving output names; defaults to the configured prefix
            outputs: Explicit output names for some fields, overriding naming
            replace: Allow re-registering an already registered kind

        Returns:
            The stored RecordSchema.

        Raises:
            ConfigurationError: invalid declaration or duplicate registration
        """
        if not isinstance(kind, type):
            raise ConfigurationError(f"record kinds must be classes, got {kind!r}")

        schema = build_schema(
            kind,
            fields=fields,
            associations=associations,
            naming=naming,
            outputs=outputs,
        )
        with self._lock:
            if kind in self._schemas and not replace:
                raise ConfigurationError(
                    f"{kind.__name__} is already registered", kind.__name__
                )
            self._schemas[kind] = schema

        logger.debug(
            "record_kind_registered",
            kind=schema.kind_name,
            fields=list(schema.fields),
            associations=list(schema.associations),
        )
        return schema

    def unregister(self, kind: type) -> None:
        with self._lock:
            self._schemas.pop(kind, None)

    def lookup(self, kind: type) -> RecordSchema | None:
        """Return the schema declared for kind or its nearest registered base."""
        schemas = self._schemas
        for klass in kind.__mro__:
            schema = schemas.get(klass)
            if schema is not None:
                return schema
        return None

    def schema_for(self, record: Any) -> RecordSchema | None:
        return self.lookup(type(record))

    def __contains__(self, kind: object) -> bool:
        return isinstance(kind, type) and self.lookup(kind) is not None

    def kinds(self) -> list[type]:
        return list(self._schemas)


# Default registry used by translate() and @translatable
registry = TranslationRegistry()


def translatable(
    *,
    fields: Iterable[str] = (),
    associations: Iterable[str] = (),
    naming: NamingRule | None = None,
    outputs: Mapping[str, str] | None = None,
    into: TranslationRegistry | None = None,
) -> Callable[[KindT], KindT]:
    """Class decorator registering a record kind.

    Example:
        @translatable(fields=("text",))
        class Comment(SQLModel):
            text: dict[str, str]
            translated_text: str | None = None
    """

    def decorator(kind: KindT) -> KindT:
        (into or registry).register(
            kind,
            fields=fields,
            associations=associations,
            naming=naming,
            outputs=outputs,
        )
        return kind

    return decorator

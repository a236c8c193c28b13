"""Request locale resolution.

Derives the request locale from the URL (path segment, subdomain, full
domain or a custom function) and exposes it as the ambient locale the
translation engine falls back on.

Error messages are localized with the python-i18n library and JSON
catalogues shipped in the translations/ directory.
"""

from translated_fields.i18n.config import LocaleConfig, LocaleStrategy, normalize_host
from translated_fields.i18n.context import (
    add_locale_to_log,
    get_default_locale,
    reset_default_locale,
    set_default_locale,
    use_locale,
)
from translated_fields.i18n.messages import init_messages, translate_message
from translated_fields.i18n.middleware import LocaleMiddleware
from translated_fields.i18n.resolver import (
    locale_from_custom,
    locale_from_domain,
    locale_from_path,
    locale_from_subdomain,
    resolve_locale,
)

__all__ = [
    "LocaleConfig",
    "LocaleMiddleware",
    "LocaleStrategy",
    "add_locale_to_log",
    "get_default_locale",
    "init_messages",
    "locale_from_custom",
    "locale_from_domain",
    "locale_from_path",
    "locale_from_subdomain",
    "normalize_host",
    "reset_default_locale",
    "resolve_locale",
    "set_default_locale",
    "translate_message",
    "use_locale",
]

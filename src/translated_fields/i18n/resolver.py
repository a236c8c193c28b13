"""Derive a request's locale from its URL.

Resolution never fails: anything that does not match yields the configured
default locale.
"""

from collections.abc import Callable

from starlette.requests import HTTPConnection

from translated_fields.i18n.config import LocaleConfig, LocaleStrategy, normalize_host


def request_host(connection: HTTPConnection) -> str:
    """Return the normalized host a request was addressed to."""
    return normalize_host(connection.url.hostname or "")


def locale_from_path(connection: HTTPConnection, config: LocaleConfig) -> str:
    """Use the first non-empty path segment when it is an allowed locale.

    The path itself is left untouched, so routes still see "/fr/...".
    """
    segment = next((part for part in connection.url.path.split("/") if part), None)
    if segment is not None and config.is_allowed(segment):
        return segment
    return config.default_locale


def locale_from_subdomain(connection: HTTPConnection, config: LocaleConfig) -> str:
    """Use the first host label when it is an allowed locale ("fr.example.com")."""
    label = request_host(connection).split(".", 1)[0]
    if label and config.is_allowed(label):
        return label
    return config.default_locale


def locale_from_domain(connection: HTTPConnection, config: LocaleConfig) -> str:
    """Look the host up in domains_locales_map.

    The full host is tried first. When it is unknown and its first label is
    an allowed locale, the host without that label is tried, so
    "fr.example.com" matches an "example.com" entry.
    """
    host = request_host(connection)
    mapping = config.domains_locales_map
    if host in mapping:
        return mapping[host]

    label, _, remainder = host.partition(".")
    if remainder and config.is_allowed(label) and remainder in mapping:
        return mapping[remainder]
    return config.default_locale


def locale_from_custom(connection: HTTPConnection, config: LocaleConfig) -> str:
    """Delegate to config.find_locale; its answer is not checked against allowed_locales."""
    assert config.find_locale is not None
    return config.find_locale(connection) or config.default_locale


_STRATEGIES: dict[LocaleStrategy, Callable[[HTTPConnection, LocaleConfig], str]] = {
    LocaleStrategy.FROM_PATH: locale_from_path,
    LocaleStrategy.FROM_SUBDOMAIN: locale_from_subdomain,
    LocaleStrategy.FROM_DOMAIN: locale_from_domain,
    LocaleStrategy.CUSTOM: locale_from_custom,
}


def resolve_locale(connection: HTTPConnection, config: LocaleConfig) -> str:
    """Resolve the locale for a request according to config.strategy.

    Args:
        connection: The incoming request (or websocket) connection
        config: Locale resolution settings

    Returns:
        The resolved locale, or config.default_locale if nothing matched.

    Example:
        config = LocaleConfig(allowed_locales={"fr", "nl"}, default_locale="en")
        resolve_locale(request_for("/fr/bonjour"), config)  # "fr"
        resolve_locale(request_for("/hello"), config)  # "en"
    """
    return _STRATEGIES[config.strategy](connection, config)

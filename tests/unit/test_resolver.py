"""Tests for deriving the request locale from its URL."""

from __future__ import annotations

from pydantic import ValidationError
import pytest

from translated_fields.i18n import (
    LocaleConfig,
    LocaleStrategy,
    normalize_host,
    resolve_locale,
)

ALLOWED = frozenset({"fr", "nl"})


def path_config() -> LocaleConfig:
    return LocaleConfig(
        strategy=LocaleStrategy.FROM_PATH, allowed_locales=ALLOWED, default_locale="en"
    )


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/fr/bonjour", "fr"),
        ("/hello", "en"),
        ("/nl", "nl"),
        ("//fr/bonjour", "fr"),
        ("/", "en"),
        ("/de/hallo", "en"),
        ("/bonjour/fr", "en"),
    ],
)
def test_from_path_first_segment(connection_factory, path: str, expected: str) -> None:
    assert resolve_locale(connection_factory(path=path), path_config()) == expected


def test_from_path_does_not_rewrite_the_path(connection_factory) -> None:
    connection = connection_factory(path="/fr/bonjour")

    resolve_locale(connection, path_config())

    assert connection.url.path == "/fr/bonjour"


@pytest.mark.parametrize(
    ("host", "expected"),
    [
        ("fr.example.com", "fr"),
        ("NL.example.com:8000", "nl"),
        ("www.example.com", "en"),
        ("example.com", "en"),
        ("de.example.com", "en"),
    ],
)
def test_from_subdomain(connection_factory, host: str, expected: str) -> None:
    config = LocaleConfig(
        strategy=LocaleStrategy.FROM_SUBDOMAIN, allowed_locales=ALLOWED, default_locale="en"
    )

    assert resolve_locale(connection_factory(host=host), config) == expected


def domain_config() -> LocaleConfig:
    return LocaleConfig(
        strategy=LocaleStrategy.FROM_DOMAIN,
        allowed_locales=ALLOWED,
        default_locale="en",
        domains_locales_map={
            "mon-super-site.example": "fr",
            "Mijn-Site.example": "nl",
        },
    )


@pytest.mark.parametrize(
    ("host", "expected"),
    [
        ("mon-super-site.example", "fr"),
        ("mon-super-site.example:8443", "fr"),
        ("mijn-site.example", "nl"),
        ("nl.mon-super-site.example", "fr"),
        ("www.mon-super-site.example", "en"),
        ("unknown.example", "en"),
    ],
)
def test_from_domain_map(connection_factory, host: str, expected: str) -> None:
    assert resolve_locale(connection_factory(host=host), domain_config()) == expected


def test_custom_result_is_used_as_is(connection_factory) -> None:
    config = LocaleConfig(
        strategy=LocaleStrategy.CUSTOM,
        allowed_locales=ALLOWED,
        default_locale="en",
        find_locale=lambda connection: connection.url.path.rsplit("/", 1)[-1],
    )

    assert resolve_locale(connection_factory(path="/lang/pt-BR"), config) == "pt-BR"


def test_custom_without_answer_falls_back_to_default(connection_factory) -> None:
    config = LocaleConfig(
        strategy=LocaleStrategy.CUSTOM, default_locale="en", find_locale=lambda _: None
    )

    assert resolve_locale(connection_factory(), config) == "en"


def test_custom_strategy_requires_find_locale() -> None:
    with pytest.raises(ValidationError, match="find_locale"):
        LocaleConfig(strategy=LocaleStrategy.CUSTOM)


def test_default_locale_must_not_be_empty() -> None:
    with pytest.raises(ValidationError):
        LocaleConfig(default_locale="")


def test_config_is_immutable() -> None:
    config = path_config()

    with pytest.raises(ValidationError):
        config.default_locale = "fr"  # type: ignore[misc]


def test_config_from_settings(settings, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "LOCALE_STRATEGY", "from_subdomain")
    monkeypatch.setattr(settings, "ALLOWED_LOCALES", ["fr", "nl"])
    monkeypatch.setattr(settings, "DEFAULT_LOCALE", "nl")

    config = LocaleConfig.from_settings(settings)

    assert config.strategy is LocaleStrategy.FROM_SUBDOMAIN
    assert config.allowed_locales == ALLOWED
    assert config.default_locale == "nl"


@pytest.mark.parametrize(
    ("host", "expected"),
    [
        ("Example.COM", "example.com"),
        ("example.com:8000", "example.com"),
        ("example.com.", "example.com"),
        ("[::1]:8000", "[::1]"),
    ],
)
def test_normalize_host(host: str, expected: str) -> None:
    assert normalize_host(host) == expected

"""Locale resolution configuration.

A LocaleConfig pairs one LocaleStrategy with the data that strategy needs.
Configs are immutable and safe to share between requests.
"""

from collections.abc import Callable, Mapping
from enum import StrEnum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

if TYPE_CHECKING:
    from translated_fields.core.config import Settings


class LocaleStrategy(StrEnum):
    """Where the request locale is read from."""

    FROM_PATH = "from_path"
    FROM_SUBDOMAIN = "from_subdomain"
    FROM_DOMAIN = "from_domain"
    CUSTOM = "custom"


class LocaleConfig(BaseModel):
    """Locale resolution settings for one application."""

    model_config = ConfigDict(frozen=True)

    strategy: LocaleStrategy = LocaleStrategy.FROM_PATH
    allowed_locales: frozenset[str] = frozenset()
    default_locale: str = "en"
    domains_locales_map: Mapping[str, str] = Field(default_factory=dict)
    # Receives the starlette HTTPConnection, returns the locale to use as-is
    find_locale: Callable[..., str | None] | None = None

    @field_validator("default_locale")
    @classmethod
    def validate_default_locale(cls, v: str) -> str:
        if not v:
            raise ValueError("default_locale must be a non-empty string")
        return v

    @field_validator("domains_locales_map")
    @classmethod
    def normalize_domains(cls, v: Mapping[str, str]) -> dict[str, str]:
        return {normalize_host(domain): locale for domain, locale in v.items()}

    @model_validator(mode="after")
    def validate_strategy(self) -> "LocaleConfig":
        if self.strategy is LocaleStrategy.CUSTOM and self.find_locale is None:
            raise ValueError("the custom strategy requires find_locale")
        return self

    @classmethod
    def from_settings(cls, settings: "Settings") -> "LocaleConfig":
        """Build a config from environment settings (custom needs code)."""
        return cls(
            strategy=LocaleStrategy(settings.LOCALE_STRATEGY),
            allowed_locales=settings.allowed_locale_codes,
            default_locale=settings.DEFAULT_LOCALE,
            domains_locales_map=settings.DOMAINS_LOCALES_MAP,
        )

    def is_allowed(self, locale: str) -> bool:
        return locale in self.allowed_locales


def normalize_host(host: str) -> str:
    """Lower-case a host and drop any port and trailing dot.

    Handles:
    - "Example.COM" -> "example.com"
    - "example.com:8000" -> "example.com"
    - "example.com." -> "example.com"
    """
    host = host.strip().lower()
    if host.startswith("["):
        # IPv6 literal, keep the address, drop the port
        return host.split("]", 1)[0] + "]"
    return host.split(":", 1)[0].rstrip(".")

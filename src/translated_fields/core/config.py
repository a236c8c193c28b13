from functools import lru_cache
from typing import Annotated, Any, Literal

from pydantic import BeforeValidator, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_locales(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    if isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    API_V1_STR: str = "/v1"
    PROJECT_NAME: str = "Translated Fields"
    DEBUG: bool = False

    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    # Locale resolution
    DEFAULT_LOCALE: str = "en"
    FALLBACK_LOCALE: str | None = None
    ALLOWED_LOCALES: Annotated[list[str] | str, BeforeValidator(parse_locales)] = [
        "en"
    ]
    LOCALE_STRATEGY: Literal["from_path", "from_subdomain", "from_domain"] = (
        "from_path"
    )
    DOMAINS_LOCALES_MAP: dict[str, str] = {}

    # Translation engine
    MISSING_TRANSLATION_MODE: Literal["ignore", "log", "raise"] = "ignore"
    TRANSLATED_FIELD_PREFIX: str = "translated_"

    @field_validator("DEFAULT_LOCALE", "TRANSLATED_FIELD_PREFIX", mode="after")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def allowed_locale_codes(self) -> frozenset[str]:
        """Return ALLOWED_LOCALES as a set, whatever form it was given in."""
        if isinstance(self.ALLOWED_LOCALES, str):
            return frozenset({self.ALLOWED_LOCALES}) if self.ALLOWED_LOCALES else frozenset()
        return frozenset(self.ALLOWED_LOCALES)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def effective_fallback_locale(self) -> str:
        """Fallback used by the translation engine when none is passed."""
        return self.FALLBACK_LOCALE or self.DEFAULT_LOCALE


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

from typing import Annotated, Any

from fastapi import Depends, Request

from translated_fields.core.config import Settings, get_settings
from translated_fields.i18n.context import LOCALE_STATE_KEY, get_default_locale
from translated_fields.translations.engine import translate
from translated_fields.translations.handlers import (
    MissingTranslationHandler,
    handler_for_mode,
)
from translated_fields.translations.registry import TranslationRegistry, registry

SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_request_locale(request: Request) -> str:
    """Locale resolved by LocaleMiddleware, or the ambient default."""
    locale = getattr(request.state, LOCALE_STATE_KEY, None)
    if isinstance(locale, str) and locale:
        return locale
    return get_default_locale()


LocaleDep = Annotated[str, Depends(get_request_locale)]


class RequestTranslator:
    """translate() bound to one request's locale and the configured policy.

    Example:
        @router.get("/posts/{post_id}")
        def read_post(post_id: int, translator: TranslatorDep) -> PostPublic:
            return translator(load_post(post_id))
    """

    def __init__(
        self,
        locale: str,
        fallback_locale: str,
        on_missing_translation: MissingTranslationHandler,
        registry: TranslationRegistry = registry,
    ) -> None:
        self.locale = locale
        self.fallback_locale = fallback_locale
        self.on_missing_translation = on_missing_translation
        self.registry = registry

    def __call__(self, value: Any) -> Any:
        return translate(
            value,
            self.locale,
            fallback_locale=self.fallback_locale,
            on_missing_translation=self.on_missing_translation,
            registry=self.registry,
        )


def get_translator(locale: LocaleDep, settings: SettingsDep) -> RequestTranslator:
    return RequestTranslator(
        locale,
        settings.effective_fallback_locale,
        handler_for_mode(settings.MISSING_TRANSLATION_MODE),
    )


TranslatorDep = Annotated[RequestTranslator, Depends(get_translator)]

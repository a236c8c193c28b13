from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel

from translated_fields.api.deps import LocaleDep, SettingsDep

router = APIRouter(prefix="/locale", tags=["locale"])


class LocalePublic(BaseModel):
    locale: str
    fallback_locale: str
    default_locale: str
    allowed_locales: list[str]
    strategy: str


@router.get("/", response_model=LocalePublic)
def read_locale(request: Request, locale: LocaleDep, settings: SettingsDep) -> Any:
    """Report the locale resolved for this request.

    Uses the LocaleConfig the application was created with, falling back to
    settings when the app carries none.
    """
    config = getattr(request.app.state, "locale_config", None)
    if config is not None:
        default_locale = config.default_locale
        allowed = config.allowed_locales
        strategy = config.strategy.value
    else:
        default_locale = settings.DEFAULT_LOCALE
        allowed = settings.allowed_locale_codes
        strategy = settings.LOCALE_STRATEGY

    return LocalePublic(
        locale=locale,
        fallback_locale=settings.effective_fallback_locale,
        default_locale=default_locale,
        allowed_locales=sorted(allowed),
        strategy=strategy,
    )

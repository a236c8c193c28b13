"""FastAPI application entry point."""

from contextlib import asynccontextmanager
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from structlog import contextvars

from translated_fields.api.main import api_router
from translated_fields.core.config import settings
from translated_fields.core.exceptions import AppException
from translated_fields.core.logging import get_logger, setup_logging
from translated_fields.i18n import (
    LocaleConfig,
    LocaleMiddleware,
    add_locale_to_log,
    get_default_locale,
    init_messages,
    translate_message,
)

setup_logging(extra_processors=[add_locale_to_log])
logger = get_logger(__name__)


def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate unique operation IDs for OpenAPI schema.

    Format: {tag}-{route_name}
    """
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    init_messages()

    config: LocaleConfig = app.state.locale_config
    logger.info(
        "application_startup",
        environment=settings.ENVIRONMENT,
        debug=settings.DEBUG,
        locale_strategy=config.strategy.value,
        default_locale=config.default_locale,
        allowed_locales=sorted(config.allowed_locales),
        missing_translation_mode=settings.MISSING_TRANSLATION_MODE,
    )

    yield

    logger.info("application_shutdown")


def create_app(locale_config: LocaleConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        locale_config: How to resolve request locales. Defaults to the
            environment settings; pass one to use the custom strategy.
    """
    config = locale_config or LocaleConfig.from_settings(settings)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        docs_url=f"{settings.API_V1_STR}/docs",
        redoc_url=f"{settings.API_V1_STR}/redoc",
        lifespan=lifespan,
        generate_unique_id_function=custom_generate_unique_id,
    )
    app.state.locale_config = config

    @app.exception_handler(AppException)
    async def app_exception_handler(
        request: Request, exc: AppException
    ) -> JSONResponse:
        """Handle all AppException subclasses with consistent JSON format.

        Translates error messages based on the request locale.
        """
        locale = get_default_locale()

        translated_message = exc.message
        if exc.message_key:
            translated_message = translate_message(exc.message_key, locale, **exc.params)

        logger.warning(
            "app_exception",
            error_code=exc.error_code,
            message=exc.message,
            translated_message=translated_message,
            locale=locale,
            status_code=exc.status_code,
            details=exc.details,
            path=str(request.url.path),
        )

        content = {
            "error_code": exc.error_code,
            "message": translated_message,
            "details": exc.details,
        }
        if exc.message_key:
            content["message_key"] = exc.message_key

        return JSONResponse(
            status_code=exc.status_code,
            content=content,
            headers={"Content-Language": locale},
        )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        """Add unique request ID to each request for tracing."""
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        contextvars.clear_contextvars()
        contextvars.bind_contextvars(request_id=request_id)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get("/health", tags=["health"])
    async def root_health():
        """Root health check endpoint."""
        return {"status": "ok", "service": settings.PROJECT_NAME}

    # Added last so it runs as the outermost layer
    app.add_middleware(LocaleMiddleware, config=config)

    return app


app = create_app()

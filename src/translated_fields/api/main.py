from fastapi import APIRouter

from translated_fields.api.routes import locale

api_router = APIRouter()
api_router.include_router(locale.router)

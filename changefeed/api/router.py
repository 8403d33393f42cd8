from fastapi import APIRouter

from changefeed.api import changelog

api_router = APIRouter()

api_router.include_router(changelog.router)

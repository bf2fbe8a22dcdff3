"""HTTP routes, all mounted under ``/api``."""

from fastapi import APIRouter

from cityinfo.api.constants import API_PREFIX
from cityinfo.api.routes import authentication, cities, files, points_of_interest

api_router = APIRouter(prefix=API_PREFIX)
api_router.include_router(authentication.router)
api_router.include_router(cities.router)
api_router.include_router(points_of_interest.router)
api_router.include_router(files.router)

__all__ = ["api_router"]

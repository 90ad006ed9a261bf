# backend/mxwll/api/v1/router.py
from fastapi import APIRouter

from mxwll.domains.satellite.api.satellite_api import router as satellite_router

api_router = APIRouter()

# Register domain API routers
api_router.include_router(satellite_router, prefix="/satellites", tags=["Satellites"])

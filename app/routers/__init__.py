# app/routers/__init__.py 

from fastapi import APIRouter

from . import tariff_router, webhook_router

# REST API router with the v1 prefix
api_router = APIRouter(prefix="/api/v1")

api_router.include_router(tariff_router.router)
api_router.include_router(webhook_router.router)

from fastapi import APIRouter
from app.api.endpoints import bridge, dashboard, tools

api_router = APIRouter()

# Combine all sub-routers into one
api_router.include_router(bridge.router)
api_router.include_router(dashboard.router)
api_router.include_router(tools.router)

"""API sub-routers assembled into a single api_router."""

from fastapi import APIRouter

from jira_helper.api.routers.create import router as create_router
from jira_helper.api.routers.health import router as health_router
from jira_helper.api.routers.search import router as search_router
from jira_helper.api.routers.settings import router as settings_router
from jira_helper.api.routers.verify import router as verify_router

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(settings_router, prefix="/settings", tags=["settings"])
api_router.include_router(search_router, prefix="/search", tags=["search"])
api_router.include_router(create_router, prefix="/create", tags=["create"])
api_router.include_router(verify_router, prefix="/verify", tags=["verify"])

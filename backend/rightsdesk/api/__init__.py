"""
API Package

FastAPI routers for all endpoints.
"""
from rightsdesk.api.territories import router as territories_router
from rightsdesk.api.broadcasters import router as broadcasters_router
from rightsdesk.api.packages import router as packages_router
from rightsdesk.api.rights import router as rights_router
from rightsdesk.api.pricing import router as pricing_router
from rightsdesk.api.health import router as health_router

__all__ = [
    "territories_router",
    "broadcasters_router",
    "packages_router",
    "rights_router",
    "pricing_router",
    "health_router",
]

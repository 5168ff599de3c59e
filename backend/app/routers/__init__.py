"""API Routers for BinDay Operations."""

from app.routers.auth import router as auth_router
from app.routers.clients import router as clients_router
from app.routers.jobs import router as jobs_router
from app.routers.logs import router as logs_router
from app.routers.portal import admin_router as portal_tokens_router
from app.routers.portal import router as portal_router
from app.routers.proof_preferences import router as proof_preferences_router
from app.routers.property_requests import router as property_requests_router
from app.routers.route import router as route_router

__all__ = [
    "auth_router",
    "clients_router",
    "jobs_router",
    "logs_router",
    "portal_tokens_router",
    "portal_router",
    "proof_preferences_router",
    "property_requests_router",
    "route_router",
]

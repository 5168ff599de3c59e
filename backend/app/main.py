"""BinDay Operations - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import get_settings
from app.core.env_validation import validate_environment
from app.routers import (
    auth_router,
    clients_router,
    jobs_router,
    logs_router,
    portal_router,
    portal_tokens_router,
    proof_preferences_router,
    property_requests_router,
    route_router,
)

# CRITICAL: Validate environment before proceeding
# This will hard-fail (exit 1) if required configuration is missing
validate_environment()

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"{settings.app_name} starting (operational timezone {settings.operational_timezone})")
    yield


app = FastAPI(
    title=settings.app_name,
    description="Bin put-out and bring-in operations: daily job generation, staff runs with proof photos, client portal and property requests.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report body/query validation failures as 400 with field errors."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": "Please review the form and try again.",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


# CORS - Dynamically configured from ALLOWED_ORIGINS environment variable
# In production, wildcard (*) is blocked by env_validation.py
allowed_origins = [origin.strip() for origin in settings.allowed_origins.split(",")]
logger.info(f"CORS configured with origins: {allowed_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API v1 routers
app.include_router(auth_router, prefix=settings.api_v1_prefix)
app.include_router(clients_router, prefix=settings.api_v1_prefix)
app.include_router(jobs_router, prefix=settings.api_v1_prefix)
app.include_router(logs_router, prefix=settings.api_v1_prefix)
app.include_router(proof_preferences_router, prefix=settings.api_v1_prefix)
app.include_router(property_requests_router, prefix=settings.api_v1_prefix)
app.include_router(portal_tokens_router, prefix=settings.api_v1_prefix)
app.include_router(portal_router, prefix=settings.api_v1_prefix)  # Token-scoped client views
app.include_router(route_router, prefix=settings.api_v1_prefix)


@app.get("/health")
@app.get(f"{settings.api_v1_prefix}/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs" if settings.debug else "Disabled in production",
    }

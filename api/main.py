"""
SafePath Routing API - FastAPI Main Application

A RESTful API for planning routes that steer around community-reported
safety hazards.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
import uvicorn

from api.routes.routing import router as routing_router
from api.routes.reports import router as reports_router
from api.services.routing_service import routing_service
from safe_path_routing.exceptions import (
    SafePathError,
    InvalidInputError,
    RouteNotFoundError,
    UpstreamUnavailableError
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    InvalidInputError: 400,
    RouteNotFoundError: 404,
    UpstreamUnavailableError: 502,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle - startup and shutdown events.
    """
    # Startup
    logger.info("Starting SafePath Routing API...")

    health = routing_service.get_health_status()
    if health.status == "healthy":
        logger.info(f"✓ Routing service ready (incident store: {health.incident_store})")
    else:
        logger.warning("⚠ Routing service running in degraded mode - "
                       f"incident store: {health.incident_store}, "
                       f"path provider configured: {health.path_provider_configured}")

    yield

    # Shutdown
    logger.info("Shutting down SafePath Routing API...")


# Create FastAPI application
app = FastAPI(
    title="SafePath Routing API",
    description="""
    **Plan routes that take community safety reports into account**

    Incident reports (unlit streets, crime hotspots, police presence, ...)
    are turned into buffer zones. When the direct path between two points
    crosses a hazard zone, a detour waypoint is inserted before the path is
    requested from the routing provider. Every returned route is scored for
    risk.

    ## Features

    - **Safe Routing**: Single-waypoint detours around hazard buffer zones
    - **Risk Analysis**: 0-100 risk score, risk level, safety notes and dangerous areas
    - **Profiles**: walking, driving or cycling
    - **GeoJSON Buffer Zones**: Hazard zones ready for map overlays

    ## Quick Start

    1. Check service health: `GET /api/routing/health`
    2. Calculate a route: `POST /api/routing/calculate`
    """,
    version="1.0.0",
    license_info={
        "name": "MIT License",
        "url": "https://opensource.org/licenses/MIT",
    },
    lifespan=lifespan
)

# Add CORS middleware for web applications
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Custom exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle request validation errors with detailed information.
    """
    logger.warning(f"Validation error for {request.url}: {exc}")
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": InvalidInputError.kind,
            "message": "Request validation failed",
            "details": jsonable_encoder(exc.errors())
        }
    )


@app.exception_handler(SafePathError)
async def routing_exception_handler(request: Request, exc: SafePathError):
    """
    Map routing failures to HTTP status codes.
    """
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    if status_code >= 500:
        logger.error(f"Routing failure for {request.url}: {exc}")
    else:
        logger.warning(f"Routing request rejected for {request.url}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": exc.kind,
            "message": exc.message,
            "details": None
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """
    Handle unexpected errors gracefully.
    """
    logger.error(f"Unexpected error for {request.url}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "internal_server_error",
            "message": "An unexpected error occurred",
            "details": None
        }
    )


# Include routers
app.include_router(routing_router)
app.include_router(reports_router)


@app.get("/", tags=["general"])
async def root():
    """
    API root endpoint with basic information.
    """
    return {
        "api": "SafePath Routing API",
        "version": "1.0.0",
        "status": "operational",
        "documentation": "/docs",
        "health_check": "/api/routing/health"
    }


@app.get("/health", tags=["general"])
async def api_health():
    """
    Simple health check endpoint.
    """
    try:
        service_health = routing_service.get_health_status()
        return {
            "api_status": "healthy",
            "service_status": service_health.status,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "api_status": "unhealthy",
                "error": str(e),
                "timestamp": datetime.now(timezone.utc).isoformat()
            }
        )


# Development server configuration
if __name__ == "__main__":
    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Enable auto-reload for development
        log_level="info"
    )

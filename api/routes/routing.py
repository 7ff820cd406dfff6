"""
FastAPI routes for safety-aware routing endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError
import logging

from api.schemas.routing import (
    RouteRequest,
    RouteResponse,
    HealthResponse,
    LocationRequest
)
from api.services.routing_service import SafeRoutingService, get_routing_service
from safe_path_routing.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/api/routing", tags=["routing"])


@router.get("/health", response_model=HealthResponse, summary="Health Check")
def health_check(service: SafeRoutingService = Depends(get_routing_service)):
    """
    Check the health status of the routing service.

    Returns:
        HealthResponse: Service health information
    """
    try:
        return service.get_health_status()
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Health check failed"
        )


@router.post("/calculate", response_model=RouteResponse, summary="Calculate Route")
def calculate_route(request: RouteRequest, service: SafeRoutingService = Depends(get_routing_service)):
    """
    Calculate a route between two locations.

    With `useSafeRouting` enabled, a detour waypoint is inserted when the
    direct path crosses a hazard buffer zone. The returned path is always
    scored against nearby incident reports.

    Args:
        request: RouteRequest containing origin/destination and preferences

    Returns:
        RouteResponse: Route geometry, instructions and safety analysis

    Example:
        ```json
        {
            "origin": {"lat": -37.8136, "lng": 144.9631},
            "destination": {"lat": -37.8150, "lng": 144.9650},
            "useSafeRouting": true,
            "profile": "walking"
        }
        ```
    """
    logger.info(f"Route calculation request ({request.profile}, safe={request.use_safe_routing}) from "
                f"({request.origin.lat}, {request.origin.lng}) to "
                f"({request.destination.lat}, {request.destination.lng})")

    return service.calculate_route(request)


@router.post("/safe", response_model=RouteResponse, summary="Calculate Safe Route")
def calculate_safe_route(origin: LocationRequest, destination: LocationRequest,
                         profile: str = "walking",
                         service: SafeRoutingService = Depends(get_routing_service)):
    """
    Calculate a route with hazard avoidance enabled.

    Args:
        origin: Starting location
        destination: Destination location
        profile: Travel profile

    Returns:
        RouteResponse: Safe route with its safety analysis
    """
    try:
        request = RouteRequest(
            origin=origin,
            destination=destination,
            use_safe_routing=True,
            profile=profile
        )
    except ValidationError as e:
        raise InvalidInputError(f"Invalid route request: {e.errors()[0]['msg']}")
    return calculate_route(request, service)


@router.get("/", summary="API Information")
def get_api_info():
    """
    Get information about the routing API.

    Returns:
        dict: API information and available endpoints
    """
    return {
        "api": "SafePath Routing API",
        "version": "1.0.0",
        "description": "Plan routes that steer around community-reported hazards",
        "endpoints": {
            "POST /api/routing/calculate": "Calculate a route, optionally avoiding hazards",
            "POST /api/routing/safe": "Calculate a route with hazard avoidance enabled",
            "GET /api/routing/health": "Check service health status",
            "GET /api/reports": "Incident reports inside a bounding box",
            "GET /api/reports/buffer-zones": "Hazard buffer zones inside a bounding box (GeoJSON)",
            "GET /api/routing/": "This information endpoint"
        },
        "profiles": ["walking", "driving", "cycling"]
    }

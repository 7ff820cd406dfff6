"""
Service layer for the safe routing API.
"""

import logging
from typing import List, Optional

import geojson

from safe_path_routing.algorithms.buffer_zones import build_zones, zones_to_geojson
from safe_path_routing.config import RoutingConfig
from safe_path_routing.data.incident_store import (
    IncidentStore,
    InMemoryIncidentStore,
    GeoJSONIncidentStore,
    SupabaseIncidentStore
)
from safe_path_routing.data.incidents import IncidentReport
from safe_path_routing.exceptions import InvalidInputError
from safe_path_routing.providers.path_provider import PathProvider, MapboxPathProvider
from safe_path_routing.route_orchestrator import RouteOrchestrator, RoutePlan, JourneyPoint
from api.schemas.routing import (
    RouteRequest,
    RouteResponse,
    RouteModel,
    RouteMetadata,
    SafetyAnalysisModel,
    HealthResponse
)

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


class SafeRoutingService:
    """
    Service class that wires the routing pipeline to its external
    collaborators and converts results to API models.
    """

    def __init__(self, config: Optional[RoutingConfig] = None,
                 incident_store: Optional[IncidentStore] = None,
                 path_provider: Optional[PathProvider] = None):
        """Initialize the routing service."""
        self.config_error: Optional[str] = None
        self.config = config or self._load_config()
        if incident_store is None:
            incident_store = self._create_incident_store()
        if path_provider is None:
            path_provider = MapboxPathProvider(
                self.config.mapbox_api_key,
                base_url=self.config.mapbox_base_url,
                timeout=self.config.provider_timeout_s
            )
        self.incident_store = incident_store
        self.path_provider = path_provider
        self.orchestrator = RouteOrchestrator(self.incident_store, self.path_provider, self.config)

    def _load_config(self) -> RoutingConfig:
        try:
            return RoutingConfig.from_env()
        except ValueError as e:
            logger.error(f"Invalid environment configuration, using defaults: {e}")
            self.config_error = str(e)
            return RoutingConfig()

    def _create_incident_store(self) -> IncidentStore:
        """Pick the incident store: remote service, then local file, then empty."""
        if self.config.has_incident_service:
            logger.info(f"Using Supabase incident store at {self.config.supabase_url}")
            return SupabaseIncidentStore(
                self.config.supabase_url,
                self.config.supabase_key,
                timeout=self.config.incident_timeout_s
            )

        data_path = self.config.incident_data_path
        if data_path:
            try:
                store = GeoJSONIncidentStore(data_path)
                logger.info(f"Using GeoJSON incident store with {len(store)} reports")
                return store
            except (FileNotFoundError, ValueError) as e:
                logger.error(f"Failed to load incident data from {data_path}: {e}")

        logger.warning("No incident store configured - routes will be returned without safety context")
        return InMemoryIncidentStore()

    @property
    def is_degraded(self) -> bool:
        no_incidents = isinstance(self.incident_store, InMemoryIncidentStore) and len(self.incident_store) == 0
        no_provider = isinstance(self.path_provider, MapboxPathProvider) and not self.path_provider.is_configured
        return no_incidents or no_provider or self.config_error is not None

    def get_health_status(self) -> HealthResponse:
        """Get the health status of the routing service."""
        provider_configured = getattr(self.path_provider, 'is_configured', True)
        return HealthResponse(
            status="degraded" if self.is_degraded else "healthy",
            version=API_VERSION,
            incident_store=self.incident_store.name,
            path_provider_configured=provider_configured,
            config_error=self.config_error
        )

    def calculate_route(self, request: RouteRequest) -> RouteResponse:
        """
        Calculate a route between two points.

        Args:
            request: Route calculation request

        Returns:
            RouteResponse with the route and its safety analysis

        Raises:
            SafePathError: On invalid input, missing route or provider failure
        """
        origin = JourneyPoint(lat=request.origin.lat, lng=request.origin.lng)
        destination = JourneyPoint(lat=request.destination.lat, lng=request.destination.lng)

        plan = self.orchestrator.plan_route(
            origin,
            destination,
            use_safe_routing=request.use_safe_routing,
            profile=request.profile
        )
        return self._convert_to_response(plan)

    def _convert_to_response(self, plan: RoutePlan) -> RouteResponse:
        """Convert a route plan to the API response format."""
        detour_ratio = plan.detour_ratio

        return RouteResponse(
            success=True,
            message=plan.message,
            route=RouteModel(
                coordinates=[[lng, lat] for lng, lat in plan.coordinates],
                distance_m=round(plan.distance_m, 1),
                duration_s=round(plan.duration_s, 0),
                instructions=plan.instructions,
                safety_analysis=SafetyAnalysisModel.model_validate(plan.safety_analysis.to_dict())
            ),
            waypoints=[[wp.lng, wp.lat] for wp in plan.waypoints],
            waypoints_used=plan.waypoints_used,
            metadata=RouteMetadata(
                profile=plan.profile,
                used_safe_routing=plan.used_safe_routing,
                waypoints_generated=plan.waypoints_used,
                detour_ratio=round(detour_ratio, 3) if detour_ratio is not None else None
            )
        )

    def get_reports(self, sw_lat: float, sw_lng: float,
                    ne_lat: float, ne_lng: float) -> List[IncidentReport]:
        """
        Reports inside the box, straight from the incident store.

        Raises:
            InvalidInputError: If the box is inverted
            UpstreamUnavailableError: If the incident store fails
        """
        if sw_lat > ne_lat or sw_lng > ne_lng:
            raise InvalidInputError("South-west corner must be below and left of the north-east corner")
        return self.incident_store.query_in_bounds(sw_lat, sw_lng, ne_lat, ne_lng)

    def get_buffer_zones(self, sw_lat: float, sw_lng: float,
                         ne_lat: float, ne_lng: float) -> geojson.FeatureCollection:
        """Buffer zones of the reports inside the box as GeoJSON polygons."""
        reports = self.get_reports(sw_lat, sw_lng, ne_lat, ne_lng)
        return zones_to_geojson(build_zones(reports))


# Global service instance
routing_service = SafeRoutingService()


def get_routing_service() -> SafeRoutingService:
    """FastAPI dependency returning the shared service instance."""
    return routing_service

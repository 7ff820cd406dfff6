"""
Safety-aware route planning pipeline.

One call runs, in order: search bounds -> incident fetch -> buffer zones ->
waypoint plan -> path provider request -> scoring of the returned path.
Nothing is kept between calls.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional

from .algorithms.buffer_zones import build_zones
from .algorithms.risk_scoring import RiskScorer, SafetyAnalysis, fallback_analysis, unavailable_analysis
from .algorithms.waypoint_planner import Waypoint, WaypointPlanner
from .config.routing_config import RoutingConfig, SUPPORTED_PROFILES
from .data.distance_utils import BoundingBox, Coordinate, bounding_box, haversine_distance_km, search_bounds
from .data.incident_store import IncidentStore
from .data.incidents import IncidentReport
from .exceptions import InvalidInputError, UpstreamUnavailableError
from .providers.path_provider import PathProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JourneyPoint:
    lat: float
    lng: float

    @property
    def coordinate(self) -> Coordinate:
        return (self.lng, self.lat)


@dataclass
class RoutePlan:
    """Result of a route request."""

    coordinates: List[Coordinate]
    distance_m: float
    duration_s: float
    instructions: List[str]
    safety_analysis: SafetyAnalysis
    waypoints: List[Waypoint] = field(default_factory=list)
    profile: str = 'walking'
    used_safe_routing: bool = False
    straight_line_m: float = 0.0

    @property
    def waypoints_used(self) -> int:
        return len(self.waypoints)

    @property
    def detour_ratio(self) -> Optional[float]:
        """Returned path length relative to the straight-line distance."""
        if self.straight_line_m <= 0:
            return None
        return self.distance_m / self.straight_line_m

    @property
    def message(self) -> str:
        if not self.used_safe_routing:
            return "Route calculated successfully"
        if self.waypoints:
            plural = "" if self.waypoints_used == 1 else "s"
            return f"Safe route found with {self.waypoints_used} waypoint{plural}"
        return "Direct route is clear of reported hazards"


def _validate_point(point: Optional[JourneyPoint], label: str) -> None:
    if point is None:
        raise InvalidInputError(f"Missing {label} coordinates")
    try:
        lat = float(point.lat)
        lng = float(point.lng)
    except (TypeError, ValueError, AttributeError):
        raise InvalidInputError(f"Invalid {label} coordinates")
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise InvalidInputError(f"Invalid {label} coordinates")
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        raise InvalidInputError(f"{label.capitalize()} coordinates out of range")


class RouteOrchestrator:
    """
    Plans routes that steer around reported hazards.

    The incident store and path provider are the only external collaborators;
    both are injected so the pipeline can run against fakes or local data.
    """

    def __init__(self, incident_store: IncidentStore, path_provider: PathProvider,
                 config: Optional[RoutingConfig] = None):
        self.config = config or RoutingConfig()
        self.config.validate()

        self.incident_store = incident_store
        self.path_provider = path_provider
        self.scorer = RiskScorer(self.config.proximity_threshold)
        self.planner = WaypointPlanner(self.config.safety_margin)

    def plan_route(self, origin: JourneyPoint, destination: JourneyPoint,
                   use_safe_routing: bool = False, profile: Optional[str] = None) -> RoutePlan:
        """
        Plan a route between two points.

        Args:
            origin: Trip start
            destination: Trip end
            use_safe_routing: Whether to insert avoidance waypoints
            profile: 'walking', 'driving' or 'cycling'

        Returns:
            RoutePlan with the provider's path and its safety analysis

        Raises:
            InvalidInputError: If the points or profile are malformed
            RouteNotFoundError: If the provider found no path
            UpstreamUnavailableError: If the provider failed
        """
        profile = profile or self.config.default_profile
        _validate_point(origin, "origin")
        _validate_point(destination, "destination")
        if profile not in SUPPORTED_PROFILES:
            raise InvalidInputError(f"Unsupported profile '{profile}'")

        start = origin.coordinate
        end = destination.coordinate

        waypoints: List[Waypoint] = []
        if use_safe_routing:
            waypoints = self._plan_waypoints(start, end)

        coordinates = [start] + [wp.coordinate for wp in sorted(waypoints, key=lambda wp: wp.order)] + [end]
        path = self.path_provider.route(coordinates, profile)
        logger.info(f"Path provider returned {len(path.coordinates)} points, {path.distance_m:.0f}m")

        safety_analysis = self.analyze_route_safety(path.coordinates)

        return RoutePlan(
            coordinates=path.coordinates,
            distance_m=path.distance_m,
            duration_s=path.duration_s,
            instructions=path.instructions,
            safety_analysis=safety_analysis,
            waypoints=waypoints,
            profile=profile,
            used_safe_routing=use_safe_routing,
            straight_line_m=haversine_distance_km(origin.lat, origin.lng,
                                                  destination.lat, destination.lng) * 1000,
        )

    def _plan_waypoints(self, start: Coordinate, end: Coordinate) -> List[Waypoint]:
        bounds = search_bounds(start, end, self.config.search_buffer_factor, self.config.search_buffer)
        incidents = self.fetch_incidents(bounds)
        zones = build_zones(incidents)
        logger.info(f"Safe routing: {len(incidents)} reports, {len(zones)} buffer zones in search area")
        return self.planner.plan(start, end, zones)

    def fetch_incidents(self, bounds: BoundingBox) -> List[IncidentReport]:
        """
        Query the incident store, degrading to no incidents on failure.

        A route without safety context is still returned to the user.
        """
        return self._query_incidents(bounds) or []

    def _query_incidents(self, bounds: BoundingBox) -> Optional[List[IncidentReport]]:
        # None means the store could not answer, as opposed to an empty area
        try:
            return self.incident_store.query_box(bounds)
        except UpstreamUnavailableError as e:
            logger.warning(f"Incident store unavailable, continuing without safety data: {e}")
        except Exception as e:
            logger.warning(f"Incident store query failed, continuing without safety data: {e}")
        return None

    def analyze_route_safety(self, route: List[Coordinate]) -> SafetyAnalysis:
        """Score a returned path against incidents within the scoring buffer."""
        threshold = self.config.proximity_threshold
        try:
            bounds = bounding_box(route).expanded(self.config.scoring_query_buffer)
            incidents = self._query_incidents(bounds)
            if incidents is None:
                return unavailable_analysis(threshold)
            return self.scorer.score(route, incidents)
        except Exception as e:
            logger.error(f"Route safety analysis failed: {e}")
            return fallback_analysis(threshold)

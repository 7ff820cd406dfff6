"""
Single-waypoint detour planning around buffer zones.

When the straight origin-destination segment cuts through one or more buffer
zones, the planner offsets the segment midpoint perpendicular to the travel
direction, far enough to clear the largest conflicting zone, on whichever
side leaves the most room from the zone centers. The path provider is then
asked to route through that point.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Sequence

from .buffer_zones import BufferZone
from ..data.distance_utils import (
    Coordinate,
    distance_point_to_segment,
    haversine_distance_km,
    km_to_degrees
)

logger = logging.getLogger(__name__)

DEFAULT_SAFETY_MARGIN = 0.002  # degrees, ~200m


@dataclass(frozen=True)
class Waypoint:
    """Intermediate coordinate inserted between origin and destination."""

    lng: float
    lat: float
    order: int = 0

    @property
    def coordinate(self) -> Coordinate:
        return (self.lng, self.lat)


def find_conflicting_zones(origin: Coordinate, destination: Coordinate,
                           zones: Sequence[BufferZone]) -> List[BufferZone]:
    """Zones whose center lies within their own radius of the direct segment."""
    return [
        zone for zone in zones
        if distance_point_to_segment(zone.center, origin, destination) < km_to_degrees(zone.radius_km)
    ]


def _min_clearance_km(candidate: Coordinate, zones: Sequence[BufferZone]) -> float:
    return min(
        haversine_distance_km(candidate[1], candidate[0], zone.center_lat, zone.center_lng)
        for zone in zones
    )


class WaypointPlanner:
    """Plans at most one avoidance waypoint for a trip."""

    def __init__(self, safety_margin: float = DEFAULT_SAFETY_MARGIN):
        self.safety_margin = safety_margin

    def plan(self, origin: Coordinate, destination: Coordinate,
             zones: Sequence[BufferZone]) -> List[Waypoint]:
        """
        Plan detour waypoints for a trip.

        Args:
            origin: ``(lng, lat)`` of the trip start
            destination: ``(lng, lat)`` of the trip end
            zones: Buffer zones in the area

        Returns:
            An empty list when the direct path is clear, otherwise exactly one
            waypoint offset from the segment midpoint
        """
        if not zones:
            return []

        conflicts = find_conflicting_zones(origin, destination, zones)
        if not conflicts:
            logger.debug("Direct path clear of all buffer zones")
            return []

        dx = destination[0] - origin[0]
        dy = destination[1] - origin[1]
        length = math.hypot(dx, dy)
        if length == 0:
            # No travel direction to offset from
            logger.warning("Origin and destination coincide, skipping detour planning")
            return []

        mid_lng = (origin[0] + destination[0]) / 2
        mid_lat = (origin[1] + destination[1]) / 2

        # Unit vector rotated 90 degrees counter-clockwise from the travel direction
        perp_lng = -dy / length
        perp_lat = dx / length

        worst_radius = max(km_to_degrees(zone.radius_km) for zone in conflicts)
        offset = worst_radius + self.safety_margin

        left = (mid_lng + perp_lng * offset, mid_lat + perp_lat * offset)
        right = (mid_lng - perp_lng * offset, mid_lat - perp_lat * offset)

        left_clearance = _min_clearance_km(left, conflicts)
        right_clearance = _min_clearance_km(right, conflicts)
        chosen = left if left_clearance >= right_clearance else right

        logger.info(f"Direct path crosses {len(conflicts)} buffer zone(s); "
                    f"detouring via ({chosen[1]:.6f}, {chosen[0]:.6f}), "
                    f"clearance {max(left_clearance, right_clearance):.3f} km")

        return [Waypoint(lng=chosen[0], lat=chosen[1], order=0)]

"""
Distance and bounding-box utilities for route geometry.

Points are ``(lng, lat)`` pairs treated as planar ``(x, y)`` unless a function
says otherwise. At the sub-kilometre scales the router works at, the planar
error is negligible for relative comparisons.
"""

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from shapely.geometry import LineString, MultiPoint, Point, box

Coordinate = Tuple[float, float]  # (lng, lat)

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE = 111.32


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned geographic bounds."""

    north: float
    south: float
    east: float
    west: float

    def expanded(self, buffer: float) -> 'BoundingBox':
        """Return a copy grown by ``buffer`` degrees on every side."""
        return BoundingBox(
            north=self.north + buffer,
            south=self.south - buffer,
            east=self.east + buffer,
            west=self.west - buffer,
        )

    def contains(self, lat: float, lng: float) -> bool:
        # covers() keeps points lying exactly on the edge
        return box(self.west, self.south, self.east, self.north).covers(Point(lng, lat))

    def as_query(self) -> Tuple[float, float, float, float]:
        """Return ``(sw_lat, sw_lng, ne_lat, ne_lng)`` for incident store queries."""
        return self.south, self.west, self.north, self.east


def distance_point_to_segment(point: Coordinate, segment_start: Coordinate,
                              segment_end: Coordinate) -> float:
    """
    Planar distance from a point to a line segment.

    Projects the point onto the segment, clamps the projection to the segment
    ends and returns the Euclidean distance to that closest point. A
    degenerate segment (start == end) gives the distance to its single point.
    """
    px, py = point
    x1, y1 = segment_start
    dx = segment_end[0] - x1
    dy = segment_end[1] - y1
    length_sq = dx * dx + dy * dy

    if length_sq == 0:
        return math.hypot(px - x1, py - y1)

    t = ((px - x1) * dx + (py - y1) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    closest_x = x1 + t * dx
    closest_y = y1 + t * dy
    return math.hypot(px - closest_x, py - closest_y)


def haversine_distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Calculate the great circle distance between two points on Earth.

    Args:
        lat1, lng1: First point coordinates
        lat2, lng2: Second point coordinates

    Returns:
        Distance in kilometers
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lng = math.radians(lng2 - lng1)

    a = (math.sin(delta_lat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lng / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def min_distance_to_polyline(point: Coordinate, polyline: Sequence[Coordinate]) -> float:
    """
    Minimum planar distance from a point to any segment of a polyline.

    Returns ``math.inf`` for an empty or single-point polyline so that callers
    treat the point as far away.
    """
    if len(polyline) < 2:
        return math.inf
    return LineString(polyline).distance(Point(point))


def bounding_box(polyline: Sequence[Coordinate]) -> BoundingBox:
    """Get the min/max latitude and longitude of a polyline."""
    if not polyline:
        raise ValueError("Cannot compute the bounding box of an empty polyline")
    west, south, east, north = MultiPoint(list(polyline)).bounds
    return BoundingBox(north=north, south=south, east=east, west=west)


def search_bounds(origin: Coordinate, destination: Coordinate,
                  buffer_factor: float = 0.5, min_buffer: float = 0.01) -> BoundingBox:
    """
    Bounds covering both endpoints with a buffer proportional to the trip.

    The buffer is ``max(lat span, lng span) * buffer_factor + min_buffer`` so
    zones near either endpoint are still captured for short trips.
    """
    lat_span = abs(destination[1] - origin[1])
    lng_span = abs(destination[0] - origin[0])
    buffer = max(lat_span, lng_span) * buffer_factor + min_buffer

    return bounding_box([origin, destination]).expanded(buffer)


def km_to_degrees(km: float) -> float:
    """Convert a kilometre distance to planar degrees."""
    return km / KM_PER_DEGREE

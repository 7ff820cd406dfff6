"""
Circular exclusion zones derived from hazardous incident reports.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

import geojson

from ..data.distance_utils import Coordinate
from ..data.incidents import IncidentReport, buffer_radius

logger = logging.getLogger(__name__)

# Approximate km per degree, used only to draw zone outlines
KM_PER_DEGREE_LNG_AT_EQUATOR = 111.32
KM_PER_DEGREE_LAT = 110.54


@dataclass(frozen=True)
class BufferZone:
    """Exclusion circle around a hazardous report."""

    center_lat: float
    center_lng: float
    radius_km: float
    severity: Optional[str]
    category: str
    report_id: Optional[str] = None

    @property
    def center(self) -> Coordinate:
        return (self.center_lng, self.center_lat)


def build_zones(incidents: Iterable[IncidentReport]) -> List[BufferZone]:
    """
    Map each hazardous incident to a buffer zone.

    Protective and unrecognised categories have radius 0 and produce no zone.
    Nearby incidents are not merged: overlapping zones are kept as-is.
    """
    zones = []
    for incident in incidents:
        radius = buffer_radius(incident.category, incident.severity)
        if radius <= 0:
            continue
        zones.append(BufferZone(
            center_lat=incident.lat,
            center_lng=incident.lng,
            radius_km=radius,
            severity=incident.severity,
            category=incident.category,
            report_id=incident.id,
        ))

    logger.debug(f"Built {len(zones)} buffer zones")
    return zones


def zone_outline(zone: BufferZone, points: int = 32) -> List[List[float]]:
    """Closed ring of ``points`` + 1 ``[lng, lat]`` vertices approximating the zone."""
    lng_scale = KM_PER_DEGREE_LNG_AT_EQUATOR * math.cos(math.radians(zone.center_lat))
    ring = []
    for i in range(points + 1):
        angle = math.radians(i * 360.0 / points)
        dx = zone.radius_km * math.cos(angle)
        dy = zone.radius_km * math.sin(angle)
        ring.append([zone.center_lng + dx / lng_scale, zone.center_lat + dy / KM_PER_DEGREE_LAT])
    # Close the ring exactly despite float drift at 360 degrees
    ring[-1] = ring[0]
    return ring


def zones_to_geojson(zones: Iterable[BufferZone], points: int = 32) -> geojson.FeatureCollection:
    """Convert buffer zones to a GeoJSON FeatureCollection of polygons."""
    features = [
        geojson.Feature(
            geometry=geojson.Polygon([zone_outline(zone, points)]),
            properties={
                "reportId": zone.report_id,
                "severity": zone.severity,
                "category": zone.category,
                "radiusKm": zone.radius_km,
            }
        )
        for zone in zones
    ]
    return geojson.FeatureCollection(features)

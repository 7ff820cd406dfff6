"""
Data model and utilities for safety-aware routing.

This module contains:
- Incident report model and weight tables
- Incident store gateways
- Distance and bounding-box calculations
"""

from .distance_utils import (
    BoundingBox,
    distance_point_to_segment,
    haversine_distance_km,
    min_distance_to_polyline,
    bounding_box,
    search_bounds,
    km_to_degrees
)
from .incidents import (
    IncidentReport,
    IncidentCategory,
    Severity,
    severity_weight,
    buffer_radius,
    is_hazardous,
    is_protective
)
from .incident_store import (
    IncidentStore,
    InMemoryIncidentStore,
    GeoJSONIncidentStore,
    SupabaseIncidentStore,
    load_incident_data
)

__all__ = [
    'BoundingBox',
    'distance_point_to_segment',
    'haversine_distance_km',
    'min_distance_to_polyline',
    'bounding_box',
    'search_bounds',
    'km_to_degrees',
    'IncidentReport',
    'IncidentCategory',
    'Severity',
    'severity_weight',
    'buffer_radius',
    'is_hazardous',
    'is_protective',
    'IncidentStore',
    'InMemoryIncidentStore',
    'GeoJSONIncidentStore',
    'SupabaseIncidentStore',
    'load_incident_data'
]

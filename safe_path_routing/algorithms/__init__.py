"""
Safety algorithms for route planning.

This module contains:
- Buffer zone construction from hazardous reports
- Route risk scoring
- Detour waypoint planning
"""

from .buffer_zones import BufferZone, build_zones, zones_to_geojson
from .risk_scoring import (
    RiskScorer,
    SafetyAnalysis,
    DangerousArea,
    risk_level_for,
    impact_magnitude,
    neutral_analysis,
    unavailable_analysis,
    fallback_analysis
)
from .waypoint_planner import Waypoint, WaypointPlanner, find_conflicting_zones

__all__ = [
    'BufferZone',
    'build_zones',
    'zones_to_geojson',
    'RiskScorer',
    'SafetyAnalysis',
    'DangerousArea',
    'risk_level_for',
    'impact_magnitude',
    'neutral_analysis',
    'unavailable_analysis',
    'fallback_analysis',
    'Waypoint',
    'WaypointPlanner',
    'find_conflicting_zones'
]

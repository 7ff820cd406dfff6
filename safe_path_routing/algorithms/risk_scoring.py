"""
Route risk scoring from nearby incident reports.

Hazardous reports near the route add risk that decays linearly with distance;
protective reports subtract half of their impact. The total is clamped to
0-100 and mapped to a discrete level.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from ..data.distance_utils import KM_PER_DEGREE, Coordinate, min_distance_to_polyline
from ..data.incidents import IncidentReport, is_hazardous, is_protective, severity_weight

logger = logging.getLogger(__name__)

DEFAULT_PROXIMITY_THRESHOLD = 0.005  # degrees, ~500m
MIN_DISTANCE_FACTOR = 0.1
PROTECTIVE_FACTOR = 0.5

MAX_SAFETY_NOTES = 3
MAX_DANGEROUS_AREAS = 5

NEUTRAL_RISK_SCORE = 30.0
FALLBACK_RISK_SCORE = 50.0
NO_DATA_NOTE = "No safety reports found in this area"
FALLBACK_NOTE = "Unable to analyze route safety - using default risk level"
UNAVAILABLE_NOTE = "Safety data unavailable - risk level not verified"


@dataclass(frozen=True)
class DangerousArea:
    lat: float
    lng: float
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {"lat": self.lat, "lng": self.lng, "reason": self.reason}


@dataclass
class SafetyAnalysis:
    """Risk assessment of a single route."""

    risk_score: float
    risk_level: str
    safety_notes: List[str] = field(default_factory=list)
    dangerous_areas: List[DangerousArea] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation with camelCase keys."""
        return {
            "riskScore": self.risk_score,
            "riskLevel": self.risk_level,
            "safetyNotes": list(self.safety_notes),
            "dangerousAreas": [area.to_dict() for area in self.dangerous_areas],
            "metadata": dict(self.metadata),
        }


def risk_level_for(score: float) -> str:
    if score >= 75:
        return "critical"
    if score >= 50:
        return "high"
    if score >= 25:
        return "medium"
    return "low"


def impact_magnitude(severity: str, distance: float,
                     threshold: float = DEFAULT_PROXIMITY_THRESHOLD) -> float:
    """
    Impact of a report at ``distance`` from the route.

    Decays linearly to the threshold, but never below 10% of the severity
    weight while the report is in range.
    """
    return severity_weight(severity) * max(MIN_DISTANCE_FACTOR, 1 - distance / threshold)


def _metadata(threshold: float, in_range: int = 0, dangerous: int = 0, protective: int = 0) -> Dict[str, Any]:
    return {
        "analysisBufferKm": round(threshold * KM_PER_DEGREE, 3),
        "reportsInRange": in_range,
        "dangerousAreasCount": dangerous,
        "safetyFeaturesCount": protective,
    }


def neutral_analysis(threshold: float = DEFAULT_PROXIMITY_THRESHOLD) -> SafetyAnalysis:
    """Result used when there are no reports near the route."""
    return SafetyAnalysis(
        risk_score=NEUTRAL_RISK_SCORE,
        risk_level=risk_level_for(NEUTRAL_RISK_SCORE),
        safety_notes=[NO_DATA_NOTE],
        dangerous_areas=[],
        metadata=_metadata(threshold),
    )


def unavailable_analysis(threshold: float = DEFAULT_PROXIMITY_THRESHOLD) -> SafetyAnalysis:
    """Neutral score for a route whose incident data could not be fetched."""
    return SafetyAnalysis(
        risk_score=NEUTRAL_RISK_SCORE,
        risk_level=risk_level_for(NEUTRAL_RISK_SCORE),
        safety_notes=[UNAVAILABLE_NOTE],
        dangerous_areas=[],
        metadata=_metadata(threshold),
    )


def fallback_analysis(threshold: float = DEFAULT_PROXIMITY_THRESHOLD) -> SafetyAnalysis:
    """Result used when the analysis itself failed."""
    return SafetyAnalysis(
        risk_score=FALLBACK_RISK_SCORE,
        risk_level=risk_level_for(FALLBACK_RISK_SCORE),
        safety_notes=[FALLBACK_NOTE],
        dangerous_areas=[],
        metadata=_metadata(threshold),
    )


class RiskScorer:
    """Scores a route polyline against incident reports around it."""

    def __init__(self, proximity_threshold: float = DEFAULT_PROXIMITY_THRESHOLD):
        if proximity_threshold <= 0:
            raise ValueError("proximity_threshold must be positive")
        self.proximity_threshold = proximity_threshold

    def score(self, route: Sequence[Coordinate],
              incidents: Sequence[IncidentReport]) -> SafetyAnalysis:
        """
        Compute the safety analysis for a route.

        Args:
            route: Ordered ``(lng, lat)`` coordinates
            incidents: Reports in the area around the route

        Returns:
            SafetyAnalysis with score, level, notes and dangerous areas
        """
        threshold = self.proximity_threshold
        risk_score = 0.0
        in_range = 0
        notes = []
        areas = []

        for incident in incidents:
            distance = min_distance_to_polyline(incident.location, route)
            if distance >= threshold:
                continue

            impact = impact_magnitude(incident.severity, distance, threshold)
            if is_hazardous(incident.category):
                risk_score += impact
                areas.append((impact, DangerousArea(
                    lat=incident.lat,
                    lng=incident.lng,
                    reason=f"{incident.readable_category}: {incident.title}"
                )))
            elif is_protective(incident.category):
                risk_score -= impact * PROTECTIVE_FACTOR
                notes.append((impact, f"Safe area: {incident.title}"))
            else:
                continue
            in_range += 1

        if in_range == 0:
            return neutral_analysis(threshold)

        risk_score = max(0.0, min(100.0, risk_score))

        # list.sort is stable, so equal impacts keep their input order
        notes.sort(key=lambda item: item[0], reverse=True)
        areas.sort(key=lambda item: item[0], reverse=True)

        logger.debug(f"Scored route against {in_range} nearby reports: {risk_score:.1f}")

        return SafetyAnalysis(
            risk_score=risk_score,
            risk_level=risk_level_for(risk_score),
            safety_notes=[note for _, note in notes[:MAX_SAFETY_NOTES]],
            dangerous_areas=[area for _, area in areas[:MAX_DANGEROUS_AREAS]],
            metadata=_metadata(threshold, in_range, len(areas), len(notes)),
        )

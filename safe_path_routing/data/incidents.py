"""
Incident report model and the category/severity lookup tables.

All numeric weights derived from a report's category or severity live here so
the scorer and the zone builder read from the same tables.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional


class IncidentCategory(Enum):
    """Known report categories."""
    UNLIT_STREET = "unlit_street"
    DANGEROUS_AREA = "dangerous_area"
    CRIME_HOTSPOT = "crime_hotspot"
    POOR_VISIBILITY = "poor_visibility"
    UNSAFE_INFRASTRUCTURE = "unsafe_infrastructure"
    SUSPICIOUS_ACTIVITY = "suspicious_activity"
    WELL_LIT_SAFE = "well_lit_safe"
    POLICE_PRESENCE = "police_presence"
    BUSY_SAFE_AREA = "busy_safe_area"
    CCTV_MONITORED = "cctv_monitored"
    EMERGENCY_PHONE = "emergency_phone"


class Severity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


HAZARDOUS_CATEGORIES = frozenset(c.value for c in (
    IncidentCategory.UNLIT_STREET,
    IncidentCategory.DANGEROUS_AREA,
    IncidentCategory.CRIME_HOTSPOT,
    IncidentCategory.POOR_VISIBILITY,
    IncidentCategory.UNSAFE_INFRASTRUCTURE,
    IncidentCategory.SUSPICIOUS_ACTIVITY,
))

PROTECTIVE_CATEGORIES = frozenset(c.value for c in (
    IncidentCategory.WELL_LIT_SAFE,
    IncidentCategory.POLICE_PRESENCE,
    IncidentCategory.BUSY_SAFE_AREA,
    IncidentCategory.CCTV_MONITORED,
    IncidentCategory.EMERGENCY_PHONE,
))

SEVERITY_WEIGHTS: Dict[str, int] = {
    Severity.LOW.value: 10,
    Severity.MEDIUM.value: 25,
    Severity.HIGH.value: 40,
    Severity.CRITICAL.value: 60,
}
DEFAULT_SEVERITY_WEIGHT = 25

# Buffer radius in kilometers for hazardous reports
BUFFER_RADII_KM: Dict[str, float] = {
    Severity.LOW.value: 0.10,
    Severity.MEDIUM.value: 0.20,
    Severity.HIGH.value: 0.30,
    Severity.CRITICAL.value: 0.50,
}
DEFAULT_BUFFER_RADIUS_KM = 0.15


def is_hazardous(category: str) -> bool:
    return category in HAZARDOUS_CATEGORIES


def is_protective(category: str) -> bool:
    return category in PROTECTIVE_CATEGORIES


def severity_weight(severity: Optional[str]) -> int:
    """Risk points a report of this severity contributes at zero distance."""
    return SEVERITY_WEIGHTS.get(severity, DEFAULT_SEVERITY_WEIGHT)


def buffer_radius(category: str, severity: Optional[str]) -> float:
    """
    Exclusion radius in kilometers for a report.

    Only hazardous categories get a zone; protective and unrecognised
    categories return 0.
    """
    if not is_hazardous(category):
        return 0.0
    return BUFFER_RADII_KM.get(severity, DEFAULT_BUFFER_RADIUS_KM)


@dataclass(frozen=True)
class IncidentReport:
    """A community-submitted safety observation at a point."""

    id: str
    lat: float
    lng: float
    category: str
    severity: Optional[str] = None
    title: str = ""
    description: Optional[str] = None
    created_at: Optional[str] = None
    verified: bool = False
    flagged: bool = False
    rating_avg: float = 0.0
    rating_count: int = 0

    @property
    def location(self):
        """Report position as an ``(lng, lat)`` coordinate."""
        return (self.lng, self.lat)

    @property
    def readable_category(self) -> str:
        return self.category.replace('_', ' ')

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'IncidentReport':
        """
        Build a report from an incident store row.

        Accepts the ``location_lat``/``location_lng`` column names returned by
        the bounds query as well as plain ``lat``/``lng``.

        Raises:
            ValueError: If the row has no usable location or category
        """
        lat = record.get('location_lat', record.get('lat'))
        lng = record.get('location_lng', record.get('lng'))
        if lat is None or lng is None:
            raise ValueError(f"Incident record {record.get('id')!r} has no location")
        if not record.get('category'):
            raise ValueError(f"Incident record {record.get('id')!r} has no category")

        return cls(
            id=str(record.get('id', '')),
            lat=float(lat),
            lng=float(lng),
            category=record['category'],
            severity=record.get('severity'),
            title=record.get('title') or '',
            description=record.get('description'),
            created_at=record.get('created_at'),
            verified=bool(record.get('verified', False)),
            flagged=bool(record.get('flagged', False)),
            rating_avg=float(record.get('rating_avg') or 0.0),
            rating_count=int(record.get('rating_count') or 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

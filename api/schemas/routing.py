"""
Pydantic schemas for the safe routing API.
"""

from typing import List, Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator

from safe_path_routing.config import SUPPORTED_PROFILES


class LocationRequest(BaseModel):
    """Request model for a single location."""
    lat: float = Field(..., ge=-90, le=90, description="Latitude coordinate")
    lng: float = Field(..., ge=-180, le=180, description="Longitude coordinate")


class RouteRequest(BaseModel):
    """Request model for route calculation."""
    model_config = ConfigDict(populate_by_name=True)

    origin: LocationRequest = Field(..., description="Starting location")
    destination: LocationRequest = Field(..., description="Destination location")
    use_safe_routing: bool = Field(default=False, alias="useSafeRouting",
                                   description="Insert detour waypoints around reported hazards")
    profile: str = Field(default="walking", description="Travel profile: 'walking', 'driving' or 'cycling'")

    @field_validator('profile')
    @classmethod
    def validate_profile(cls, v):
        """Ensure the profile is one the path provider supports."""
        if v not in SUPPORTED_PROFILES:
            raise ValueError(f"profile must be one of {', '.join(SUPPORTED_PROFILES)}")
        return v


class DangerousAreaModel(BaseModel):
    lat: float
    lng: float
    reason: str


class SafetyAnalysisModel(BaseModel):
    """Risk assessment of the returned route."""
    model_config = ConfigDict(populate_by_name=True)

    risk_score: float = Field(..., ge=0.0, le=100.0, alias="riskScore", description="Risk score (100 = most dangerous)")
    risk_level: str = Field(..., alias="riskLevel", description="'low', 'medium', 'high' or 'critical'")
    safety_notes: List[str] = Field(default_factory=list, alias="safetyNotes")
    dangerous_areas: List[DangerousAreaModel] = Field(default_factory=list, alias="dangerousAreas")
    metadata: Dict[str, Any] = Field(default_factory=dict)


class RouteModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    coordinates: List[List[float]] = Field(..., description="Route geometry as [lng, lat] pairs")
    distance_m: float = Field(..., description="Total route distance in meters")
    duration_s: float = Field(..., description="Estimated travel time in seconds")
    instructions: List[str] = Field(default_factory=list, description="Turn-by-turn instructions")
    safety_analysis: Optional[SafetyAnalysisModel] = Field(default=None, alias="safetyAnalysis")


class RouteMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    profile: str
    used_safe_routing: bool = Field(..., alias="usedSafeRouting")
    waypoints_generated: int = Field(..., alias="waypointsGenerated")
    detour_ratio: Optional[float] = Field(default=None, alias="detourRatio",
                                          description="Route distance relative to the straight line")


class RouteResponse(BaseModel):
    """Response model for route calculation."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(..., description="Whether the route calculation was successful")
    message: str = Field(..., description="Status message")
    route: Optional[RouteModel] = Field(default=None, description="Calculated route")
    waypoints: List[List[float]] = Field(default_factory=list, description="Inserted waypoints as [lng, lat] pairs")
    waypoints_used: int = Field(default=0, alias="waypointsUsed")
    metadata: Optional[RouteMetadata] = Field(default=None)


class IncidentReportModel(BaseModel):
    """Incident report as stored."""
    id: str
    location_lat: float
    location_lng: float
    category: str
    severity: Optional[str] = None
    title: str = ""
    description: Optional[str] = None
    created_at: Optional[str] = None
    verified: bool = False
    flagged: bool = False
    rating_avg: float = 0.0
    rating_count: int = 0


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    incident_store: str = Field(..., description="Configured incident store")
    path_provider_configured: bool = Field(..., description="Whether the path provider has credentials")
    config_error: Optional[str] = Field(None, description="Environment configuration problem, if any")


class ErrorResponse(BaseModel):
    """Error response model."""
    success: bool = Field(False, description="Always false for error responses")
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Detailed error message")
    details: Optional[Any] = Field(None, description="Additional error details")

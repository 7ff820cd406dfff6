"""
FastAPI routes for read-only incident report queries.
"""

from typing import List

from fastapi import APIRouter, Depends, Query
import logging

from api.schemas.routing import IncidentReportModel
from api.services.routing_service import SafeRoutingService, get_routing_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("", response_model=List[IncidentReportModel], summary="Reports In Bounds")
def get_reports(sw_lat: float = Query(..., ge=-90, le=90),
                sw_lng: float = Query(..., ge=-180, le=180),
                ne_lat: float = Query(..., ge=-90, le=90),
                ne_lng: float = Query(..., ge=-180, le=180),
                service: SafeRoutingService = Depends(get_routing_service)):
    """
    List incident reports whose location falls inside the bounding box.
    """
    reports = service.get_reports(sw_lat, sw_lng, ne_lat, ne_lng)
    logger.info(f"Returning {len(reports)} reports in bounds")
    return [
        IncidentReportModel(
            id=report.id,
            location_lat=report.lat,
            location_lng=report.lng,
            category=report.category,
            severity=report.severity,
            title=report.title,
            description=report.description,
            created_at=report.created_at,
            verified=report.verified,
            flagged=report.flagged,
            rating_avg=report.rating_avg,
            rating_count=report.rating_count
        )
        for report in reports
    ]


@router.get("/buffer-zones", summary="Buffer Zones In Bounds")
def get_buffer_zones(sw_lat: float = Query(..., ge=-90, le=90),
                     sw_lng: float = Query(..., ge=-180, le=180),
                     ne_lat: float = Query(..., ge=-90, le=90),
                     ne_lng: float = Query(..., ge=-180, le=180),
                     service: SafeRoutingService = Depends(get_routing_service)):
    """
    Hazard buffer zones for the reports inside the bounding box, as a GeoJSON
    FeatureCollection of circle polygons.
    """
    return service.get_buffer_zones(sw_lat, sw_lng, ne_lat, ne_lng)

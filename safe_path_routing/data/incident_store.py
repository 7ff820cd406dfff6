"""
Incident store gateways.

The router only needs one query: every incident whose point lies inside an
axis-aligned box, unfiltered by category or severity. Filtering is done by
the zone builder and the risk scorer.
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

import geojson
import requests
from shapely.geometry import Point, box

from .distance_utils import BoundingBox
from .incidents import IncidentReport
from ..exceptions import UpstreamUnavailableError

logger = logging.getLogger(__name__)


class IncidentStore(ABC):
    """Abstract source of incident reports."""

    name = "base"

    @abstractmethod
    def query_in_bounds(self, sw_lat: float, sw_lng: float,
                        ne_lat: float, ne_lng: float) -> List[IncidentReport]:
        """
        Return all incidents inside the box.

        Raises:
            UpstreamUnavailableError: If the backing service cannot be reached
        """
        pass

    def query_box(self, bounds: BoundingBox) -> List[IncidentReport]:
        return self.query_in_bounds(*bounds.as_query())


class InMemoryIncidentStore(IncidentStore):
    """Incident store over a list held in memory."""

    name = "memory"

    def __init__(self, reports: Optional[Iterable[IncidentReport]] = None):
        self.reports: List[IncidentReport] = list(reports or [])

    def __len__(self) -> int:
        return len(self.reports)

    def query_in_bounds(self, sw_lat: float, sw_lng: float,
                        ne_lat: float, ne_lng: float) -> List[IncidentReport]:
        # covers() keeps points lying exactly on the edge
        area = box(sw_lng, sw_lat, ne_lng, ne_lat)
        return [report for report in self.reports if area.covers(Point(report.lng, report.lat))]


def load_incident_data(data_path: str) -> List[IncidentReport]:
    """
    Load incident reports from a GeoJSON FeatureCollection of points.

    Feature properties carry the report fields (``id``, ``category``,
    ``severity``, ``title``...); the point geometry gives the location.

    Raises:
        FileNotFoundError: If the data file does not exist
        ValueError: If the data format is invalid
    """
    if not os.path.exists(data_path):
        raise FileNotFoundError(f"Incident data file not found: {data_path}")

    logger.info(f"Loading incident data from: {data_path}")

    try:
        with open(data_path, 'r') as f:
            collection = geojson.load(f)
    except ValueError as e:
        raise ValueError(f"Invalid JSON format in incident data file: {e}")

    if 'features' not in collection:
        raise ValueError("Incident data must be in GeoJSON format with 'features' key")

    reports = []
    skipped = 0
    for feature in collection['features']:
        geometry = feature.get('geometry') or {}
        coords = geometry.get('coordinates') or []
        if geometry.get('type') != 'Point' or len(coords) < 2:
            skipped += 1
            continue

        record = dict(feature.get('properties') or {})
        record.setdefault('id', feature.get('id', len(reports)))
        record['lng'], record['lat'] = coords[0], coords[1]
        try:
            reports.append(IncidentReport.from_record(record))
        except ValueError as e:
            logger.debug(f"Skipping incident feature: {e}")
            skipped += 1

    if skipped:
        logger.warning(f"Skipped {skipped} incident features without a usable point or category")
    logger.info(f"Loaded {len(reports)} incident reports")
    return reports


class GeoJSONIncidentStore(InMemoryIncidentStore):
    """Incident store backed by a local GeoJSON file."""

    name = "geojson"

    def __init__(self, data_path: str):
        self.data_path = data_path
        super().__init__(load_incident_data(data_path))


class SupabaseIncidentStore(IncidentStore):
    """
    Incident store that calls the ``get_reports_in_bounds`` database function
    through the Supabase REST endpoint.
    """

    name = "supabase"
    rpc_name = "get_reports_in_bounds"

    def __init__(self, url: str, api_key: str, timeout: float = 5.0,
                 session: Optional[requests.Session] = None):
        if not url or not api_key:
            raise ValueError("Supabase URL and API key are required")
        self.url = url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.url}/rest/v1/rpc/{self.rpc_name}"

    def query_in_bounds(self, sw_lat: float, sw_lng: float,
                        ne_lat: float, ne_lng: float) -> List[IncidentReport]:
        payload = {'sw_lat': sw_lat, 'sw_lng': sw_lng, 'ne_lat': ne_lat, 'ne_lng': ne_lng}
        headers = {
            'apikey': self.api_key,
            'Authorization': f"Bearer {self.api_key}",
            'Content-Type': 'application/json',
        }

        try:
            response = self.session.post(self.endpoint, json=payload, headers=headers,
                                         timeout=self.timeout)
            response.raise_for_status()
            rows = response.json()
        except requests.exceptions.Timeout:
            raise UpstreamUnavailableError(f"Incident store timed out after {self.timeout}s")
        except requests.exceptions.RequestException as e:
            raise UpstreamUnavailableError(f"Incident store request failed: {e}")
        except ValueError as e:
            raise UpstreamUnavailableError(f"Incident store returned invalid JSON: {e}")

        if not isinstance(rows, list):
            raise UpstreamUnavailableError("Incident store returned an unexpected payload")

        reports = []
        for row in rows:
            if not isinstance(row, dict):
                logger.debug(f"Skipping non-object incident row: {row!r}")
                continue
            try:
                reports.append(IncidentReport.from_record(row))
            except (ValueError, TypeError) as e:
                logger.debug(f"Skipping malformed incident row: {e}")

        logger.debug(f"Incident store returned {len(reports)} reports")
        return reports

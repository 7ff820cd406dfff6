"""
Clients for the external turn-by-turn path provider.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import requests

from ..config.routing_config import SUPPORTED_PROFILES
from ..data.distance_utils import Coordinate
from ..exceptions import InvalidInputError, RouteNotFoundError, UpstreamUnavailableError

logger = logging.getLogger(__name__)

NO_ROUTE_CODES = ('NoRoute', 'NoSegment')


@dataclass
class PathResult:
    """Geometry and metrics of a path returned by the provider."""

    coordinates: List[Coordinate]
    distance_m: float
    duration_s: float
    instructions: List[str] = field(default_factory=list)


class PathProvider(ABC):
    """Turns an ordered coordinate list into a routable path."""

    name = "base"

    @abstractmethod
    def route(self, coordinates: Sequence[Coordinate], profile: str = 'walking') -> PathResult:
        """
        Request one path through ``coordinates`` in order.

        Raises:
            RouteNotFoundError: If the provider found no path
            UpstreamUnavailableError: If the provider is unreachable or mis-configured
        """
        pass

    @staticmethod
    def check_request(coordinates: Sequence[Coordinate], profile: str) -> None:
        if len(coordinates) < 2:
            raise InvalidInputError("At least two coordinates are required to request a path")
        if profile not in SUPPORTED_PROFILES:
            raise InvalidInputError(f"Unsupported profile '{profile}', expected one of {', '.join(SUPPORTED_PROFILES)}")


class MapboxPathProvider(PathProvider):
    """Path provider backed by the Mapbox Directions API."""

    name = "mapbox"

    def __init__(self, api_key: Optional[str],
                 base_url: str = 'https://api.mapbox.com/directions/v5/mapbox',
                 timeout: float = 10.0,
                 session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def route(self, coordinates: Sequence[Coordinate], profile: str = 'walking') -> PathResult:
        self.check_request(coordinates, profile)
        if not self.api_key:
            raise UpstreamUnavailableError("Path provider is not configured: MAPBOX_API_KEY is missing")

        coordinates_string = ';'.join(f"{lng},{lat}" for lng, lat in coordinates)
        url = f"{self.base_url}/{profile}/{coordinates_string}"
        params = {
            'access_token': self.api_key,
            'geometries': 'geojson',
            'steps': 'true',
            'overview': 'full',
            'alternatives': 'false',
        }

        logger.info(f"Requesting {profile} path through {len(coordinates)} coordinates")
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout:
            raise UpstreamUnavailableError(f"Path provider timed out after {self.timeout}s")
        except requests.exceptions.RequestException as e:
            raise UpstreamUnavailableError(f"Path provider request failed: {e}")

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.ok:
            # Mapbox reports unroutable coordinates with a 4xx status and a NoRoute/NoSegment code
            if isinstance(data, dict) and data.get('code') in NO_ROUTE_CODES:
                raise RouteNotFoundError(data.get('message') or "No route found between the specified locations")
            logger.error(f"Path provider error: {response.status_code} {response.text[:200]}")
            raise UpstreamUnavailableError(f"Path provider error: {response.status_code} {response.reason}")

        if data is None:
            raise UpstreamUnavailableError("Path provider returned invalid JSON")
        if not isinstance(data, dict):
            raise UpstreamUnavailableError("Path provider returned an unexpected payload")
        if data.get('code') in NO_ROUTE_CODES or not data.get('routes'):
            raise RouteNotFoundError("No route found between the specified locations")

        return self._parse_route(data['routes'][0])

    @staticmethod
    def _parse_route(route: dict) -> PathResult:
        geometry = route.get('geometry') or {}
        coordinates = [(float(c[0]), float(c[1])) for c in geometry.get('coordinates', [])]
        if len(coordinates) < 2:
            raise UpstreamUnavailableError("Path provider returned a route without geometry")

        instructions = [
            step['maneuver']['instruction']
            for leg in route.get('legs') or []
            for step in leg.get('steps') or []
            if (step.get('maneuver') or {}).get('instruction')
        ]

        return PathResult(
            coordinates=coordinates,
            distance_m=float(route.get('distance', 0.0)),
            duration_s=float(route.get('duration', 0.0)),
            instructions=instructions,
        )

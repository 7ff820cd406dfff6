import pytest

from safe_path_routing.data.distance_utils import haversine_distance_km
from safe_path_routing.data.incident_store import IncidentStore, InMemoryIncidentStore
from safe_path_routing.data.incidents import IncidentReport
from safe_path_routing.exceptions import UpstreamUnavailableError
from safe_path_routing.providers.path_provider import PathProvider, PathResult
from safe_path_routing.route_orchestrator import JourneyPoint

# Melbourne CBD walk used throughout the suite
ORIGIN = JourneyPoint(lat=-37.8136, lng=144.9631)
DESTINATION = JourneyPoint(lat=-37.8150, lng=144.9650)
MIDPOINT = ((ORIGIN.lng + DESTINATION.lng) / 2, (ORIGIN.lat + DESTINATION.lat) / 2)
DIRECT_ROUTE = [ORIGIN.coordinate, DESTINATION.coordinate]


def make_report(category, severity="medium", lng=MIDPOINT[0], lat=MIDPOINT[1], title=None, id="r1"):
    return IncidentReport(
        id=id,
        lat=lat,
        lng=lng,
        category=category,
        severity=severity,
        title=title or f"{category} report",
    )


class StraightLinePathProvider(PathProvider):
    """Returns the requested coordinates as the path and records every call."""

    name = "straight-line"

    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def route(self, coordinates, profile='walking'):
        self.check_request(coordinates, profile)
        self.calls.append((list(coordinates), profile))
        if self.error is not None:
            raise self.error

        distance_km = sum(
            haversine_distance_km(a[1], a[0], b[1], b[0])
            for a, b in zip(coordinates, coordinates[1:])
        )
        return PathResult(
            coordinates=list(coordinates),
            distance_m=distance_km * 1000,
            duration_s=distance_km * 1000 / 1.4,
            instructions=["Head southeast", "You have arrived"],
        )


class RecordingIncidentStore(InMemoryIncidentStore):
    """In-memory store that remembers the boxes it was queried with."""

    def __init__(self, reports=None):
        super().__init__(reports)
        self.queries = []

    def query_in_bounds(self, sw_lat, sw_lng, ne_lat, ne_lng):
        self.queries.append((sw_lat, sw_lng, ne_lat, ne_lng))
        return super().query_in_bounds(sw_lat, sw_lng, ne_lat, ne_lng)


class UnavailableIncidentStore(IncidentStore):
    name = "unavailable"

    def __init__(self):
        self.calls = 0

    def query_in_bounds(self, sw_lat, sw_lng, ne_lat, ne_lng):
        self.calls += 1
        raise UpstreamUnavailableError("Incident store timed out after 5.0s")


@pytest.fixture
def path_provider():
    return StraightLinePathProvider()


@pytest.fixture
def empty_store():
    return RecordingIncidentStore()

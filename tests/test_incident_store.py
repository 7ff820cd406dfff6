import geojson
import pytest
import requests

from safe_path_routing.data.incident_store import (
    GeoJSONIncidentStore,
    InMemoryIncidentStore,
    SupabaseIncidentStore,
    load_incident_data
)
from safe_path_routing.data.incidents import IncidentReport
from safe_path_routing.exceptions import UpstreamUnavailableError

from conftest import make_report


class StubResponse:
    def __init__(self, payload=None, status_code=200, json_error=False):
        self.payload = payload
        self.status_code = status_code
        self.json_error = json_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self.json_error:
            raise ValueError("Expecting value")
        return self.payload


class StubSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.requests.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


ROW = {
    "id": "5f0c",
    "location_lat": -37.8143,
    "location_lng": 144.9641,
    "category": "unlit_street",
    "severity": "high",
    "title": "Dark laneway",
    "description": None,
    "created_at": "2025-03-01T21:10:00Z",
    "rating_avg": 4.5,
    "rating_count": 2,
    "verified": True,
    "flagged": False,
}


def test_from_record_reads_store_columns():
    report = IncidentReport.from_record(ROW)
    assert report.location == (144.9641, -37.8143)
    assert report.category == "unlit_street"
    assert report.verified is True
    assert report.rating_count == 2


def test_from_record_requires_location():
    with pytest.raises(ValueError):
        IncidentReport.from_record({"id": "x", "category": "unlit_street"})


def test_in_memory_store_returns_points_inside_box():
    inside = make_report("crime_hotspot", lng=0.5, lat=0.5, id="in")
    edge = make_report("police_presence", lng=1.0, lat=1.0, id="edge")
    outside = make_report("crime_hotspot", lng=1.5, lat=0.5, id="out")
    store = InMemoryIncidentStore([inside, edge, outside])

    found = store.query_in_bounds(0.0, 0.0, 1.0, 1.0)
    assert [r.id for r in found] == ["in", "edge"]


def test_geojson_store_loads_point_features(tmp_path):
    collection = geojson.FeatureCollection([
        geojson.Feature(id="a", geometry=geojson.Point((144.9641, -37.8143)),
                        properties={"category": "crime_hotspot", "severity": "critical", "title": "Hotspot"}),
        geojson.Feature(geometry=geojson.LineString([(0, 0), (1, 1)]),
                        properties={"category": "crime_hotspot"}),
        geojson.Feature(geometry=geojson.Point((144.0, -37.0)), properties={"title": "No category"}),
    ])
    path = tmp_path / "incidents.geojson"
    path.write_text(geojson.dumps(collection))

    store = GeoJSONIncidentStore(str(path))
    assert len(store) == 1
    report = store.reports[0]
    assert report.id == "a"
    assert (report.lat, report.lng) == (-37.8143, 144.9641)


def test_load_incident_data_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_incident_data(str(tmp_path / "missing.geojson"))

    bad = tmp_path / "bad.geojson"
    bad.write_text("{not json")
    with pytest.raises(ValueError):
        load_incident_data(str(bad))

    no_features = tmp_path / "plain.json"
    no_features.write_text('{"type": "Point", "coordinates": [0, 0]}')
    with pytest.raises(ValueError):
        load_incident_data(str(no_features))


def test_supabase_store_posts_bounds_and_parses_rows():
    session = StubSession(StubResponse([ROW, {"id": "broken"}, None, ["not", "a", "row"]]))
    store = SupabaseIncidentStore("https://example.supabase.co/", "service-key", timeout=3.0, session=session)

    reports = store.query_in_bounds(-37.82, 144.95, -37.80, 144.97)

    assert [r.id for r in reports] == ["5f0c"]
    sent = session.requests[0]
    assert sent["url"] == "https://example.supabase.co/rest/v1/rpc/get_reports_in_bounds"
    assert sent["json"] == {"sw_lat": -37.82, "sw_lng": 144.95, "ne_lat": -37.80, "ne_lng": 144.97}
    assert sent["headers"]["apikey"] == "service-key"
    assert sent["timeout"] == 3.0


@pytest.mark.parametrize("session", [
    StubSession(error=requests.exceptions.Timeout()),
    StubSession(error=requests.exceptions.ConnectionError("refused")),
    StubSession(StubResponse({"message": "boom"}, status_code=500)),
    StubSession(StubResponse(json_error=True)),
    StubSession(StubResponse({"unexpected": "object"})),
])
def test_supabase_store_failures_are_upstream_errors(session):
    store = SupabaseIncidentStore("https://example.supabase.co", "key", session=session)
    with pytest.raises(UpstreamUnavailableError):
        store.query_in_bounds(0, 0, 1, 1)


def test_supabase_store_requires_credentials():
    with pytest.raises(ValueError):
        SupabaseIncidentStore("", "key")

import pytest

from safe_path_routing.algorithms.risk_scoring import FALLBACK_NOTE, NO_DATA_NOTE, UNAVAILABLE_NOTE
from safe_path_routing.config import RoutingConfig
from safe_path_routing.data.incident_store import IncidentStore, SupabaseIncidentStore
from safe_path_routing.exceptions import InvalidInputError, RouteNotFoundError, UpstreamUnavailableError
from safe_path_routing.route_orchestrator import JourneyPoint, RouteOrchestrator

from conftest import (
    DESTINATION,
    MIDPOINT,
    ORIGIN,
    RecordingIncidentStore,
    StraightLinePathProvider,
    UnavailableIncidentStore,
    make_report
)


def orchestrator(store, provider, **config):
    return RouteOrchestrator(store, provider, RoutingConfig(**config))


def test_no_incidents_returns_neutral_direct_route(empty_store, path_provider):
    plan = orchestrator(empty_store, path_provider).plan_route(ORIGIN, DESTINATION, use_safe_routing=True)

    assert plan.waypoints_used == 0
    assert plan.safety_analysis.risk_score == 30
    assert plan.safety_analysis.risk_level == "low"
    assert plan.safety_analysis.safety_notes == [NO_DATA_NOTE]
    assert path_provider.calls[0][0] == [ORIGIN.coordinate, DESTINATION.coordinate]
    assert plan.message == "Direct route is clear of reported hazards"


def test_critical_hotspot_on_path_adds_detour(path_provider):
    store = RecordingIncidentStore([make_report("crime_hotspot", "critical", title="Late-night brawls")])
    plan = orchestrator(store, path_provider).plan_route(ORIGIN, DESTINATION, use_safe_routing=True)

    assert plan.waypoints_used == 1
    waypoint = plan.waypoints[0]
    assert waypoint.coordinate != pytest.approx(MIDPOINT)

    requested = path_provider.calls[0][0]
    assert requested == [ORIGIN.coordinate, waypoint.coordinate, DESTINATION.coordinate]
    assert plan.coordinates == requested
    assert plan.message == "Safe route found with 1 waypoint"
    assert plan.detour_ratio > 1


def test_protective_report_never_triggers_detour(path_provider):
    store = RecordingIncidentStore([make_report("well_lit_safe", "low", title="Bright arcade")])
    plan = orchestrator(store, path_provider).plan_route(ORIGIN, DESTINATION, use_safe_routing=True)

    assert plan.waypoints == []
    assert len(path_provider.calls[0][0]) == 2
    assert plan.safety_analysis.safety_notes == ["Safe area: Bright arcade"]
    assert plan.safety_analysis.dangerous_areas == []


def test_incident_store_outage_still_returns_route(path_provider):
    store = UnavailableIncidentStore()
    plan = orchestrator(store, path_provider).plan_route(ORIGIN, DESTINATION, use_safe_routing=True)

    assert plan.coordinates == [ORIGIN.coordinate, DESTINATION.coordinate]
    assert plan.waypoints == []
    assert plan.safety_analysis.risk_score == 30
    assert plan.safety_analysis.safety_notes == [UNAVAILABLE_NOTE]
    # Planning query and scoring query both attempted
    assert store.calls == 2


def test_malformed_store_reply_still_returns_route(path_provider):
    class GarbledStore(IncidentStore):
        def query_in_bounds(self, sw_lat, sw_lng, ne_lat, ne_lng):
            raise AttributeError("'NoneType' object has no attribute 'get'")

    plan = orchestrator(GarbledStore(), path_provider).plan_route(ORIGIN, DESTINATION, use_safe_routing=True)

    assert plan.coordinates == [ORIGIN.coordinate, DESTINATION.coordinate]
    assert plan.waypoints == []
    assert plan.safety_analysis.risk_score == 30
    assert plan.safety_analysis.safety_notes == [UNAVAILABLE_NOTE]


def test_supabase_rows_that_are_not_objects_are_skipped(path_provider):
    class RowsResponse:
        def raise_for_status(self):
            pass

        def json(self):
            return [None, ["row"], 7]

    class RowsSession:
        def __init__(self):
            self.requests = []

        def post(self, url, json=None, headers=None, timeout=None):
            self.requests.append(json)
            return RowsResponse()

    session = RowsSession()
    store = SupabaseIncidentStore("https://example.supabase.co", "key", session=session)
    plan = orchestrator(store, path_provider).plan_route(ORIGIN, DESTINATION, use_safe_routing=True)

    assert plan.waypoints == []
    assert plan.safety_analysis.safety_notes == [NO_DATA_NOTE]
    assert len(session.requests) == 2


def test_direct_routing_skips_planning_but_still_scores(path_provider):
    store = RecordingIncidentStore([make_report("crime_hotspot", "critical")])
    plan = orchestrator(store, path_provider).plan_route(ORIGIN, DESTINATION, use_safe_routing=False)

    assert plan.waypoints == []
    assert len(path_provider.calls[0][0]) == 2
    assert len(store.queries) == 1
    assert plan.safety_analysis.risk_score == pytest.approx(60)
    assert plan.safety_analysis.risk_level == "high"
    assert plan.message == "Route calculated successfully"


def test_scoring_query_covers_returned_path_with_buffer(path_provider):
    store = RecordingIncidentStore()
    orchestrator(store, path_provider).plan_route(ORIGIN, DESTINATION)

    sw_lat, sw_lng, ne_lat, ne_lng = store.queries[-1]
    assert sw_lat == pytest.approx(DESTINATION.lat - 0.01)
    assert sw_lng == pytest.approx(ORIGIN.lng - 0.01)
    assert ne_lat == pytest.approx(ORIGIN.lat + 0.01)
    assert ne_lng == pytest.approx(DESTINATION.lng + 0.01)


def test_planning_query_uses_proportional_search_box(path_provider):
    store = RecordingIncidentStore()
    orchestrator(store, path_provider).plan_route(ORIGIN, DESTINATION, use_safe_routing=True)

    sw_lat, sw_lng, ne_lat, ne_lng = store.queries[0]
    buffer = max(abs(DESTINATION.lat - ORIGIN.lat), abs(DESTINATION.lng - ORIGIN.lng)) * 0.5 + 0.01
    assert sw_lat == pytest.approx(DESTINATION.lat - buffer)
    assert ne_lng == pytest.approx(DESTINATION.lng + buffer)


def test_route_not_found_propagates(empty_store):
    provider = StraightLinePathProvider(error=RouteNotFoundError("No route found"))
    with pytest.raises(RouteNotFoundError):
        orchestrator(empty_store, provider).plan_route(ORIGIN, DESTINATION, use_safe_routing=True)


def test_provider_outage_is_fatal(empty_store):
    provider = StraightLinePathProvider(error=UpstreamUnavailableError("Path provider timed out"))
    with pytest.raises(UpstreamUnavailableError):
        orchestrator(empty_store, provider).plan_route(ORIGIN, DESTINATION)


@pytest.mark.parametrize("origin,destination,profile", [
    (None, DESTINATION, "walking"),
    (ORIGIN, None, "walking"),
    (JourneyPoint(lat=95.0, lng=144.9), DESTINATION, "walking"),
    (JourneyPoint(lat=float("nan"), lng=144.9), DESTINATION, "walking"),
    (ORIGIN, DESTINATION, "teleport"),
])
def test_invalid_input_rejected_before_external_calls(empty_store, path_provider, origin, destination, profile):
    with pytest.raises(InvalidInputError):
        orchestrator(empty_store, path_provider).plan_route(origin, destination, True, profile)
    assert empty_store.queries == []
    assert path_provider.calls == []


def test_scorer_failure_falls_back_to_medium_risk(empty_store, path_provider, monkeypatch):
    router = orchestrator(empty_store, path_provider)

    def broken_score(route, incidents):
        raise RuntimeError("bad geometry")

    monkeypatch.setattr(router.scorer, "score", broken_score)
    plan = router.plan_route(ORIGIN, DESTINATION)

    assert plan.safety_analysis.risk_score == 50
    assert plan.safety_analysis.risk_level == "medium"
    assert plan.safety_analysis.safety_notes == [FALLBACK_NOTE]


def test_profile_defaults_from_config(empty_store, path_provider):
    orchestrator(empty_store, path_provider, default_profile="cycling").plan_route(ORIGIN, DESTINATION)
    assert path_provider.calls[0][1] == "cycling"


def test_repeated_requests_are_independent(path_provider):
    store = RecordingIncidentStore([make_report("dangerous_area", "high")])
    router = orchestrator(store, path_provider)

    first = router.plan_route(ORIGIN, DESTINATION, use_safe_routing=True)
    second = router.plan_route(ORIGIN, DESTINATION, use_safe_routing=True)
    assert first.waypoints == second.waypoints
    assert first.safety_analysis == second.safety_analysis

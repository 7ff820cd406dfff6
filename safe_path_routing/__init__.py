"""
SafePath Routing

Safety-aware route planning on top of an external turn-by-turn provider.
Community incident reports become buffer zones; a direct path that crosses
a zone is nudged around it with a single detour waypoint, and the path the
provider returns is scored for risk.

## Quick Start

```python
from safe_path_routing import (
    RouteOrchestrator, RoutingConfig, JourneyPoint,
    GeoJSONIncidentStore, MapboxPathProvider
)

config = RoutingConfig.from_env()
orchestrator = RouteOrchestrator(
    GeoJSONIncidentStore("incidents.geojson"),
    MapboxPathProvider(config.mapbox_api_key),
    config
)

plan = orchestrator.plan_route(
    JourneyPoint(lat=-37.8136, lng=144.9631),
    JourneyPoint(lat=-37.8150, lng=144.9650),
    use_safe_routing=True
)
print(plan.message, plan.safety_analysis.risk_level)
```

## Architecture

- `data/`: Incident model, weight tables, incident stores, geometry
- `algorithms/`: Buffer zones, risk scoring, waypoint planning
- `providers/`: External path provider clients
- `config/`: Configuration management
"""

from .config import RoutingConfig
from .data import (
    IncidentReport,
    IncidentStore,
    InMemoryIncidentStore,
    GeoJSONIncidentStore,
    SupabaseIncidentStore
)
from .algorithms import BufferZone, RiskScorer, SafetyAnalysis, Waypoint, WaypointPlanner, build_zones
from .providers import PathProvider, PathResult, MapboxPathProvider
from .route_orchestrator import RouteOrchestrator, RoutePlan, JourneyPoint
from .exceptions import SafePathError, InvalidInputError, RouteNotFoundError, UpstreamUnavailableError

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    'RouteOrchestrator',
    'RoutePlan',
    'JourneyPoint',
    'RoutingConfig',

    # Data
    'IncidentReport',
    'IncidentStore',
    'InMemoryIncidentStore',
    'GeoJSONIncidentStore',
    'SupabaseIncidentStore',

    # Algorithms
    'BufferZone',
    'build_zones',
    'RiskScorer',
    'SafetyAnalysis',
    'Waypoint',
    'WaypointPlanner',

    # Providers
    'PathProvider',
    'PathResult',
    'MapboxPathProvider',

    # Errors
    'SafePathError',
    'InvalidInputError',
    'RouteNotFoundError',
    'UpstreamUnavailableError',

    '__version__'
]

"""
Configuration management for safety-aware routing parameters.
"""

import os
from dataclasses import dataclass
from typing import Optional


SUPPORTED_PROFILES = ('walking', 'driving', 'cycling')


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be a number, got {raw!r}")


@dataclass
class RoutingConfig:
    """Configuration parameters for the safety-aware routing pipeline."""

    # Risk Scoring
    proximity_threshold: float = 0.005  # degrees (~500m) - max incident distance that affects a route
    scoring_query_buffer: float = 0.01  # degrees (~1km) - extra buffer around the returned path

    # Waypoint Planning
    safety_margin: float = 0.002  # degrees (~200m) - clearance added beyond the worst zone radius
    search_buffer: float = 0.01  # degrees - constant part of the planning search box buffer
    search_buffer_factor: float = 0.5  # fraction of the larger lat/lng span added to the search box

    # External Services
    incident_timeout_s: float = 5.0
    provider_timeout_s: float = 10.0
    default_profile: str = 'walking'
    mapbox_api_key: Optional[str] = None
    mapbox_base_url: str = 'https://api.mapbox.com/directions/v5/mapbox'
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None

    # Offline Data
    incident_data_path: Optional[str] = None  # GeoJSON file used when no incident service is configured

    def validate(self) -> None:
        """Validate configuration parameters."""
        if self.proximity_threshold <= 0:
            raise ValueError("proximity_threshold must be positive")
        if self.scoring_query_buffer < 0:
            raise ValueError("scoring_query_buffer must be non-negative")
        if self.safety_margin < 0:
            raise ValueError("safety_margin must be non-negative")
        if self.search_buffer < 0 or self.search_buffer_factor < 0:
            raise ValueError("search buffers must be non-negative")
        if self.incident_timeout_s <= 0 or self.provider_timeout_s <= 0:
            raise ValueError("timeouts must be positive")
        if self.default_profile not in SUPPORTED_PROFILES:
            raise ValueError(f"default_profile must be one of {', '.join(SUPPORTED_PROFILES)}")

    @property
    def has_incident_service(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @classmethod
    def from_env(cls) -> 'RoutingConfig':
        """Build a configuration from environment variables, falling back to defaults."""
        defaults = cls()
        config = cls(
            proximity_threshold=_env_float('SAFEPATH_PROXIMITY_THRESHOLD', defaults.proximity_threshold),
            safety_margin=_env_float('SAFEPATH_SAFETY_MARGIN', defaults.safety_margin),
            scoring_query_buffer=_env_float('SAFEPATH_SCORING_BUFFER', defaults.scoring_query_buffer),
            incident_timeout_s=_env_float('SAFEPATH_INCIDENT_TIMEOUT', defaults.incident_timeout_s),
            provider_timeout_s=_env_float('SAFEPATH_PROVIDER_TIMEOUT', defaults.provider_timeout_s),
            mapbox_api_key=os.environ.get('MAPBOX_API_KEY') or None,
            mapbox_base_url=os.environ.get('MAPBOX_BASE_URL') or defaults.mapbox_base_url,
            supabase_url=os.environ.get('SUPABASE_URL') or None,
            supabase_key=os.environ.get('SUPABASE_SERVICE_ROLE_KEY') or None,
            incident_data_path=os.environ.get('SAFEPATH_INCIDENT_DATA') or None,
        )
        config.validate()
        return config

    @classmethod
    def create_balanced_config(cls) -> 'RoutingConfig':
        """Create balanced configuration (default)."""
        return cls()

    @classmethod
    def create_strict_config(cls) -> 'RoutingConfig':
        """
        Create configuration that reacts to incidents further from the route
        and keeps detours clear of zones by a wider margin.
        """
        return cls(
            proximity_threshold=0.008,   # ~800m scoring reach
            safety_margin=0.004,         # ~400m clearance past the worst zone
            scoring_query_buffer=0.015,
        )

    @classmethod
    def create_offline_config(cls, incident_data_path: str) -> 'RoutingConfig':
        """Create configuration backed by a local GeoJSON incident file."""
        return cls(incident_data_path=incident_data_path)

"""
Configuration management for safety-aware routing.
"""

from .routing_config import RoutingConfig, SUPPORTED_PROFILES

__all__ = [
    'RoutingConfig',
    'SUPPORTED_PROFILES'
]

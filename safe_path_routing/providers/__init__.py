"""
External path provider clients.
"""

from .path_provider import PathProvider, PathResult, MapboxPathProvider

__all__ = [
    'PathProvider',
    'PathResult',
    'MapboxPathProvider'
]

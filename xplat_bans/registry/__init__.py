"""
Ban registry: the classes, package prefixes and methods that may not be used.
"""

from .loader import DEFAULT_BAN_FILE, BanRegistryLoader, build_registry
from .models import BanEntry, BanRegistry, LoadResult, LoadStatus

__all__ = [
    'BanEntry',
    'BanRegistry',
    'BanRegistryLoader',
    'DEFAULT_BAN_FILE',
    'LoadResult',
    'LoadStatus',
    'build_registry',
]

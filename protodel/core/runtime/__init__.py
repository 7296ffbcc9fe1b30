from .binding import MISSING, STATIC_MARKER, MethodBinding
from .cache import CachedResolution, CacheStats, PropertyCache
from .inspection import InstanceReport, inspect_instance
from .instance import Instance
from .resolver import Resolver

__all__ = [
    "Instance",
    "MethodBinding",
    "MISSING",
    "STATIC_MARKER",
    "PropertyCache",
    "CachedResolution",
    "CacheStats",
    "Resolver",
    "InstanceReport",
    "inspect_instance",
]

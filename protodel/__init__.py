"""Prototype-based delegation for Python objects.

Instances hold their own properties and delegate misses to a single
prototype chain. A shared cache memoizes chain lookups per property name,
observers can veto any write or delete (freezing is built on them), and a
weak registry tracks the children of every prototype.
"""

from .core.config import SpaceConfig
from .core.errors import MethodNotFound, ObserverError, PrototypeError
from .core.observers import MutationDecision, MutationVerdict
from .core.registry import PrototypeSpace
from .core.runtime import STATIC_MARKER, Instance, InstanceReport, MethodBinding
from .prototype import (
    assign,
    create,
    default_space,
    dispose,
    entries,
    extend,
    freeze,
    get_descendants,
    get_instances,
    get_observers,
    get_prototypes,
    has_own_property,
    has_property,
    has_prototype,
    inspect,
    is_extensible,
    is_frozen,
    keys,
    observe,
    own_entries,
    own_keys,
    own_values,
    prevent_extensions,
    unfreeze,
    unobserve,
    values,
)

__all__ = [
    "Instance",
    "InstanceReport",
    "MethodBinding",
    "MethodNotFound",
    "MutationDecision",
    "MutationVerdict",
    "ObserverError",
    "PrototypeError",
    "PrototypeSpace",
    "STATIC_MARKER",
    "SpaceConfig",
    "assign",
    "create",
    "default_space",
    "dispose",
    "entries",
    "extend",
    "freeze",
    "get_descendants",
    "get_instances",
    "get_observers",
    "get_prototypes",
    "has_own_property",
    "has_property",
    "has_prototype",
    "inspect",
    "is_extensible",
    "is_frozen",
    "keys",
    "observe",
    "own_entries",
    "own_keys",
    "own_values",
    "prevent_extensions",
    "unfreeze",
    "unobserve",
    "values",
]

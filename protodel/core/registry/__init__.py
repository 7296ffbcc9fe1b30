from .instances import InstanceRegistry
from .space import PrototypeSpace

__all__ = ["InstanceRegistry", "PrototypeSpace"]

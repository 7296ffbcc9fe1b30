from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from protodel.utils.json_safe import to_jsonable

from .binding import MethodBinding
from .instance import Instance


class InstanceReport(BaseModel):
    """JSON-safe introspection summary of one Instance."""

    handle: int
    prototype: Optional[int] = None
    chain: List[int] = Field(default_factory=list)
    own_keys: List[str] = Field(default_factory=list)
    static_methods: List[str] = Field(default_factory=list)
    own_values: Dict[str, Any] = Field(default_factory=dict)
    frozen: bool = False
    extensible: bool = True
    observer_count: int = 0
    children: List[int] = Field(default_factory=list)
    disposed: bool = False


def describe_value(value: Any) -> Any:
    """Render a property value without invoking it or its hooks."""

    if isinstance(value, Instance):
        return {"$instance": value.handle}
    if isinstance(value, MethodBinding):
        return {"$method": getattr(value.function, "__qualname__", "method")}
    if callable(value):
        return {"$callable": getattr(value, "__qualname__", None) or type(value).__name__}
    return to_jsonable(value)


def inspect_instance(obj: Any, space: Any) -> InstanceReport:
    prototype = obj.prototype
    own = obj.own_properties
    return InstanceReport(
        handle=obj.handle,
        prototype=prototype.handle if prototype is not None else None,
        chain=[p.handle for p in space.get_prototypes(obj)],
        own_keys=list(own),
        static_methods=sorted(obj.static_names),
        own_values={name: describe_value(value) for name, value in own.items()},
        frozen=space.is_frozen(obj),
        extensible=space.is_extensible(obj),
        observer_count=len(space.get_observers(obj)),
        children=[c.handle for c in space.get_instances(obj)],
        disposed=obj.disposed,
    )

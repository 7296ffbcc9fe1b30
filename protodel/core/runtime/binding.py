from __future__ import annotations

import inspect
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

STATIC_MARKER = ":"

RESERVED_NAMES = frozenset({"prototype", "properties"})

INVOKE_HOOK = "__invoke__"
STRING_HOOK = "__str__"
CLONE_HOOK = "__clone__"
DISPOSE_HOOK = "__dispose__"

_NUMERIC = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")


@dataclass(frozen=True, eq=False)
class MethodBinding:
    """
    A plain function paired with the Instance it runs against.

    Calling the binding passes ``owner`` as the first argument, so the
    function reads like ``def method(this, *args)``. Rebinding never mutates;
    it returns a new binding over the same function.
    """

    function: Callable[..., Any]
    owner: Any

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.function(self.owner, *args, **kwargs)

    def rebind(self, owner: Any) -> "MethodBinding":
        if owner is self.owner:
            return self
        return MethodBinding(self.function, owner)

    def __repr__(self) -> str:
        name = getattr(self.function, "__qualname__", repr(self.function))
        return f"<MethodBinding {name} of {self.owner!r}>"


def is_bindable(value: Any) -> bool:
    """Plain functions and existing bindings take the owner as ``this``."""

    return isinstance(value, MethodBinding) or inspect.isfunction(value)


def unbind(value: Any) -> Any:
    if isinstance(value, MethodBinding):
        return value.function
    return value


def bind(value: Any, owner: Any) -> Any:
    """Bind ``value`` to ``owner`` if it is bindable, otherwise return it as is."""

    if isinstance(value, MethodBinding):
        return value.rebind(owner)
    if inspect.isfunction(value):
        return MethodBinding(value, owner)
    return value


def is_numeric_key(key: Any) -> bool:
    if isinstance(key, bool):
        return False
    if isinstance(key, (int, float)):
        return True
    if isinstance(key, str):
        return _NUMERIC.match(key) is not None
    return False


def split_static(key: str) -> Tuple[str, bool]:
    """Strip the static marker from a construction-time key."""

    if key.startswith(STATIC_MARKER):
        return key[len(STATIC_MARKER):], True
    return key, False


def check_name(name: Any) -> str:
    if not isinstance(name, str):
        raise TypeError("property name must be a string")
    if not name:
        raise ValueError("property name must be non-empty")
    return name


def parse_definition(key: Any) -> Optional[Tuple[str, bool]]:
    """
    Normalize one construction-time key.

    Returns ``(name, is_static)`` or ``None`` when the key is ignored
    (numeric keys, the reserved ``properties`` key and reserved
    names carrying the static marker).
    """

    if is_numeric_key(key):
        return None
    if not isinstance(key, str):
        raise TypeError(f"property names must be strings, got {type(key).__name__}")
    if key == "properties":
        return None
    name, static = split_static(key)
    if static and name in RESERVED_NAMES:
        return None
    return check_name(name), static


class _Missing:
    """Marker for a name that resolves nowhere on the chain."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()

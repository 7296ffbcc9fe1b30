from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple


class MutationDecision(str, Enum):
    """
    Outcome an observer may return for a proposed write or delete.

    Observers may also return ``False`` to reject; any other return value
    (including ``None``) accepts.
    """

    ACCEPT = "ACCEPT"
    REJECT = "REJECT"


Observer = Callable[[Any, str, Any], Any]


def observer_name(callback: Observer) -> str:
    return getattr(callback, "__qualname__", None) or type(callback).__name__


def is_rejection(result: Any) -> bool:
    return result is False or result == MutationDecision.REJECT


@dataclass(frozen=True)
class MutationVerdict:
    """
    Immutable record of one gated mutation attempt.

    - status is a MutationDecision (not free-form text)
    - rejected_by lists observer names in the order they vetoed
    """

    status: MutationDecision
    property_name: str
    rejected_by: Tuple[str, ...] = ()
    reason: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.status == MutationDecision.ACCEPT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "property_name": self.property_name,
            "rejected_by": list(self.rejected_by),
            "reason": self.reason,
        }


@dataclass(frozen=True, eq=False)
class FreezeGuard:
    """Observer installed by freeze(); rejects every mutation of its target."""

    handle: int

    def __call__(self, target: Any, name: str, value: Any) -> MutationDecision:
        return MutationDecision.REJECT

from .ledgers import ExtensibilityLedger, FreezeLedger
from .models import FreezeGuard, MutationDecision, MutationVerdict, Observer
from .registry import ObserverRegistry

__all__ = [
    "ObserverRegistry",
    "FreezeLedger",
    "ExtensibilityLedger",
    "FreezeGuard",
    "MutationDecision",
    "MutationVerdict",
    "Observer",
]

"""
Persistence.

Wire codec, backend client and the flow save protocol.
"""

from .adapter import FlowSaver, Notifier, PersistenceAdapter, SaveResult
from .client import FlowApiClient
from .wire import WireEdge, WireFlow, WireNode, from_wire, to_wire

__all__ = [
    "FlowSaver",
    "Notifier",
    "PersistenceAdapter",
    "SaveResult",
    "FlowApiClient",
    "WireEdge",
    "WireFlow",
    "WireNode",
    "from_wire",
    "to_wire",
]

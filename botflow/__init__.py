"""
botflow - Conversational Flow Editor Core

Headless core of a chatbot automation editor:
- Node type catalog with per-type configuration schemas
- Flow graph model (nodes, edges, cascade deletes)
- Canvas viewport, pointer interaction and two-click connections
- Schema-driven configuration forms
- Backend persistence with draft promotion and debounced auto-save
"""

__version__ = "1.0.0"

from .exceptions import (
    BotflowError,
    EdgeNotFoundError,
    FormValidationError,
    InvalidConnection,
    NodeNotFoundError,
    PersistenceError,
    UnknownNodeTypeError,
)
from .models import Flow, FlowEdge, FlowNode, Position
from .nodes import NodeCatalog, default_catalog
from .session import EditorSession

__all__ = [
    "__version__",
    "BotflowError",
    "EdgeNotFoundError",
    "FormValidationError",
    "InvalidConnection",
    "NodeNotFoundError",
    "PersistenceError",
    "UnknownNodeTypeError",
    "Flow",
    "FlowEdge",
    "FlowNode",
    "Position",
    "NodeCatalog",
    "default_catalog",
    "EditorSession",
]

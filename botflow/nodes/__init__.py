"""
Node Types and Catalog.

This module provides the node type definitions and the catalog
used by the flow editor.
"""

from .registry import NodeCatalog, default_catalog
from .definitions import (
    ALL_NODES,
    TRIGGER_NODES,
    CONDITION_NODES,
    ACTION_NODES,
    RESPONSE_NODES,
    AI_NODES,
    FLOW_CONTROL_NODES,
)

__all__ = [
    "NodeCatalog",
    "default_catalog",
    "ALL_NODES",
    "TRIGGER_NODES",
    "CONDITION_NODES",
    "ACTION_NODES",
    "RESPONSE_NODES",
    "AI_NODES",
    "FLOW_CONTROL_NODES",
]

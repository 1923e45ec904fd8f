"""
Flow Graph.

The editable graph model and its structural validator.
"""

from .model import FlowGraph, GraphChange, GraphListener
from .validator import FlowValidator

__all__ = [
    "FlowGraph",
    "GraphChange",
    "GraphListener",
    "FlowValidator",
]

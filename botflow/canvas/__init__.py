"""
Canvas Module.

Viewport, pointer interaction, edge creation and rendering.
"""

from .connection import Armed, ConnectionResult, ConnectionStateMachine, HandlePolarity
from .controller import CanvasController, InteractionMode
from .render import BezierRenderer, EdgeGeometry, NodeBox, RenderStrategy, Scene
from .viewport import Viewport

__all__ = [
    "Armed",
    "ConnectionResult",
    "ConnectionStateMachine",
    "HandlePolarity",
    "CanvasController",
    "InteractionMode",
    "BezierRenderer",
    "EdgeGeometry",
    "NodeBox",
    "RenderStrategy",
    "Scene",
    "Viewport",
]

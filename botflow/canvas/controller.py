"""
Canvas Controller.

Translates pointer and keyboard events into viewport changes and graph
mutations. Panning and node dragging are mutually exclusive.
"""

import logging
from enum import Enum
from typing import Optional, Set

from ..config import CanvasConfig, get_settings
from ..graph.model import FlowGraph
from ..models import FlowNode, Position
from .connection import ConnectionStateMachine, HandlePolarity
from .render import BezierRenderer, RenderStrategy, Scene
from .viewport import Viewport

logger = logging.getLogger(__name__)


class InteractionMode(str, Enum):
    """Current pointer interaction."""

    IDLE = "idle"
    PANNING = "panning"
    DRAGGING_NODE = "dragging_node"


class CanvasController:
    """
    Canvas interaction controller.

    Features:
    - Drag on empty canvas pans, drag on a node moves it
    - Wheel/step zoom, optionally about the cursor
    - Palette drop creates a node under the pointer
    - Single selection (node or edge) and deletion
    """

    def __init__(
        self,
        graph: FlowGraph,
        config: Optional[CanvasConfig] = None,
        renderer: Optional[RenderStrategy] = None,
        connections: Optional[ConnectionStateMachine] = None,
    ):
        self.config = config or get_settings().canvas
        self.graph = graph
        self.viewport = Viewport.from_config(self.config)
        self.renderer = renderer or BezierRenderer(self.config)
        self.connections = connections or ConnectionStateMachine(graph)

        self.mode = InteractionMode.IDLE
        self.selected_node_id: Optional[str] = None
        self.selected_edge_id: Optional[str] = None

        self._last_pointer: Optional[Position] = None
        self._grab: Optional[Position] = None
        self._drag_node_id: Optional[str] = None

    # ------------------------------------------------------------------
    # Hit testing
    # ------------------------------------------------------------------

    def node_at(self, screen: Position) -> Optional[FlowNode]:
        """Topmost node under a screen point."""
        point = self.viewport.screen_to_graph(screen)
        for node in reversed(self.graph.nodes):
            if (
                node.position.x <= point.x <= node.position.x + self.config.node_width
                and node.position.y <= point.y <= node.position.y + self.config.node_height
            ):
                return node
        return None

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def pointer_down(self, screen: Position, node_id: Optional[str] = None) -> InteractionMode:
        """
        Start a pan or a node drag.

        Args:
            screen: Pointer position in screen space
            node_id: Node under the pointer, if the caller already knows it;
                otherwise it is hit-tested
        """
        if node_id is None:
            hit = self.node_at(screen)
            node_id = hit.id if hit else None

        self._last_pointer = Position(screen.x, screen.y)

        if node_id is None:
            self.clear_selection()
            self.connections.click_canvas()
            self.mode = InteractionMode.PANNING
            return self.mode

        node = self.graph.require_node(node_id)
        self.select_node(node_id)
        self.connections.click_node(node_id)

        point = self.viewport.screen_to_graph(screen)
        self._grab = Position(point.x - node.position.x, point.y - node.position.y)
        self._drag_node_id = node_id
        self.mode = InteractionMode.DRAGGING_NODE
        return self.mode

    def pointer_move(self, screen: Position) -> None:
        point = self.viewport.screen_to_graph(screen)
        self.connections.move_pointer(point)

        if self.mode == InteractionMode.PANNING and self._last_pointer is not None:
            self.viewport.pan_by(screen.x - self._last_pointer.x, screen.y - self._last_pointer.y)
        elif self.mode == InteractionMode.DRAGGING_NODE and self._drag_node_id is not None:
            self.graph.move_node(
                self._drag_node_id,
                Position(point.x - self._grab.x, point.y - self._grab.y),
            )

        self._last_pointer = Position(screen.x, screen.y)

    def pointer_up(self) -> None:
        self.mode = InteractionMode.IDLE
        self._last_pointer = None
        self._grab = None
        self._drag_node_id = None

    # ------------------------------------------------------------------
    # Handles
    # ------------------------------------------------------------------

    def click_output(self, node_id: str):
        return self.connections.click_output(node_id)

    def click_input(self, node_id: str):
        return self.connections.click_input(node_id)

    # ------------------------------------------------------------------
    # Zoom
    # ------------------------------------------------------------------

    def zoom_in(self, anchor: Optional[Position] = None) -> float:
        return self.viewport.zoom_in(anchor)

    def zoom_out(self, anchor: Optional[Position] = None) -> float:
        return self.viewport.zoom_out(anchor)

    def wheel(self, delta_y: float, anchor: Optional[Position] = None) -> float:
        """Scroll up zooms in, scroll down zooms out."""
        if delta_y < 0:
            return self.zoom_in(anchor)
        if delta_y > 0:
            return self.zoom_out(anchor)
        return self.viewport.zoom

    # ------------------------------------------------------------------
    # Palette / selection
    # ------------------------------------------------------------------

    def drop_node(self, type_id: str, screen: Position) -> FlowNode:
        """
        Create a node of a palette type under a screen point.

        Raises:
            UnknownNodeTypeError: If the type is not in the catalog
        """
        node = self.graph.add_node(type_id, self.viewport.screen_to_graph(screen))
        self.select_node(node.id)
        return node

    def select_node(self, node_id: str) -> None:
        self.selected_node_id = node_id
        self.selected_edge_id = None

    def select_edge(self, edge_id: str) -> None:
        self.selected_edge_id = edge_id
        self.selected_node_id = None

    def clear_selection(self) -> None:
        self.selected_node_id = None
        self.selected_edge_id = None

    @property
    def selection(self) -> Set[str]:
        return {i for i in (self.selected_node_id, self.selected_edge_id) if i}

    def delete_selected(self) -> bool:
        """Delete the selected node (with its edges) or edge."""
        deleted = False

        if self.selected_node_id and self.graph.has_node(self.selected_node_id):
            self.graph.remove_node(self.selected_node_id)
            deleted = True
        elif self.selected_edge_id:
            deleted = self.graph.remove_edge(self.selected_edge_id) is not None

        self.clear_selection()
        return deleted

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self) -> Scene:
        preview = None
        armed = self.connections.armed
        if (
            armed is not None
            and armed.polarity == HandlePolarity.SOURCE
            and self.connections.preview is not None
        ):
            preview = (armed.node_id, self.connections.preview)

        return self.renderer.render(self.graph.flow, self.viewport, self.selection, preview)

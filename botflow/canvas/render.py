"""
Render Strategies.

Turns the graph and viewport into drawable geometry. Edges carry no
geometry of their own; paths are recomputed from node positions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from ..config import CanvasConfig
from ..models import Flow, FlowNode, Position
from .viewport import Viewport


@dataclass
class NodeBox:
    """Screen-space rectangle of a node."""

    node_id: str
    x: float
    y: float
    width: float
    height: float
    selected: bool = False

    def contains(self, point: Position) -> bool:
        return self.x <= point.x <= self.x + self.width and self.y <= point.y <= self.y + self.height


@dataclass
class EdgeGeometry:
    """Screen-space cubic Bezier path of an edge."""

    edge_id: str
    start: Position
    control1: Position
    control2: Position
    end: Position
    label: str = ""
    selected: bool = False

    @property
    def path(self) -> str:
        """SVG path data."""
        return (
            f"M {self.start.x:g} {self.start.y:g} "
            f"C {self.control1.x:g} {self.control1.y:g}, "
            f"{self.control2.x:g} {self.control2.y:g}, "
            f"{self.end.x:g} {self.end.y:g}"
        )


@dataclass
class Scene:
    """Everything needed to draw one frame."""

    nodes: List[NodeBox] = field(default_factory=list)
    edges: List[EdgeGeometry] = field(default_factory=list)
    preview: Optional[EdgeGeometry] = None
    grid_spacing: float = 40.0
    grid_phase: Tuple[float, float] = (0.0, 0.0)


class RenderStrategy(ABC):
    """Pluggable renderer for the canvas."""

    @abstractmethod
    def render(
        self,
        flow: Flow,
        viewport: Viewport,
        selected: Set[str],
        preview: Optional[Tuple[str, Position]] = None,
    ) -> Scene:
        """
        Compute the scene for a flow.

        Args:
            flow: Flow to draw
            viewport: Current viewport
            selected: Ids of selected nodes/edges
            preview: (source node id, graph point) of a connection in progress
        """


class BezierRenderer(RenderStrategy):
    """Draws edges as cubic curves from source right-middle to target left-middle."""

    def __init__(self, config: Optional[CanvasConfig] = None):
        config = config or CanvasConfig()
        self.node_width = config.node_width
        self.node_height = config.node_height

    def output_anchor(self, node: FlowNode) -> Position:
        return Position(node.position.x + self.node_width, node.position.y + self.node_height / 2)

    def input_anchor(self, node: FlowNode) -> Position:
        return Position(node.position.x, node.position.y + self.node_height / 2)

    def curve(self, start: Position, end: Position) -> Tuple[Position, Position]:
        """Control points bending horizontally out of and into the handles."""
        bend = max(abs(end.x - start.x) / 2, 50.0)
        return Position(start.x + bend, start.y), Position(end.x - bend, end.y)

    def render(
        self,
        flow: Flow,
        viewport: Viewport,
        selected: Set[str],
        preview: Optional[Tuple[str, Position]] = None,
    ) -> Scene:
        nodes = {n.id: n for n in flow.nodes}
        scene = Scene(grid_spacing=viewport.grid_spacing, grid_phase=viewport.grid_phase)

        for node in flow.nodes:
            corner = viewport.graph_to_screen(node.position)
            scene.nodes.append(
                NodeBox(
                    node_id=node.id,
                    x=corner.x,
                    y=corner.y,
                    width=self.node_width * viewport.zoom,
                    height=self.node_height * viewport.zoom,
                    selected=node.id in selected,
                )
            )

        for edge in flow.edges:
            source = nodes.get(edge.source_node_id)
            target = nodes.get(edge.target_node_id)
            if source is None or target is None:
                continue
            scene.edges.append(
                self._edge(
                    edge.id,
                    self.output_anchor(source),
                    self.input_anchor(target),
                    viewport,
                    label=edge.label,
                    selected=edge.id in selected,
                )
            )

        if preview is not None:
            source = nodes.get(preview[0])
            if source is not None:
                scene.preview = self._edge("preview", self.output_anchor(source), preview[1], viewport)

        return scene

    def _edge(
        self,
        edge_id: str,
        start: Position,
        end: Position,
        viewport: Viewport,
        label: str = "",
        selected: bool = False,
    ) -> EdgeGeometry:
        control1, control2 = self.curve(start, end)
        return EdgeGeometry(
            edge_id=edge_id,
            start=viewport.graph_to_screen(start),
            control1=viewport.graph_to_screen(control1),
            control2=viewport.graph_to_screen(control2),
            end=viewport.graph_to_screen(end),
            label=label,
            selected=selected,
        )

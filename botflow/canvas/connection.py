"""
Connection State Machine.

Two-click edge creation between node handles. Either polarity may be
clicked first; both orders end in one add_edge(source, target) call.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..exceptions import InvalidConnection
from ..graph.model import FlowGraph
from ..models import FlowEdge, Position

logger = logging.getLogger(__name__)


class HandlePolarity(str, Enum):
    """Which side of a node was clicked."""

    SOURCE = "source"  # output handle
    TARGET = "target"  # input handle


@dataclass
class Armed:
    """A first handle has been clicked."""

    node_id: str
    polarity: HandlePolarity


@dataclass
class ConnectionResult:
    """Outcome of a click that left the machine idle."""

    edge: Optional[FlowEdge] = None
    error: Optional[InvalidConnection] = None
    cancelled: bool = False

    @property
    def created(self) -> bool:
        return self.edge is not None


class ConnectionStateMachine:
    """
    Idle / Armed(node, polarity) machine.

    Transitions:
    - Idle + handle click: arm at that node and polarity
    - Armed + opposite handle on another node: create edge, go idle
    - Armed + same polarity on another node: re-arm there
    - Armed + click on the armed node or on empty canvas: cancel
    """

    def __init__(self, graph: FlowGraph):
        self.graph = graph
        self.armed: Optional[Armed] = None
        self.preview: Optional[Position] = None
        self.last_result: Optional[ConnectionResult] = None

    @property
    def is_idle(self) -> bool:
        return self.armed is None

    def click_output(self, node_id: str) -> Optional[ConnectionResult]:
        return self._click_handle(node_id, HandlePolarity.SOURCE)

    def click_input(self, node_id: str) -> Optional[ConnectionResult]:
        return self._click_handle(node_id, HandlePolarity.TARGET)

    def click_node(self, node_id: str) -> Optional[ConnectionResult]:
        """Click on a node body. Cancels only if it is the armed node."""
        if self.armed is not None and self.armed.node_id == node_id:
            return self.cancel()
        return None

    def click_canvas(self) -> Optional[ConnectionResult]:
        if self.armed is None:
            return None
        return self.cancel()

    def move_pointer(self, point: Position) -> None:
        """Track the pointer (graph space) for the preview line."""
        if self.armed is not None:
            self.preview = Position(point.x, point.y)

    def cancel(self) -> ConnectionResult:
        self._reset()
        return self._finish(ConnectionResult(cancelled=True))

    def _click_handle(self, node_id: str, polarity: HandlePolarity) -> Optional[ConnectionResult]:
        armed = self.armed

        if armed is None or (armed.polarity == polarity and armed.node_id != node_id):
            self.armed = Armed(node_id, polarity)
            self.preview = None
            return None

        if armed.node_id == node_id:
            return self.cancel()

        if armed.polarity == HandlePolarity.SOURCE:
            source_id, target_id = armed.node_id, node_id
        else:
            source_id, target_id = node_id, armed.node_id

        self._reset()
        try:
            edge = self.graph.add_edge(source_id, target_id)
        except InvalidConnection as e:
            logger.warning(f"Connection rejected: {e.reason}")
            return self._finish(ConnectionResult(error=e))

        return self._finish(ConnectionResult(edge=edge))

    def _reset(self) -> None:
        self.armed = None
        self.preview = None

    def _finish(self, result: ConnectionResult) -> ConnectionResult:
        self.last_result = result
        return result

"""
Flow Graph Model.

Mutations over a Flow aggregate. Every mutation keeps the invariant
that no edge references a node missing from the flow.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..config import EdgeKind
from ..exceptions import (
    EdgeNotFoundError,
    InvalidConnection,
    NodeNotFoundError,
    UnknownNodeTypeError,
)
from ..ids import new_edge_id, new_node_id
from ..models import Flow, FlowEdge, FlowNode, Position
from ..nodes import NodeCatalog

logger = logging.getLogger(__name__)


@dataclass
class GraphChange:
    """Notification sent to listeners after a successful mutation."""

    action: str  # add_node, move_node, remove_node, add_edge, ...
    payload: Dict[str, Any] = field(default_factory=dict)


GraphListener = Callable[[GraphChange], None]


class FlowGraph:
    """
    Editable graph over a Flow.

    Features:
    - Node creation from the catalog
    - Cascade deletion of edges
    - Additive configuration merge
    - Change notifications (auto-save hooks)
    """

    def __init__(self, flow: Flow, catalog: NodeCatalog):
        self.flow = flow
        self.catalog = catalog
        self._listeners: List[GraphListener] = []

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: GraphListener) -> Callable[[], None]:
        """Register a change listener. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, action: str, **payload: Any) -> None:
        change = GraphChange(action=action, payload=payload)
        for listener in list(self._listeners):
            listener(change)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> List[FlowNode]:
        return self.flow.nodes

    @property
    def edges(self) -> List[FlowEdge]:
        return self.flow.edges

    def get_node(self, node_id: str) -> Optional[FlowNode]:
        for node in self.flow.nodes:
            if node.id == node_id:
                return node
        return None

    def require_node(self, node_id: str) -> FlowNode:
        node = self.get_node(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    def has_node(self, node_id: str) -> bool:
        return self.get_node(node_id) is not None

    def get_edge(self, edge_id: str) -> Optional[FlowEdge]:
        for edge in self.flow.edges:
            if edge.id == edge_id:
                return edge
        return None

    def outgoing(self, node_id: str) -> List[FlowEdge]:
        """Outgoing edges, in evaluation order."""
        edges = [e for e in self.flow.edges if e.source_node_id == node_id]
        return sorted(edges, key=lambda e: e.order)

    def incoming(self, node_id: str) -> List[FlowEdge]:
        return [e for e in self.flow.edges if e.target_node_id == node_id]

    # ------------------------------------------------------------------
    # Node mutations
    # ------------------------------------------------------------------

    def add_node(self, type_id: str, position: Position) -> FlowNode:
        """
        Create a node of a catalog type.

        Args:
            type_id: Catalog type id (e.g. "trigger-keyword")
            position: Position in graph space

        Returns:
            The new node, with empty configuration

        Raises:
            UnknownNodeTypeError: If the type is not in the catalog
        """
        node_def = self.catalog.lookup(type_id)
        if node_def is None:
            raise UnknownNodeTypeError(type_id)

        node = FlowNode(
            id=new_node_id(),
            flow_id=self.flow.id,
            type=type_id,
            category=node_def.category.value,
            position=Position(position.x, position.y),
            title=node_def.name,
            description=node_def.description,
        )
        self.flow.nodes.append(node)

        logger.debug(f"Added node {node.id} ({type_id}) at ({position.x}, {position.y})")
        self._emit("add_node", node_id=node.id)
        return node

    def move_node(self, node_id: str, position: Position) -> FlowNode:
        """Update a node's position. Edges are geometry-free."""
        node = self.require_node(node_id)
        node.position = Position(position.x, position.y)
        self._emit("move_node", node_id=node_id)
        return node

    def remove_node(self, node_id: str) -> List[FlowEdge]:
        """
        Remove a node and every edge touching it.

        Returns:
            The removed edges
        """
        node = self.require_node(node_id)

        removed = [e for e in self.flow.edges if e.touches(node_id)]
        self.flow.edges = [e for e in self.flow.edges if not e.touches(node_id)]
        self.flow.nodes = [n for n in self.flow.nodes if n is not node]

        logger.debug(f"Removed node {node_id} and {len(removed)} edges")
        self._emit("remove_node", node_id=node_id, edge_ids=[e.id for e in removed])
        return removed

    def update_node(
        self,
        node_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        enabled: Optional[bool] = None,
        is_start: Optional[bool] = None,
        is_end: Optional[bool] = None,
    ) -> FlowNode:
        """Update node metadata; None leaves a field unchanged."""
        node = self.require_node(node_id)

        if title is not None:
            node.title = title
        if description is not None:
            node.description = description
        if enabled is not None:
            node.enabled = enabled
        # No policy on how many start/end nodes a flow may have
        if is_start is not None:
            node.is_start = is_start
        if is_end is not None:
            node.is_end = is_end

        self._emit("update_node", node_id=node_id)
        return node

    def set_node_configuration(self, node_id: str, config: Dict[str, Any]) -> FlowNode:
        """
        Merge configuration values into a node.

        Keys absent from the current schema are kept, so stored data
        survives schema changes.
        """
        node = self.require_node(node_id)
        node.configuration = {**node.configuration, **config}
        self._emit("set_node_configuration", node_id=node_id, keys=sorted(config))
        return node

    # ------------------------------------------------------------------
    # Edge mutations
    # ------------------------------------------------------------------

    def add_edge(self, source_id: str, target_id: str) -> FlowEdge:
        """
        Connect two nodes.

        Raises:
            InvalidConnection: On self-connection or missing endpoint
        """
        if source_id == target_id:
            raise InvalidConnection(source_id, target_id, "a node cannot connect to itself")
        if not self.has_node(source_id):
            raise InvalidConnection(source_id, target_id, f"source {source_id} not in flow")
        if not self.has_node(target_id):
            raise InvalidConnection(source_id, target_id, f"target {target_id} not in flow")

        edge = FlowEdge(
            id=new_edge_id(),
            flow_id=self.flow.id,
            source_node_id=source_id,
            target_node_id=target_id,
            kind=EdgeKind.DEFAULT,
            order=0,
        )
        self.flow.edges.append(edge)

        logger.debug(f"Added edge {edge.id}: {source_id} -> {target_id}")
        self._emit("add_edge", edge_id=edge.id)
        return edge

    def remove_edge(self, edge_id: str) -> Optional[FlowEdge]:
        """Remove an edge. Unknown ids are ignored."""
        edge = self.get_edge(edge_id)
        if edge is None:
            return None

        self.flow.edges = [e for e in self.flow.edges if e is not edge]
        self._emit("remove_edge", edge_id=edge_id)
        return edge

    def update_edge(
        self,
        edge_id: str,
        label: Optional[str] = None,
        condition: Optional[str] = None,
        kind: Optional[EdgeKind] = None,
        order: Optional[int] = None,
        enabled: Optional[bool] = None,
    ) -> FlowEdge:
        """Update edge attributes; endpoints are immutable."""
        edge = self.get_edge(edge_id)
        if edge is None:
            raise EdgeNotFoundError(edge_id)

        if label is not None:
            edge.label = label
        if condition is not None:
            edge.condition = condition or None
        if kind is not None:
            edge.kind = EdgeKind(kind)
        if order is not None:
            edge.order = order
        if enabled is not None:
            edge.enabled = enabled

        self._emit("update_edge", edge_id=edge_id)
        return edge

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def rebind_flow_id(self, flow_id: str) -> None:
        """Point the flow and all its nodes/edges at a new flow id."""
        old_id = self.flow.id
        self.flow.id = flow_id
        for node in self.flow.nodes:
            node.flow_id = flow_id
        for edge in self.flow.edges:
            edge.flow_id = flow_id

        logger.info(f"Flow {old_id} rebound to {flow_id}")

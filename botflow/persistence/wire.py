"""
Wire Format.

Conversion between the in-memory Flow aggregate and the backend JSON
representation. This is the only module that knows the backend field
names.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..config import EdgeKind, NodeCategory, VariableScope
from ..models import Flow, FlowEdge, FlowNode, FlowVariable, Position
from ..nodes import NodeCatalog

logger = logging.getLogger(__name__)

# Category given to nodes whose type is unknown and whose payload has none
FALLBACK_CATEGORY = NodeCategory.ADVANCED.value


class WireModel(BaseModel):
    """Base for backend payloads: camelCase on the wire, snake_case in code."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class WirePosition(WireModel):
    x: float = 0.0
    y: float = 0.0


class WireNode(WireModel):
    """Node as stored by the backend."""

    id: str
    type: str
    title: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    position: Optional[WirePosition] = None
    config: Optional[Dict[str, Any]] = None
    is_start: Optional[bool] = Field(default=None, alias="isStart")
    is_end: Optional[bool] = Field(default=None, alias="isEnd")
    is_enabled: Optional[bool] = Field(default=None, alias="isEnabled")


class WireEdge(WireModel):
    """Edge as stored by the backend."""

    id: str
    from_node_id: str = Field(alias="fromNodeId")
    to_node_id: str = Field(alias="toNodeId")
    label: Optional[str] = None
    condition: Optional[str] = None
    kind: Optional[EdgeKind] = None
    order: Optional[int] = None
    is_enabled: Optional[bool] = Field(default=None, alias="isEnabled")


class WireVariable(WireModel):
    """Flow variable as stored by the backend."""

    key: str
    label: Optional[str] = None
    value_type: Optional[str] = Field(default=None, alias="valueType")
    default_value: Any = Field(default=None, alias="defaultValue")
    scope: Optional[VariableScope] = None
    is_required: Optional[bool] = Field(default=None, alias="isRequired")
    description: Optional[str] = None


class WireFlow(WireModel):
    """Complete flow payload."""

    id: Optional[str] = None
    bot_id: Optional[str] = Field(default=None, alias="botId")
    name: str = ""
    description: Optional[str] = None
    nodes: List[WireNode] = Field(default_factory=list)
    edges: List[WireEdge] = Field(default_factory=list)
    variables: List[WireVariable] = Field(default_factory=list)
    version: Optional[int] = None
    is_active: Optional[bool] = Field(default=None, alias="isActive")


class WireFlowSummary(WireModel):
    """Entry of a bot's flow listing."""

    id: str
    name: str = ""
    version: Optional[int] = None
    is_active: Optional[bool] = Field(default=None, alias="isActive")


class WireBot(WireModel):
    id: str
    name: str = ""
    description: Optional[str] = None
    is_enabled: Optional[bool] = Field(default=None, alias="isEnabled")


# =============================================================================
# Flow -> wire
# =============================================================================


def node_to_wire(node: FlowNode) -> WireNode:
    return WireNode(
        id=node.id,
        type=node.type,
        title=node.title,
        category=node.category,
        description=node.description,
        position=WirePosition(x=node.position.x, y=node.position.y),
        config=dict(node.configuration),
        is_start=node.is_start,
        is_end=node.is_end,
        is_enabled=node.enabled,
    )


def edge_to_wire(edge: FlowEdge) -> WireEdge:
    return WireEdge(
        id=edge.id,
        from_node_id=edge.source_node_id,
        to_node_id=edge.target_node_id,
        label=edge.label,
        condition=edge.condition,
        kind=edge.kind,
        order=edge.order,
        is_enabled=edge.enabled,
    )


def variable_to_wire(variable: FlowVariable) -> WireVariable:
    return WireVariable(
        key=variable.key,
        label=variable.label,
        value_type=variable.value_type,
        default_value=variable.default_value,
        scope=variable.scope,
        is_required=variable.required,
        description=variable.description,
    )


def to_wire(flow: Flow, include_id: bool = True) -> Dict[str, Any]:
    """
    Serialize a flow to the backend JSON shape.

    Args:
        flow: Flow to serialize
        include_id: False for create requests, where the server issues the id

    Returns:
        JSON-ready dict with camelCase keys
    """
    wire = WireFlow(
        id=flow.id,
        bot_id=flow.bot_id,
        name=flow.name,
        description=flow.description,
        nodes=[node_to_wire(n) for n in flow.nodes],
        edges=[edge_to_wire(e) for e in flow.edges],
        variables=[variable_to_wire(v) for v in flow.variables],
        version=flow.version,
        is_active=flow.is_active,
    )

    exclude = None if include_id else {"id"}
    return wire.model_dump(mode="json", by_alias=True, exclude=exclude)


# =============================================================================
# Wire -> flow
# =============================================================================


def node_from_wire(wire: WireNode, flow_id: str, catalog: NodeCatalog) -> FlowNode:
    category = wire.category
    if not category:
        known = catalog.category_of(wire.type)
        category = known.value if known else FALLBACK_CATEGORY

    position = wire.position or WirePosition()

    return FlowNode(
        id=wire.id,
        flow_id=flow_id,
        type=wire.type,
        category=category,
        position=Position(position.x, position.y),
        title=wire.title or "",
        description=wire.description or "",
        configuration=dict(wire.config or {}),
        enabled=wire.is_enabled is not False,
        is_start=bool(wire.is_start),
        is_end=bool(wire.is_end),
    )


def edge_from_wire(wire: WireEdge, flow_id: str) -> FlowEdge:
    return FlowEdge(
        id=wire.id,
        flow_id=flow_id,
        source_node_id=wire.from_node_id,
        target_node_id=wire.to_node_id,
        label=wire.label or "",
        condition=wire.condition or None,
        kind=wire.kind or EdgeKind.DEFAULT,
        order=wire.order or 0,
        enabled=wire.is_enabled is not False,
    )


def variable_from_wire(wire: WireVariable) -> FlowVariable:
    return FlowVariable(
        key=wire.key,
        label=wire.label or "",
        value_type=wire.value_type or "string",
        default_value=wire.default_value,
        scope=wire.scope or VariableScope.FLOW,
        required=bool(wire.is_required),
        description=wire.description or "",
    )


def from_wire(
    payload: Dict[str, Any],
    catalog: NodeCatalog,
    bot_id: Optional[str] = None,
) -> Flow:
    """
    Build a Flow from a backend payload.

    Missing flags and geometry get defaults. Edges whose endpoints are
    not in the payload are dropped, so the loaded flow never holds a
    dangling edge.

    Args:
        payload: Flow JSON (already unwrapped from {"data": ...})
        catalog: Catalog used to resolve missing categories
        bot_id: Owning bot, when the payload does not carry it

    Raises:
        pydantic.ValidationError: If the payload is malformed
    """
    wire = WireFlow.model_validate(payload)
    flow_id = wire.id or ""

    nodes = [node_from_wire(n, flow_id, catalog) for n in wire.nodes]
    node_ids = {n.id for n in nodes}

    edges = []
    for wire_edge in wire.edges:
        if wire_edge.from_node_id not in node_ids or wire_edge.to_node_id not in node_ids:
            logger.warning(
                f"Dropping edge {wire_edge.id} of flow {flow_id}: "
                f"{wire_edge.from_node_id} -> {wire_edge.to_node_id} references a missing node"
            )
            continue
        edges.append(edge_from_wire(wire_edge, flow_id))

    return Flow(
        id=flow_id,
        bot_id=wire.bot_id or bot_id or "",
        name=wire.name,
        description=wire.description or "",
        nodes=nodes,
        edges=edges,
        variables=[variable_from_wire(v) for v in wire.variables],
        version=wire.version or 1,
        is_active=wire.is_active is not False,
    )

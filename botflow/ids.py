"""
Client-side identifier generation.

Ids are random (uuid4) rather than timestamp based, so several nodes
created within the same tick never collide.
"""

import uuid

DRAFT_FLOW_PREFIX = "flow_"
NODE_PREFIX = "node_"
EDGE_PREFIX = "edge_"


def _new_id(prefix: str) -> str:
    return f"{prefix}{uuid.uuid4().hex}"


def new_node_id() -> str:
    return _new_id(NODE_PREFIX)


def new_edge_id() -> str:
    return _new_id(EDGE_PREFIX)


def new_draft_flow_id() -> str:
    """Id for a flow that exists only in client memory."""
    return _new_id(DRAFT_FLOW_PREFIX)


def is_draft_id(flow_id: str) -> bool:
    """Whether a flow id was generated client-side and never persisted."""
    return flow_id.startswith(DRAFT_FLOW_PREFIX)

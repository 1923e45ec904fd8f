"""
Flow Validator.

Validates flow structure, connections, and node configurations.
"""

import logging
from typing import Dict, List, Optional, Set

from ..config import NodeCategory
from ..forms.validation import validate_configuration
from ..models import Flow, ValidationIssue, ValidationResult
from ..nodes import NodeCatalog, default_catalog

logger = logging.getLogger(__name__)


class FlowValidator:
    """
    Validates flow structure and configuration.

    Checks:
    - Structural integrity (duplicate ids, dangling edges)
    - Node configuration (required fields, field rules)
    - Connectivity (isolated nodes, loops)
    - Start/end markers (reported, never enforced)
    """

    def __init__(self, catalog: Optional[NodeCatalog] = None):
        self.catalog = catalog or default_catalog()

    def validate(self, flow: Flow) -> ValidationResult:
        """
        Validate a complete flow.

        Args:
            flow: Flow to validate

        Returns:
            ValidationResult with issues found
        """
        issues: List[ValidationIssue] = []

        # Structural validation
        issues.extend(self._validate_structure(flow))

        # Node validation
        issues.extend(self._validate_nodes(flow))

        # Edge validation
        issues.extend(self._validate_edges(flow))

        # Connectivity
        issues.extend(self._validate_connectivity(flow))

        # Markers
        issues.extend(self._report_markers(flow))

        valid = all(i.severity != "error" for i in issues)
        logger.debug(f"Validated flow {flow.id}: {len(issues)} issues, valid={valid}")

        return ValidationResult(valid=valid, issues=issues)

    def _validate_structure(self, flow: Flow) -> List[ValidationIssue]:
        """Validate basic flow structure."""
        issues = []

        # Check for duplicate node IDs
        seen_ids: Set[str] = set()
        for node in flow.nodes:
            if node.id in seen_ids:
                issues.append(
                    ValidationIssue(
                        severity="error",
                        message=f"Duplicate node ID: {node.id}",
                        node_id=node.id,
                    )
                )
            seen_ids.add(node.id)

        # Check for duplicate edge IDs
        seen_edge_ids: Set[str] = set()
        for edge in flow.edges:
            if edge.id in seen_edge_ids:
                issues.append(
                    ValidationIssue(
                        severity="error",
                        message=f"Duplicate edge ID: {edge.id}",
                        edge_id=edge.id,
                    )
                )
            seen_edge_ids.add(edge.id)

        return issues

    def _validate_nodes(self, flow: Flow) -> List[ValidationIssue]:
        """Validate individual nodes."""
        issues = []

        for node in flow.nodes:
            node_def = self.catalog.lookup(node.type)

            if not node_def:
                issues.append(
                    ValidationIssue(
                        severity="error",
                        message=f"Unknown node type: {node.type}",
                        node_id=node.id,
                    )
                )
                continue

            for key, message in validate_configuration(
                node_def.config_schema, node.configuration
            ).items():
                issues.append(
                    ValidationIssue(
                        severity="warning",
                        message=message,
                        node_id=node.id,
                        field_key=key,
                    )
                )

            # Check for disabled nodes with active edges
            if not node.enabled:
                outgoing = [e for e in flow.edges if e.source_node_id == node.id]
                if outgoing:
                    issues.append(
                        ValidationIssue(
                            severity="warning",
                            message="Disabled node has outgoing edges",
                            node_id=node.id,
                        )
                    )

        return issues

    def _validate_edges(self, flow: Flow) -> List[ValidationIssue]:
        """Validate edges between nodes."""
        issues = []
        node_ids = {n.id for n in flow.nodes}

        for edge in flow.edges:
            # Check source node exists
            if edge.source_node_id not in node_ids:
                issues.append(
                    ValidationIssue(
                        severity="error",
                        message=f"Edge source node not found: {edge.source_node_id}",
                        edge_id=edge.id,
                    )
                )

            # Check target node exists
            if edge.target_node_id not in node_ids:
                issues.append(
                    ValidationIssue(
                        severity="error",
                        message=f"Edge target node not found: {edge.target_node_id}",
                        edge_id=edge.id,
                    )
                )

            # Check for self-connections
            if edge.source_node_id == edge.target_node_id:
                issues.append(
                    ValidationIssue(
                        severity="error",
                        message="Node has an edge to itself",
                        node_id=edge.source_node_id,
                        edge_id=edge.id,
                    )
                )

        return issues

    def _validate_connectivity(self, flow: Flow) -> List[ValidationIssue]:
        """Find isolated nodes and unguarded loops."""
        issues = []

        connected: Set[str] = set()
        graph: Dict[str, List[str]] = {n.id: [] for n in flow.nodes}
        for edge in flow.edges:
            connected.add(edge.source_node_id)
            connected.add(edge.target_node_id)
            if edge.source_node_id in graph:
                graph[edge.source_node_id].append(edge.target_node_id)

        if len(flow.nodes) > 1:
            for node in flow.nodes:
                if node.id not in connected:
                    issues.append(
                        ValidationIssue(
                            severity="warning",
                            message="Node has no connections",
                            node_id=node.id,
                        )
                    )

        issues.extend(self._detect_loops(flow, graph))
        return issues

    def _detect_loops(
        self,
        flow: Flow,
        graph: Dict[str, List[str]],
    ) -> List[ValidationIssue]:
        """Detect cycles that do not pass through a loop node."""
        issues = []
        visited: Set[str] = set()
        rec_stack: Set[str] = set()
        types = {n.id: n.type for n in flow.nodes}

        def dfs(node_id: str) -> bool:
            visited.add(node_id)
            rec_stack.add(node_id)

            for neighbor in graph.get(node_id, []):
                if neighbor not in graph:
                    continue
                if neighbor not in visited:
                    if dfs(neighbor):
                        return True
                elif neighbor in rec_stack:
                    if types.get(neighbor) != "flow-loop":
                        issues.append(
                            ValidationIssue(
                                severity="warning",
                                message="Potential infinite loop detected (consider using a Loop node)",
                                node_id=neighbor,
                            )
                        )
                    return True

            rec_stack.remove(node_id)
            return False

        for node_id in graph:
            if node_id not in visited:
                dfs(node_id)

        return issues

    def _report_markers(self, flow: Flow) -> List[ValidationIssue]:
        """Report start/end markers and triggers. Informational only."""
        starts = [n for n in flow.nodes if n.is_start]
        ends = [n for n in flow.nodes if n.is_end]
        triggers = [n for n in flow.nodes if n.category == NodeCategory.TRIGGER.value]

        return [
            ValidationIssue(severity="info", message=f"{len(starts)} start node(s)"),
            ValidationIssue(severity="info", message=f"{len(ends)} end node(s)"),
            ValidationIssue(severity="info", message=f"{len(triggers)} trigger node(s)"),
        ]

    def quick_validate(self, flow: Flow) -> bool:
        """
        Quick validation for basic errors.

        Returns True if no edge references a missing node.
        """
        node_ids = {n.id for n in flow.nodes}
        for edge in flow.edges:
            if edge.source_node_id not in node_ids or edge.target_node_id not in node_ids:
                return False
        return True

"""Unit tests for the flow graph model."""

import pytest

from botflow.config import EdgeKind
from botflow.exceptions import (
    EdgeNotFoundError,
    InvalidConnection,
    NodeNotFoundError,
    UnknownNodeTypeError,
)
from botflow.models import Position


class TestNodes:
    """Tests for node mutations."""

    def test_add_node(self, graph):
        """Test a node takes its category and title from the catalog."""
        node = graph.add_node("trigger-keyword", Position(100, 100))

        assert node.id.startswith("node_")
        assert node.flow_id == graph.flow.id
        assert node.category == "trigger"
        assert node.title == "Keyword"
        assert node.configuration == {}
        assert node.enabled is True
        assert node.is_start is False and node.is_end is False
        assert graph.get_node(node.id) is node

    def test_add_node_unknown_type(self, graph):
        """Test unknown types are rejected and nothing is added."""
        with pytest.raises(UnknownNodeTypeError) as exc_info:
            graph.add_node("no-such-type", Position(0, 0))

        assert exc_info.value.type_id == "no-such-type"
        assert graph.nodes == []

    def test_ids_are_unique(self, graph):
        """Test nodes created back to back get distinct ids."""
        ids = {graph.add_node("action-send-text", Position(0, 0)).id for _ in range(20)}
        assert len(ids) == 20

    def test_move_node(self, greeting_graph):
        """Test moving a node leaves edges untouched."""
        node = greeting_graph.nodes[0]
        edges_before = list(greeting_graph.edges)

        greeting_graph.move_node(node.id, Position(250, 300))

        assert node.position == Position(250, 300)
        assert greeting_graph.edges == edges_before

    def test_move_missing_node(self, graph):
        with pytest.raises(NodeNotFoundError):
            graph.move_node("node_missing", Position(0, 0))

    def test_remove_node_cascades(self, graph):
        """Test removing a node removes every edge touching it."""
        a = graph.add_node("trigger-keyword", Position(0, 0))
        b = graph.add_node("action-send-text", Position(300, 0))
        c = graph.add_node("flow-end", Position(600, 0))
        graph.add_edge(a.id, b.id)
        graph.add_edge(b.id, c.id)
        kept = graph.add_edge(a.id, c.id)

        removed = graph.remove_node(b.id)

        assert len(removed) == 2
        assert graph.edges == [kept]
        assert all(not e.touches(b.id) for e in graph.edges)
        assert not graph.has_node(b.id)

    def test_update_node(self, graph):
        """Test metadata updates; None leaves a field unchanged."""
        node = graph.add_node("action-send-text", Position(0, 0))

        graph.update_node(node.id, title="Welcome", is_start=True)
        graph.update_node(node.id, enabled=False)

        assert node.title == "Welcome"
        assert node.is_start is True
        assert node.enabled is False

    def test_multiple_start_nodes_allowed(self, graph):
        """Test no cardinality policy is applied to start markers."""
        a = graph.add_node("trigger-keyword", Position(0, 0))
        b = graph.add_node("trigger-intent", Position(0, 200))

        graph.update_node(a.id, is_start=True)
        graph.update_node(b.id, is_start=True)

        assert [n.is_start for n in graph.nodes] == [True, True]


class TestConfiguration:
    """Tests for set_node_configuration."""

    def test_merge(self, graph):
        """Test configuration is merged, not replaced."""
        node = graph.add_node("trigger-keyword", Position(0, 0))

        graph.set_node_configuration(node.id, {"keywords": "help"})
        graph.set_node_configuration(node.id, {"caseSensitive": True})

        assert node.configuration == {"keywords": "help", "caseSensitive": True}

    def test_unknown_keys_preserved(self, graph):
        """Test keys missing from the current schema survive."""
        node = graph.add_node("trigger-keyword", Position(0, 0))
        node.configuration = {"legacyOption": 3}

        graph.set_node_configuration(node.id, {"keywords": "hi"})

        assert node.configuration["legacyOption"] == 3


class TestEdges:
    """Tests for edge mutations."""

    def test_add_edge(self, graph):
        """Test connecting two nodes creates exactly one default edge."""
        a = graph.add_node("trigger-keyword", Position(0, 0))
        b = graph.add_node("action-send-text", Position(300, 0))

        edge = graph.add_edge(a.id, b.id)

        assert graph.edges == [edge]
        assert edge.source_node_id == a.id
        assert edge.target_node_id == b.id
        assert edge.kind == EdgeKind.DEFAULT
        assert edge.order == 0
        assert edge.enabled is True

    def test_self_connection_rejected(self, graph):
        """Test a node cannot connect to itself."""
        a = graph.add_node("trigger-keyword", Position(0, 0))

        with pytest.raises(InvalidConnection):
            graph.add_edge(a.id, a.id)

        assert graph.edges == []

    def test_missing_endpoint_rejected(self, graph):
        """Test both endpoints must exist."""
        a = graph.add_node("trigger-keyword", Position(0, 0))

        with pytest.raises(InvalidConnection):
            graph.add_edge(a.id, "node_missing")
        with pytest.raises(InvalidConnection):
            graph.add_edge("node_missing", a.id)

        assert graph.edges == []

    def test_remove_edge(self, greeting_graph):
        edge = greeting_graph.edges[0]

        assert greeting_graph.remove_edge(edge.id) is edge
        assert greeting_graph.edges == []

    def test_remove_missing_edge_is_noop(self, greeting_graph):
        assert greeting_graph.remove_edge("edge_missing") is None
        assert len(greeting_graph.edges) == 1

    def test_update_edge(self, greeting_graph):
        """Test edge attributes are updated, blank condition clears it."""
        edge = greeting_graph.edges[0]

        greeting_graph.update_edge(edge.id, label="yes", condition="x > 1", kind="conditional")
        assert edge.kind == EdgeKind.CONDITIONAL
        assert edge.condition == "x > 1"

        greeting_graph.update_edge(edge.id, condition="")
        assert edge.condition is None
        assert edge.label == "yes"

    def test_update_missing_edge(self, graph):
        with pytest.raises(EdgeNotFoundError):
            graph.update_edge("edge_missing", label="x")

    def test_outgoing_sorted_by_order(self, graph):
        """Test outgoing edges come back in evaluation order."""
        a = graph.add_node("flow-branch", Position(0, 0))
        b = graph.add_node("action-send-text", Position(300, 0))
        c = graph.add_node("action-send-text", Position(300, 200))
        first = graph.add_edge(a.id, b.id)
        second = graph.add_edge(a.id, c.id)
        graph.update_edge(first.id, order=2)
        graph.update_edge(second.id, order=1)

        assert graph.outgoing(a.id) == [second, first]
        assert graph.incoming(b.id) == [first]


class TestListeners:
    """Tests for change notifications."""

    def test_mutations_notify(self, graph):
        """Test each mutation notifies subscribers once."""
        changes = []
        graph.subscribe(changes.append)

        a = graph.add_node("trigger-keyword", Position(0, 0))
        b = graph.add_node("action-send-text", Position(300, 0))
        graph.add_edge(a.id, b.id)
        graph.move_node(a.id, Position(10, 10))
        graph.remove_node(b.id)

        assert [c.action for c in changes] == [
            "add_node",
            "add_node",
            "add_edge",
            "move_node",
            "remove_node",
        ]

    def test_failed_mutation_does_not_notify(self, graph):
        changes = []
        graph.subscribe(changes.append)

        with pytest.raises(UnknownNodeTypeError):
            graph.add_node("nope", Position(0, 0))

        assert changes == []

    def test_unsubscribe(self, graph):
        changes = []
        unsubscribe = graph.subscribe(changes.append)
        unsubscribe()

        graph.add_node("trigger-keyword", Position(0, 0))
        assert changes == []

    def test_rebind_flow_id(self, greeting_graph):
        """Test rebinding updates the flow, nodes and edges without notifying."""
        changes = []
        greeting_graph.subscribe(changes.append)

        greeting_graph.rebind_flow_id("srv-1")

        assert greeting_graph.flow.id == "srv-1"
        assert all(n.flow_id == "srv-1" for n in greeting_graph.nodes)
        assert all(e.flow_id == "srv-1" for e in greeting_graph.edges)
        assert changes == []

"""Unit tests for the wire codec."""

import pytest
from pydantic import ValidationError

from botflow.config import EdgeKind, VariableScope
from botflow.models import FlowVariable
from botflow.persistence import from_wire, to_wire


class TestToWire:
    """Tests for Flow -> backend JSON."""

    def test_field_names(self, greeting_graph):
        """Test nodes and edges use the backend field names."""
        greeting_graph.set_node_configuration(greeting_graph.nodes[0].id, {"keywords": "hi"})
        payload = to_wire(greeting_graph.flow)

        node = payload["nodes"][0]
        assert set(node) == {
            "id", "type", "title", "category", "description", "position",
            "config", "isStart", "isEnd", "isEnabled",
        }
        assert node["position"] == {"x": 100, "y": 100}
        assert node["config"] == {"keywords": "hi"}

        edge = payload["edges"][0]
        assert set(edge) == {
            "id", "fromNodeId", "toNodeId", "label", "condition", "kind", "order", "isEnabled",
        }
        assert edge["kind"] == "default"

        assert payload["botId"] == greeting_graph.flow.bot_id
        assert payload["isActive"] is True

    def test_create_payload_has_no_id(self, greeting_graph):
        payload = to_wire(greeting_graph.flow, include_id=False)
        assert "id" not in payload


class TestFromWire:
    """Tests for backend JSON -> Flow."""

    def test_round_trip(self, greeting_graph, catalog):
        """Test decoding an encoded flow gives the same flow."""
        flow = greeting_graph.flow
        greeting_graph.update_edge(flow.edges[0].id, label="next", condition="ok", kind="success")
        greeting_graph.update_node(flow.nodes[0].id, is_start=True)
        flow.variables.append(
            FlowVariable(key="name", label="Name", default_value="guest", scope=VariableScope.SESSION)
        )

        assert from_wire(to_wire(flow), catalog) == flow

    def test_defaults(self, catalog):
        """Test missing flags, geometry and category get defaults."""
        flow = from_wire(
            {
                "id": "flow-1",
                "name": "Imported",
                "nodes": [{"id": "n1", "type": "trigger-keyword"}, {"id": "n2", "type": "flow-end"}],
                "edges": [{"id": "e1", "fromNodeId": "n1", "toNodeId": "n2"}],
            },
            catalog,
            bot_id="bot-1",
        )

        node = flow.nodes[0]
        assert node.category == "trigger"
        assert node.position.x == 0 and node.position.y == 0
        assert node.enabled is True
        assert node.is_start is False and node.is_end is False
        assert node.flow_id == "flow-1"

        edge = flow.edges[0]
        assert edge.kind == EdgeKind.DEFAULT
        assert edge.order == 0
        assert edge.enabled is True
        assert edge.condition is None

        assert flow.bot_id == "bot-1"
        assert flow.version == 1

    def test_dangling_edges_dropped(self, catalog):
        """Test edges referencing absent nodes are discarded on load."""
        flow = from_wire(
            {
                "id": "flow-1",
                "nodes": [{"id": "n1", "type": "trigger-keyword"}],
                "edges": [
                    {"id": "e1", "fromNodeId": "n1", "toNodeId": "ghost"},
                    {"id": "e2", "fromNodeId": "ghost", "toNodeId": "n1"},
                ],
            },
            catalog,
        )

        assert flow.edges == []
        assert len(flow.nodes) == 1

    def test_unknown_type_kept(self, catalog):
        """Test nodes of unknown types survive loading."""
        flow = from_wire(
            {
                "id": "flow-1",
                "nodes": [
                    {"id": "n1", "type": "legacy-type", "category": "integration"},
                    {"id": "n2", "type": "other-legacy"},
                ],
            },
            catalog,
        )

        assert flow.nodes[0].category == "integration"
        assert flow.nodes[1].category == "advanced"

    def test_nulls_are_defaults(self, catalog):
        flow = from_wire(
            {
                "id": "flow-1",
                "description": None,
                "nodes": [
                    {"id": "n1", "type": "flow-end", "title": None, "config": None, "isEnabled": None}
                ],
            },
            catalog,
        )

        assert flow.description == ""
        assert flow.nodes[0].configuration == {}
        assert flow.nodes[0].enabled is True

    def test_disabled_flags_respected(self, catalog):
        flow = from_wire(
            {
                "id": "flow-1",
                "isActive": False,
                "nodes": [{"id": "n1", "type": "flow-end", "isEnabled": False, "isEnd": True}],
            },
            catalog,
        )

        assert flow.is_active is False
        assert flow.nodes[0].enabled is False
        assert flow.nodes[0].is_end is True

    def test_malformed_payload(self, catalog):
        with pytest.raises(ValidationError):
            from_wire({"id": "flow-1", "nodes": [{"type": "no-id"}]}, catalog)

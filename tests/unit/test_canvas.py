"""Unit tests for the canvas viewport, controller and renderer."""

import pytest

from botflow.canvas import BezierRenderer, CanvasController, InteractionMode, Viewport
from botflow.config import CanvasConfig
from botflow.exceptions import UnknownNodeTypeError
from botflow.models import Position


class TestViewport:
    """Tests for the screen/graph transform and zoom."""

    def test_transform_round_trip(self):
        viewport = Viewport(offset=Position(30, -20), zoom=1.5, origin=Position(10, 50))
        screen = Position(400, 300)

        point = viewport.screen_to_graph(screen)

        assert point.x == pytest.approx((400 - 10 - 30) / 1.5)
        assert point.y == pytest.approx((300 - 50 + 20) / 1.5)
        back = viewport.graph_to_screen(point)
        assert back.x == pytest.approx(400)
        assert back.y == pytest.approx(300)

    def test_zoom_clamped(self):
        """Test zoom never leaves [0.5, 2.0] whatever the sequence."""
        viewport = Viewport()

        for _ in range(30):
            viewport.zoom_in()
            assert 0.5 <= viewport.zoom <= 2.0
        assert viewport.zoom == 2.0

        for _ in range(30):
            viewport.zoom_out()
            assert 0.5 <= viewport.zoom <= 2.0
        assert viewport.zoom == 0.5

        assert viewport.set_zoom(10) == 2.0
        assert viewport.set_zoom(-3) == 0.5

    def test_zoom_step(self):
        viewport = Viewport()
        assert viewport.zoom_in() == pytest.approx(1.1)

    def test_zoom_about_anchor(self):
        """Test the graph point under the cursor stays put."""
        viewport = Viewport(offset=Position(40, 25), origin=Position(5, 5))
        anchor = Position(320, 240)
        before = viewport.screen_to_graph(anchor)

        viewport.set_zoom(1.7, anchor=anchor)

        after = viewport.screen_to_graph(anchor)
        assert after.x == pytest.approx(before.x)
        assert after.y == pytest.approx(before.y)

    def test_grid(self):
        """Test grid spacing scales with zoom and phase follows the offset."""
        viewport = Viewport(offset=Position(130, -10), zoom=0.5)

        assert viewport.grid_spacing == 20
        assert viewport.grid_phase == (10, 10)

    def test_from_config(self):
        config = CanvasConfig(min_zoom=0.25, max_zoom=4.0, default_zoom=1.0)
        viewport = Viewport.from_config(config)

        assert viewport.set_zoom(3.0) == 3.0
        assert viewport.set_zoom(0.1) == 0.25


class TestCanvasController:
    """Tests for pointer interaction."""

    @pytest.fixture
    def controller(self, graph, canvas_config) -> CanvasController:
        return CanvasController(graph, config=canvas_config)

    def test_drop_node_at_graph_point(self, controller):
        """Test a palette drop lands at the transformed point."""
        controller.viewport.pan_by(50, 20)
        controller.viewport.set_zoom(2.0)

        node = controller.drop_node("trigger-keyword", Position(250, 220))

        assert node.position == Position(100, 100)
        assert controller.selected_node_id == node.id

    def test_drop_unknown_type(self, controller, graph):
        with pytest.raises(UnknownNodeTypeError):
            controller.drop_node("nope", Position(0, 0))
        assert graph.nodes == []

    def test_pan_on_empty_canvas(self, controller):
        """Test dragging empty canvas pans and moves no node."""
        node = controller.drop_node("trigger-keyword", Position(100, 100))

        mode = controller.pointer_down(Position(600, 600))
        controller.pointer_move(Position(650, 580))
        controller.pointer_up()

        assert mode == InteractionMode.PANNING
        assert controller.viewport.offset == Position(50, -20)
        assert node.position == Position(100, 100)
        assert controller.mode == InteractionMode.IDLE

    def test_empty_canvas_clears_selection(self, controller):
        controller.drop_node("trigger-keyword", Position(100, 100))
        assert controller.selected_node_id is not None

        controller.pointer_down(Position(900, 900))

        assert controller.selection == set()

    def test_drag_node(self, controller):
        """Test dragging a node moves only that node, keeping the grab point."""
        node = controller.drop_node("trigger-keyword", Position(100, 100))
        offset_before = Position(controller.viewport.offset.x, controller.viewport.offset.y)

        mode = controller.pointer_down(Position(120, 130))
        controller.pointer_move(Position(220, 180))
        controller.pointer_up()

        assert mode == InteractionMode.DRAGGING_NODE
        assert node.position == Position(200, 150)
        assert controller.viewport.offset == offset_before

    def test_drag_node_while_zoomed(self, controller):
        controller.viewport.set_zoom(2.0)
        node = controller.drop_node("trigger-keyword", Position(200, 200))

        controller.pointer_down(Position(210, 210), node_id=node.id)
        controller.pointer_move(Position(310, 210))

        assert node.position == Position(150, 100)

    def test_delete_selected_node_cascades(self, controller, graph):
        a = controller.drop_node("trigger-keyword", Position(0, 0))
        b = controller.drop_node("action-send-text", Position(400, 0))
        graph.add_edge(a.id, b.id)

        controller.select_node(a.id)
        assert controller.delete_selected() is True

        assert [n.id for n in graph.nodes] == [b.id]
        assert graph.edges == []

    def test_delete_selected_edge(self, controller, graph):
        a = controller.drop_node("trigger-keyword", Position(0, 0))
        b = controller.drop_node("action-send-text", Position(400, 0))
        edge = graph.add_edge(a.id, b.id)

        controller.select_edge(edge.id)

        assert controller.delete_selected() is True
        assert graph.edges == []
        assert len(graph.nodes) == 2

    def test_delete_without_selection(self, controller):
        assert controller.delete_selected() is False

    def test_wheel_zoom(self, controller):
        assert controller.wheel(-1) == pytest.approx(1.1)
        assert controller.wheel(1) == pytest.approx(1.0)
        assert controller.wheel(0) == pytest.approx(1.0)


class TestBezierRenderer:
    """Tests for the default render strategy."""

    def test_edge_anchors(self, greeting_graph):
        """Test edges run from source right-middle to target left-middle."""
        viewport = Viewport()
        renderer = BezierRenderer(CanvasConfig(node_width=200, node_height=100))

        scene = renderer.render(greeting_graph.flow, viewport, set())
        edge = scene.edges[0]

        assert edge.start == Position(300, 150)
        assert edge.end == Position(400, 150)
        assert edge.path.startswith("M 300 150 C")
        assert len(scene.nodes) == 2

    def test_geometry_follows_moves(self, greeting_graph):
        """Test paths are recomputed from current node positions."""
        renderer = BezierRenderer()
        target = greeting_graph.nodes[1]
        greeting_graph.move_node(target.id, Position(500, 300))

        edge = renderer.render(greeting_graph.flow, Viewport(), set()).edges[0]

        assert edge.end == Position(500, 350)

    def test_zoomed_boxes(self, greeting_graph):
        viewport = Viewport(zoom=0.5)
        scene = BezierRenderer().render(greeting_graph.flow, viewport, set())

        assert scene.nodes[0].width == 100
        assert scene.nodes[0].x == 50

    def test_selection_and_preview(self, greeting_graph):
        trigger = greeting_graph.nodes[0]
        edge = greeting_graph.edges[0]

        scene = BezierRenderer().render(
            greeting_graph.flow,
            Viewport(),
            {trigger.id, edge.id},
            preview=(trigger.id, Position(600, 400)),
        )

        assert scene.nodes[0].selected is True
        assert scene.edges[0].selected is True
        assert scene.preview.end == Position(600, 400)

"""Tests for the graph view model."""

import pytest
import numpy as np
from forcegraph.geom import Point
from forcegraph.graph import Node, Edge, Graph, NodeShape
from forcegraph.layout import LayoutKind, CircularLayout, ForceDirectedLayout
from forcegraph.viewmodel import EventType, NodeView, GraphViewModel


def make_view_model(size=(800, 600), layout=LayoutKind.circular):
    nodes = [
        Node('a', position=Point(0.25, 0.5)),
        Node('b', position=Point(0.75, 0.5), shape=NodeShape.square),
        Node('c', position=Point(0.5, 0.25)),
    ]
    edges = [Edge('a', 'b'), Edge('b', 'c')]
    vm = GraphViewModel(Graph(nodes, edges), layout=layout)
    vm.update_canvas_size(size)
    return vm


class TestEventType:
    """Test EventType enum."""

    def test_event_names(self):
        """Test event type names."""
        assert EventType['tick'] == EventType.tick
        assert EventType['layoutChanged'] == EventType.layoutChanged
        assert EventType['resize'] == EventType.resize


class TestTransforms:
    """Test model/view transforms."""

    def test_initial_identity(self):
        """Test transforms start as identity."""
        vm = GraphViewModel(Graph())
        assert np.array_equal(vm.model_to_view.matrix, np.eye(3))
        assert np.array_equal(vm.view_to_model.matrix, np.eye(3))

    def test_landscape_canvas(self):
        """Test unit square is centred horizontally on a wide canvas."""
        vm = make_view_model((800, 600))
        assert vm.scale_factor == pytest.approx(600)
        p = vm.model_to_view.apply(Point(0, 0))
        assert p.x == pytest.approx(100)
        assert p.y == pytest.approx(0)
        p = vm.model_to_view.apply(Point(1, 1))
        assert p.x == pytest.approx(700)
        assert p.y == pytest.approx(600)

    def test_portrait_canvas(self):
        """Test unit square is centred vertically on a tall canvas."""
        vm = make_view_model((300, 500))
        p = vm.model_to_view.apply(Point(0.5, 0.5))
        assert p.x == pytest.approx(150)
        assert p.y == pytest.approx(250)
        assert vm.model_to_view.ty == pytest.approx(100)

    def test_inverse(self):
        """Test view_to_model undoes model_to_view."""
        for size in [(800, 600), (300, 500), (1, 1), (1024.5, 77.25)]:
            vm = make_view_model(size)
            m = vm.model_to_view.then(vm.view_to_model).matrix
            assert np.allclose(m, np.eye(3), rtol=0.0, atol=1e-9)

    def test_canvas_size_property(self):
        """Test setting canvas_size recomputes transforms."""
        vm = make_view_model((100, 100))
        vm.canvas_size = (400, 200)
        assert vm.canvas_size == (400, 200)
        assert vm.scale_factor == pytest.approx(200)

    def test_zero_canvas(self):
        """Test degenerate canvas gives identity transforms."""
        vm = make_view_model((0, 0))
        assert np.array_equal(vm.model_to_view.matrix, np.eye(3))
        assert np.array_equal(vm.view_to_model.matrix, np.eye(3))

    def test_negative_canvas(self):
        """Test negative canvas gives identity transforms."""
        vm = make_view_model((-10, 300))
        assert np.array_equal(vm.model_to_view.matrix, np.eye(3))
        assert np.array_equal(vm.view_to_model.matrix, np.eye(3))

    def test_link_width_model(self):
        """Test link width converted to model units."""
        vm = make_view_model((400, 400))
        assert vm.link_width_model == pytest.approx(2.0 / 400)


class TestHitTest:
    """Test model_rect and hit_test."""

    def test_model_rect_constant_view_size(self):
        """Test hit rectangle has the node size in view space."""
        vm = make_view_model((400, 400))
        r = vm.model_rect(vm.graph.node_at(0))
        assert (r.X - r.x) * vm.scale_factor == pytest.approx(vm.node_size)
        assert (r.x + r.X) / 2 == pytest.approx(0.25)
        assert (r.y + r.Y) / 2 == pytest.approx(0.5)

    def test_hit_at_node_position(self):
        """Test a point at a node's view position hits that node."""
        vm = make_view_model((800, 600))
        for i, nv in enumerate(vm.node_views()):
            assert vm.hit_test(nv.position) == i

    def test_hit_within_node_size(self):
        """Test points near the node still hit."""
        vm = make_view_model((800, 600))
        p = vm.node_views()[1].position
        assert vm.hit_test(Point(p.x + 9, p.y - 9)) == 1
        assert vm.hit_test(Point(p.x + 11, p.y)) is None

    def test_miss(self):
        """Test empty space hits nothing."""
        vm = make_view_model((800, 600))
        assert vm.hit_test(Point(5, 5)) is None

    def test_first_node_wins(self):
        """Test overlapping nodes resolve to the first in canonical order."""
        vm = make_view_model((400, 400))
        vm.graph.node_at(2).position = Point(0.25, 0.5)
        assert vm.hit_test(Point(100, 200)) == 0

    def test_resize_invalidates_hit(self):
        """Test hit-testing follows a canvas resize."""
        vm = make_view_model((400, 400))
        assert vm.hit_test(Point(100, 200)) == 0
        vm.update_canvas_size((800, 800))
        assert vm.hit_test(Point(100, 200)) is None
        assert vm.hit_test(Point(200, 400)) == 0

    def test_zero_canvas_does_not_crash(self):
        """Test degenerate canvas hit-tests nothing."""
        vm = make_view_model((0, 0))
        assert vm.hit_test(Point(0.25, 0.5)) is None
        r = vm.model_rect(vm.graph.node_at(0))
        assert r.X - r.x == 0
        assert len(vm.node_views()) == 3

    def test_degenerate_canvas_hits_nothing(self):
        """Test no point hits a node until the canvas has a real size."""
        vm = make_view_model((-10, 300))
        for p in [Point(0, 0), Point(5, 5), Point(0.75, 0.5), Point(-3, 8)]:
            assert vm.hit_test(p) is None

        vm.update_canvas_size((400, 400))
        assert vm.hit_test(Point(100, 200)) == 0

    def test_hit_before_canvas_size(self):
        """Test a fresh view model hit-tests nothing."""
        vm = GraphViewModel(Graph([Node('a', position=Point(0.5, 0.5))]))
        assert vm.hit_test(Point(0.5, 0.5)) is None


class TestDragPrimitives:
    """Test drag_node and stop_dragging_node."""

    def test_drag_node(self):
        """Test dragging places node and freezes it."""
        vm = make_view_model((400, 400))
        v = vm.graph.node_at(1)
        v.velocity = Point(1, 1)
        vm.drag_node(1, Point(200, 100))
        assert v.position.x == pytest.approx(0.5)
        assert v.position.y == pytest.approx(0.25)
        assert v.velocity == Point(0, 0)
        assert v.is_interactive

    def test_stop_dragging(self):
        """Test releasing a node."""
        vm = make_view_model((400, 400))
        vm.drag_node(0, Point(10, 10))
        vm.stop_dragging_node(0)
        assert not vm.graph.node_at(0).is_interactive

    def test_bad_index(self):
        """Test bad indices fail fast."""
        vm = make_view_model()
        with pytest.raises(IndexError):
            vm.drag_node(3, Point(0, 0))
        with pytest.raises(IndexError):
            vm.stop_dragging_node(-1)


class TestLayoutSelection:
    """Test switching layouts."""

    def test_default_layout(self):
        """Test circular is the default."""
        vm = GraphViewModel(Graph())
        assert vm.layout == LayoutKind.circular
        assert isinstance(vm.layout_engine, CircularLayout)

    def test_switch_layout(self):
        """Test setting the layout replaces the engine."""
        vm = make_view_model()
        vm.layout = LayoutKind.forceDirected
        assert isinstance(vm.layout_engine, ForceDirectedLayout)
        vm.layout = 'circular'
        assert isinstance(vm.layout_engine, CircularLayout)

    def test_switch_discards_private_state(self):
        """Test rotation phase resets but node positions are kept."""
        vm = make_view_model()
        for _ in range(3):
            vm.update_simulation()
        assert vm.layout_engine.start_angle == pytest.approx(0.015)
        before = [v.position for v in vm.graph.nodes]

        vm.layout = LayoutKind.forceDirected
        vm.layout = LayoutKind.circular

        assert vm.layout_engine.start_angle == 0.0
        assert [v.position for v in vm.graph.nodes] == before

    def test_bad_layout_name(self):
        """Test unknown layout names are rejected."""
        vm = make_view_model()
        with pytest.raises(ValueError):
            vm.layout = 'grid'


class TestFrameOutput:
    """Test node_views and link_segments."""

    def test_node_views(self):
        """Test nodes in canonical order in view space."""
        vm = make_view_model((400, 400))
        views = vm.node_views()
        assert [nv.id for nv in views] == ['a', 'b', 'c']
        assert isinstance(views[0], NodeView)
        assert views[1].shape == NodeShape.square
        assert views[0].position.x == pytest.approx(100)
        assert views[0].position.y == pytest.approx(200)

    def test_link_segments(self):
        """Test edge end points in view space."""
        vm = make_view_model((400, 400))
        segments = vm.link_segments()
        assert len(segments) == 2
        (s, t) = segments[0]
        assert (s.x, s.y) == pytest.approx((100, 200))
        assert (t.x, t.y) == pytest.approx((300, 200))

    def test_link_segments_skip_unknown(self):
        """Test edges to missing nodes are not drawn."""
        vm = make_view_model((400, 400))
        vm.graph.add_edge(Edge('a', 'ghost'))
        assert len(vm.link_segments()) == 2


class TestEvents:
    """Test the event system."""

    def test_tick_event(self):
        """Test a listener is called on every simulation step."""
        vm = make_view_model()
        events = []
        vm.on(EventType.tick, events.append)
        vm.update_simulation()
        vm.update_simulation()
        assert len(events) == 2
        assert events[0]['type'] == EventType.tick

    def test_string_event_name(self):
        """Test subscribing by name."""
        vm = make_view_model()
        events = []
        assert vm.on('layoutChanged', events.append) is vm
        vm.layout = 'forceDirected'
        assert events[0]['layout'] == LayoutKind.forceDirected

    def test_resize_event(self):
        """Test resize fires with the new size."""
        vm = make_view_model()
        events = []
        vm.on(EventType.resize, events.append)
        vm.canvas_size = (10, 20)
        assert events[0]['size'] == (10, 20)


class TestOptions:
    """Test configuration from an options mapping."""

    def test_from_options(self):
        """Test recognised options are applied."""
        vm = GraphViewModel.from_options(
            Graph.sample(),
            {'layout': 'forceDirected', 'node_size': 30.0, 'canvas_size': (200, 100)}
        )
        assert vm.layout == LayoutKind.forceDirected
        assert vm.node_size == 30.0
        assert vm.scale_factor == pytest.approx(100)

    def test_defaults(self):
        """Test empty options give defaults."""
        vm = GraphViewModel.from_options(Graph(), {})
        assert vm.layout == LayoutKind.circular
        assert vm.node_size == GraphViewModel.node_size

    def test_unknown_option(self):
        """Test unknown options are rejected."""
        with pytest.raises(ValueError):
            GraphViewModel.from_options(Graph(), {'gravity': 1.0})

    def test_unknown_layout(self):
        """Test unknown layout option is rejected."""
        with pytest.raises(ValueError):
            GraphViewModel.from_options(Graph(), {'layout': 'tree'})

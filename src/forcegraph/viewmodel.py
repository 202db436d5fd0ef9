"""
View model connecting a graph and its layout engine to a renderer.

This module implements the GraphViewModel class which provides:
- Model/view coordinate transforms sized to the canvas
- Hit-testing of view points against nodes
- Drag primitives that put nodes under user control
- Per-frame simulation ticks and view-space output for drawing
- Event system (tick/layoutChanged/resize events)
"""

from __future__ import annotations

from typing import Any, Callable, Hashable, Mapping, NamedTuple, Optional, TypedDict, Union
from enum import IntEnum

from .geom import AffineTransform, Point, Rectangle
from .graph import Graph, Node, NodeShape
from .layout import GraphLayout, LayoutKind


class EventType(IntEnum):
    """
    The view model fires three events:
    - tick: fired once per simulation step, listen to this to redraw
    - layoutChanged: the layout engine was replaced
    - resize: the canvas size and transforms changed
    """
    tick = 0
    layoutChanged = 1
    resize = 2


class Event(TypedDict, total=False):
    """Event dictionary passed to event listeners."""
    type: EventType
    layout: LayoutKind
    size: tuple[float, float]


class NodeView(NamedTuple):
    """What a renderer needs to draw one node."""
    id: Hashable
    position: Point
    shape: NodeShape
    size: float


class GraphViewModel:
    """
    Owns a graph, the active layout engine and the model/view transforms.

    Model space is the unit square in which the layout engines work; view
    space is the canvas in pixels. The transforms map the unit square onto
    the largest centred square that fits the canvas.
    """

    node_size = 20.0
    font_size = 12.0
    link_width = 2.0

    OPTIONS = ('layout', 'node_size', 'canvas_size')

    def __init__(
        self,
        graph: Graph,
        layout: Union[LayoutKind, str] = LayoutKind.circular,
        node_size: Optional[float] = None
    ):
        """
        Initialize view model.

        Args:
            graph: Graph to lay out, owned and mutated by this view model
            layout: Initial layout strategy
            node_size: Node drawing size in view units
        """
        self.graph = graph
        if node_size is not None:
            self.node_size = node_size

        self._canvas_size: tuple[float, float] = (0.0, 0.0)
        self.model_to_view = AffineTransform.identity()
        self.view_to_model = AffineTransform.identity()
        self._degenerate = True

        self._layout = LayoutKind.parse(layout)
        self.layout_engine: GraphLayout = self._layout.make_engine()

        self.event: Optional[dict] = None

    @classmethod
    def from_options(cls, graph: Graph, options: Mapping[str, Any]) -> GraphViewModel:
        """
        Create a view model from an options mapping.

        Recognised options are 'layout' ("circular" or "forceDirected"),
        'node_size' and 'canvas_size' ((width, height)).

        Raises:
            ValueError: On an unknown option or layout name
        """
        unknown = [k for k in options if k not in cls.OPTIONS]
        if unknown:
            raise ValueError(f"unknown options: {', '.join(sorted(unknown))}")

        vm = cls(
            graph,
            layout=options.get('layout', LayoutKind.circular),
            node_size=options.get('node_size')
        )
        if 'canvas_size' in options:
            vm.canvas_size = options['canvas_size']
        return vm

    def on(self, e: Union[EventType, str], listener: Callable[[Event], None]) -> GraphViewModel:
        """
        Subscribe a listener to an event.

        Args:
            e: Event type (EventType enum or string name)
            listener: Function to call when event fires

        Returns:
            self for method chaining
        """
        if self.event is None:
            self.event = {}

        if isinstance(e, str):
            e = EventType[e]
        self.event[e] = listener
        return self

    def trigger(self, e: Event) -> None:
        """Call the listener registered for an event, if any."""
        if self.event and e['type'] in self.event:
            self.event[e['type']](e)

    @property
    def canvas_size(self) -> tuple[float, float]:
        return self._canvas_size

    @canvas_size.setter
    def canvas_size(self, size: tuple[float, float]) -> None:
        self.update_canvas_size(size)

    def update_canvas_size(self, size: tuple[float, float]) -> None:
        """
        Recompute both transforms for a new canvas size.

        The unit square is scaled by min(width, height) and centred on the
        canvas. A canvas without a positive extent in both dimensions gets
        identity transforms.

        Args:
            size: Canvas (width, height) in view units
        """
        width, height = size
        self._canvas_size = (width, height)

        m = min(width, height)
        self._degenerate = m <= 0
        if not self._degenerate:
            self.model_to_view = (
                AffineTransform.identity()
                .translated_by((width - m) * 0.5, (height - m) * 0.5)
                .scaled_by(m, m)
            )
            self.view_to_model = self.model_to_view.inverted()
        else:
            self.model_to_view = AffineTransform.identity()
            self.view_to_model = AffineTransform.identity()

        self.trigger({'type': EventType.resize, 'size': self._canvas_size})

    @property
    def layout(self) -> LayoutKind:
        return self._layout

    @layout.setter
    def layout(self, kind: Union[LayoutKind, str]) -> None:
        # A fresh engine drops private state such as the rotation phase
        self._layout = LayoutKind.parse(kind)
        self.layout_engine = self._layout.make_engine()
        self.trigger({'type': EventType.layoutChanged, 'layout': self._layout})

    @property
    def scale_factor(self) -> float:
        """Uniform scale of the model to view transform."""
        return self.model_to_view.a

    @property
    def link_width_model(self) -> float:
        """Link width expressed in model units."""
        return self.link_width * self.view_to_model.a

    def model_rect(self, node: Node) -> Rectangle:
        """
        Hit-testing rectangle of a node in model space.

        The rectangle has the node's view size on screen whatever the
        canvas size. Without a usable canvas the rectangle is empty, so
        nothing can be hit.
        """
        if self._degenerate:
            return Rectangle.around(node.position, 0.0)
        return Rectangle.around(node.position, self.node_size / (2 * self.scale_factor))

    def hit_test(self, point: Point) -> Optional[int]:
        """
        Find the node under a view point.

        Args:
            point: Location in view space

        Returns:
            Canonical index of the first node whose rectangle contains the
            point, or None
        """
        model_point = self.view_to_model.apply(point)
        for i, v in enumerate(self.graph.nodes):
            if self.model_rect(v).contains(model_point):
                return i
        return None

    def drag_node(self, index: int, location: Point) -> None:
        """
        Move a node under user control.

        The node is frozen against the simulation until stop_dragging_node.

        Args:
            index: Canonical node index, as returned by hit_test
            location: Pointer location in view space
        """
        v = self.graph.node_at(index)
        v.position = self.view_to_model.apply(location)
        v.velocity = Point.zero()
        v.is_interactive = True

    def stop_dragging_node(self, index: int) -> None:
        """Hand a dragged node back to the simulation."""
        self.graph.node_at(index).is_interactive = False

    def update_simulation(self) -> None:
        """Run one tick of the active layout engine."""
        self.layout_engine.update(self.graph)
        self.trigger({'type': EventType.tick, 'layout': self._layout})

    def node_views(self) -> list[NodeView]:
        """Nodes in canonical order, positioned in view space."""
        return [
            NodeView(v.id, self.model_to_view.apply(v.position), v.shape, v.size)
            for v in self.graph.nodes
        ]

    def link_segments(self) -> list[tuple[Point, Point]]:
        """
        Edge end points in view space, in edge order.

        Edges referring to nodes that are not in the graph are skipped.
        """
        lookup = {v.id: v.position for v in self.graph.nodes}
        segments = []
        for e in self.graph.edges:
            source = lookup.get(e.source_id)
            target = lookup.get(e.target_id)
            if source is None or target is None:
                continue
            segments.append((self.model_to_view.apply(source), self.model_to_view.apply(target)))
        return segments

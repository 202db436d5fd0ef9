"""
forcegraph: interactive force-directed graph layout

Graph model, layout engines, coordinate transforms and drag handling for
drawing a small graph with a live physics layout.
"""

__version__ = "0.1.0"

from .geom import Point, Rectangle, AffineTransform
from .graph import NodeShape, Node, Edge, Graph, build_adjacency
from .layout import (
    GraphLayout, LayoutKind, CircularLayout, ForceDirectedLayout, PerformanceWarning
)
from .viewmodel import EventType, NodeView, GraphViewModel
from .interaction import PointerPhase, DragState, DragController

__all__ = [
    "Point", "Rectangle", "AffineTransform",
    "NodeShape", "Node", "Edge", "Graph", "build_adjacency",
    "GraphLayout", "LayoutKind", "CircularLayout", "ForceDirectedLayout",
    "PerformanceWarning",
    "EventType", "NodeView", "GraphViewModel",
    "PointerPhase", "DragState", "DragController",
]

"""
Layout engines for interactive graph drawing.

This module provides the GraphLayout interface and its two strategies:
- CircularLayout: evenly spaced nodes on a slowly rotating circle
- ForceDirectedLayout: spring/repulsion physics integrated with Euler steps

Both engines advance every non-interactive node by exactly one step per
call to update(). Nodes with is_interactive set are under user control and
their positions are never written by an engine.
"""

from __future__ import annotations

from typing import Union
from enum import IntEnum
import math
import warnings
import numpy as np

from .geom import Point
from .graph import Graph


class PerformanceWarning(UserWarning):
    """Warning about performance-related issues."""
    pass


class GraphLayout:
    """
    Interface of a layout engine.

    Subclasses may keep private state between ticks (e.g. a rotation
    phase); that state is discarded when the engine is replaced.
    """

    def update(self, graph: Graph) -> None:
        """
        Advance the layout by one tick, in place.

        Args:
            graph: Graph whose node positions and velocities are updated
        """
        raise NotImplementedError


class LayoutKind(IntEnum):
    """
    The available layout strategies.

    - circular: nodes on a rotating circle
    - forceDirected: spring/repulsion simulation
    """
    circular = 0
    forceDirected = 1

    def make_engine(self) -> GraphLayout:
        """Create a fresh engine for this kind of layout."""
        if self is LayoutKind.circular:
            return CircularLayout()
        return ForceDirectedLayout()

    @classmethod
    def parse(cls, value: Union[LayoutKind, str, int]) -> LayoutKind:
        """
        Convert a layout name or value to a LayoutKind.

        Names are matched ignoring case, underscores and hyphens, so
        "forceDirected", "force_directed" and "force-directed" are the same.

        Raises:
            ValueError: If value does not name a layout
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.replace('_', '').replace('-', '').lower()
            for kind in cls:
                if kind.name.lower() == key:
                    return kind
            raise ValueError(f"unknown layout {value!r}")
        return cls(value)


class CircularLayout(GraphLayout):
    """
    Places nodes evenly on a circle that rotates a little every tick.
    """

    def __init__(self, radius: float = 0.4, angle_step: float = 0.005):
        self.radius = radius
        self.center = Point(0.5, 0.5)
        self.angle_step = angle_step
        self.start_angle = 0.0

    def update(self, graph: Graph) -> None:
        n = len(graph.nodes)
        if n == 0:
            return

        delta = 2 * math.pi / n
        angle = self.start_angle
        for v in graph.nodes:
            # interactive nodes keep their slot so the others don't shift
            if not v.is_interactive:
                v.position = self.center + Point(math.cos(angle), math.sin(angle)) * self.radius
                v.velocity = Point.zero()
            angle += delta

        self.start_angle += self.angle_step


class ForceDirectedLayout(GraphLayout):
    """
    Force-directed layout integrated with explicit Euler steps.

    Each tick computes, from a snapshot of the current positions:
    - all-pairs repulsion: charge * (p_i - p_j) / |p_i - p_j|^2
    - spring attraction along every edge, in both directions:
      k * (|p_j - p_i| - spring_length) * unit(p_j - p_i)
    - a centering drift from the mean position towards (0.5, 0.5), added
      directly to the position of every non-interactive node

    Velocities become (v + F * time_step) * friction for every node;
    interactive nodes then have their velocity zeroed and keep their
    position.

    Repulsion is O(n^2) per tick with no spatial partitioning, which limits
    this engine to small graphs. Large forces are not clamped.
    """

    ZERO_DISTANCE_SQUARED = 1e-8

    large_graph_threshold = 1000

    def __init__(
        self,
        friction: float = 0.001,
        spring_length: float = 0.15,
        spring_constant: float = 40.0,
        charge_constant: float = 0.05875,
        time_step: float = 0.5
    ):
        self.friction = friction
        self.spring_length = spring_length
        self.spring_constant = spring_constant
        self.charge_constant = charge_constant
        self.time_step = time_step
        self._warned = False

    @staticmethod
    def edge_pairs(graph: Graph) -> np.ndarray:
        """
        Resolve edges to pairs of canonical node indices.

        Edges with an endpoint that is not in the graph are skipped.

        Returns:
            Integer array of shape (m, 2)
        """
        pairs = []
        for e in graph.edges:
            if graph.contains(e.source_id) and graph.contains(e.target_id):
                pairs.append((graph.index_of(e.source_id), graph.index_of(e.target_id)))
        if not pairs:
            return np.zeros((0, 2), dtype=int)
        return np.array(pairs, dtype=int)

    def repulsion(self, x: np.ndarray) -> np.ndarray:
        """
        Compute all-pairs repulsion.

        Args:
            x: Positions (2 x n)

        Returns:
            Repulsive force per node (2 x n)
        """
        n = x.shape[1]

        # diff[:, i, j] = x[:, i] - x[:, j]
        diff = x[:, :, np.newaxis] - x[:, np.newaxis, :]
        dist_squared = np.sum(diff ** 2, axis=0)

        # Near-coincident pairs (including each node with itself) are ignored
        valid_mask = ~np.eye(n, dtype=bool) & (dist_squared > self.ZERO_DISTANCE_SQUARED)
        safe_dist_sq = np.where(valid_mask, dist_squared, 1.0)
        scale = np.where(valid_mask, self.charge_constant / safe_dist_sq, 0.0)

        return np.sum(diff * scale[np.newaxis, :, :], axis=2)

    def springs(self, x: np.ndarray, pairs: np.ndarray) -> np.ndarray:
        """
        Compute spring forces along edges.

        Every edge pulls (or pushes) both of its endpoints. Edges whose
        endpoints coincide contribute nothing.

        Args:
            x: Positions (2 x n)
            pairs: Edge endpoint indices (m x 2)

        Returns:
            Spring force per node (2 x n)
        """
        f = np.zeros_like(x)
        if len(pairs) == 0:
            return f

        s = pairs[:, 0]
        t = pairs[:, 1]
        delta = x[:, t] - x[:, s]
        length = np.sqrt(np.sum(delta ** 2, axis=0))

        valid = length > 0
        safe_length = np.where(valid, length, 1.0)
        magnitude = np.where(
            valid,
            self.spring_constant * (length - self.spring_length) / safe_length,
            0.0
        )
        pull = delta * magnitude[np.newaxis, :]

        for i in range(x.shape[0]):
            np.add.at(f[i], s, pull[i])
            np.add.at(f[i], t, -pull[i])
        return f

    def forces(self, x: np.ndarray, pairs: np.ndarray) -> np.ndarray:
        """Total force per node (2 x n): repulsion plus springs."""
        return self.repulsion(x) + self.springs(x, pairs)

    def update(self, graph: Graph) -> None:
        nodes = graph.nodes
        n = len(nodes)
        if n == 0:
            return

        if n > self.large_graph_threshold and not self._warned:
            self._warned = True
            warnings.warn(
                f"Force-directed layout of {n} nodes: repulsion is computed "
                "over all node pairs and slows down quadratically.",
                PerformanceWarning,
                stacklevel=2
            )

        # Snapshot, so no node sees another node's updated position this tick
        x = np.array(
            [[v.position.x for v in nodes], [v.position.y for v in nodes]], dtype=float
        )
        vel = np.array(
            [[v.velocity.x for v in nodes], [v.velocity.y for v in nodes]], dtype=float
        )
        interactive = np.array([v.is_interactive for v in nodes], dtype=bool)

        f = self.forces(x, self.edge_pairs(graph))

        centering = np.array([0.5, 0.5]) - np.mean(x, axis=1)

        vel = (vel + f * self.time_step) * self.friction

        vel[:, interactive] = 0.0
        free = ~interactive
        x[:, free] += vel[:, free] + centering[:, np.newaxis]

        for i, v in enumerate(nodes):
            v.position = Point(float(x[0, i]), float(x[1, i]))
            v.velocity = Point(float(vel[0, i]), float(vel[1, i]))

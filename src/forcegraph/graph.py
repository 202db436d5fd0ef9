"""
Graph model for interactive layout.

This module implements the node and edge records, the symmetric adjacency
index, and the Graph container that owns them:
- Nodes are kept in insertion order, which is the canonical order used for
  rendering and for index-based APIs (drag, hit-test)
- Nodes can be looked up by id in constant time
- Adjacency is kept equal to the symmetric closure of the edge list
"""

from __future__ import annotations

from typing import Hashable, Iterable, Iterator, Optional
from enum import IntEnum
import uuid

from .geom import Point


NodeID = Hashable


class NodeShape(IntEnum):
    """Visual kind of a node. Has no effect on the simulation."""
    circle = 0
    square = 1


class Node:
    """
    Graph node with simulation state.

    Attributes:
        id: Opaque unique identifier
        position: Position in model space (nominally the unit square)
        velocity: Velocity in model units per tick
        shape: Visual kind
        size: Drawing size in view units
        is_interactive: True while the node is under user control
    """

    def __init__(
        self,
        id: Optional[NodeID] = None,
        position: Optional[Point] = None,
        velocity: Optional[Point] = None,
        shape: NodeShape = NodeShape.circle,
        size: float = 50.0,
        is_interactive: bool = False
    ):
        self.id: NodeID = id if id is not None else uuid.uuid4()
        self.position: Point = position if position is not None else Point.zero()
        self.velocity: Point = velocity if velocity is not None else Point.zero()
        self.shape = shape
        self.size = size
        self.is_interactive = is_interactive

    def __repr__(self) -> str:
        return (
            f"Node(id={self.id!r}, position={self.position!r}, "
            f"velocity={self.velocity!r}, is_interactive={self.is_interactive!r})"
        )


class Edge:
    """
    Undirected connection between two nodes, immutable once created.

    Attributes:
        id: Opaque unique identifier
        source_id: Id of the source node
        target_id: Id of the target node
    """

    __slots__ = ('_id', '_source_id', '_target_id')

    def __init__(self, source_id: NodeID, target_id: NodeID, id: Optional[Hashable] = None):
        object.__setattr__(self, '_id', id if id is not None else uuid.uuid4())
        object.__setattr__(self, '_source_id', source_id)
        object.__setattr__(self, '_target_id', target_id)

    @property
    def id(self) -> Hashable:
        return self._id

    @property
    def source_id(self) -> NodeID:
        return self._source_id

    @property
    def target_id(self) -> NodeID:
        return self._target_id

    def __setattr__(self, name, value):
        raise AttributeError(f"Edge is immutable, cannot set {name!r}")

    def __repr__(self) -> str:
        return f"Edge({self._source_id!r}, {self._target_id!r})"


def build_adjacency(edges: Iterable[Edge]) -> dict[NodeID, set[NodeID]]:
    """
    Build the symmetric adjacency index of an edge list.

    For every edge (s, t), t is added to the set of s and s to the set of t.
    A self-loop maps a node to itself.

    Args:
        edges: Edges to index

    Returns:
        Mapping from node id to the set of neighbouring node ids
    """
    adjacency: dict[NodeID, set[NodeID]] = {}
    for e in edges:
        adjacency.setdefault(e.source_id, set()).add(e.target_id)
        adjacency.setdefault(e.target_id, set()).add(e.source_id)
    return adjacency


class Graph:
    """
    Owns the nodes and edges of a graph.

    The node set is static for the lifetime of a graph, so indices handed
    out by index-based APIs stay valid.
    """

    def __init__(self, nodes: Iterable[Node] = (), edges: Iterable[Edge] = ()):
        self.nodes: list[Node] = list(nodes)
        self._index: dict[NodeID, int] = {}
        for i, v in enumerate(self.nodes):
            if v.id in self._index:
                raise ValueError(f"duplicate node id {v.id!r}")
            self._index[v.id] = i

        self._edges: list[Edge] = []
        self.adjacency: dict[NodeID, set[NodeID]] = {}
        self.set_edges(edges)

    @staticmethod
    def sample() -> Graph:
        """
        Small three node cycle, useful for demos and previews.
        """
        n1 = Node(position=Point(100 / 400, 100 / 400))
        n2 = Node(position=Point(250 / 400, 150 / 400), shape=NodeShape.square)
        n3 = Node(position=Point(180 / 400, 300 / 400))
        return Graph(
            [n1, n2, n3],
            [Edge(n1.id, n2.id), Edge(n2.id, n3.id), Edge(n3.id, n1.id)]
        )

    @property
    def edges(self) -> tuple[Edge, ...]:
        return tuple(self._edges)

    def set_edges(self, edges: Iterable[Edge]) -> None:
        """Replace the edge list and rebuild the adjacency index."""
        self._edges = list(edges)
        self.adjacency = build_adjacency(self._edges)

    def add_edge(self, edge: Edge) -> None:
        """Append an edge, keeping the adjacency index symmetric."""
        self._edges.append(edge)
        self.adjacency.setdefault(edge.source_id, set()).add(edge.target_id)
        self.adjacency.setdefault(edge.target_id, set()).add(edge.source_id)

    def node_at(self, index: int) -> Node:
        """
        Get a node by canonical index.

        Raises:
            IndexError: If index is out of range. Negative indices are
                rejected rather than counted from the end.
        """
        if index < 0:
            raise IndexError(f"node index {index} out of range")
        return self.nodes[index]

    def index_of(self, id: NodeID) -> int:
        """
        Get the canonical index of a node id.

        Raises:
            KeyError: If no node has this id
        """
        return self._index[id]

    def node_by_id(self, id: NodeID) -> Node:
        return self.nodes[self._index[id]]

    def contains(self, id: NodeID) -> bool:
        return id in self._index

    def neighbours(self, id: NodeID) -> frozenset[NodeID]:
        """Ids of the nodes directly connected to a node."""
        return frozenset(self.adjacency.get(id, ()))

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

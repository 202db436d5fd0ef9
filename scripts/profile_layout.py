"""
Profiling script for forcegraph layout performance analysis.

Runs force-directed and circular ticks over random graphs of increasing
size to show how the all-pairs repulsion scales. Pass --save to also dump
each scenario's cProfile data to a .prof file.
"""

import cProfile
import pstats
import io
from pstats import SortKey
import time
import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np
from forcegraph import Point, Node, Edge, Graph, GraphViewModel, LayoutKind, DragController


def create_graph(n_nodes, n_edges):
    """Create a random graph with n nodes and approximately n_edges edges."""
    rng = np.random.default_rng(42)
    nodes = [Node(i, position=Point(*rng.random(2))) for i in range(n_nodes)]

    edges = []
    for _ in range(n_edges):
        source = int(rng.integers(0, n_nodes))
        target = int(rng.integers(0, n_nodes))
        if source != target:
            edges.append(Edge(source, target))

    return Graph(nodes, edges)


def run_frames(graph, layout, ticks):
    """Tick and read back view geometry, as a renderer would each frame."""
    vm = GraphViewModel(graph, layout=layout)
    vm.canvas_size = (1024, 768)
    for _ in range(ticks):
        vm.update_simulation()
        vm.node_views()
        vm.link_segments()
    return ticks


def run_drag(graph, ticks):
    """Drag the first node sideways while the simulation runs."""
    vm = GraphViewModel(graph, layout=LayoutKind.forceDirected)
    vm.canvas_size = (800, 800)
    dc = DragController(vm)

    start = vm.node_views()[0].position
    dc.pointer_down(start)
    for i in range(ticks):
        dc.pointer_move(Point(start.x + i, start.y))
        vm.update_simulation()
    dc.pointer_up()
    return ticks


# name, nodes, edges, runner(graph) -> ticks
SCENARIOS = [
    ("force-20", 20, 30, lambda g: run_frames(g, LayoutKind.forceDirected, 500)),
    ("force-100", 100, 200, lambda g: run_frames(g, LayoutKind.forceDirected, 200)),
    ("force-500", 500, 1000, lambda g: run_frames(g, LayoutKind.forceDirected, 30)),
    ("circular-100", 100, 200, lambda g: run_frames(g, LayoutKind.circular, 200)),
    ("drag-100", 100, 200, lambda g: run_drag(g, 200)),
]


def profile_scenario(name, n_nodes, n_edges, runner, save=False):
    """Profile one scenario; return its cost per tick in milliseconds."""
    graph = create_graph(n_nodes, n_edges)
    profiler = cProfile.Profile()

    start = time.perf_counter()
    profiler.enable()
    ticks = runner(graph)
    profiler.disable()
    per_tick = (time.perf_counter() - start) * 1000 / ticks

    s = io.StringIO()
    pstats.Stats(profiler, stream=s).sort_stats(SortKey.TIME).print_stats(8)
    print(f"\n--- {name}: {n_nodes} nodes, {len(graph.edges)} edges, {per_tick:.3f} ms/tick")
    print(s.getvalue())

    if save:
        profiler.dump_stats(f"profile_{name}.prof")
    return per_tick


def main():
    save = "--save" in sys.argv[1:]
    summary = [
        (name, n, profile_scenario(name, n, m, runner, save))
        for name, n, m, runner in SCENARIOS
    ]

    print("\nscenario        nodes   ms/tick")
    for name, n, per_tick in summary:
        print(f"{name:<15} {n:>5} {per_tick:>9.3f}")


if __name__ == "__main__":
    main()

"""Connected-group labelling, path tracing and section-length metrics."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hampath.engine.pair_set import PairSet

if TYPE_CHECKING:
    from hampath.engine.graph import Graph


def compute_groups(graph: "Graph") -> None:
    """
    Label every node with its component.

    Group 0 is the path walked from `goal`; every other node is swept in
    index order and its cycle receives the next unused label.
    """
    nodes = graph.nodes
    for node in nodes:
        node.group = None

    i = graph.goal
    while i is not None and nodes[i].group is None:
        nodes[i].group = 0
        i = nodes[i].next

    group = 1
    for start in range(len(nodes)):
        if nodes[start].group is not None:
            continue
        j = start
        while j is not None and nodes[j].group is None:
            nodes[j].group = group
            j = nodes[j].next
        group += 1


def path_from_goal(graph: "Graph") -> list[int]:
    """Indices visited walking `next` from `goal`, head first."""
    nodes = graph.nodes
    path: list[int] = []
    seen: set[int] = set()
    i = graph.goal
    while i is not None and i not in seen:
        seen.add(i)
        path.append(i)
        i = nodes[i].next
    return path


def trace_path(graph: "Graph") -> list[int]:
    """
    Trace the current path and refresh `path_is_blocked` / `path_is_win`.

    Returns the traced nodes in tail-to-head order.
    """
    current = path_from_goal(graph)
    current.reverse()

    graph.path_is_blocked = False
    for i in range(1, len(current)):
        if graph.blocked_edges.has(current[i - 1], current[i]):
            graph.path_is_blocked = True
            break

    graph.path_is_win = not graph.path_is_blocked and len(current) == len(graph.nodes)
    return current


def compute_sub_path_lengths(graph: "Graph") -> None:
    """
    Set every node's `section_length` to the size of its unbroken run.

    Runs are grown along `next` pointers, merging the successor into the
    current run until the walk meets its own run again or crosses a
    blocked edge.
    """
    nodes = graph.nodes
    node_group = list(range(len(nodes)))
    group_size = [1] * len(nodes)

    for i in range(len(nodes)):
        i0 = i
        i1 = nodes[i0].next
        while i1 is not None and node_group[i1] != node_group[i] and not graph.blocked_edges.has(i0, i1):
            group_size[node_group[i]] += 1
            group_size[node_group[i1]] -= 1
            node_group[i1] = node_group[i]
            i0 = i1
            i1 = nodes[i0].next

    for i, node in enumerate(nodes):
        node.section_length = group_size[node_group[i]]


def used_edges(graph: "Graph") -> PairSet:
    """Edges of the path walked from `goal`."""
    edges = PairSet()
    path = path_from_goal(graph)
    for i0, i1 in zip(path, path[1:]):
        edges.add(i0, i1)
    return edges


def live_edges(graph: "Graph") -> PairSet:
    """Edges used by any `next` pointer, on the path or on a cycle."""
    edges = PairSet()
    for i, node in enumerate(graph.nodes):
        if node.next is not None:
            edges.add(i, node.next)
    return edges


def group_count(graph: "Graph") -> int:
    return len({node.group for node in graph.nodes})


def refresh(graph: "Graph") -> None:
    """Recompute every derived field of the graph."""
    compute_groups(graph)
    trace_path(graph)
    compute_sub_path_lengths(graph)


__all__ = [
    "compute_groups",
    "path_from_goal",
    "trace_path",
    "compute_sub_path_lengths",
    "used_edges",
    "live_edges",
    "group_count",
    "refresh",
]

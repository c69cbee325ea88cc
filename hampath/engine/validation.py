"""Structural checks for the path-plus-cycles invariant."""

from __future__ import annotations

from hampath.engine.errors import InvariantViolation
from hampath.engine.graph import Graph, are_adjacent


def check_structure(graph: Graph) -> None:
    """
    Raise InvariantViolation unless `next` forms one simple path rooted at
    `goal` plus disjoint simple cycles over the remaining nodes.
    """
    nodes = graph.nodes
    count = len(nodes)
    in_degree = [0] * count

    for i, node in enumerate(nodes):
        if node.next is None:
            continue
        if not 0 <= node.next < count:
            raise InvariantViolation(f"node {i} points outside the graph ({node.next})")
        if not are_adjacent(graph, i, node.next):
            raise InvariantViolation(f"node {i} points at non-adjacent node {node.next}")
        in_degree[node.next] += 1

    for i, degree in enumerate(in_degree):
        if degree > 1:
            raise InvariantViolation(f"node {i} has in-degree {degree}")

    if in_degree[graph.goal] != 0:
        raise InvariantViolation(f"goal {graph.goal} has a predecessor")

    on_path: set[int] = set()
    i = graph.goal
    while i is not None:
        if i in on_path:
            raise InvariantViolation(f"path from goal revisits node {i}")
        on_path.add(i)
        i = nodes[i].next

    # Everything else must lie on a cycle: a walk has to come back to its start.
    for start in range(count):
        if start in on_path:
            continue
        j = nodes[start].next
        steps = 1
        while j is not None and j != start and steps <= count:
            j = nodes[j].next
            steps += 1
        if j != start:
            raise InvariantViolation(f"node {start} is neither on the path nor on a cycle")


def is_well_formed(graph: Graph) -> bool:
    try:
        check_structure(graph)
    except InvariantViolation:
        return False
    return True


def cycle_count(graph: Graph) -> int:
    """Number of disjoint cycles next to the main path."""
    return len({node.group for node in graph.nodes if node.group not in (None, 0)})


__all__ = ["check_structure", "is_well_formed", "cycle_count"]

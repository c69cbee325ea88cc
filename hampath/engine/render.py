"""
Render adapter: turns a graph into coloured rectangles or a text drawing.

Renderers only consume what is produced here; no graph logic happens on
their side.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from hampath.engine.constants import COLOR_BLOCKED_EDGE, COLOR_LOOP, COLOR_PATH
from hampath.engine.graph import Graph

EDGE_HALF_WIDTH = 0.1


@dataclass(frozen=True)
class Rect:
    x0: float
    y0: float
    x1: float
    y1: float
    color: int


class RectSink(ABC):
    """Receiver for batched rectangles (a GPU batcher, a test recorder, ...)."""

    @abstractmethod
    def add_rect(self, rect: Rect) -> None:
        pass

    def flush(self) -> None:
        """Submit pending rectangles; no-op by default."""
        return None


class RectList(RectSink):
    def __init__(self) -> None:
        self.rects: list[Rect] = []

    def add_rect(self, rect: Rect) -> None:
        self.rects.append(rect)


def lerp(v0: float, v1: float, u: float) -> float:
    return v0 + (v1 - v0) * u


def color_lerp(color0: int, color1: int, u: float) -> int:
    """Blend two packed 0xAABBGGRR colours channel by channel."""
    out = 0
    for shift in (0, 8, 16, 24):
        c0 = (color0 >> shift) & 0xFF
        c1 = (color1 >> shift) & 0xFF
        out |= int(lerp(c0, c1, u)) << shift
    return out


def edge_rects(graph: Graph, r: float = EDGE_HALF_WIDTH) -> list[Rect]:
    """
    Two half-segment rectangles per live edge, each tinted by its node's
    section length (loop colour for short runs, path colour for full ones).
    """
    count = len(graph.nodes)
    rects: list[Rect] = []
    for node0 in graph.nodes:
        if node0.next is None:
            continue
        node1 = graph.nodes[node0.next]

        dx = node1.coord[0] - node0.coord[0]
        dy = node1.coord[1] - node0.coord[1]
        x, y = node0.coord

        color0 = color_lerp(COLOR_LOOP, COLOR_PATH, node0.section_length / count)
        color1 = color_lerp(COLOR_LOOP, COLOR_PATH, node1.section_length / count)

        rx = abs(dx) * (0.25 - 0.5 * r) + r
        ry = abs(dy) * (0.25 - 0.5 * r) + r

        cx0 = x + dx * (0.25 - r / 2)
        cy0 = y + dy * (0.25 - r / 2)
        cx1 = x + dx * (0.75 + 0.5 * r)
        cy1 = y + dy * (0.75 + 0.5 * r)

        rects.append(Rect(cx0 - rx, cy0 - ry, cx0 + rx, cy0 + ry, color0))
        rects.append(Rect(cx1 - rx, cy1 - ry, cx1 + rx, cy1 + ry, color1))
    return rects


def blocked_rects(graph: Graph) -> list[Rect]:
    """One bar across the middle of every blocked edge."""
    rects: list[Rect] = []
    for i0, i1 in graph.blocked_edges:
        (x0, y0), (x1, y1) = graph.nodes[i0].coord, graph.nodes[i1].coord
        rx = 0.1 + 0.5 * abs(y1 - y0)
        ry = 0.1 + 0.5 * abs(x1 - x0)
        x = (x0 + x1) / 2
        y = (y0 + y1) / 2
        rects.append(Rect(x - rx, y - ry, x + rx, y + ry, COLOR_BLOCKED_EDGE))
    return rects


def draw_graph(graph: Graph, sink: RectSink) -> None:
    for rect in edge_rects(graph):
        sink.add_rect(rect)
    for rect in blocked_rects(graph):
        sink.add_rect(rect)
    sink.flush()


def render_ascii(graph: Graph) -> str:
    """
    Text drawing of the board, highest row first.

    Nodes: G goal, S start, o path, * cycle. Edges show their direction
    (> < ^ v); x marks a blocked edge that is not in use, ! a blocked edge
    the current path or a cycle runs through.
    """
    size_x, size_y = graph.extents
    width = 2 * size_x - 1
    height = 2 * size_y - 1
    canvas = [[" "] * width for _ in range(height)]

    def put(px: int, py: int, ch: str) -> None:
        canvas[height - 1 - py][px] = ch

    for idx, node in enumerate(graph.nodes):
        x, y = node.coord
        if idx == graph.goal:
            ch = "G"
        elif idx == graph.start:
            ch = "S"
        elif node.group == 0:
            ch = "o"
        else:
            ch = "*"
        put(2 * x, 2 * y, ch)

    for idx, node in enumerate(graph.nodes):
        if node.next is None:
            continue
        (x0, y0), (x1, y1) = node.coord, graph.nodes[node.next].coord
        if graph.blocked_edges.has(idx, node.next):
            ch = "!"
        elif x1 > x0:
            ch = ">"
        elif x1 < x0:
            ch = "<"
        elif y1 > y0:
            ch = "^"
        else:
            ch = "v"
        put(x0 + x1, y0 + y1, ch)

    for i0, i1 in graph.blocked_edges:
        if graph.nodes[i0].next == i1 or graph.nodes[i1].next == i0:
            continue
        (x0, y0), (x1, y1) = graph.nodes[i0].coord, graph.nodes[i1].coord
        put(x0 + x1, y0 + y1, "x")

    return "\n".join("".join(row).rstrip() for row in canvas)


__all__ = [
    "Rect",
    "RectSink",
    "RectList",
    "lerp",
    "color_lerp",
    "edge_rects",
    "blocked_rects",
    "draw_graph",
    "render_ascii",
]

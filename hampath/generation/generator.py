"""Level generation: scramble a zig-zag path into a solvable puzzle."""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass

import numpy as np

from hampath.core.logging import NullRunLogger, RunLogger
from hampath.engine.config import GridShape
from hampath.engine.graph import Coord, Graph, cell_corners, cells, grid_edges
from hampath.engine.groups import live_edges, refresh, used_edges
from hampath.engine.pair_set import PairSet
from hampath.engine.rotation import try_move_start, try_rotate
from hampath.generation.config import DEFAULT_GENERATOR, DEFAULT_POLICY, GeneratorConfig, LevelPolicy


@dataclass(frozen=True)
class JoinResult:
    passes: int
    rotations: int
    converged: bool


@dataclass(frozen=True)
class GenerationReport:
    """Counters collected while building one level."""

    level: int | None
    extents: Coord
    wander_moves: int
    shuffle_rotations: int
    join: JoinResult
    all_shuffle_rotations: int
    rejoin: JoinResult
    blocked_edges: int
    path_is_blocked: bool

    @property
    def converged(self) -> bool:
        return self.join.converged and self.rejoin.converged

    def as_metrics(self) -> dict[str, float]:
        return {
            "generation/wander_moves": float(self.wander_moves),
            "generation/shuffle_rotations": float(self.shuffle_rotations),
            "generation/join_passes": float(self.join.passes),
            "generation/join_rotations": float(self.join.rotations),
            "generation/all_shuffle_rotations": float(self.all_shuffle_rotations),
            "generation/rejoin_passes": float(self.rejoin.passes),
            "generation/rejoin_rotations": float(self.rejoin.rotations),
            "generation/blocked_edges": float(self.blocked_edges),
            "generation/converged": float(int(self.converged)),
        }


@dataclass
class Level:
    level: int | None
    graph: Graph
    solution_edges: PairSet
    report: GenerationReport


def _random_order(items: list, rng: np.random.Generator) -> list:
    return [items[int(i)] for i in rng.permutation(len(items))]


def shuffle(graph: Graph, rng: np.random.Generator, factor: int = 7) -> int:
    """
    Attempt `factor * w * h` rotations on uniformly random cells.

    Rejected attempts are simply skipped. Returns how many rotations took.
    """
    size_x, size_y = graph.extents
    if size_x < 2 or size_y < 2:
        return 0
    rotations = 0
    for _ in range(factor * size_x * size_y):
        x = int(rng.integers(size_x - 1))
        y = int(rng.integers(size_y - 1))
        if try_rotate(graph, (x, y)):
            rotations += 1
    return rotations


def all_shuffle(graph: Graph, rng: np.random.Generator, passes: int) -> int:
    """Try to rotate every cell of the board, in a fresh random order per pass."""
    board = cells(graph)
    rotations = 0
    for _ in range(passes):
        for coord in _random_order(board, rng):
            if try_rotate(graph, coord):
                rotations += 1
    return rotations


def is_mixed(graph: Graph, coord: Coord) -> bool:
    """True if the corners of the cell do not all share one group."""
    corners = cell_corners(graph, coord)
    if corners is None:
        return False
    groups = {graph.nodes[i].group for i in corners}
    return len(groups) > 1


def mixed_cells(graph: Graph) -> list[Coord]:
    return [coord for coord in cells(graph) if is_mixed(graph, coord)]


def join(graph: Graph, rng: np.random.Generator, max_passes: int = 64) -> JoinResult:
    """
    Merge stray cycles back into the main path.

    Every cell whose corners sit in different groups is rotated, visiting
    cells in random order. Passes repeat until no such cell is left, a pass
    makes no progress, or `max_passes` is reached.
    """
    board = cells(graph)
    passes = 0
    rotations = 0
    while mixed_cells(graph):
        if passes >= max_passes:
            return JoinResult(passes=passes, rotations=rotations, converged=False)
        passes += 1
        progressed = False
        for coord in _random_order(board, rng):
            if is_mixed(graph, coord) and try_rotate(graph, coord):
                rotations += 1
                progressed = True
        if not progressed:
            return JoinResult(passes=passes, rotations=rotations, converged=not mixed_cells(graph))
    return JoinResult(passes=passes, rotations=rotations, converged=True)


def wander_start(graph: Graph, rng: np.random.Generator, steps: int) -> int:
    moves = 0
    for _ in range(steps):
        if try_move_start(graph, rng):
            moves += 1
    return moves


def block_unused_edges(
    graph: Graph,
    solution_edges: PairSet,
    fraction: float,
    rng: np.random.Generator,
    *,
    prefer_idle: bool = False,
) -> int:
    """
    Block a random share of the grid edges the solution does not need.

    With `prefer_idle`, edges that no live `next` pointer currently uses go
    first. Returns the number of edges blocked.
    """
    candidates = PairSet()
    for i0, i1 in grid_edges(graph):
        if not solution_edges.has(i0, i1):
            candidates.add(i0, i1)

    order = candidates.shuffled(rng)
    if prefer_idle:
        live = live_edges(graph)
        order.sort(key=lambda pair: live.has(*pair))

    count = min(len(order), math.floor(len(order) * fraction))
    for i0, i1 in order[:count]:
        graph.blocked_edges.add(i0, i1)
    return count


class LevelGenerator:
    """Builds puzzle graphs for a level number.

    The random generator is owned by the instance, so a seeded generator
    produces the same sequence of levels every run.
    """

    def __init__(
        self,
        config: GeneratorConfig = DEFAULT_GENERATOR,
        policy: LevelPolicy = DEFAULT_POLICY,
        *,
        rng: np.random.Generator | None = None,
        logger: RunLogger | None = None,
    ):
        self.config = config
        self.policy = policy
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self.logger = logger if logger is not None else NullRunLogger()

    def create(self, level: int) -> Level:
        """Generate the puzzle for `level` using the level policy's extents."""
        shape = self.policy.shape_for(level)
        return self.build(shape, level=level)

    def build(self, shape: GridShape, *, level: int | None = None) -> Level:
        cfg = self.config
        rng = self.rng

        # 1. Start from a full zig-zag path
        graph = Graph.zig_zag(shape.size_x, shape.size_y)
        moves = wander_start(graph, rng, cfg.wander_start_steps)

        # 2. Bake a random solution in
        shuffled = shuffle(graph, rng, cfg.shuffle_factor)
        first_join = join(graph, rng, cfg.max_join_passes)
        solution_edges = used_edges(graph)

        # 3. Scramble the visible path away from it
        scrambled = all_shuffle(graph, rng, cfg.all_shuffle_passes)
        second_join = join(graph, rng, cfg.max_join_passes)

        # 4. Forbid part of the non-solution edges
        blocked = block_unused_edges(
            graph, solution_edges, cfg.blocked_fraction, rng, prefer_idle=cfg.prefer_idle_edges
        )
        refresh(graph)

        report = GenerationReport(
            level=level,
            extents=graph.extents,
            wander_moves=moves,
            shuffle_rotations=shuffled,
            join=first_join,
            all_shuffle_rotations=scrambled,
            rejoin=second_join,
            blocked_edges=blocked,
            path_is_blocked=graph.path_is_blocked,
        )
        if not report.converged:
            warnings.warn(
                f"join left cycles on a {shape.size_x}x{shape.size_y} board "
                f"(level={level}); the baked solution may not cover every node",
                RuntimeWarning,
                stacklevel=2,
            )
        self._log(report)
        return Level(level=level, graph=graph, solution_edges=solution_edges, report=report)

    def _log(self, report: GenerationReport) -> None:
        self.logger.log_params(
            {
                "level": report.level,
                "size_x": report.extents[0],
                "size_y": report.extents[1],
                "blocked_fraction": self.config.blocked_fraction,
            }
        )
        for key, value in report.as_metrics().items():
            self.logger.log_metric(key, value, step=report.level)


def create_graph(level: int, *, seed: int | None = None) -> Graph:
    """Convenience wrapper: one-off level graph with the default settings."""
    generator = LevelGenerator(GeneratorConfig(seed=seed))
    return generator.create(level).graph


__all__ = [
    "JoinResult",
    "GenerationReport",
    "Level",
    "LevelGenerator",
    "shuffle",
    "all_shuffle",
    "is_mixed",
    "mixed_cells",
    "join",
    "wander_start",
    "block_unused_edges",
    "create_graph",
]

from __future__ import annotations

import math
from enum import Enum
from typing import TYPE_CHECKING

from hampath.engine.config import SessionConfig
from hampath.engine.graph import Coord, Graph
from hampath.engine.groups import compute_sub_path_lengths
from hampath.engine.rotation import can_rotate, try_rotate

if TYPE_CHECKING:
    from hampath.generation.generator import Level, LevelGenerator


class GameState(Enum):
    PAUSED = "paused"
    ACTIVE = "active"
    WON = "won"


class PuzzleSession:
    """
    Game-state glue around one puzzle graph.

    A fresh level starts PAUSED (or WON if it happens to be solved already);
    the first successful rotation makes it ACTIVE and the timer only runs
    while ACTIVE. Once WON, any click that does not rotate starts a new level.
    """

    def __init__(self, generator: "LevelGenerator", config: SessionConfig | None = None):
        self.generator = generator
        self.config = config or SessionConfig()
        self.level = generator.policy.clamp(self.config.initial_level)
        self.elapsed = 0.0
        self.state = GameState.PAUSED
        self.current: "Level" = self._new_level()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    @property
    def graph(self) -> Graph:
        return self.current.graph

    def reset(self) -> None:
        self.current = self._new_level()

    def rotate(self, x: int, y: int) -> bool:
        """Handle a click on grid cell (x, y); returns whether a rotation happened."""
        size_x, size_y = self.graph.extents
        in_range = 0 <= x < size_x - 1 and 0 <= y < size_y - 1
        if not in_range or not try_rotate(self.graph, (x, y)):
            if self.state is GameState.WON:
                self.reset()
            return False

        compute_sub_path_lengths(self.graph)

        if self.graph.path_is_win and self.state is not GameState.WON:
            self.state = GameState.WON
        elif self.state is GameState.PAUSED:
            self.state = GameState.ACTIVE
        return True

    def toggle_pause(self) -> None:
        if self.state is GameState.ACTIVE:
            self.state = GameState.PAUSED
        elif self.state is GameState.PAUSED:
            self.state = GameState.ACTIVE

    def next_level(self) -> bool:
        return self._change_level(self.level + 1)

    def previous_level(self) -> bool:
        return self._change_level(self.level - 1)

    def advance(self, dt: float) -> float:
        """Accrue frame time while ACTIVE; returns the time actually added."""
        if self.state is not GameState.ACTIVE or dt <= 0:
            return 0.0
        step = min(dt, self.config.max_frame_dt)
        self.elapsed += step
        return step

    def hover_cell(self, gx: float, gy: float) -> Coord | None:
        """Cell under a fractional grid position, if it can be rotated."""
        x = math.floor(gx)
        y = math.floor(gy)
        size_x, size_y = self.graph.extents
        if not (0 <= x < size_x - 1 and 0 <= y < size_y - 1):
            return None
        if not can_rotate(self.graph, (x, y)):
            return None
        return (x, y)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    def _change_level(self, level: int) -> bool:
        policy = self.generator.policy
        if level < policy.min_level or level > policy.max_level:
            return False
        self.level = level
        self.reset()
        return True

    def _new_level(self) -> "Level":
        current = self.generator.create(self.level)
        self.elapsed = 0.0
        self.state = GameState.WON if current.graph.path_is_win else GameState.PAUSED
        return current


__all__ = ["GameState", "PuzzleSession"]

from __future__ import annotations

from dataclasses import dataclass

from hampath.engine.constants import MAX_FRAME_DT


@dataclass(frozen=True)
class GridShape:
    """Static lattice dimensions of a puzzle graph."""

    size_x: int
    size_y: int

    def __post_init__(self) -> None:
        if self.size_x <= 0:
            raise ValueError(f"size_x must be positive, got {self.size_x}")
        if self.size_y <= 0:
            raise ValueError(f"size_y must be positive, got {self.size_y}")

    @property
    def cell_count(self) -> int:
        return self.size_x * self.size_y

    @property
    def rotatable_cells(self) -> int:
        """Number of 2x2 cells a rotation can target."""
        return max(0, self.size_x - 1) * max(0, self.size_y - 1)


@dataclass(frozen=True)
class SessionConfig:
    """
    Knobs for the interactive puzzle session.

    - `initial_level` is the level generated when the session starts.
    - `max_frame_dt` caps the time accrued per frame so a backgrounded
      session does not jump ahead.
    """

    initial_level: int = 3
    max_frame_dt: float = MAX_FRAME_DT

    def __post_init__(self) -> None:
        if self.initial_level < 0:
            raise ValueError(f"initial_level must be non-negative, got {self.initial_level}")
        if self.max_frame_dt <= 0:
            raise ValueError(f"max_frame_dt must be positive, got {self.max_frame_dt}")


__all__ = ["GridShape", "SessionConfig"]

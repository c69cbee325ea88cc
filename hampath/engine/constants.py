from __future__ import annotations

from typing import Tuple

# Sentinel used only in exported numpy arrays; the engine itself uses None.
NO_NODE = -1

# Lattice neighbour offsets (dx, dy)
DIRS: Tuple[Tuple[int, int], ...] = ((1, 0), (-1, 0), (0, -1), (0, 1))

# Packed 0xAABBGGRR colours
COLOR_PATH = 0xFF00FFFF
COLOR_LOOP = 0xFF204010
COLOR_BLOCKED_EDGE = 0xFF101010

MAX_FRAME_DT = 1.0 / 30.0

__all__ = ["NO_NODE", "DIRS", "COLOR_PATH", "COLOR_LOOP", "COLOR_BLOCKED_EDGE", "MAX_FRAME_DT"]

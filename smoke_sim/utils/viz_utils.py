"""
Visualization utilities for smoke and flame colours.
"""

from typing import Tuple

import numpy as np

# Flame gradient stops: core to tip
FLAME_STOPS = (
    (0.0, (1.0, 1.0, 0.0)),   # yellow
    (0.5, (1.0, 0.65, 0.0)),  # orange
    (1.0, (1.0, 0.0, 0.0)),   # red
)

SMOKE_GREY = 50 / 255.0


def flame_color(t: float) -> Tuple[float, float, float]:
    """
    Colour along the flame gradient.

    Args:
        t: Position from flame core (0) to tip (1); clipped to [0, 1]

    Returns:
        Tuple of (r, g, b) values in range [0, 1]
    """
    t = float(np.clip(t, 0.0, 1.0))
    for (t0, c0), (t1, c1) in zip(FLAME_STOPS, FLAME_STOPS[1:]):
        if t <= t1:
            w = (t - t0) / (t1 - t0)
            return tuple(a + (b - a) * w for a, b in zip(c0, c1))
    return FLAME_STOPS[-1][1]


def smoke_rgba(opacities: np.ndarray) -> np.ndarray:
    """
    Per-particle RGBA colours for smoke puffs.

    Args:
        opacities: Array of particle opacities

    Returns:
        Array of shape (N, 4) with dark grey colours and clipped alpha
    """
    opacities = np.asarray(opacities, dtype=float)
    colors = np.empty((opacities.shape[0], 4))
    colors[:, :3] = SMOKE_GREY
    colors[:, 3] = np.clip(opacities, 0.0, 1.0)
    return colors

"""
Ceiling smoke layer.

The layer is a 1-D field of smoke thickness, one sample per horizontal unit of
surface width. It gains mass from particle deposits and each tick drifts,
diffuses sideways, drains at active vents and slowly thins out. The wall
blocks diffusion unless the door is open.

The update is an explicit Euler scheme on the discrete Laplacian. With the
default rate of 0.3 per speed step it is stable at speed 1; at speed 2 and 4
the diffusion number exceeds the 0.5 stability limit and the field can
oscillate (the clamp keeps it non-negative). ``max_diffusion_number`` caps the
effective rate when set.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from smoke_sim.parameters import SmokeParameters
from smoke_sim.core.obstruction import ObstructionModel

logger = logging.getLogger(__name__)

STABILITY_LIMIT = 0.5


class SmokeLayerField:
    """Accumulated smoke thickness at the ceiling."""

    def __init__(self, params: SmokeParameters, obstruction: ObstructionModel, length: int = 0):
        self.params = params
        self.obstruction = obstruction
        self.values = np.zeros(max(0, int(length)), dtype=float)
        self._warned_unstable = False

    @property
    def length(self) -> int:
        return int(self.values.shape[0])

    def __len__(self) -> int:
        return self.length

    def reset(self, length: Optional[int] = None):
        """Zero the field, optionally at a new length."""
        if length is None:
            length = self.length
        self.values = np.zeros(max(0, int(length)), dtype=float)

    def deposit_at(self, column: int, amount: float) -> bool:
        """
        Add smoke to a column.

        Args:
            column: Column index
            amount: Thickness to add

        Returns:
            True if the column exists and received the deposit
        """
        if 0 <= column < self.length:
            self.values[column] += amount
            return True
        return False

    def effective_diffusion_rate(self, speed_multiplier: float) -> float:
        rate = self.params.diffusion_rate * speed_multiplier
        limit = self.params.max_diffusion_number
        if limit is not None:
            return min(rate, limit)
        if rate > STABILITY_LIMIT and not self._warned_unstable:
            logger.warning(
                f"Diffusion number {rate:.2f} exceeds the explicit-scheme limit {STABILITY_LIMIT}; "
                f"the smoke layer may oscillate"
            )
            self._warned_unstable = True
        return rate

    def step(
        self,
        door_open: bool,
        left_vent_on: bool,
        right_vent_on: bool,
        simulated_time: float,
        speed_multiplier: float
    ):
        """
        Advance the field by one tick.

        The new field is computed from a frozen copy of the current one so
        that every column reads its neighbours' values from the same tick.

        Args:
            door_open: Door passability
            left_vent_on: Left vent suction
            right_vent_on: Right vent suction
            simulated_time: Elapsed simulated time, drives the ambient drift
            speed_multiplier: Simulation speed multiplier
        """
        n = self.length
        if n == 0:
            return

        p = self.params
        layer = self.values.copy()
        next_layer = layer.copy()
        columns = np.arange(n)

        # Ambient air movement
        next_layer += np.sin(simulated_time * p.drift_time_frequency
                             + columns * p.drift_space_frequency) * p.drift_amplitude

        # Horizontal diffusion
        rate = self.effective_diffusion_rate(speed_multiplier)
        if n > 2:
            laplacian = np.zeros(n)
            laplacian[1:-1] = layer[:-2] + layer[2:] - 2.0 * layer[1:-1]
            if not door_open:
                self._block_wall(layer, laplacian)
            next_layer += rate * laplacian

        # Vent suction
        drain = p.vent_drain_rate * speed_multiplier
        if left_vent_on:
            next_layer[columns < p.vent_layer_reach] -= drain
        if right_vent_on:
            next_layer[columns > n - p.vent_layer_reach] -= drain

        # Natural thinning
        next_layer -= p.decay_rate * speed_multiplier
        np.maximum(next_layer, 0.0, out=next_layer)

        self.values = next_layer

    def _block_wall(self, layer: np.ndarray, laplacian: np.ndarray):
        """Replace the Laplacian around a closed wall with one-sided exchange."""
        n = layer.shape[0]
        start, stop = self.obstruction.layer_band(n)
        if start >= stop:
            return
        laplacian[start:stop] = 0.0

        left_edge = start - 1
        if 0 < left_edge < n - 1:
            laplacian[left_edge] = layer[left_edge - 1] - layer[left_edge]
        right_edge = stop
        if 0 < right_edge < n - 1:
            laplacian[right_edge] = layer[right_edge + 1] - layer[right_edge]

    def max_thickness(self) -> float:
        if self.length == 0:
            return 0.0
        return float(self.values.max())

    def total_mass(self) -> float:
        return float(self.values.sum())

    def band_mass(self, start: int, stop: int) -> float:
        """Sum of thickness over the half-open column range [start, stop)."""
        start = max(0, start)
        stop = min(self.length, stop)
        if start >= stop:
            return 0.0
        return float(self.values[start:stop].sum())

    def side_max(self) -> Tuple[float, float]:
        """Maximum thickness left and right of the wall band."""
        start, stop = self.obstruction.layer_band(self.length)
        left = self.values[:start]
        right = self.values[stop:]
        return (float(left.max()) if left.size else 0.0,
                float(right.max()) if right.size else 0.0)

    def snapshot(self) -> np.ndarray:
        """Get a read-only copy of the field."""
        data = self.values.copy()
        data.setflags(write=False)
        return data

"""
Interior wall with a door opening.

The wall splits the room into two zones at the horizontal centre of the
surface. It is solid from the ceiling down to the top of the door; the door
occupies a fixed band above the floor line and is the only passable section,
and only while open.

Particles use the wide collision band (``wall_band_half_width``), the smoke
layer uses the narrow diffusion band (``layer_wall_half_width``).
"""

import math
from typing import Optional, Tuple

from smoke_sim.parameters import SmokeParameters


class ObstructionModel:
    """Wall geometry shared by the particle system and the smoke layer."""

    def __init__(self, params: SmokeParameters):
        self.params = params
        self.wall_x = 0.0
        self.door_top = 0.0
        self.door_open = False

    def configure(self, surface_width: float, surface_height: float):
        """
        Place the wall for a surface size.

        Args:
            surface_width: Surface width in units
            surface_height: Surface height in units
        """
        self.wall_x = surface_width / 2.0
        self.door_top = surface_height - self.params.floor_offset - self.params.door_height

    def blocks(self, y: float, door_open: Optional[bool] = None) -> bool:
        """Whether the wall is solid at height ``y``."""
        if door_open is None:
            door_open = self.door_open
        return y < self.door_top or not door_open

    def in_particle_band(self, x: float) -> bool:
        half = self.params.wall_band_half_width
        return self.wall_x - half < x < self.wall_x + half

    def clamp_outside(self, from_left: bool) -> float:
        """Position just outside the collision band on the given side."""
        if from_left:
            return self.wall_x - self.params.wall_clearance
        return self.wall_x + self.params.wall_clearance

    def collide(self, x: float, y: float, vx: float, door_open: bool) -> Tuple[float, float, bool]:
        """
        Resolve a particle sitting in the wall band.

        Args:
            x: Horizontal position
            y: Vertical position (0 at the ceiling)
            vx: Horizontal velocity
            door_open: Door passability

        Returns:
            Tuple of (x, vx, reflected)
        """
        if self.in_particle_band(x) and self.blocks(y, door_open):
            vx *= -self.params.wall_restitution
            return self.clamp_outside(x < self.wall_x), vx, True
        return x, vx, False

    def sweep(
        self,
        x_before: float,
        x_after: float,
        y_before: float,
        y_after: float,
        vx: float,
        door_open: bool
    ) -> Tuple[float, float, bool]:
        """
        Resolve a move that ended in, or passed through, the wall band.

        A particle is blocked when the door is closed or when either end of the
        move is above the door top. Blocked particles are put back on the side
        they came from with their horizontal velocity reflected.

        Returns:
            Tuple of (x, vx, reflected)
        """
        if not (self.blocks(y_before, door_open) or self.blocks(y_after, door_open)):
            return x_after, vx, False

        crossed = (x_before - self.wall_x) * (x_after - self.wall_x) < 0
        if not (crossed or self.in_particle_band(x_after)):
            return x_after, vx, False

        from_left = x_before < self.wall_x
        if x_before == self.wall_x:
            from_left = x_after < self.wall_x
        # only flip velocity still pointing into the wall
        if (vx > 0) == from_left and vx != 0:
            vx *= -self.params.wall_restitution
        return self.clamp_outside(from_left), vx, True

    def layer_band(self, length: int) -> Tuple[int, int]:
        """
        Column range of the smoke layer covered by the wall.

        Args:
            length: Number of field columns

        Returns:
            Half-open (start, stop) column range of columns strictly within
            ``layer_wall_half_width`` of the wall centre, clipped to the field
        """
        half = self.params.layer_wall_half_width
        start = math.floor(self.wall_x - half) + 1
        stop = math.ceil(self.wall_x + half)
        return max(0, start), min(length, stop)

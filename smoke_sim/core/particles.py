"""
Smoke particle simulation.

This module manages the spawning, motion and removal of buoyant smoke
particles rising from the fire. Particles that reach the ceiling band are
converted into deposits on the smoke layer.
"""

import logging
from typing import List, Optional

import numpy as np

from smoke_sim.parameters import SmokeParameters
from smoke_sim.core.obstruction import ObstructionModel
from smoke_sim.core.smoke_layer import SmokeLayerField

logger = logging.getLogger(__name__)

SNAPSHOT_COLUMNS = ("x", "y", "vx", "vy", "radius", "opacity")


class SmokeParticle:
    """A single smoke puff with position, velocity, size and opacity.

    Coordinates follow the drawing surface: y = 0 is the ceiling and y grows
    toward the floor, so rising particles have negative vy.
    """

    __slots__ = ("x", "y", "vx", "vy", "radius", "opacity")

    def __init__(self, x: float, y: float, vx: float, vy: float, radius: float, opacity: float):
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        self.radius = radius
        self.opacity = opacity

    def apply_turbulence(self, jitter_x: float, jitter_y: float):
        self.vx += jitter_x
        self.vy += jitter_y

    def apply_vent_suction(self, target_x: float, target_y: float, attraction: float, fade: float):
        """Pull the particle toward a vent corner and speed up its fading."""
        self.vx += (target_x - self.x) * attraction
        self.vy += (target_y - self.y) * attraction
        self.opacity -= fade

    def integrate(self, speed_multiplier: float):
        """Advance position by one explicit Euler step."""
        self.x += self.vx * speed_multiplier
        self.y += self.vy * speed_multiplier

    def is_out_of_bounds(self, width: float) -> bool:
        """Check if the particle left the surface (ceiling or either side)."""
        return self.y < 0 or self.x < 0 or self.x > width

    def as_row(self) -> tuple:
        return (self.x, self.y, self.vx, self.vy, self.radius, self.opacity)


class ParticleSystem:
    """Owns the live smoke particles and advances them each tick."""

    def __init__(self, params: SmokeParameters, obstruction: ObstructionModel,
                 rng: Optional[np.random.Generator] = None):
        """
        Initialize an empty particle system.

        Args:
            params: Model parameters
            obstruction: Wall/door geometry used for collisions
            rng: Random generator for spawning and turbulence
        """
        self.params = params
        self.obstruction = obstruction
        self.rng = rng if rng is not None else np.random.default_rng(params.seed)
        self.particles: List[SmokeParticle] = []

    @property
    def count(self) -> int:
        return len(self.particles)

    def clear(self):
        self.particles = []

    def spawn(
        self,
        intensity_level: int,
        fire_intensity: float,
        origin_x: float,
        surface_height: float,
        speed_multiplier: float
    ) -> int:
        """
        Create this tick's batch of particles at the fire.

        Args:
            intensity_level: Fire intensity level (1-3)
            fire_intensity: Current fire intensity, capped here for the spawn rate
            origin_x: Horizontal position of the fire
            surface_height: Surface height; particles start just above the floor line
            speed_multiplier: Simulation speed multiplier

        Returns:
            Number of particles created
        """
        p = self.params
        capped = min(fire_intensity, p.spawn_intensity_cap)
        num = int(np.floor(p.spawn_rate_factor * intensity_level * capped * speed_multiplier))
        if num <= 0:
            return 0

        xs = origin_x + self.rng.uniform(-p.spawn_jitter, p.spawn_jitter, num)
        vxs = self.rng.uniform(-p.spawn_vx_range, p.spawn_vx_range, num)
        vys = -self.rng.uniform(0.0, p.spawn_vy_random, num) - intensity_level * p.buoyancy_per_level
        radii = self.rng.uniform(p.radius_min, p.radius_max, num)
        start_y = surface_height - p.floor_offset

        for x, vx, vy, radius in zip(xs, vxs, vys, radii):
            self.particles.append(
                SmokeParticle(float(x), start_y, float(vx), float(vy), float(radius), p.initial_opacity)
            )
        return num

    def advance(
        self,
        surface_width: float,
        surface_height: float,
        door_open: bool,
        left_vent_on: bool,
        right_vent_on: bool,
        speed_multiplier: float,
        layer: SmokeLayerField
    ) -> int:
        """
        Advance every particle by one tick.

        Particles reaching the ceiling band deposit into ``layer`` and are
        removed. Faded or escaped particles are removed. Survivors are kept in
        a fresh list, the live list is never modified while iterating.

        Args:
            surface_width: Surface width in units
            surface_height: Surface height in units
            door_open: Door passability
            left_vent_on: Left vent suction
            right_vent_on: Right vent suction
            speed_multiplier: Simulation speed multiplier
            layer: Smoke layer receiving ceiling deposits

        Returns:
            Number of particles deposited into the layer this tick
        """
        p = self.params
        obstruction = self.obstruction
        n = len(self.particles)
        if n == 0:
            return 0

        jitter = (self.rng.random((n, 2)) - 0.5) * p.turbulence_strength
        survivors: List[SmokeParticle] = []
        deposits = 0

        for particle, (jx, jy) in zip(self.particles, jitter):
            particle.apply_turbulence(jx, jy)

            particle.x, particle.vx, _ = obstruction.collide(
                particle.x, particle.y, particle.vx, door_open
            )

            near_left = particle.x < p.vent_particle_reach
            near_right = particle.x > surface_width - p.vent_particle_reach
            if right_vent_on and near_right:
                particle.apply_vent_suction(surface_width, p.vent_target_y, p.vent_attraction, p.vent_fade)
            if left_vent_on and near_left:
                particle.apply_vent_suction(0.0, p.vent_target_y, p.vent_attraction, p.vent_fade)

            x_before, y_before = particle.x, particle.y
            particle.integrate(speed_multiplier)
            particle.x, particle.vx, _ = obstruction.sweep(
                x_before, particle.x, y_before, particle.y, particle.vx, door_open
            )

            if particle.y < p.ceiling_band:
                if layer.deposit_at(int(np.floor(particle.x)), p.deposit_amount):
                    deposits += 1
                continue

            particle.opacity -= p.fade_rate * speed_multiplier
            if particle.opacity <= 0 or particle.is_out_of_bounds(surface_width):
                continue

            survivors.append(particle)

        self.particles = survivors
        return deposits

    def snapshot(self) -> np.ndarray:
        """
        Get a read-only copy of the particle state.

        Returns:
            Array of shape (N, 6) with columns x, y, vx, vy, radius, opacity
        """
        if not self.particles:
            data = np.zeros((0, len(SNAPSHOT_COLUMNS)))
        else:
            data = np.array([p.as_row() for p in self.particles], dtype=float)
        data.setflags(write=False)
        return data

    def get_statistics(self) -> dict:
        """Get summary statistics about the live particles."""
        if not self.particles:
            return {'count': 0, 'mean_opacity': 0.0, 'mean_height': 0.0}
        snap = self.snapshot()
        return {
            'count': len(self.particles),
            'mean_opacity': float(snap[:, 5].mean()),
            'mean_height': float(snap[:, 1].mean()),
        }

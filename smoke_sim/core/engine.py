"""
Simulation core.

``SimulationCore`` owns every piece of mutable simulation state (fire,
particles, smoke layer, wall, vents, clock) and is the only object a front
end talks to. Setters are instantaneous writes observed by the next tick;
read accessors hand out copies so a renderer can never mutate the state.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

from smoke_sim.parameters import SmokeParameters
from smoke_sim.core.clock import SimulationClock
from smoke_sim.core.fire_source import FireSource
from smoke_sim.core.obstruction import ObstructionModel
from smoke_sim.core.particles import ParticleSystem
from smoke_sim.core.smoke_layer import SmokeLayerField

logger = logging.getLogger(__name__)

VENT_SIDES = ("left", "right")
INTENSITY_LEVELS = (1, 2, 3)


@dataclass(frozen=True)
class SimulationSnapshot:
    """Consistent read-only view of the simulation after a tick."""
    elapsed_time: int
    running: bool
    speed_multiplier: int
    intensity_level: int
    surface_width: float
    surface_height: float
    wall_x: float
    door_top: float
    door_open: bool
    left_vent_on: bool
    right_vent_on: bool
    crouch: bool
    fire_x: float
    fire_intensity: float
    flame_count: int
    particles: np.ndarray
    layer: np.ndarray
    smoke_thickness_cm: int
    breathing_height_cm: float
    danger: bool


class SimulationCore:
    """Aggregate owning the whole smoke simulation."""

    def __init__(self, params: Optional[SmokeParameters] = None,
                 rng: Optional[np.random.Generator] = None):
        """
        Create a stopped simulation with no surface configured.

        Args:
            params: Model parameters (defaults if None)
            rng: Random generator; built from ``params.seed`` if None
        """
        self.params = params if params is not None else SmokeParameters()
        self.rng = rng if rng is not None else np.random.default_rng(self.params.seed)

        self.surface_width = 0.0
        self.surface_height = 0.0

        self.clock = SimulationClock(self.params.tick_interval_ms)
        self.obstruction = ObstructionModel(self.params)
        self.fire = FireSource(self.params)
        self.layer = SmokeLayerField(self.params, self.obstruction)
        self.particles = ParticleSystem(self.params, self.obstruction, self.rng)

        self.intensity_level = 1
        self.vents: Dict[str, bool] = {side: False for side in VENT_SIDES}
        self.crouch = False

    # ------------------------------------------------------------------
    # Surface and lifecycle
    # ------------------------------------------------------------------

    def configure(self, surface_width: float, surface_height: float):
        """
        Set the drawing surface size.

        Rebuilds the smoke layer as one empty column per unit of width, places
        the wall and door, and moves the fire to its default position.

        Args:
            surface_width: Surface width in units
            surface_height: Surface height in units
        """
        self.surface_width = float(max(0.0, surface_width))
        self.surface_height = float(max(0.0, surface_height))
        self.obstruction.configure(self.surface_width, self.surface_height)
        self.layer.reset(math.ceil(self.surface_width))
        self.fire.place_default(self.surface_width)
        logger.info(
            f"Configured surface {self.surface_width:g}x{self.surface_height:g}, "
            f"{self.layer.length} layer columns"
        )

    def start(self):
        self.clock.start()

    def stop(self):
        self.clock.stop()

    def reset(self):
        """Return every owned entity to its initial state. Safe to call repeatedly."""
        self.clock.reset()
        self.fire.reset()
        self.particles.clear()
        self.layer.reset(math.ceil(self.surface_width))
        self.obstruction.door_open = False
        for side in VENT_SIDES:
            self.vents[side] = False
        self.crouch = False
        logger.info("Simulation reset")

    def tick(self) -> bool:
        """
        Advance the simulation by one tick.

        Returns:
            True if a tick ran, False while paused
        """
        return self.clock.tick(self._run_pipeline)

    def run(self, num_ticks: int) -> int:
        """Run ``num_ticks`` ticks back to back. Returns the number that ran."""
        return self.clock.run(num_ticks, self._run_pipeline)

    def _run_pipeline(self, elapsed: int, speed: int):
        door_open = self.obstruction.door_open
        left, right = self.vents["left"], self.vents["right"]

        self.fire.grow(speed)
        self.particles.spawn(
            self.intensity_level, self.fire.intensity, self.fire.x, self.surface_height, speed
        )
        self.particles.advance(
            self.surface_width, self.surface_height, door_open, left, right, speed, self.layer
        )
        self.layer.step(door_open, left, right, elapsed, speed)

    # ------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------

    def set_fire_origin(self, x: float):
        """Move the fire. Clamped to the surface once one is configured."""
        if self.surface_width <= 0:
            self.fire.set_position(x)
            return
        clamped = min(max(float(x), 0.0), self.surface_width)
        if clamped != x:
            logger.warning(f"Fire origin {x} outside surface, clamped to {clamped}")
        self.fire.set_position(clamped)

    def set_intensity_level(self, level: int):
        clamped = int(min(max(round(level), INTENSITY_LEVELS[0]), INTENSITY_LEVELS[-1]))
        if clamped != level:
            logger.warning(f"Intensity level {level} not supported, using {clamped}")
        self.intensity_level = clamped

    def set_door_open(self, is_open: bool):
        self.obstruction.door_open = bool(is_open)

    def toggle_door(self) -> bool:
        self.set_door_open(not self.obstruction.door_open)
        return self.obstruction.door_open

    def set_vent(self, side: str, on: bool):
        if side not in self.vents:
            raise ValueError(f"Unknown vent side '{side}', expected one of {VENT_SIDES}")
        self.vents[side] = bool(on)

    def toggle_vent(self, side: str) -> bool:
        self.set_vent(side, not self.vents.get(side, False))
        return self.vents[side]

    def set_speed_multiplier(self, value: float) -> int:
        return self.clock.set_speed(value)

    def cycle_speed(self) -> int:
        return self.clock.cycle_speed()

    def set_crouch(self, crouch: bool):
        self.crouch = bool(crouch)

    def toggle_crouch(self) -> bool:
        self.crouch = not self.crouch
        return self.crouch

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def elapsed_time(self) -> int:
        return self.clock.elapsed

    @property
    def is_running(self) -> bool:
        return self.clock.running

    @property
    def speed_multiplier(self) -> int:
        return self.clock.speed

    @property
    def door_open(self) -> bool:
        return self.obstruction.door_open

    @property
    def any_vent_on(self) -> bool:
        return any(self.vents.values())

    @property
    def fire_position(self) -> float:
        return self.fire.x

    @property
    def fire_intensity(self) -> float:
        return self.fire.intensity

    @property
    def flame_count(self) -> int:
        return self.fire.flame_count()

    def smoke_layer_thickness(self) -> int:
        """Maximum layer thickness in whole centimetres (rounded down)."""
        return math.floor(self.layer.max_thickness() / self.params.px_per_cm)

    def breathing_height(self) -> float:
        """Occupant breathing height in centimetres."""
        if self.crouch:
            return self.params.crouch_height_cm
        return self.params.standing_height_cm

    def is_danger(self) -> bool:
        return self.smoke_layer_thickness() > self.breathing_height()

    def particle_snapshot(self) -> np.ndarray:
        return self.particles.snapshot()

    def field_snapshot(self) -> np.ndarray:
        return self.layer.snapshot()

    def state(self) -> SimulationSnapshot:
        """Bundle the current state for a renderer."""
        thickness = self.smoke_layer_thickness()
        breathing = self.breathing_height()
        return SimulationSnapshot(
            elapsed_time=self.elapsed_time,
            running=self.is_running,
            speed_multiplier=self.speed_multiplier,
            intensity_level=self.intensity_level,
            surface_width=self.surface_width,
            surface_height=self.surface_height,
            wall_x=self.obstruction.wall_x,
            door_top=self.obstruction.door_top,
            door_open=self.door_open,
            left_vent_on=self.vents["left"],
            right_vent_on=self.vents["right"],
            crouch=self.crouch,
            fire_x=self.fire.x,
            fire_intensity=self.fire.intensity,
            flame_count=self.fire.flame_count(),
            particles=self.particle_snapshot(),
            layer=self.field_snapshot(),
            smoke_thickness_cm=thickness,
            breathing_height_cm=breathing,
            danger=thickness > breathing,
        )

"""
Fire source modeling.

A single point emitter on the floor whose intensity grows with simulated time.
Consumers clamp the intensity at point of use, the stored value is uncapped.
"""

import math

from smoke_sim.parameters import SmokeParameters


class FireSource:
    """Point emitter driving the smoke spawn rate."""

    def __init__(self, params: SmokeParameters, x: float = 0.0):
        self.params = params
        self.x = float(x)
        self.intensity = 1.0

    def grow(self, speed_multiplier: float):
        """Increase intensity by one tick's growth, scaled by the speed multiplier."""
        self.intensity += self.params.fire_growth_rate * speed_multiplier

    def set_position(self, x: float):
        """Relocate the emitter. Intensity is unaffected."""
        self.x = float(x)

    def place_default(self, surface_width: float):
        """Put the emitter at its default spot near the left side of the room."""
        self.x = surface_width * self.params.fire_default_fraction

    def spawn_intensity(self) -> float:
        """Intensity as seen by the particle spawn formula."""
        return min(self.intensity, self.params.spawn_intensity_cap)

    def effective_intensity(self) -> float:
        """Intensity as seen by renderers."""
        return min(self.intensity, self.params.render_intensity_cap)

    def flame_count(self) -> int:
        """Number of flame glyphs a renderer should draw this frame."""
        return int(math.floor(self.params.flames_per_intensity * self.effective_intensity()))

    def reset(self):
        self.intensity = 1.0

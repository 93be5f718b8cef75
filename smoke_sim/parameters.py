"""
Simulation parameters for the smoke layer model.

This module holds every tunable constant of the teaching model in a single
dataclass, together with helpers to serialize it and load overrides from a
JSON file.
"""

import json
import logging
from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Optional, Dict, Any, Union

logger = logging.getLogger(__name__)


@dataclass
class SmokeParameters:
    """Container for all smoke model parameters.

    Distances are in surface units (one unit per horizontal field column),
    rates are per tick at speed multiplier 1.
    """

    # Clock
    tick_interval_ms: int = 50

    # Fire source
    fire_growth_rate: float = 0.01
    fire_default_fraction: float = 0.15
    spawn_intensity_cap: float = 5.0
    render_intensity_cap: float = 10.0
    flames_per_intensity: int = 15

    # Particle spawning
    spawn_rate_factor: float = 2.0
    floor_offset: float = 40.0
    spawn_jitter: float = 10.0
    spawn_vx_range: float = 1.0
    spawn_vy_random: float = 2.0
    buoyancy_per_level: float = 1.2
    radius_min: float = 5.0
    radius_max: float = 13.0
    initial_opacity: float = 0.7

    # Particle motion
    turbulence_strength: float = 0.05
    fade_rate: float = 0.003
    ceiling_band: float = 20.0
    deposit_amount: float = 2.5

    # Wall and door
    wall_band_half_width: float = 8.0
    wall_clearance: float = 9.0
    wall_restitution: float = 0.5
    door_height: float = 90.0
    layer_wall_half_width: float = 5.0

    # Vents
    vent_particle_reach: float = 80.0
    vent_attraction: float = 0.01
    vent_target_y: float = 50.0
    vent_fade: float = 0.04
    vent_layer_reach: float = 150.0
    vent_drain_rate: float = 1.5

    # Smoke layer
    diffusion_rate: float = 0.3
    max_diffusion_number: Optional[float] = None
    drift_amplitude: float = 0.1
    drift_time_frequency: float = 0.1
    drift_space_frequency: float = 0.05
    decay_rate: float = 0.02

    # Readings
    px_per_cm: float = 0.2
    standing_height_cm: float = 180.0
    crouch_height_cm: float = 100.0

    # Reproducibility
    seed: Optional[int] = None

    def __post_init__(self):
        """Validate parameter values."""
        if self.tick_interval_ms <= 0:
            raise ValueError(f"tick_interval_ms must be positive, got {self.tick_interval_ms}")
        if self.radius_min > self.radius_max:
            raise ValueError(
                f"radius_min ({self.radius_min}) must not exceed radius_max ({self.radius_max})"
            )
        if not 0.0 <= self.initial_opacity <= 1.0:
            raise ValueError(f"initial_opacity must lie in [0, 1], got {self.initial_opacity}")
        if self.wall_clearance <= self.wall_band_half_width:
            raise ValueError("wall_clearance must be larger than wall_band_half_width")
        if self.px_per_cm <= 0:
            raise ValueError(f"px_per_cm must be positive, got {self.px_per_cm}")
        if self.max_diffusion_number is not None and self.max_diffusion_number <= 0:
            raise ValueError("max_diffusion_number must be positive when set")
        for name in ("spawn_rate_factor", "diffusion_rate", "decay_rate", "fade_rate",
                     "deposit_amount", "ceiling_band", "door_height"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert parameters to a plain dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SmokeParameters':
        """Create SmokeParameters from a dictionary.

        Missing keys keep their defaults; unknown keys are rejected so that a
        misspelled override does not pass silently.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown smoke parameters: {', '.join(unknown)}")
        return cls(**data)

    def with_overrides(self, **kwargs) -> 'SmokeParameters':
        """Return a copy with the given fields replaced."""
        data = self.to_dict()
        data.update(kwargs)
        return SmokeParameters.from_dict(data)


def load_parameters(path: Union[str, Path]) -> SmokeParameters:
    """
    Load parameters from a JSON file.

    Args:
        path: Path to a JSON object whose keys are SmokeParameters fields

    Returns:
        SmokeParameters with the file's values applied over the defaults
    """
    path = Path(path)
    with path.open('r', encoding='utf-8') as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"Parameter file {path} must contain a JSON object")
    logger.info(f"Loaded {len(data)} parameter overrides from {path}")
    return SmokeParameters.from_dict(data)

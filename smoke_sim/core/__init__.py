"""
Core functionality for the smoke layer simulation.

Modules:
- fire_source: Growing point emitter
- obstruction: Interior wall with a door opening
- particles: Buoyant smoke particles
- smoke_layer: Ceiling smoke thickness field
- clock: Tick sequencing and speed control
- engine: SimulationCore aggregate
"""

from .fire_source import FireSource
from .obstruction import ObstructionModel
from .smoke_layer import SmokeLayerField
from .particles import ParticleSystem, SmokeParticle
from .clock import SimulationClock
from .engine import SimulationCore, SimulationSnapshot

__all__ = [
    "FireSource",
    "ObstructionModel",
    "SmokeLayerField",
    "ParticleSystem",
    "SmokeParticle",
    "SimulationClock",
    "SimulationCore",
    "SimulationSnapshot",
]

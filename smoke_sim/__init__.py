"""
Smoke Layer Simulation

An interactive teaching model of smoke rising from a room fire, pooling at the
ceiling, spreading past a wall and door, and being drawn off by vents.
"""

import logging

__version__ = "0.1.0"

from .parameters import SmokeParameters, load_parameters
from .core.engine import SimulationCore, SimulationSnapshot

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "SmokeParameters",
    "load_parameters",
    "SimulationCore",
    "SimulationSnapshot",
]

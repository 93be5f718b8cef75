"""
Visualization module for the smoke layer simulation.

This module provides matplotlib drawing helpers that read simulation
snapshots, and the interactive viewer.
"""

from .plotting import (
    plot_scene,
    plot_smoke_layer,
    plot_particles,
    plot_fire,
    plot_room,
    plot_thickness_history,
)
from .viewer import SmokeLayerViewer

__all__ = [
    'plot_scene',
    'plot_smoke_layer',
    'plot_particles',
    'plot_fire',
    'plot_room',
    'plot_thickness_history',
    'SmokeLayerViewer',
]

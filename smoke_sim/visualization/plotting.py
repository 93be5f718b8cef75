"""
Plotting utilities for the smoke layer simulation.

These functions only read a ``SimulationSnapshot``; they never touch the live
simulation. Surface coordinates have y = 0 at the ceiling, so every Axes is
drawn with an inverted y axis.
"""

from typing import Optional, Sequence
import logging

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Circle, Polygon, Rectangle

from smoke_sim.core.engine import SimulationSnapshot
from smoke_sim.utils.viz_utils import flame_color, smoke_rgba

logger = logging.getLogger(__name__)

LAYER_TOP = 20.0
WALL_WIDTH = 10.0
VENT_INSET = 32.0
VENT_RADIUS = 16.0


def _get_axes(ax: Optional[plt.Axes]):
    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 8))
    else:
        fig = ax.figure
    return fig, ax


def setup_room_axes(ax: plt.Axes, snapshot: SimulationSnapshot):
    """Reset an Axes to the room's extent and style."""
    ax.set_xlim(0, snapshot.surface_width)
    ax.set_ylim(snapshot.surface_height, 0)
    ax.set_aspect('equal')
    ax.set_facecolor('#f8fafc')
    ax.set_xticks([])
    ax.set_yticks([])


def plot_smoke_layer(
    snapshot: SimulationSnapshot,
    ax: Optional[plt.Axes] = None,
    show: bool = False,
    layer_top: float = LAYER_TOP,
    **fill_kwargs
) -> plt.Figure:
    """Draw the ceiling smoke layer as a filled band hanging from ``layer_top``.

    Args:
        snapshot: Simulation state to draw
        ax: Optional matplotlib Axes to plot on
        show: Whether to call plt.show()
        layer_top: Height of the top of the layer in surface units
        **fill_kwargs: Additional arguments passed to ``fill_between``

    Returns:
        The matplotlib Figure containing the plot
    """
    fig, ax = _get_axes(ax)
    layer = snapshot.layer
    if layer.size == 0:
        logger.debug("Smoke layer is empty; surface not configured yet")
        return fig

    fill_kwargs.setdefault('color', '#262626')
    fill_kwargs.setdefault('alpha', 0.85)
    fill_kwargs.setdefault('linewidth', 0)
    xs = np.arange(layer.size)
    ax.fill_between(xs, layer_top, layer_top + layer, **fill_kwargs)

    if show:
        plt.show()
    return fig


def plot_particles(
    snapshot: SimulationSnapshot,
    ax: Optional[plt.Axes] = None,
    show: bool = False
) -> plt.Figure:
    """Draw smoke particles as grey discs with their own opacity."""
    fig, ax = _get_axes(ax)
    particles = snapshot.particles
    if particles.shape[0] == 0:
        return fig

    # scatter sizes are in points^2; approximate data radius to points
    sizes = (particles[:, 4] * 0.9) ** 2
    ax.scatter(particles[:, 0], particles[:, 1], s=sizes,
               c=smoke_rgba(particles[:, 5]), edgecolors='none')

    if show:
        plt.show()
    return fig


def plot_fire(
    snapshot: SimulationSnapshot,
    ax: Optional[plt.Axes] = None,
    rng: Optional[np.random.Generator] = None,
    floor_offset: float = 40.0
) -> plt.Figure:
    """Draw ``snapshot.flame_count`` flickering flame triangles at the fire."""
    fig, ax = _get_axes(ax)
    rng = rng if rng is not None else np.random.default_rng()
    base_y = snapshot.surface_height - floor_offset

    for _ in range(snapshot.flame_count):
        flame_x = snapshot.fire_x + rng.uniform(-5, 5)
        tip_y = base_y - rng.uniform(0, 30)
        color = flame_color(rng.random())
        ax.add_patch(Polygon(
            [(flame_x, base_y), (flame_x - 5, tip_y), (flame_x + 5, tip_y)],
            closed=True, facecolor=color, edgecolor='none', alpha=0.6
        ))
    return fig


def plot_room(
    snapshot: SimulationSnapshot,
    ax: Optional[plt.Axes] = None,
    px_per_cm: float = 0.2
) -> plt.Figure:
    """Draw the wall, door, vents, fire marker and breathing-height line."""
    fig, ax = _get_axes(ax)
    wall_left = snapshot.wall_x - WALL_WIDTH / 2

    ax.add_patch(Rectangle((wall_left, 0), WALL_WIDTH, snapshot.door_top,
                           facecolor='#475569', edgecolor='none'))
    door_height = snapshot.surface_height - snapshot.door_top
    if snapshot.door_open:
        ax.add_patch(Rectangle((wall_left, snapshot.door_top), WALL_WIDTH, door_height,
                               fill=False, edgecolor='#10b981', linewidth=1.5))
    else:
        ax.add_patch(Rectangle((wall_left, snapshot.door_top), WALL_WIDTH, door_height,
                               facecolor='#92400e', edgecolor='none'))

    for on, x in ((snapshot.left_vent_on, VENT_INSET),
                  (snapshot.right_vent_on, snapshot.surface_width - VENT_INSET)):
        ax.add_patch(Circle((x, 64), VENT_RADIUS,
                            facecolor='#3b82f6' if on else '#94a3b8', edgecolor='none'))

    breathing_y = snapshot.surface_height - snapshot.breathing_height_cm * px_per_cm
    ax.axhline(breathing_y, color='#f87171', linestyle='--', linewidth=1, alpha=0.6)
    ax.plot(snapshot.fire_x, snapshot.surface_height - 48, 'v', color='#ea580c', markersize=8)
    return fig


def plot_scene(
    snapshot: SimulationSnapshot,
    ax: Optional[plt.Axes] = None,
    show: bool = True,
    title: Optional[str] = None,
    rng: Optional[np.random.Generator] = None
) -> plt.Figure:
    """Plot a full frame: room, fire, particles and smoke layer.

    Args:
        snapshot: Simulation state to draw
        ax: Optional matplotlib Axes to plot on
        show: Whether to call plt.show()
        title: Plot title (defaults to time and smoke thickness)
        rng: Random generator for flame flicker

    Returns:
        The matplotlib Figure containing the plot
    """
    fig, ax = _get_axes(ax)
    ax.clear()
    setup_room_axes(ax, snapshot)
    if snapshot.danger:
        ax.set_facecolor('#fee2e2')

    plot_room(snapshot, ax)
    plot_fire(snapshot, ax, rng=rng)
    plot_particles(snapshot, ax)
    plot_smoke_layer(snapshot, ax)

    if title is None:
        title = (f't = {snapshot.elapsed_time} s    '
                 f'smoke layer {snapshot.smoke_thickness_cm} cm    '
                 f'breathing height {int(snapshot.breathing_height_cm)} cm')
    ax.set_title(title)

    if show:
        plt.show()
    return fig


def plot_thickness_history(
    times: Sequence[float],
    thickness_cm: Sequence[float],
    breathing_height_cm: Optional[float] = None,
    ax: Optional[plt.Axes] = None,
    show: bool = True
) -> plt.Figure:
    """Plot smoke layer thickness over simulated time."""
    fig, ax = _get_axes(ax)
    ax.plot(times, thickness_cm, color='#334155', label='Smoke layer thickness')
    if breathing_height_cm is not None:
        ax.axhline(breathing_height_cm, color='#ef4444', linestyle='--', label='Breathing height')
    ax.set_xlabel('Simulated time (s)')
    ax.set_ylabel('Thickness (cm)')
    ax.grid(True)
    ax.legend()

    if show:
        plt.show()
    return fig

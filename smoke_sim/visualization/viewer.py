"""
Interactive smoke layer viewer.

A matplotlib front end for ``SimulationCore``: buttons for the lifecycle,
door, vents, speed and posture, radio buttons for the fire intensity level,
and click-to-place for the fire origin. One ``FuncAnimation`` timer with the
clock's fixed period drives ``tick`` and then redraws from a snapshot.
"""

import logging
from typing import Optional

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.widgets import Button, RadioButtons

from smoke_sim.core.engine import SimulationCore
from smoke_sim.visualization.plotting import plot_scene

logger = logging.getLogger(__name__)

INTENSITY_LABELS = ('Low (incipient)', 'Medium (growth)', 'High (fully developed)')


class SmokeLayerViewer:
    """Displays and controls a smoke simulation."""

    def __init__(self, core: SimulationCore, surface_width: float = 800, surface_height: float = 420):
        """
        Initialize the viewer and configure the core for its surface.

        Args:
            core: Simulation to display
            surface_width: Room width in surface units
            surface_height: Room height in surface units
        """
        self.core = core
        self.core.configure(surface_width, surface_height)
        self.flame_rng = np.random.default_rng()
        self.animation: Optional[FuncAnimation] = None

        self._setup_ui()
        self._redraw()

    def _setup_ui(self):
        """Set up the matplotlib figure and interactive controls."""
        self.fig = plt.figure(figsize=(14, 8))
        self.fig.patch.set_facecolor('#111827')
        self.fig.suptitle('Indoor Fire Smoke Simulation',
                          fontsize=16, fontweight='bold', color='#f97316', y=0.98)

        self.ax = self.fig.add_axes([0.05, 0.22, 0.9, 0.68])

        button_specs = [
            ('start', 'Start', self._on_start),
            ('speed', 'Speed: 1x', self._on_speed),
            ('reset', 'Reset', self._on_reset),
            ('door', 'Door: closed', self._on_door),
            ('left', 'Left vent: off', self._on_left_vent),
            ('right', 'Right vent: off', self._on_right_vent),
            ('crouch', 'Standing (180cm)', self._on_crouch),
        ]
        self.buttons = {}
        for index, (key, label, handler) in enumerate(button_specs):
            ax_button = self.fig.add_axes([0.25 + index * 0.105, 0.06, 0.1, 0.05])
            button = Button(ax_button, label, color='#374151', hovercolor='#4b5563')
            button.label.set_color('white')
            button.label.set_fontsize(8)
            button.on_clicked(handler)
            self.buttons[key] = button

        ax_radio = self.fig.add_axes([0.03, 0.02, 0.18, 0.14], facecolor='#1f2937')
        self.radio_intensity = RadioButtons(ax_radio, INTENSITY_LABELS, active=0)
        for label in self.radio_intensity.labels:
            label.set_color('#d1d5db')
            label.set_fontsize(8)
        self.radio_intensity.on_clicked(self._on_intensity)

        self.fig.canvas.mpl_connect('button_press_event', self._on_click)

    def _refresh_labels(self):
        core = self.core
        running = core.is_running
        start = self.buttons['start']
        start.label.set_text('Running' if running else 'Start')
        start.color = '#1f2937' if running else '#374151'
        start.hovercolor = start.color if running else '#4b5563'
        start.ax.set_facecolor(start.color)
        self.buttons['speed'].label.set_text(f'Speed: {core.speed_multiplier}x')
        self.buttons['door'].label.set_text(f"Door: {'open' if core.door_open else 'closed'}")
        self.buttons['left'].label.set_text(f"Left vent: {'on' if core.vents['left'] else 'off'}")
        self.buttons['right'].label.set_text(f"Right vent: {'on' if core.vents['right'] else 'off'}")
        self.buttons['crouch'].label.set_text(
            'Crouching (100cm)' if core.crouch else 'Standing (180cm)'
        )

    def _on_start(self, event):
        """Start the clock and its timer. Ignored while already running."""
        if self.core.is_running:
            return
        self.core.start()
        if self.animation is None:
            self.animation = FuncAnimation(
                self.fig, self._on_frame,
                interval=self.core.clock.tick_interval_ms,
                cache_frame_data=False
            )
        self._refresh_labels()
        self.fig.canvas.draw_idle()

    def _stop_animation(self):
        if self.animation is not None:
            self.animation.event_source.stop()
            self.animation = None

    def _on_speed(self, event):
        self.core.cycle_speed()
        self._refresh_labels()

    def _on_reset(self, event):
        self.core.reset()
        self._stop_animation()
        self._refresh_labels()
        self._redraw()

    def _on_door(self, event):
        self.core.toggle_door()
        self._refresh_labels()

    def _on_left_vent(self, event):
        self.core.toggle_vent('left')
        self._refresh_labels()

    def _on_right_vent(self, event):
        self.core.toggle_vent('right')
        self._refresh_labels()

    def _on_crouch(self, event):
        self.core.toggle_crouch()
        self._refresh_labels()

    def _on_intensity(self, label):
        self.core.set_intensity_level(INTENSITY_LABELS.index(label) + 1)

    def _on_click(self, event):
        """Move the fire origin when the room itself is clicked."""
        if event.inaxes is not self.ax or event.xdata is None:
            return
        self.core.set_fire_origin(event.xdata)
        if not self.core.is_running:
            self._redraw()

    def _on_frame(self, _frame):
        if not self.core.is_running:
            self._stop_animation()
            self._refresh_labels()
            return
        self.core.tick()
        self._redraw()

    def _redraw(self):
        """Redraw the room from a snapshot taken after the last tick."""
        snapshot = self.core.state()
        plot_scene(snapshot, ax=self.ax, show=False, rng=self.flame_rng)
        self.ax.title.set_color('#ef4444' if snapshot.danger else '#d1d5db')
        self.fig.canvas.draw_idle()

    def show(self):
        """Display the interactive visualization."""
        plt.show()

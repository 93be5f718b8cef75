"""
Smoke Layer Simulator
Interactive model of smoke filling a two-zone room, with a door and vents.

Usage:
    $ python smoke_layer_simulator.py
    $ python smoke_layer_simulator.py --headless --ticks 400 --door-open-at 200
"""

import argparse
import logging

import matplotlib.pyplot as plt

from smoke_sim.parameters import SmokeParameters, load_parameters
from smoke_sim.core.engine import SimulationCore
from smoke_sim.visualization.plotting import plot_scene, plot_thickness_history

logger = logging.getLogger("smoke_layer_simulator")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Indoor fire smoke layer simulation")
    parser.add_argument("--params", help="JSON file with SmokeParameters overrides")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--width", type=float, default=800.0, help="Room width in surface units")
    parser.add_argument("--height", type=float, default=420.0, help="Room height in surface units")
    parser.add_argument("--headless", action="store_true", help="Run without the interactive viewer")
    parser.add_argument("--ticks", type=int, default=300, help="Ticks to run in headless mode")
    parser.add_argument("--intensity", type=int, default=1, choices=(1, 2, 3))
    parser.add_argument("--speed", type=int, default=1, choices=(1, 2, 4))
    parser.add_argument("--fire-x", type=float, default=None, help="Fire position (default 15%% of width)")
    parser.add_argument("--door-open-at", type=int, default=None, help="Tick at which the door opens")
    parser.add_argument("--left-vent", action="store_true")
    parser.add_argument("--right-vent", action="store_true")
    parser.add_argument("--plot", action="store_true", help="Show the final frame and thickness history")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def build_core(args) -> SimulationCore:
    params = load_parameters(args.params) if args.params else SmokeParameters()
    if args.seed is not None:
        params = params.with_overrides(seed=args.seed)
    core = SimulationCore(params)
    core.configure(args.width, args.height)
    if args.fire_x is not None:
        core.set_fire_origin(args.fire_x)
    core.set_intensity_level(args.intensity)
    core.set_speed_multiplier(args.speed)
    core.set_vent("left", args.left_vent)
    core.set_vent("right", args.right_vent)
    return core


def run_headless(core: SimulationCore, ticks: int, door_open_at=None, plot: bool = False) -> dict:
    """
    Run the simulation without a timer and log a summary.

    Returns:
        Dictionary of final readings
    """
    times, thickness = [], []
    core.start()
    for tick in range(ticks):
        if door_open_at is not None and tick == door_open_at:
            core.set_door_open(True)
            logger.info(f"Door opened at tick {tick}")
        core.tick()
        times.append(core.elapsed_time)
        thickness.append(core.smoke_layer_thickness())

    left_max, right_max = core.layer.side_max()
    summary = {
        'elapsed_time': core.elapsed_time,
        'particles': core.particles.count,
        'fire_intensity': round(core.fire_intensity, 3),
        'smoke_thickness_cm': core.smoke_layer_thickness(),
        'left_zone_max': round(left_max, 3),
        'right_zone_max': round(right_max, 3),
        'danger': core.is_danger(),
    }
    for key, value in summary.items():
        logger.info(f"{key}: {value}")
    stats = core.particles.get_statistics()
    logger.info(
        f"Live particles: mean height {stats['mean_height']:.1f}, "
        f"mean opacity {stats['mean_opacity']:.3f}"
    )

    if plot:
        fig, (ax_scene, ax_history) = plt.subplots(2, 1, figsize=(10, 10))
        plot_scene(core.state(), ax=ax_scene, show=False)
        plot_thickness_history(times, thickness, core.breathing_height(), ax=ax_history, show=False)
        plt.show()
    return summary


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    core = build_core(args)

    if args.headless:
        run_headless(core, args.ticks, args.door_open_at, args.plot)
        return

    from smoke_sim.visualization.viewer import SmokeLayerViewer
    viewer = SmokeLayerViewer(core, args.width, args.height)
    if args.fire_x is not None:
        core.set_fire_origin(args.fire_x)
    viewer.show()


if __name__ == '__main__':
    main()

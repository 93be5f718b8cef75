import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from smoke_sim.parameters import SmokeParameters
from smoke_sim.core.engine import SimulationCore
from smoke_sim.core.obstruction import ObstructionModel
from smoke_sim.core.smoke_layer import SmokeLayerField
from smoke_sim.core.particles import ParticleSystem

SURFACE_WIDTH = 400
SURFACE_HEIGHT = 400


@pytest.fixture
def params():
    return SmokeParameters(seed=1234)


@pytest.fixture
def quiet_params():
    """Parameters with ambient drift and decay switched off."""
    return SmokeParameters(seed=1234, drift_amplitude=0.0, decay_rate=0.0)


@pytest.fixture
def obstruction(params):
    model = ObstructionModel(params)
    model.configure(SURFACE_WIDTH, SURFACE_HEIGHT)
    return model


@pytest.fixture
def layer(params, obstruction):
    return SmokeLayerField(params, obstruction, SURFACE_WIDTH)


@pytest.fixture
def particle_system(params, obstruction):
    return ParticleSystem(params, obstruction, np.random.default_rng(7))


def make_core(seed=1234, fire_x=50.0, level=1, **overrides):
    """Configured 400 x 400 simulation with the fire at ``fire_x``."""
    core = SimulationCore(SmokeParameters(seed=seed, **overrides))
    core.configure(SURFACE_WIDTH, SURFACE_HEIGHT)
    core.set_fire_origin(fire_x)
    core.set_intensity_level(level)
    return core


@pytest.fixture
def core():
    return make_core()


@pytest.fixture
def core_factory():
    return make_core

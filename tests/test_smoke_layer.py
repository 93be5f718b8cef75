import logging

import numpy as np
import pytest

from smoke_sim.core.obstruction import ObstructionModel
from smoke_sim.core.smoke_layer import SmokeLayerField
from smoke_sim.parameters import SmokeParameters


def make_layer(params, length=400):
    obstruction = ObstructionModel(params)
    obstruction.configure(length, 400)
    return SmokeLayerField(params, obstruction, length)


def quiet_step(layer, door_open=False, left=False, right=False, t=0, speed=1):
    layer.step(door_open, left, right, t, speed)


class TestDeposit:

    def test_deposit_in_range(self, layer):
        assert layer.deposit_at(10, 2.5)
        assert layer.deposit_at(10, 2.5)
        assert layer.values[10] == 5.0

    @pytest.mark.parametrize("column", [-1, 400, 10_000])
    def test_deposit_out_of_range_is_ignored(self, layer, column):
        assert not layer.deposit_at(column, 2.5)
        assert layer.total_mass() == 0.0


class TestShape:

    def test_zero_length_step_is_noop(self, params, obstruction):
        layer = SmokeLayerField(params, obstruction)
        layer.step(True, True, True, 10, 4)
        assert layer.length == 0
        assert layer.max_thickness() == 0.0

    def test_reset(self, layer):
        layer.deposit_at(5, 1.0)
        layer.reset()
        assert layer.length == 400
        assert layer.total_mass() == 0.0
        layer.reset(123)
        assert len(layer) == 123


class TestStep:

    def test_drift_follows_time_and_column(self):
        params = SmokeParameters(decay_rate=0.0, diffusion_rate=0.0)
        layer = make_layer(params)
        layer.values[:] = 1.0
        layer.step(False, False, False, 7, 1)
        columns = np.arange(400)
        expected = 1.0 + 0.1 * np.sin(0.7 + 0.05 * columns)
        np.testing.assert_allclose(layer.values, expected)

    def test_diffusion_spreads_a_spike(self, quiet_params):
        layer = make_layer(quiet_params)
        layer.values[100] = 10.0
        quiet_step(layer)
        assert layer.values[100] == pytest.approx(10.0 - 2 * 0.3 * 10.0)
        assert layer.values[99] == pytest.approx(3.0)
        assert layer.values[101] == pytest.approx(3.0)
        assert layer.total_mass() == pytest.approx(10.0)

    def test_update_reads_previous_field(self, quiet_params):
        # an in-place sweep would let column 101 see column 100's new value
        layer = make_layer(quiet_params)
        layer.values[100] = 10.0
        quiet_step(layer)
        assert layer.values[102] == 0.0

    def test_diffusion_scales_with_speed(self, quiet_params):
        layer = make_layer(quiet_params)
        layer.values[100] = 10.0
        quiet_step(layer, speed=2)
        assert layer.values[99] == pytest.approx(6.0)

    def test_edges_do_not_diffuse(self, quiet_params):
        layer = make_layer(quiet_params)
        layer.values[1] = 10.0
        quiet_step(layer)
        assert layer.values[0] == 0.0

    def test_closed_wall_blocks_and_conserves(self, quiet_params):
        layer = make_layer(quiet_params)
        layer.values[170:196] = 5.0
        for _ in range(50):
            quiet_step(layer)
        start, stop = layer.obstruction.layer_band(400)
        assert np.all(layer.values[start:] == 0.0)
        assert layer.total_mass() == pytest.approx(26 * 5.0)

    def test_edge_column_exchanges_with_outward_neighbour_only(self, quiet_params):
        layer = make_layer(quiet_params)
        layer.values[194] = 4.0
        layer.values[195] = 2.0
        layer.values[196] = 100.0  # inside the wall band
        quiet_step(layer)
        assert layer.values[195] == pytest.approx(2.0 + 0.3 * (4.0 - 2.0))
        assert layer.values[196] == 100.0

    def test_open_door_lets_smoke_cross(self, quiet_params):
        layer = make_layer(quiet_params)
        layer.values[170:196] = 5.0
        for _ in range(200):
            quiet_step(layer, door_open=True)
        assert layer.band_mass(205, 400) > 0.0
        assert layer.total_mass() == pytest.approx(26 * 5.0)

    def test_vent_drain_bands(self, quiet_params):
        layer = make_layer(quiet_params)
        layer.values[:] = 10.0
        quiet_step(layer, left=True, right=True)
        assert layer.values[149] == pytest.approx(8.5)
        assert layer.values[150] == pytest.approx(10.0)
        assert layer.values[250] == pytest.approx(10.0)
        assert layer.values[251] == pytest.approx(8.5)

    def test_drain_scales_with_speed(self, quiet_params):
        layer = make_layer(quiet_params.with_overrides(diffusion_rate=0.0))
        layer.values[:] = 10.0
        quiet_step(layer, left=True, speed=4)
        assert layer.values[10] == pytest.approx(4.0)

    def test_decay(self):
        params = SmokeParameters(drift_amplitude=0.0, diffusion_rate=0.0)
        layer = make_layer(params)
        layer.values[:] = 1.0
        layer.step(False, False, False, 0, 2)
        np.testing.assert_allclose(layer.values, 0.96)

    def test_values_never_negative(self, params):
        layer = make_layer(params)
        rng = np.random.default_rng(0)
        layer.values[:] = rng.uniform(0, 3, 400)
        for t in range(1, 200):
            layer.step(t % 2 == 0, True, t % 3 == 0, t, 4)
            assert np.all(layer.values >= 0.0)
            assert layer.length == 400


class TestStability:

    def test_unclamped_by_default_with_warning(self, quiet_params, caplog):
        layer = make_layer(quiet_params)
        with caplog.at_level(logging.WARNING, logger="smoke_sim.core.smoke_layer"):
            assert layer.effective_diffusion_rate(4) == pytest.approx(1.2)
            assert layer.effective_diffusion_rate(4) == pytest.approx(1.2)
        assert len([r for r in caplog.records if "Diffusion number" in r.message]) == 1

    def test_no_warning_at_stable_rate(self, quiet_params, caplog):
        layer = make_layer(quiet_params)
        with caplog.at_level(logging.WARNING, logger="smoke_sim.core.smoke_layer"):
            assert layer.effective_diffusion_rate(1) == pytest.approx(0.3)
        assert not caplog.records

    def test_optional_clamp(self, quiet_params):
        layer = make_layer(quiet_params.with_overrides(max_diffusion_number=0.5))
        assert layer.effective_diffusion_rate(4) == 0.5
        assert layer.effective_diffusion_rate(1) == pytest.approx(0.3)


class TestReadAccess:

    def test_snapshot_is_read_only_copy(self, layer):
        layer.deposit_at(3, 1.0)
        snap = layer.snapshot()
        with pytest.raises(ValueError):
            snap[3] = 0.0
        layer.deposit_at(3, 1.0)
        assert snap[3] == 1.0

    def test_band_mass_and_side_max(self, layer):
        layer.deposit_at(10, 3.0)
        layer.deposit_at(300, 1.0)
        assert layer.band_mass(0, 150) == 3.0
        assert layer.band_mass(-50, 1000) == 4.0
        assert layer.band_mass(200, 100) == 0.0
        assert layer.side_max() == (3.0, 1.0)
        assert layer.max_thickness() == 3.0

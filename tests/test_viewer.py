import matplotlib.pyplot as plt
import pytest

from smoke_sim.visualization.viewer import SmokeLayerViewer


@pytest.fixture
def viewer(core):
    view = SmokeLayerViewer(core, 400, 400)
    yield view
    plt.close(view.fig)


def test_viewer_configures_core(viewer, core):
    assert core.layer.length == 400
    assert viewer.animation is None
    assert viewer.buttons['start'].label.get_text() == 'Start'


def test_start_marks_button_as_running(viewer, core):
    viewer._on_start(None)
    assert core.is_running
    assert viewer.animation is not None
    assert viewer.buttons['start'].label.get_text() == 'Running'

    animation = viewer.animation
    viewer._on_start(None)
    assert viewer.animation is animation


def test_reset_stops_timer(viewer, core):
    viewer._on_start(None)
    viewer._on_reset(None)
    assert not core.is_running
    assert viewer.animation is None
    assert viewer.buttons['start'].label.get_text() == 'Start'


def test_frame_while_paused_stops_timer(viewer, core):
    viewer._on_start(None)
    core.stop()
    elapsed = core.elapsed_time
    viewer._on_frame(0)
    assert viewer.animation is None
    assert core.elapsed_time == elapsed
    assert viewer.buttons['start'].label.get_text() == 'Start'


def test_frame_while_running_ticks(viewer, core):
    viewer._on_start(None)
    elapsed = core.elapsed_time
    viewer._on_frame(0)
    assert core.elapsed_time == elapsed + 1

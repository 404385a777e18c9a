import numpy as np
import pytest

from charts import EASINGS, ChartConfig, StateTransition, TimeTransition, get_easing


@pytest.mark.parametrize("name", EASINGS)
def test_easing_endpoints_are_pinned(name):
    ease = get_easing(name)
    out = ease(np.array([0.0, 1.0]))
    assert out[0] == 0.0
    assert out[1] == 1.0


def test_easing_clips_input_range():
    ease = get_easing("cubic-in")
    assert ease(-0.5) == 0.0
    assert ease(1.5) == 1.0
    assert float(ease(0.5)) == pytest.approx(0.125)


def test_in_out_easing_is_symmetric_around_midpoint():
    ease = get_easing("sine-in-out")
    assert float(ease(0.5)) == pytest.approx(0.5)
    assert float(ease(0.25)) + float(ease(0.75)) == pytest.approx(1.0)


@pytest.mark.filterwarnings("error")
@pytest.mark.parametrize("name", EASINGS)
def test_easing_grid_raises_no_numeric_warnings(name):
    out = get_easing(name)(np.linspace(0.0, 1.0, 11))
    assert np.all(np.isfinite(out))
    assert out[0] == 0.0 and out[-1] == 1.0


def test_unknown_easing_raises():
    with pytest.raises(ValueError, match="Unknown easing"):
        get_easing("wobbly")


def test_chart_config_fields_are_unique_and_ordered():
    config = ChartConfig(x="year", y="value", color="type", group="type", kind="line_points")
    assert config.fields == ["year", "value", "type"]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"kind": "bar"},
        {"x_limits": (10.0, 1.0)},
        {"x_log": True, "x_limits": (0.0, 10.0)},
        {"alpha": 1.5},
        {"size_range": (0.0, 10.0)},
        {"background": "grey"},
        {"palette": "no-such-palette"},
    ],
)
def test_chart_config_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        ChartConfig(x="x", y="y", **kwargs)


def test_transitions_validate_easing_and_frames():
    with pytest.raises(ValueError):
        TimeTransition(field="year", easing="nope")
    with pytest.raises(ValueError):
        TimeTransition(field="year", nframes=0)
    with pytest.raises(ValueError):
        StateTransition(field="type", transition_length=0, state_length=0)
    with pytest.raises(ValueError):
        StateTransition(field="type", transition_length=-1)
    assert StateTransition(field="type", easing="sine-in-out").wrap is True

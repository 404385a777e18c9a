import pandas as pd
import pytest
from PIL import Image

from charts import (
    ChartConfig,
    StateTransition,
    TimeTransition,
    animate_states,
    animate_time,
    build_scales,
    render_figure,
    render_static,
)
import charts.animate
import charts.render
from charts.render import LAYER_COLUMN, join_output


def test_render_static_writes_png(tmp_path, warming_df):
    config = ChartConfig(x="year", y="value", kind="line_points", fill="value", palette="RdYlBu_r")
    out = render_static(warming_df, config, tmp_path / "img" / "warming.png")
    with Image.open(out) as img:
        assert img.format == "PNG"
        assert img.size == (800, 500)


def test_render_static_without_rows_raises(tmp_path):
    df = pd.DataFrame({"year": [2000], "value": [None]})
    with pytest.raises(RuntimeError, match="No valid rows"):
        render_static(df, ChartConfig(x="year", y="value"), tmp_path / "empty.png")


def test_render_figure_uses_fixed_limits(nations_df):
    config = ChartConfig(x="gdp_percap", y="life_expect", x_log=True, size="population", color="region")
    scales = build_scales(nations_df, config)
    fig = render_figure(nations_df[nations_df["year"] == 2015], config, scales, label="2015")
    ax = fig.axes[0]
    assert ax.get_xscale() == "log"
    assert ax.get_xlim() == pytest.approx(scales.x_limits)
    assert ax.get_ylim() == pytest.approx(scales.y_limits)
    assert [t.get_text() for t in ax.get_legend().get_texts()] == ["Americas", "Asia", "Europe"]


def test_layers_are_drawn_as_separate_lines():
    df = pd.DataFrame(
        {
            "x": [1, 2, 1, 2],
            "y": [1, 2, 3, 4],
            "kind": ["a", "a", "a", "a"],
            LAYER_COLUMN: ["shadow:a", "shadow:a", "current", "current"],
        }
    )
    config = ChartConfig(x="x", y="y", kind="line", group="kind")
    fig = render_figure(df, config)
    assert len(fig.axes[0].get_lines()) == 2


def test_continuous_guide_adds_colorbar(warming_df):
    config = ChartConfig(x="year", y="value", fill="value", color_limits=(-1.0, 1.0))
    fig = render_figure(warming_df, config)
    assert len(fig.axes) == 2


def test_join_output():
    assert join_output("img", "a.png") == "img/a.png"
    assert join_output("img/", "a.png") == "img/a.png"
    assert join_output("", "a.png") == "a.png"


def test_animate_time_writes_gif(tmp_path, nations_df):
    config = ChartConfig(x="gdp_percap", y="life_expect", x_log=True, size="population", color="region", group="country")
    out = animate_time(nations_df, config, TimeTransition(field="year", nframes=4, fps=5), tmp_path / "nations.gif")
    with Image.open(out) as gif:
        assert gif.format == "GIF"
        assert gif.n_frames >= 2


def test_animate_states_writes_gif(tmp_path, simulations_df):
    config = ChartConfig(x="year", y="value", kind="line_points", color="type", group="type")
    transition = StateTransition(field="type", nframes=6, easing="sine-in-out", shadow=True)
    out = animate_states(simulations_df, config, transition, tmp_path / "simulations.gif")
    with Image.open(out) as gif:
        assert gif.n_frames >= 2


def test_animation_without_frames_raises(tmp_path):
    df = pd.DataFrame({"country": [], "year": [], "x": [], "y": []})
    config = ChartConfig(x="x", y="y", group="country")
    with pytest.raises(RuntimeError, match="No frames"):
        animate_time(df, config, TimeTransition(field="year"), tmp_path / "empty.gif")


def test_animate_time_keeps_axes_and_scales_across_frames(tmp_path, nations_df, monkeypatch):
    drawn = []
    real_draw_frame = charts.render.draw_frame

    def recording_draw_frame(ax, data, config, scales, **kwargs):
        real_draw_frame(ax, data, config, scales, **kwargs)
        drawn.append((tuple(ax.get_xlim()), tuple(ax.get_ylim()), scales))

    monkeypatch.setattr(charts.animate, "draw_frame", recording_draw_frame)
    config = ChartConfig(x="gdp_percap", y="life_expect", x_log=True, size="population", color="region", group="country")
    animate_time(nations_df, config, TimeTransition(field="year", nframes=4, fps=5), tmp_path / "nations.gif")

    assert len(drawn) >= 4
    assert len({xlim for xlim, _, _ in drawn}) == 1
    assert len({ylim for _, ylim, _ in drawn}) == 1
    assert all(scales is drawn[0][2] for _, _, scales in drawn)
    expected = build_scales(nations_df, config)
    assert drawn[0][0] == pytest.approx(expected.x_limits)
    assert drawn[0][1] == pytest.approx(expected.y_limits)

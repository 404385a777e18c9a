import numpy as np
import pandas as pd
import pytest

from charts import ChartConfig, build_scales
from charts.scales import to_float


def test_configured_limits_win_over_data(warming_df):
    config = ChartConfig(x="year", y="value", x_limits=(1880.0, 2020.0), y_limits=(-0.5, 1.0))
    scales = build_scales(warming_df, config)
    assert scales.x_limits == (1880.0, 2020.0)
    assert scales.y_limits == (-0.5, 1.0)


def test_data_limits_are_padded(warming_df):
    scales = build_scales(warming_df, ChartConfig(x="year", y="value"))
    lo, hi = scales.x_limits
    assert lo < 2000 and hi > 2004
    assert lo == pytest.approx(2000 - 0.2)
    assert hi == pytest.approx(2004 + 0.2)


def test_log_axis_limits_ignore_non_positive_values():
    df = pd.DataFrame({"x": [0.0, 10.0, 1000.0], "y": [1.0, 2.0, 3.0]})
    scales = build_scales(df, ChartConfig(x="x", y="y", x_log=True))
    lo, hi = scales.x_limits
    assert 0 < lo < 10.0
    assert hi > 1000.0


def test_categorical_color_scale_is_sorted(nations_df):
    config = ChartConfig(x="gdp_percap", y="life_expect", color="region", palette="Set1")
    scales = build_scales(nations_df, config)
    assert scales.color.is_categorical
    assert scales.color.categories == ("Americas", "Asia", "Europe")
    assert len(set(scales.color.colors)) == 3


def test_continuous_fill_scale_uses_color_limits(warming_df):
    config = ChartConfig(x="year", y="value", fill="value", palette="RdYlBu_r", color_limits=(-1.0, 1.0))
    scales = build_scales(warming_df, config)
    assert not scales.fill.is_categorical
    assert scales.fill.limits == (-1.0, 1.0)
    colors = scales.fills_for(warming_df)
    assert len(colors) == len(warming_df)
    assert all(len(c) == 4 for c in colors)


def test_missing_values_map_to_grey():
    df = pd.DataFrame({"x": [1, 2], "y": [1, 2], "kind": ["a", None]})
    scales = build_scales(df, ChartConfig(x="x", y="y", color="kind"))
    colors = scales.colors_for(df)
    assert colors[0] != colors[1]


def test_sizes_follow_fixed_domain(nations_df):
    config = ChartConfig(x="gdp_percap", y="life_expect", size="population", size_range=(10.0, 100.0))
    scales = build_scales(nations_df, config)
    subset = nations_df[nations_df["year"] == 2015]
    sizes = scales.sizes_for(subset, default=60.0)
    # the smallest population of the full table maps to the low end
    assert sizes.min() == pytest.approx(10.0)
    assert sizes.max() < 100.0


def test_missing_field_raises_key_error(warming_df):
    with pytest.raises(KeyError):
        build_scales(warming_df, ChartConfig(x="year", y="anomaly"))


def test_to_float_handles_nullable_integers():
    values = to_float(pd.Series(pd.array([1, None, 3], dtype="Int64")))
    assert values.dtype == np.float64
    assert np.isnan(values[1])


def test_qualitative_palette_cycles_when_categories_outnumber_colors():
    df = pd.DataFrame({"x": range(11), "y": range(11), "kind": [f"k{i:02d}" for i in range(11)]})
    scales = build_scales(df, ChartConfig(x="x", y="y", color="kind", palette="Set1"))
    colors = scales.color.colors
    assert len(colors) == 11
    assert len(set(colors[:9])) == 9
    assert colors[9] == colors[0]
    assert colors[10] == colors[1]


def test_unknown_palette_is_rejected_before_scales_are_built():
    with pytest.raises(ValueError, match="Unknown palette"):
        ChartConfig(x="x", y="y", color="kind", palette="not-a-colormap")

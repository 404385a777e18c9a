"""
Nations gallery: income vs life expectancy by country.

Artefacts:

- nations_2016.png
  Static bubble chart for a single year:
    - X axis: gdp_percap (log scale)
    - Y axis: life_expect
    - Size:   population
    - Colour: region

- nations.gif
  The same chart animated over `year`: each country moves continuously
  between its yearly observations (linear easing); countries entering or
  leaving the table fade in/out.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Optional

import pandas as pd

from adapters import StorageAdapter
from charts import ChartConfig, TimeTransition, animate_time, render_static
from charts.render import join_output
from datasets import filter_year_equals, load_nations


OUTPUT_DIR = Path("img")
NATIONS_STATIC_YEAR = 2016
NATIONS_GIF_NAME = "nations.gif"

NATIONS_CHART = ChartConfig(
    x="gdp_percap",
    y="life_expect",
    size="population",
    color="region",
    group="country",
    x_log=True,
    palette="Set1",
    size_range=(10.0, 1500.0),
    alpha=0.7,
    xlabel="GDP per capita",
    ylabel="Life expectancy at birth",
    figsize=(9.0, 5.5),
)

NATIONS_TRANSITION = TimeTransition(
    field="year",
    easing="linear",
    enter_fade=True,
    exit_fade=True,
    nframes=100,
    fps=10,
)


def nations_static_name(year: int) -> str:
    return f"nations_{year}.png"


def _plottable(nations: pd.DataFrame) -> pd.DataFrame:
    # log axis: only strictly positive incomes can be placed
    df = nations.dropna(subset=["gdp_percap", "life_expect"])
    return df[df["gdp_percap"] > 0].reset_index(drop=True)


def build_nations_static(
    nations: pd.DataFrame,
    *,
    year: int = NATIONS_STATIC_YEAR,
    output_dir: Path | str = OUTPUT_DIR,
    storage: StorageAdapter | None = None,
) -> Path | str:
    """
    Static chart of the nations snapshot for `year` (default: 2016).

    Raises RuntimeError when the table has no plottable rows for that year.
    """
    df_year = _plottable(filter_year_equals(nations, year))
    if df_year.empty:
        raise RuntimeError(f"No nations data available for year={year}")

    config = replace(NATIONS_CHART, title=f"Nations in {year}")
    return render_static(
        df_year,
        config,
        join_output(output_dir, nations_static_name(year)),
        storage=storage,
    )


def build_nations_animation(
    nations: pd.DataFrame,
    *,
    output_dir: Path | str = OUTPUT_DIR,
    storage: StorageAdapter | None = None,
    nframes: Optional[int] = None,
    fps: Optional[float] = None,
) -> Path | str:
    """Animated bubble chart over all years of the table."""
    df = _plottable(nations)
    if df.empty:
        raise RuntimeError("No nations data available to animate")

    transition = NATIONS_TRANSITION
    if nframes is not None:
        transition = replace(transition, nframes=nframes)
    if fps is not None:
        transition = replace(transition, fps=fps)

    return animate_time(
        df,
        NATIONS_CHART,
        transition,
        join_output(output_dir, NATIONS_GIF_NAME),
        storage=storage,
    )


if __name__ == "__main__":
    import argparse

    from datasets import DATA_DIR, NATIONS_CSV_NAME

    parser = argparse.ArgumentParser(
        description="Render the nations charts (static snapshot and animated GIF).",
    )
    parser.add_argument(
        "--input",
        type=str,
        default=str(DATA_DIR / NATIONS_CSV_NAME),
        help="Path to nations.csv.",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=str(OUTPUT_DIR),
        help="Directory where images will be saved.",
    )
    parser.add_argument("--year", type=int, default=NATIONS_STATIC_YEAR, help="Year of the static chart.")
    parser.add_argument("--skip-animation", action="store_true", help="Only render the static chart.")

    args = parser.parse_args()
    table = load_nations(args.input)
    print(build_nations_static(table, year=args.year, output_dir=args.output_dir))
    if not args.skip_animation:
        print(build_nations_animation(table, output_dir=args.output_dir))


__all__ = [
    "OUTPUT_DIR",
    "NATIONS_STATIC_YEAR",
    "NATIONS_GIF_NAME",
    "NATIONS_CHART",
    "NATIONS_TRANSITION",
    "nations_static_name",
    "build_nations_static",
    "build_nations_animation",
]

"""
Simulations gallery: simulated temperature anomaly by scenario type.

Artefact:

- simulations.gif
  Line + points of `value` by `year`, switching between the scenario
  states of `type` (e.g. natural vs human). Each state is held for 2
  units and the transition between states takes 0.5 units, eased with
  sine-in-out.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Optional

import pandas as pd

from adapters import StorageAdapter
from charts import ChartConfig, StateTransition, animate_states
from charts.render import join_output
from datasets import load_simulations


OUTPUT_DIR = Path("img")
SIMULATIONS_GIF_NAME = "simulations.gif"

SIMULATIONS_CHART = ChartConfig(
    x="year",
    y="value",
    kind="line_points",
    color="type",
    group="type",
    palette="Set1",
    alpha=0.9,
    marker_size=20.0,
    title="Simulated global temperature anomaly",
    xlabel="",
    ylabel="Temperature anomaly (°C)",
)

SIMULATIONS_TRANSITION = StateTransition(
    field="type",
    transition_length=0.5,
    state_length=2.0,
    easing="sine-in-out",
    wrap=True,
    nframes=100,
    fps=10,
)


def build_simulations_animation(
    simulations: pd.DataFrame,
    *,
    output_dir: Path | str = OUTPUT_DIR,
    storage: StorageAdapter | None = None,
    shadow: bool = False,
    nframes: Optional[int] = None,
) -> Path | str:
    """
    Animate the scenarios one after the other.

    With `shadow`, scenarios already shown stay on the chart, faded.
    """
    df = simulations.dropna(subset=["year", "value", "type"]).reset_index(drop=True)
    if df.empty:
        raise RuntimeError("No simulations data available to animate")

    transition = replace(SIMULATIONS_TRANSITION, shadow=shadow)
    if nframes is not None:
        transition = replace(transition, nframes=nframes)

    return animate_states(
        df,
        SIMULATIONS_CHART,
        transition,
        join_output(output_dir, SIMULATIONS_GIF_NAME),
        storage=storage,
    )


if __name__ == "__main__":
    import argparse

    from datasets import DATA_DIR, SIMULATIONS_CSV_NAME

    parser = argparse.ArgumentParser(description="Render the simulations state-transition GIF.")
    parser.add_argument(
        "--input",
        type=str,
        default=str(DATA_DIR / SIMULATIONS_CSV_NAME),
        help="Path to simulations.csv.",
    )
    parser.add_argument("--output-dir", type=str, default=str(OUTPUT_DIR), help="Directory for the GIF.")
    parser.add_argument("--shadow", action="store_true", help="Keep previous scenarios on the chart.")

    args = parser.parse_args()
    print(
        build_simulations_animation(
            load_simulations(args.input),
            output_dir=args.output_dir,
            shadow=args.shadow,
        )
    )


__all__ = [
    "OUTPUT_DIR",
    "SIMULATIONS_GIF_NAME",
    "SIMULATIONS_CHART",
    "SIMULATIONS_TRANSITION",
    "build_simulations_animation",
]

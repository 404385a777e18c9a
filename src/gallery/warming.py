"""
Warming gallery: global annual temperature anomaly.

Artefacts:

- warming.png          line + points, points filled by anomaly (RdYlBu)
- warming/<year>.png   one cumulative frame per year (rows with year <= t)
- warming/frames_manifest.csv
- warming.gif          the per-year frames assembled in year order

Axis limits and the colour domain are fixed, so every yearly frame is
drawn on the same canvas.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Union

import pandas as pd

from adapters import StorageAdapter
from charts import ChartConfig, FrameRecord, export_cumulative_frames, frames_to_gif, render_static
from charts.render import join_output
from datasets import load_warming


OUTPUT_DIR = Path("img")
WARMING_PNG_NAME = "warming.png"
WARMING_GIF_NAME = "warming.gif"
WARMING_FRAMES_SUBDIR = "warming"
WARMING_FRAME_DURATION_MS = 100

WARMING_CHART = ChartConfig(
    x="year",
    y="value",
    kind="line_points",
    fill="value",
    palette="RdYlBu_r",
    color_limits=(-1.0, 1.0),
    x_limits=(1880.0, 2020.0),
    y_limits=(-0.5, 1.0),
    alpha=1.0,
    marker_size=40.0,
    line_color="#444444",
    title="Global annual mean temperature anomaly",
    xlabel="",
    ylabel="Difference from 1951-1980 (°C)",
)


def build_warming_static(
    warming: pd.DataFrame,
    *,
    output_dir: Path | str = OUTPUT_DIR,
    storage: StorageAdapter | None = None,
) -> Path | str:
    """Full temperature record as a single image."""
    if warming.dropna(subset=["year", "value"]).empty:
        raise RuntimeError("No warming data available")
    return render_static(warming, WARMING_CHART, join_output(output_dir, WARMING_PNG_NAME), storage=storage)


def build_warming_frames(
    warming: pd.DataFrame,
    *,
    start: Optional[int] = None,
    end: Optional[int] = None,
    output_dir: Path | str = OUTPUT_DIR,
    fmt: str = "png",
    frame_duration_ms: int = WARMING_FRAME_DURATION_MS,
    storage: StorageAdapter | None = None,
    max_workers: int = 1,
    make_gif: bool = True,
) -> Dict[str, Union[List[FrameRecord], Path, str]]:
    """
    Export one cumulative frame per year, then assemble them into a GIF.

    `start`/`end` default to the first/last year of the table.

    Returns
    -------
    {"frames": [FrameRecord, ...], "gif": location}   ("gif" only when make_gif)
    """
    years = warming["year"].dropna()
    if years.empty:
        raise RuntimeError("No warming data available")
    start = int(years.min()) if start is None else int(start)
    end = int(years.max()) if end is None else int(end)

    records = export_cumulative_frames(
        warming,
        WARMING_CHART,
        time_field="year",
        start=start,
        end=end,
        output_dir=join_output(output_dir, WARMING_FRAMES_SUBDIR),
        fmt=fmt,
        storage=storage,
        max_workers=max_workers,
        label_steps=True,
    )

    result: Dict[str, Union[List[FrameRecord], Path, str]] = {"frames": records}
    if make_gif:
        result["gif"] = frames_to_gif(
            records,
            join_output(output_dir, WARMING_GIF_NAME),
            duration_ms=frame_duration_ms,
            storage=storage,
        )
    return result


if __name__ == "__main__":
    import argparse

    from datasets import DATA_DIR, WARMING_CSV_NAME

    parser = argparse.ArgumentParser(
        description="Render the warming chart, its per-year frames and the assembled GIF.",
    )
    parser.add_argument("--input", type=str, default=str(DATA_DIR / WARMING_CSV_NAME), help="Path to warming.csv.")
    parser.add_argument("--output-dir", type=str, default=str(OUTPUT_DIR), help="Directory for the images.")
    parser.add_argument("--start-year", type=int, default=None, help="First frame year (default: first year).")
    parser.add_argument("--end-year", type=int, default=None, help="Last frame year (default: last year).")
    parser.add_argument("--workers", type=int, default=1, help="Worker processes for frame rendering.")

    args = parser.parse_args()
    table = load_warming(args.input)
    print(build_warming_static(table, output_dir=args.output_dir))
    outputs = build_warming_frames(
        table,
        start=args.start_year,
        end=args.end_year,
        output_dir=args.output_dir,
        max_workers=args.workers,
    )
    print(outputs["gif"])


__all__ = [
    "OUTPUT_DIR",
    "WARMING_PNG_NAME",
    "WARMING_GIF_NAME",
    "WARMING_FRAMES_SUBDIR",
    "WARMING_CHART",
    "build_warming_static",
    "build_warming_frames",
]

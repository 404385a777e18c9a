"""
Local orchestration entrypoint for the chart gallery.

When executed locally, runs:

1. Input tables check (download missing CSVs when a base URL is set)
2. Nations static chart (nations_2016.png)
3. Nations animation (nations.gif)
4. Warming chart, per-year frames and GIF (warming.png, warming/, warming.gif)
5. Simulations state animation (simulations.gif)

Intended usage (local):

    PYTHONPATH=src python -m local_pipeline

Configuration comes from the environment (or a `.env` file in the CWD):
CHARTS_DATA_DIR, CHARTS_OUTPUT_DIR, CHARTS_FRAME_WORKERS and
CHARTS_DATASET_BASE_URL. Command line flags take precedence, e.g.:

    PYTHONPATH=src python -m local_pipeline --start-year 1950 --workers 4
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Union

from adapters import LocalStorageAdapter
from datasets import (
    DATA_DIR,
    NATIONS_CSV_NAME,
    SIMULATIONS_CSV_NAME,
    WARMING_CSV_NAME,
    ensure_datasets,
    load_nations,
    load_simulations,
    load_warming,
)
from env_loader import env_int, env_path, load_dotenv_if_present
from gallery import (
    NATIONS_STATIC_YEAR,
    build_nations_animation,
    build_nations_static,
    build_simulations_animation,
    build_warming_frames,
    build_warming_static,
)

DATA_DIR_ENV = "CHARTS_DATA_DIR"
OUTPUT_DIR_ENV = "CHARTS_OUTPUT_DIR"
FRAME_WORKERS_ENV = "CHARTS_FRAME_WORKERS"
DEFAULT_OUTPUT_DIR = Path("img")


def run_local_gallery(
    *,
    data_dir: Optional[Path | str] = None,
    output_dir: Optional[Path | str] = None,
    max_workers: Optional[int] = None,
    nations_year: int = NATIONS_STATIC_YEAR,
    start_year: Optional[int] = None,
    end_year: Optional[int] = None,
    nframes: Optional[int] = None,
    skip_nations: bool = False,
    skip_warming: bool = False,
    skip_simulations: bool = False,
) -> Dict[str, List[Union[Path, str]]]:
    """
    Build every gallery artefact end-to-end on the local filesystem.

    Parameters
    ----------
    data_dir, output_dir, max_workers:
        Override CHARTS_DATA_DIR / CHARTS_OUTPUT_DIR / CHARTS_FRAME_WORKERS.
    start_year, end_year:
        Bounds of the warming per-year frames (default: full table).
    nframes:
        Frame count for the nations and simulations animations.

    Returns
    -------
    artefacts:
        Dictionary mapping step names to lists of generated paths.
    """
    load_dotenv_if_present()
    data_root = Path(data_dir) if data_dir is not None else env_path(DATA_DIR_ENV, DATA_DIR)
    output_root = Path(output_dir) if output_dir is not None else env_path(OUTPUT_DIR_ENV, DEFAULT_OUTPUT_DIR)
    workers = max_workers if max_workers is not None else env_int(FRAME_WORKERS_ENV, 1)

    artefacts: Dict[str, List[Union[Path, str]]] = {}
    storage = LocalStorageAdapter(root_dir=output_root)
    output_root.mkdir(parents=True, exist_ok=True)

    # 1. Input tables
    print(f"[1/5] Checking input tables under {data_root}...")
    needed = []
    if not skip_nations:
        needed.append(NATIONS_CSV_NAME)
    if not skip_warming:
        needed.append(WARMING_CSV_NAME)
    if not skip_simulations:
        needed.append(SIMULATIONS_CSV_NAME)
    tables = ensure_datasets(data_dir=data_root, names=needed)
    artefacts["inputs"] = list(tables.values())

    # 2-3. Nations
    if skip_nations:
        print("[2/5] Skipping nations static chart.")
        print("[3/5] Skipping nations animation.")
    else:
        nations = load_nations(tables[NATIONS_CSV_NAME])
        print(f"[2/5] Rendering nations chart for {nations_year}...")
        static_key = build_nations_static(nations, year=nations_year, output_dir="", storage=storage)
        print(f"      Static chart: {static_key}")
        print("[3/5] Rendering nations animation...")
        gif_key = build_nations_animation(nations, output_dir="", storage=storage, nframes=nframes)
        print(f"      GIF: {gif_key}")
        artefacts["nations"] = [static_key, gif_key]

    # 4. Warming
    if skip_warming:
        print("[4/5] Skipping warming chart and frames.")
    else:
        warming = load_warming(tables[WARMING_CSV_NAME])
        print("[4/5] Rendering warming chart, per-year frames and GIF...")
        static_key = build_warming_static(warming, output_dir="", storage=storage)
        outputs = build_warming_frames(
            warming,
            start=start_year,
            end=end_year,
            output_dir="",
            storage=storage,
            max_workers=workers,
        )
        frames = outputs["frames"]
        print(f"      Generated {len(frames)} frames.")
        print(f"      GIF: {outputs['gif']}")
        artefacts["warming"] = [static_key, outputs["gif"]]
        artefacts["warming_frames"] = [r.location for r in frames]

    # 5. Simulations
    if skip_simulations:
        print("[5/5] Skipping simulations animation.")
    else:
        simulations = load_simulations(tables[SIMULATIONS_CSV_NAME])
        print("[5/5] Rendering simulations state animation...")
        gif_key = build_simulations_animation(simulations, output_dir="", storage=storage, nframes=nframes)
        print(f"      GIF: {gif_key}")
        artefacts["simulations"] = [gif_key]

    print("\nGallery completed successfully.")
    return artefacts


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(
        description="Build the full chart gallery locally.",
    )
    parser.add_argument("--data-dir", type=str, default=None, help=f"Input tables directory (env {DATA_DIR_ENV}).")
    parser.add_argument("--output-dir", type=str, default=None, help=f"Output directory (env {OUTPUT_DIR_ENV}).")
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help=f"Worker processes for the warming frames (env {FRAME_WORKERS_ENV}).",
    )
    parser.add_argument("--nations-year", type=int, default=NATIONS_STATIC_YEAR, help="Year of the static chart.")
    parser.add_argument("--start-year", type=int, default=None, help="First year of the warming frames.")
    parser.add_argument("--end-year", type=int, default=None, help="Last year of the warming frames.")
    parser.add_argument("--nframes", type=int, default=None, help="Frame count of the tweened animations.")
    parser.add_argument("--skip-nations", action="store_true", help="Do not render the nations charts.")
    parser.add_argument("--skip-warming", action="store_true", help="Do not render the warming charts.")
    parser.add_argument("--skip-simulations", action="store_true", help="Do not render the simulations chart.")

    args = parser.parse_args()
    run_local_gallery(
        data_dir=args.data_dir,
        output_dir=args.output_dir,
        max_workers=args.workers,
        nations_year=args.nations_year,
        start_year=args.start_year,
        end_year=args.end_year,
        nframes=args.nframes,
        skip_nations=args.skip_nations,
        skip_warming=args.skip_warming,
        skip_simulations=args.skip_simulations,
    )


__all__ = ["run_local_gallery"]

"""
Cloud orchestration entrypoint for the chart gallery.

This module wires the gallery builders to the S3 storage adapter: the
input CSVs are read from the bucket and every rendered artefact (static
PNGs, per-year frames, manifests and GIFs) is written back to it.

It is intentionally thin: all chart rules live in the `gallery` and
`charts` packages.

Environment variables
---------------------

- CHARTS_S3_BUCKET
    Name of the S3 bucket holding the input tables and the outputs.

- CHARTS_S3_BASE_PREFIX (optional)
    Logical base prefix under the bucket, for example "chart-gallery".
    All keys are read/written under this prefix.

- CHARTS_FRAME_WORKERS (optional, default 1)
    Worker processes used to render the warming frames.

Input tables are expected at `data/<name>.csv` and outputs are written
under `img/` (both relative to the base prefix).

Lambda handler
--------------

Configure your Lambda to use:

    Handler: cloud_pipeline.lambda_handler

The event payload may optionally include:

    {
      "start_year": 1950,
      "end_year": 2017,
      "nframes": 60
    }
"""

from __future__ import annotations

import json
import os
from typing import Dict, List, Optional

from adapters import S3StorageAdapter
from datasets import (
    NATIONS_CSV_NAME,
    SIMULATIONS_CSV_NAME,
    WARMING_CSV_NAME,
    load_nations,
    load_simulations,
    load_warming,
)
from env_loader import env_int, load_dotenv_if_present
from gallery import (
    build_nations_animation,
    build_nations_static,
    build_simulations_animation,
    build_warming_frames,
    build_warming_static,
)


# Picks up a local .env during development; absent on AWS.
load_dotenv_if_present()

CHARTS_S3_BUCKET_ENV = "CHARTS_S3_BUCKET"
CHARTS_S3_BASE_PREFIX_ENV = "CHARTS_S3_BASE_PREFIX"
FRAME_WORKERS_ENV = "CHARTS_FRAME_WORKERS"

INPUT_PREFIX = "data"
OUTPUT_PREFIX = "img"


def _build_s3_storage_from_env() -> S3StorageAdapter:
    bucket = os.getenv(CHARTS_S3_BUCKET_ENV)
    if not bucket:
        raise RuntimeError(
            f"Missing required environment variable {CHARTS_S3_BUCKET_ENV!r} for S3 bucket name.",
        )

    base_prefix = os.getenv(CHARTS_S3_BASE_PREFIX_ENV) or None
    return S3StorageAdapter(bucket=bucket, base_prefix=base_prefix)


def run_cloud_gallery(
    *,
    start_year: Optional[int] = None,
    end_year: Optional[int] = None,
    nframes: Optional[int] = None,
    storage: Optional[S3StorageAdapter] = None,
) -> Dict[str, List[str]]:
    """
    Build every gallery artefact reading from and writing to S3.

    Parameters
    ----------
    start_year, end_year:
        Bounds of the warming per-year frames (same semantics as in
        run_local_gallery).
    nframes:
        Frame count for the tweened animations.
    storage:
        Pre-built adapter; by default one is created from the environment.

    Returns
    -------
    artefacts:
        Dictionary mapping step names to lists of s3:// locations.
    """
    artefacts: Dict[str, List[str]] = {}

    storage = storage or _build_s3_storage_from_env()
    workers = env_int(FRAME_WORKERS_ENV, 1)

    # 1. Input tables (S3)
    print("[cloud 1/5] Loading input tables from S3...")
    nations = load_nations(f"{INPUT_PREFIX}/{NATIONS_CSV_NAME}", storage=storage)
    warming = load_warming(f"{INPUT_PREFIX}/{WARMING_CSV_NAME}", storage=storage)
    simulations = load_simulations(f"{INPUT_PREFIX}/{SIMULATIONS_CSV_NAME}", storage=storage)

    # 2. Nations static chart
    print("[cloud 2/5] Rendering nations static chart (S3)...")
    nations_static = None
    try:
        nations_static = build_nations_static(nations, output_dir=OUTPUT_PREFIX, storage=storage)
    except RuntimeError as exc:
        message = str(exc)
        if message.startswith("No nations data available for year="):
            print(f"[cloud] Skipping nations static chart: {message}")
        else:
            raise

    # 3. Nations animation
    print("[cloud 3/5] Rendering nations animation (S3)...")
    nations_gif = build_nations_animation(nations, output_dir=OUTPUT_PREFIX, storage=storage, nframes=nframes)
    artefacts["nations"] = [str(p) for p in (nations_static, nations_gif) if p is not None]

    # 4. Warming chart, frames and GIF
    print("[cloud 4/5] Rendering warming chart, per-year frames and GIF (S3)...")
    warming_static = build_warming_static(warming, output_dir=OUTPUT_PREFIX, storage=storage)
    outputs = build_warming_frames(
        warming,
        start=start_year,
        end=end_year,
        output_dir=OUTPUT_PREFIX,
        storage=storage,
        max_workers=workers,
    )
    artefacts["warming"] = [str(warming_static), str(outputs["gif"])]
    artefacts["warming_frames"] = [str(r.location) for r in outputs["frames"]]

    # 5. Simulations animation
    print("[cloud 5/5] Rendering simulations state animation (S3)...")
    simulations_gif = build_simulations_animation(
        simulations,
        output_dir=OUTPUT_PREFIX,
        storage=storage,
        nframes=nframes,
    )
    artefacts["simulations"] = [str(simulations_gif)]

    print("\nCloud gallery completed successfully.")
    return artefacts


def lambda_handler(event, context):  # pragma: no cover - AWS entrypoint
    """
    AWS Lambda handler for the cloud gallery.

    The incoming `event` may optionally contain `start_year`, `end_year`
    and `nframes` integers. S3 configuration is taken from environment
    variables (see module docstring).
    """
    event = event or {}
    artefacts = run_cloud_gallery(
        start_year=event.get("start_year"),
        end_year=event.get("end_year"),
        nframes=event.get("nframes"),
    )

    summary = {
        key: values if key != "warming_frames" else values[:1] + values[-1:]
        for key, values in artefacts.items()
    }

    return {
        "statusCode": 200,
        "body": json.dumps(
            {
                "message": "Cloud gallery executed successfully.",
                "frame_count": len(artefacts.get("warming_frames", [])),
                "artefacts": summary,
            }
        ),
    }


__all__ = ["run_cloud_gallery", "lambda_handler"]

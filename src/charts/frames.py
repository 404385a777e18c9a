"""
Cumulative frame export loop.

For each integer step t of a contiguous range, render the rows of the
table whose time field is <= t and write the image to
`<output_dir>/<t>.<fmt>`. Every image uses the same scales (computed once
from the whole table and the configured limits), so the sequence can be
turned into a GIF afterwards (see `charts.gif`).

Layout (local or through a StorageAdapter):

    <output_dir>/<start>.png
    ...
    <output_dir>/<end>.png
    <output_dir>/frames_manifest.csv      step, file, row_count
"""

from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

import pandas as pd

from adapters import StorageAdapter
from datasets.filters import filter_up_to
from .config import ChartConfig
from .render import figure_to_bytes, join_output, render_figure, write_image
from .scales import Scales, build_scales

MANIFEST_NAME = "frames_manifest.csv"


@dataclass(frozen=True)
class FrameRecord:
    step: int
    location: Path | str
    row_count: int
    key: str = ""


def frame_name(step: int, fmt: str) -> str:
    """File name of the image for one step, e.g. "1880.png"."""
    return f"{step}.{fmt}"


def _savefig_format(fmt: str) -> str:
    return "jpeg" if fmt.lower() == "jpg" else fmt.lower()


def render_frame_bytes(
    subset: pd.DataFrame,
    config: ChartConfig,
    scales: Scales,
    fmt: str,
    label: Optional[str] = None,
) -> bytes:
    """Render one frame to encoded image bytes; picklable for worker processes."""
    fig = render_figure(subset, config, scales, label=label)
    return figure_to_bytes(fig, fmt=_savefig_format(fmt), dpi=config.dpi)


def _iter_rendered(
    jobs: List[Tuple[int, pd.DataFrame]],
    config: ChartConfig,
    scales: Scales,
    fmt: str,
    *,
    max_workers: int,
    label_steps: bool,
) -> Iterator[Tuple[int, bytes]]:
    labels = [str(step) if label_steps else None for step, _ in jobs]
    if max_workers <= 1 or len(jobs) <= 1:
        for (step, subset), label in zip(jobs, labels):
            yield step, render_frame_bytes(subset, config, scales, fmt, label)
        return

    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(render_frame_bytes, subset, config, scales, fmt, label)
            for (_, subset), label in zip(jobs, labels)
        ]
        # Results are consumed in step order so writes stay deterministic.
        for (step, _), future in zip(jobs, futures):
            yield step, future.result()


def export_cumulative_frames(
    df: pd.DataFrame,
    config: ChartConfig,
    *,
    time_field: str,
    start: int,
    end: int,
    output_dir: Path | str,
    fmt: str = "png",
    storage: StorageAdapter | None = None,
    max_workers: int = 1,
    label_steps: bool = False,
    write_manifest: bool = True,
) -> List[FrameRecord]:
    """
    Write one image per step t in [start, end] showing rows with time <= t.

    Re-running with the same input rewrites the same file names. With
    `max_workers > 1` frames are rendered in worker processes; the files
    are still written by this process, in step order.
    """
    if start > end:
        raise ValueError(f"Invalid frame range: start={start} > end={end}")
    if time_field not in df.columns:
        raise KeyError(f"Time field {time_field!r} not found in table columns {list(df.columns)}")

    scales = build_scales(df, config)
    output_root = str(output_dir).replace("\\", "/").rstrip("/") or "."

    jobs = [(step, filter_up_to(df, step, column=time_field)) for step in range(int(start), int(end) + 1)]
    row_counts = {step: len(subset) for step, subset in jobs}

    records: List[FrameRecord] = []
    rendered = _iter_rendered(
        jobs, config, scales, fmt, max_workers=max_workers, label_steps=label_steps
    )
    for step, content in rendered:
        target = join_output(output_root, frame_name(step, fmt))
        location = write_image(content, target, storage=storage)
        records.append(FrameRecord(step=step, location=location, row_count=row_counts[step], key=target))

    if write_manifest:
        manifest = pd.DataFrame(
            {
                "step": [r.step for r in records],
                "file": [frame_name(r.step, fmt) for r in records],
                "row_count": [r.row_count for r in records],
            }
        )
        manifest_key = join_output(output_root, MANIFEST_NAME)
        if storage is None:
            Path(output_root).mkdir(parents=True, exist_ok=True)
            manifest.to_csv(manifest_key, index=False)
        else:
            storage.write_csv(manifest, manifest_key)

    print(f"[frames] Wrote {len(records)} frames ({start}..{end}) to {output_root}")
    return records


__all__ = [
    "MANIFEST_NAME",
    "FrameRecord",
    "frame_name",
    "render_frame_bytes",
    "export_cumulative_frames",
]

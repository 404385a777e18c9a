"""
Render a frame plan into an animated GIF.

matplotlib's FuncAnimation redraws the axes for each planned frame and
PillowWriter encodes the result, so no GIF encoding happens here.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import List, Optional, Sequence

import matplotlib.pyplot as plt
import pandas as pd
from matplotlib.animation import FuncAnimation, PillowWriter

from adapters import StorageAdapter
from .config import ChartConfig, StateTransition, TimeTransition
from .render import draw_frame, new_figure
from .scales import Scales, build_scales
from .tween import Frame, plan_state_frames, plan_time_frames


def render_animation(
    frames: Sequence[Frame],
    config: ChartConfig,
    scales: Scales,
    output_path: Path | str,
    *,
    fps: float,
    storage: StorageAdapter | None = None,
    dpi: Optional[int] = None,
) -> Path | str:
    """
    Encode `frames` as a GIF at `output_path` (local or through storage).

    Every frame is drawn with the same `scales`, so axes and colours do
    not jump between frames. Returns the written location.
    """
    if not frames:
        raise RuntimeError(f"No frames to animate for {output_path}")

    fig, ax = new_figure(config, scales)
    draw_frame(ax, frames[0].data, config, scales, label=frames[0].label)
    fig.tight_layout()

    def update(i: int) -> List:
        frame = frames[i]
        draw_frame(ax, frame.data, config, scales, label=frame.label)
        return []

    anim = FuncAnimation(fig, update, frames=len(frames), interval=1000.0 / fps, blit=False, repeat=False)
    writer = PillowWriter(fps=fps)

    try:
        if storage is None:
            path = Path(output_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            anim.save(str(path), writer=writer, dpi=dpi or config.dpi)
            return path

        with tempfile.TemporaryDirectory() as tmp:
            tmp_path = Path(tmp) / Path(str(output_path)).name
            anim.save(str(tmp_path), writer=writer, dpi=dpi or config.dpi)
            return storage.write_raw(str(output_path).replace("\\", "/"), tmp_path.read_bytes())
    finally:
        plt.close(fig)


def animate_time(
    df: pd.DataFrame,
    config: ChartConfig,
    transition: TimeTransition,
    output_path: Path | str,
    *,
    storage: StorageAdapter | None = None,
) -> Path | str:
    """Continuous animation over `transition.field` (scales from the whole table)."""
    scales = build_scales(df, config)
    frames = plan_time_frames(df, config, transition)
    return render_animation(frames, config, scales, output_path, fps=transition.fps, storage=storage)


def animate_states(
    df: pd.DataFrame,
    config: ChartConfig,
    transition: StateTransition,
    output_path: Path | str,
    *,
    storage: StorageAdapter | None = None,
) -> Path | str:
    """State-switching animation over `transition.field`."""
    scales = build_scales(df, config)
    frames = plan_state_frames(df, config, transition)
    return render_animation(frames, config, scales, output_path, fps=transition.fps, storage=storage)


__all__ = ["render_animation", "animate_time", "animate_states"]

"""
Static rendering of one table into a matplotlib figure / image file.

The same drawing routine (`draw_chart`) is used for stand-alone charts,
for every frame of an animation and for every image of the cumulative
export loop, so all of them share the same look and the same fixed scales.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Optional, Tuple

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402
from matplotlib.cm import ScalarMappable  # noqa: E402
from matplotlib.colors import to_rgba  # noqa: E402
from matplotlib.lines import Line2D  # noqa: E402

from adapters import StorageAdapter  # noqa: E402
from .config import ChartConfig  # noqa: E402
from .scales import ColorScale, Scales, build_scales, to_float  # noqa: E402

ALPHA_COLUMN = "_alpha"
# Rows with different layer ids are never joined into the same line.
LAYER_COLUMN = "_layer"
DEFAULT_POINT_COLOR = "#1f77b4"


def _row_alpha(df: pd.DataFrame, base: float, override: Optional[float]) -> np.ndarray:
    alpha = np.full(len(df), base if override is None else override, dtype=float)
    if ALPHA_COLUMN in df.columns:
        alpha = alpha * np.nan_to_num(to_float(df[ALPHA_COLUMN]), nan=1.0)
    return np.clip(alpha, 0.0, 1.0)


def _with_alpha(colors, alpha: np.ndarray, n: int, default: str) -> np.ndarray:
    if colors is None:
        rgba = np.tile(to_rgba(default), (n, 1))
    else:
        rgba = np.array(colors, dtype=float).reshape(n, 4)
    rgba[:, 3] = alpha
    return rgba


def _line_color(config: ChartConfig, scales: Scales, group_value) -> str:
    scale = scales.color
    if (
        scale is not None
        and scale.is_categorical
        and config.group is not None
        and scale.field == config.group
        and str(group_value) in scale.categories
    ):
        return scale.color_of(str(group_value))
    return config.line_color


def _draw_lines(ax, df: pd.DataFrame, config: ChartConfig, scales: Scales, alpha: np.ndarray) -> None:
    if df.empty:
        return
    frame = df.assign(**{ALPHA_COLUMN: alpha})
    keys = [c for c in (config.group, LAYER_COLUMN) if c is not None and c in frame.columns]
    if not keys:
        groups = [((None,), frame)]
    else:
        groups = list(frame.groupby(keys, sort=True, dropna=True))

    for key, part in groups:
        group_value = key[0] if config.group is not None else None
        part = part.sort_values(config.x, kind="stable")
        if len(part) < 2:
            continue
        ax.plot(
            to_float(part[config.x]),
            to_float(part[config.y]),
            color=_line_color(config, scales, group_value),
            alpha=float(part[ALPHA_COLUMN].max()),
            linewidth=1.5,
            zorder=1,
        )


def _draw_points(ax, df: pd.DataFrame, config: ChartConfig, scales: Scales, alpha: np.ndarray) -> None:
    n = len(df)
    if n == 0:
        return
    fills = scales.fills_for(df)
    colors = scales.colors_for(df)

    face = _with_alpha(fills if fills is not None else colors, alpha, n, DEFAULT_POINT_COLOR)
    if fills is not None and colors is not None and scales.fill is not scales.color:
        edge = _with_alpha(colors, alpha, n, config.marker_edgecolor)
    else:
        edge = _with_alpha(None, alpha, n, config.marker_edgecolor)

    ax.scatter(
        to_float(df[config.x]),
        to_float(df[config.y]),
        s=scales.sizes_for(df, config.marker_size),
        c=face,
        edgecolors=edge,
        linewidths=0.6,
        zorder=2,
    )


def _apply_theme(fig, ax, background: str) -> None:
    if background != "black":
        return
    fig.patch.set_facecolor("black")
    ax.set_facecolor("black")
    for spine in ax.spines.values():
        spine.set_color("#bbbbbb")
    ax.tick_params(colors="#dddddd")
    ax.xaxis.label.set_color("#dddddd")
    ax.yaxis.label.set_color("#dddddd")
    ax.title.set_color("white")


def draw_chart(
    ax,
    df: pd.DataFrame,
    config: ChartConfig,
    scales: Scales,
    *,
    alpha: Optional[float] = None,
) -> None:
    """
    Draw one layer of `df` on `ax` with fixed limits from `scales`.

    Per-row transparency can be supplied in an `_alpha` column (used by
    fades and shadows); it multiplies `config.alpha` (or `alpha`).
    """
    row_alpha = _row_alpha(df, config.alpha, alpha)
    if config.kind in ("line", "line_points"):
        _draw_lines(ax, df, config, scales, row_alpha)
    if config.kind in ("scatter", "line_points"):
        _draw_points(ax, df, config, scales, row_alpha)


def setup_axes(ax, config: ChartConfig, scales: Scales) -> None:
    """Axis scale, limits, labels and grid; identical for every frame."""
    if scales.x_log:
        ax.set_xscale("log")
    ax.set_xlim(*scales.x_limits)
    ax.set_ylim(*scales.y_limits)
    ax.set_xlabel(config.xlabel if config.xlabel is not None else config.x)
    ax.set_ylabel(config.ylabel if config.ylabel is not None else config.y)
    if config.title:
        ax.set_title(config.title)
    ax.grid(True, linestyle="--", alpha=0.3)


def _guide(config: ChartConfig, scales: Scales) -> Tuple[Optional[ColorScale], str]:
    if scales.fill is not None:
        return scales.fill, config.fill or ""
    return scales.color, config.color or ""


def _add_legend(ax, scale: Optional[ColorScale], title: str) -> None:
    if scale is None or not scale.is_categorical:
        return
    handles = [
        Line2D([0], [0], marker="o", color="w", label=category,
               markerfacecolor=color, markeredgecolor="k", markersize=8)
        for category, color in zip(scale.categories, scale.colors)
    ]
    ax.legend(handles=handles, title=title, loc="best", frameon=False, fontsize=8)


def _add_colorbar(fig, ax, scale: Optional[ColorScale], title: str) -> None:
    if scale is None or scale.is_categorical:
        return
    mappable = ScalarMappable(norm=scale.normalize(), cmap=scale.cmap)
    mappable.set_array([])
    fig.colorbar(mappable, ax=ax, label=title)


def draw_label(ax, label: str, background: str = "white") -> None:
    """Large frame label (year / state) in the lower right corner."""
    ax.text(
        0.97,
        0.04,
        label,
        transform=ax.transAxes,
        fontsize=28,
        color="#dddddd" if background == "black" else "gray",
        alpha=0.6,
        ha="right",
        va="bottom",
    )


def new_figure(config: ChartConfig, scales: Scales) -> Tuple[plt.Figure, plt.Axes]:
    """Figure and axes; a continuous colour guide is added once as a colorbar."""
    fig, ax = plt.subplots(figsize=config.figsize, dpi=config.dpi)
    scale, title = _guide(config, scales)
    _add_colorbar(fig, ax, scale, title)
    return fig, ax


def draw_frame(
    ax,
    df: pd.DataFrame,
    config: ChartConfig,
    scales: Scales,
    *,
    label: Optional[str] = None,
) -> None:
    """Clear `ax` and draw one complete frame (axes, legend, data, label)."""
    ax.clear()
    setup_axes(ax, config, scales)
    scale, title = _guide(config, scales)
    _add_legend(ax, scale, title)
    draw_chart(ax, df, config, scales)
    if label is not None:
        draw_label(ax, label, config.background)
    _apply_theme(ax.figure, ax, config.background)


def render_figure(
    df: pd.DataFrame,
    config: ChartConfig,
    scales: Optional[Scales] = None,
    *,
    label: Optional[str] = None,
):
    """Build a complete figure for `df`; an empty table gives empty axes."""
    if scales is None:
        scales = build_scales(df, config)
    fig, ax = new_figure(config, scales)
    draw_frame(ax, df, config, scales, label=label)
    fig.tight_layout()
    return fig


def figure_to_bytes(fig, *, fmt: str = "png", dpi: Optional[int] = None) -> bytes:
    """Serialise and close the figure."""
    buf = io.BytesIO()
    try:
        fig.savefig(buf, format=fmt, dpi=dpi or fig.dpi, facecolor=fig.get_facecolor())
    finally:
        plt.close(fig)
    return buf.getvalue()


def _format_from_path(path: Path | str, fmt: Optional[str]) -> str:
    if fmt:
        return fmt
    suffix = Path(str(path)).suffix.lstrip(".").lower()
    return "jpeg" if suffix == "jpg" else (suffix or "png")


def join_output(output_dir: Path | str, name: str) -> str:
    """Output location `<output_dir>/<name>` as a forward-slash key/path."""
    root = str(output_dir).replace("\\", "/").rstrip("/")
    return f"{root}/{name}" if root else name


def write_image(
    content: bytes,
    output_path: Path | str,
    *,
    storage: StorageAdapter | None = None,
) -> Path | str:
    """Write image bytes locally (creating parent dirs) or through storage."""
    if storage is None:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path
    return storage.write_raw(str(output_path).replace("\\", "/"), content)


def render_static(
    df: pd.DataFrame,
    config: ChartConfig,
    output_path: Path | str,
    *,
    storage: StorageAdapter | None = None,
    scales: Optional[Scales] = None,
    fmt: Optional[str] = None,
    label: Optional[str] = None,
) -> Path | str:
    """
    Render `df` to a single image file.

    Raises RuntimeError when there is nothing to draw.
    """
    subset = df.dropna(subset=[config.x, config.y])
    if subset.empty:
        raise RuntimeError(f"No valid rows to plot for {output_path}")

    fig = render_figure(subset, config, scales or build_scales(df, config), label=label)
    content = figure_to_bytes(fig, fmt=_format_from_path(output_path, fmt), dpi=config.dpi)
    return write_image(content, output_path, storage=storage)


__all__ = [
    "ALPHA_COLUMN",
    "LAYER_COLUMN",
    "draw_chart",
    "draw_label",
    "draw_frame",
    "setup_axes",
    "new_figure",
    "render_figure",
    "figure_to_bytes",
    "join_output",
    "write_image",
    "render_static",
]

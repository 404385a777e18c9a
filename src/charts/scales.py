"""
Fixed scales shared by every frame of a chart.

Scales (axis limits, colour/fill mapping, marker size domain) are computed
once from the *whole* table plus the configured limits, never from the
subset shown in one frame. That keeps consecutive frames directly
comparable when they are assembled into a GIF.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import matplotlib
import numpy as np
import pandas as pd
from matplotlib.colors import Normalize, to_hex, to_rgba

from .config import ChartConfig, Limits

AXIS_PADDING = 0.05
DEFAULT_CONTINUOUS_PALETTE = "viridis"


@dataclass(frozen=True)
class ColorScale:
    """Maps a categorical or numeric column to colours."""

    field: str
    categories: Optional[Tuple[str, ...]] = None
    colors: Optional[Tuple[str, ...]] = None
    limits: Optional[Limits] = None
    cmap: str = DEFAULT_CONTINUOUS_PALETTE

    @property
    def is_categorical(self) -> bool:
        return self.categories is not None

    def color_of(self, category: str) -> str:
        assert self.categories is not None and self.colors is not None
        return self.colors[self.categories.index(category)]

    def map(self, values: pd.Series) -> List[Tuple[float, float, float, float]]:
        """RGBA tuple per value; unknown categories / NaN map to grey."""
        missing = to_rgba("#bdbdbd")
        if self.is_categorical:
            lookup = dict(zip(self.categories, self.colors))
            return [
                to_rgba(lookup[str(v)]) if pd.notna(v) and str(v) in lookup else missing
                for v in values
            ]
        assert self.limits is not None
        norm = Normalize(vmin=self.limits[0], vmax=self.limits[1], clip=True)
        cmap = matplotlib.colormaps[self.cmap]
        numeric = to_float(values)
        return [
            tuple(cmap(norm(v))) if not np.isnan(v) else missing
            for v in numeric
        ]

    def normalize(self) -> Normalize:
        assert self.limits is not None
        return Normalize(vmin=self.limits[0], vmax=self.limits[1], clip=True)


@dataclass(frozen=True)
class Scales:
    x_limits: Limits
    y_limits: Limits
    x_log: bool = False
    color: Optional[ColorScale] = None
    fill: Optional[ColorScale] = None
    size_field: Optional[str] = None
    size_domain: Optional[Limits] = None
    size_range: Tuple[float, float] = (20.0, 1500.0)

    def colors_for(self, df: pd.DataFrame):
        if self.color is None:
            return None
        return self.color.map(df[self.color.field])

    def fills_for(self, df: pd.DataFrame):
        if self.fill is None:
            return None
        return self.fill.map(df[self.fill.field])

    def sizes_for(self, df: pd.DataFrame, default: float) -> np.ndarray:
        """Marker areas (points²), linear in the size field over its fixed domain."""
        if self.size_field is None or self.size_domain is None:
            return np.full(len(df), float(default))
        lo, hi = self.size_range
        dmin, dmax = self.size_domain
        values = to_float(df[self.size_field])
        if dmax == dmin:
            scaled = np.full(len(values), 0.5)
        else:
            scaled = np.clip((values - dmin) / (dmax - dmin), 0.0, 1.0)
        scaled = np.where(np.isnan(scaled), 0.0, scaled)
        return lo + scaled * (hi - lo)


def to_float(series: pd.Series) -> np.ndarray:
    """Float array of a column; nullable-integer NA and unparsable values become NaN."""
    return pd.to_numeric(series, errors="coerce").astype("float64").to_numpy()


def _numeric(series: pd.Series) -> np.ndarray:
    values = to_float(series)
    return values[~np.isnan(values)]


def _padded_limits(values: np.ndarray, *, log: bool = False) -> Limits:
    if log:
        values = values[values > 0]
    if values.size == 0:
        return (1.0, 10.0) if log else (0.0, 1.0)

    if log:
        values = np.log10(values)
    lo, hi = float(values.min()), float(values.max())
    if lo == hi:
        lo, hi = lo - 0.5, hi + 0.5
    pad = (hi - lo) * AXIS_PADDING
    lo, hi = lo - pad, hi + pad
    if log:
        return (float(10 ** lo), float(10 ** hi))
    return (lo, hi)


def _palette_colors(palette: str, n: int) -> Tuple[str, ...]:
    cmap = matplotlib.colormaps[palette]

    listed = getattr(cmap, "colors", None)
    if listed is not None and getattr(cmap, "N", 256) < 256:
        # qualitative palette: cycle once the categories outnumber its colours
        if n > len(listed):
            print(
                f"[charts] Palette {palette!r} has {len(listed)} colours for {n} categories; "
                "colours will repeat.",
            )
        return tuple(to_hex(listed[i % len(listed)]) for i in range(n))
    if n == 1:
        return (to_hex(cmap(0.0)),)
    return tuple(to_hex(cmap(i / (n - 1))) for i in range(n))


def build_color_scale(
    df: pd.DataFrame,
    field: str,
    *,
    palette: str,
    limits: Optional[Limits] = None,
) -> ColorScale:
    """Categorical scale for text columns, continuous scale for numeric ones."""
    series = df[field]
    if pd.api.types.is_numeric_dtype(series):
        if limits is None:
            values = _numeric(series)
            if values.size == 0:
                limits = (0.0, 1.0)
            else:
                lo, hi = float(values.min()), float(values.max())
                limits = (lo, hi) if lo < hi else (lo - 0.5, hi + 0.5)
        return ColorScale(field=field, limits=tuple(limits), cmap=palette)

    categories = tuple(sorted(str(v) for v in series.dropna().unique()))
    return ColorScale(
        field=field,
        categories=categories,
        colors=_palette_colors(palette, max(1, len(categories))),
    )


def build_scales(df: pd.DataFrame, config: ChartConfig) -> Scales:
    """
    Compute the scales of a chart from the complete table.

    Configured limits always win over the data range; data-derived axis
    limits are padded by 5% (in log space for a log x axis).
    """
    missing = [c for c in config.fields if c not in df.columns]
    if missing:
        raise KeyError(f"Chart fields {missing} not found in table columns {list(df.columns)}")

    x_limits = config.x_limits or _padded_limits(_numeric(df[config.x]), log=config.x_log)
    y_limits = config.y_limits or _padded_limits(_numeric(df[config.y]))

    color = None
    if config.color is not None:
        color = build_color_scale(df, config.color, palette=config.palette, limits=config.color_limits)

    fill = None
    if config.fill is not None:
        if config.fill == config.color:
            fill = color
        else:
            fill = build_color_scale(df, config.fill, palette=config.palette, limits=config.color_limits)

    size_domain = None
    if config.size is not None:
        values = _numeric(df[config.size])
        if values.size:
            size_domain = (float(values.min()), float(values.max()))

    return Scales(
        x_limits=tuple(x_limits),
        y_limits=tuple(y_limits),
        x_log=config.x_log,
        color=color,
        fill=fill,
        size_field=config.size,
        size_domain=size_domain,
        size_range=tuple(config.size_range),
    )


__all__ = ["AXIS_PADDING", "ColorScale", "Scales", "build_color_scale", "build_scales", "to_float"]

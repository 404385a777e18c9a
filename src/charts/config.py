"""
Explicit chart and animation configuration.

A chart is described by a `ChartConfig` (which fields drive position,
size, colour and fill, plus fixed axis limits and palette). An animated
chart adds one of two transition modes:

- `TimeTransition`: continuous interpolation over a numeric time field,
  with easing and fade-in/fade-out of entering/exiting points;
- `StateTransition`: switching between discrete states of a categorical
  field, with relative transition/hold lengths and an easing curve.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import matplotlib

from .easing import EASINGS

CHART_KINDS = ("scatter", "line", "line_points")

Limits = Tuple[float, float]


def _check_limits(name: str, limits: Optional[Limits]) -> None:
    if limits is None:
        return
    if len(limits) != 2:
        raise ValueError(f"{name} must be a (low, high) pair, got {limits!r}")
    lo, hi = limits
    if lo >= hi:
        raise ValueError(f"{name} must satisfy low < high, got {limits!r}")


@dataclass(frozen=True)
class ChartConfig:
    """Visual encoding of one chart."""

    x: str
    y: str
    kind: str = "scatter"
    size: Optional[str] = None
    color: Optional[str] = None
    fill: Optional[str] = None
    group: Optional[str] = None

    x_limits: Optional[Limits] = None
    y_limits: Optional[Limits] = None
    x_log: bool = False

    palette: str = "tab10"
    color_limits: Optional[Limits] = None
    size_range: Tuple[float, float] = (20.0, 1500.0)
    alpha: float = 0.7
    line_color: str = "#7f7f7f"
    marker_size: float = 60.0
    marker_edgecolor: str = "#333333"

    title: Optional[str] = None
    xlabel: Optional[str] = None
    ylabel: Optional[str] = None
    figsize: Tuple[float, float] = (8.0, 5.0)
    dpi: int = 100
    background: str = "white"

    def __post_init__(self) -> None:
        if self.kind not in CHART_KINDS:
            raise ValueError(f"Unknown chart kind {self.kind!r}; expected one of {CHART_KINDS}")
        _check_limits("x_limits", self.x_limits)
        _check_limits("y_limits", self.y_limits)
        _check_limits("color_limits", self.color_limits)
        if self.palette not in matplotlib.colormaps:
            raise ValueError(f"Unknown palette {self.palette!r}; expected a matplotlib colormap name")
        lo, hi = self.size_range
        if lo <= 0 or hi < lo:
            raise ValueError(f"size_range must satisfy 0 < low <= high, got {self.size_range!r}")
        if self.x_log and self.x_limits is not None and self.x_limits[0] <= 0:
            raise ValueError("x_limits must be positive on a log axis")
        if not 0.0 <= self.alpha <= 1.0:
            raise ValueError(f"alpha must be within [0, 1], got {self.alpha}")
        if self.background not in ("white", "black"):
            raise ValueError(f"background must be 'white' or 'black', got {self.background!r}")

    @property
    def fields(self) -> List[str]:
        """Table columns the chart reads, in a stable order without repeats."""
        seen: List[str] = []
        for name in (self.x, self.y, self.size, self.color, self.fill, self.group):
            if name is not None and name not in seen:
                seen.append(name)
        return seen


def _check_easing(easing: str) -> None:
    if easing not in EASINGS:
        raise ValueError(f"Unknown easing {easing!r}; expected one of {EASINGS}")


def _check_frames(nframes: int, fps: float) -> None:
    if nframes < 1:
        raise ValueError(f"nframes must be >= 1, got {nframes}")
    if fps <= 0:
        raise ValueError(f"fps must be > 0, got {fps}")


@dataclass(frozen=True)
class TimeTransition:
    """Continuous animation along a numeric time field."""

    field: str
    easing: str = "linear"
    enter_fade: bool = True
    exit_fade: bool = True
    nframes: int = 100
    fps: float = 10.0
    label_template: str = "{frame_time:.0f}"

    def __post_init__(self) -> None:
        _check_easing(self.easing)
        _check_frames(self.nframes, self.fps)


@dataclass(frozen=True)
class StateTransition:
    """Animation switching between the discrete states of a categorical field."""

    field: str
    transition_length: float = 1.0
    state_length: float = 1.0
    easing: str = "linear"
    wrap: bool = True
    shadow: bool = False
    shadow_alpha: float = 0.25
    nframes: int = 100
    fps: float = 10.0
    states: Optional[Tuple[str, ...]] = None

    def __post_init__(self) -> None:
        _check_easing(self.easing)
        _check_frames(self.nframes, self.fps)
        if self.transition_length < 0 or self.state_length < 0:
            raise ValueError("transition_length and state_length must be >= 0")
        if self.transition_length == 0 and self.state_length == 0:
            raise ValueError("transition_length and state_length cannot both be 0")
        if not 0.0 <= self.shadow_alpha <= 1.0:
            raise ValueError(f"shadow_alpha must be within [0, 1], got {self.shadow_alpha}")


__all__ = [
    "CHART_KINDS",
    "ChartConfig",
    "TimeTransition",
    "StateTransition",
]

"""
Frame planning for animated charts.

A plan is a list of `Frame`s, each holding the rows to draw for that
frame (with a per-row `_alpha` column) and a label. Rendering is left to
`charts.animate`; keeping the plan as plain DataFrames makes it easy to
check what each frame will show.

Two modes:

- time transitions (`plan_time_frames`): entities identified by
  `config.group` move continuously between their observations of a
  numeric time field; entering/exiting entities fade in/out over one
  observation step.
- state transitions (`plan_state_frames`): the table is split by a
  categorical field; each state is held for a while, then rows are
  interpolated towards the next state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from .config import ChartConfig, StateTransition, TimeTransition
from .easing import get_easing
from .render import ALPHA_COLUMN, LAYER_COLUMN
from .scales import to_float


@dataclass
class Frame:
    index: int
    label: str
    data: pd.DataFrame
    time: Optional[float] = None
    state: Optional[str] = None


def _split_fields(df: pd.DataFrame, fields: Sequence[str]) -> tuple[List[str], List[str]]:
    numeric: List[str] = []
    carried: List[str] = []
    for name in fields:
        if pd.api.types.is_numeric_dtype(df[name]):
            numeric.append(name)
        else:
            carried.append(name)
    return numeric, carried


def _observation_step(times: np.ndarray) -> float:
    if times.size < 2:
        return 1.0
    return float(np.median(np.diff(times)))


def plan_time_frames(
    df: pd.DataFrame,
    config: ChartConfig,
    transition: TimeTransition,
) -> List[Frame]:
    """
    Plan `transition.nframes` frames evenly spaced over the time range.

    Between two observations of an entity the numeric chart fields are
    interpolated with the eased fraction; text fields keep the value of
    the earlier observation. Before its first (after its last)
    observation an entity is shown at that observation with alpha
    falling linearly to 0 one observation step away, when `enter_fade`
    (`exit_fade`) is set; otherwise it is left out.
    """
    time_field = transition.field
    if config.group is None:
        raise ValueError("Time transitions need ChartConfig.group to follow entities across frames")

    fields = [c for c in config.fields if c not in (config.group, time_field)]
    missing = [c for c in fields + [config.group, time_field] if c not in df.columns]
    if missing:
        raise KeyError(f"Columns {missing} not found in table columns {list(df.columns)}")

    data = df.dropna(subset=[time_field, config.group]).copy()
    data[time_field] = pd.to_numeric(data[time_field], errors="coerce").astype(float)
    data = data.dropna(subset=[time_field])
    if data.empty:
        return []
    data = data.drop_duplicates([config.group, time_field], keep="last")

    numeric, carried = _split_fields(data, fields)
    observed = np.sort(data[time_field].unique())
    step = _observation_step(observed)
    frame_times = np.linspace(observed[0], observed[-1], transition.nframes)
    ease = get_easing(transition.easing)

    pieces: List[pd.DataFrame] = []
    for entity, rows in data.groupby(config.group, sort=True):
        rows = rows.sort_values(time_field)
        times = to_float(rows[time_field])
        last = len(times) - 1

        k = np.clip(np.searchsorted(times, frame_times, side="right") - 1, 0, last)
        k_next = np.minimum(k + 1, last)
        span = times[k_next] - times[k]
        raw = np.where(span > 0, (frame_times - times[k]) / np.where(span > 0, span, 1.0), 0.0)
        frac = ease(np.clip(raw, 0.0, 1.0))

        alpha = np.ones(len(frame_times))
        before = frame_times < times[0]
        after = frame_times > times[-1]
        enter_alpha = 1.0 - (times[0] - frame_times) / step if transition.enter_fade else 0.0
        exit_alpha = 1.0 - (frame_times - times[-1]) / step if transition.exit_fade else 0.0
        alpha = np.where(before, enter_alpha, alpha)
        alpha = np.where(after, exit_alpha, alpha)
        visible = alpha > 1e-9
        if not visible.any():
            continue

        piece: Dict[str, object] = {
            "_frame": np.arange(len(frame_times))[visible],
            config.group: entity,
            time_field: frame_times[visible],
            ALPHA_COLUMN: np.clip(alpha[visible], 0.0, 1.0),
        }
        for col in numeric:
            values = to_float(rows[col])
            v0, v1 = values[k], values[k_next]
            piece[col] = (v0 + frac * (v1 - v0))[visible]
        for col in carried:
            piece[col] = rows[col].to_numpy(dtype=object)[k][visible]
        pieces.append(pd.DataFrame(piece))

    if pieces:
        long = pd.concat(pieces, ignore_index=True)
    else:
        long = pd.DataFrame(columns=["_frame", config.group, time_field, ALPHA_COLUMN] + fields)
    by_frame = {i: part.drop(columns="_frame").reset_index(drop=True) for i, part in long.groupby("_frame")}
    empty = long.drop(columns="_frame").iloc[0:0]

    frames: List[Frame] = []
    for i, t in enumerate(frame_times):
        frames.append(
            Frame(
                index=i,
                label=transition.label_template.format(frame_time=t),
                data=by_frame.get(i, empty),
                time=float(t),
            )
        )
    return frames


def _state_order(df: pd.DataFrame, transition: StateTransition) -> List[str]:
    present = [str(v) for v in pd.unique(df[transition.field].dropna().astype(str))]
    if transition.states is None:
        return present
    unknown = [s for s in transition.states if s not in present]
    if unknown:
        raise ValueError(f"States {unknown} not found in column {transition.field!r}")
    return list(transition.states)


def frame_budget(n_states: int, transition: StateTransition) -> tuple[int, int]:
    """
    (hold frames per state, frames per transition).

    The frame budget `nframes` is split in proportion to `state_length`
    and `transition_length`; each non-zero length gets at least one frame.
    """
    if n_states == 0:
        return 0, 0
    n_transitions = n_states if transition.wrap else n_states - 1
    if n_states == 1:
        n_transitions = 0
    units = n_states * transition.state_length + n_transitions * transition.transition_length
    if units <= 0:
        return max(1, transition.nframes // n_states), 0
    per_unit = transition.nframes / units
    hold = max(1, int(round(transition.state_length * per_unit))) if transition.state_length > 0 else 0
    moving = (
        max(1, int(round(transition.transition_length * per_unit)))
        if transition.transition_length > 0 and n_transitions > 0
        else 0
    )
    if hold == 0 and moving == 0:
        hold = 1
    return hold, moving


def _match_key(config: ChartConfig, transition: StateTransition) -> str:
    if config.group is not None and config.group != transition.field:
        return config.group
    return config.x


def _tween_states(
    a: pd.DataFrame,
    b: pd.DataFrame,
    *,
    key: str,
    numeric: Sequence[str],
    fraction: float,
) -> pd.DataFrame:
    """Rows between state `a` and state `b` at eased `fraction`."""
    a = a.drop_duplicates(key, keep="last")
    b = b.drop_duplicates(key, keep="last")
    merged = a.merge(b, on=key, how="outer", suffixes=("_a", "_b"), indicator=True)

    source = "_a" if fraction < 0.5 else "_b"
    out = pd.DataFrame({key: merged[key]})
    for col in a.columns:
        if col == key:
            continue
        col_a, col_b = f"{col}_a", f"{col}_b"
        if col in numeric:
            va = to_float(merged[col_a])
            vb = to_float(merged[col_b])
            va = np.where(np.isnan(va), vb, va)
            vb = np.where(np.isnan(vb), va, vb)
            out[col] = va + fraction * (vb - va)
        else:
            preferred = merged[f"{col}{source}"]
            other = merged[col_b if source == "_a" else col_a]
            out[col] = preferred.where(preferred.notna(), other)

    alpha = np.ones(len(merged))
    alpha = np.where(merged["_merge"] == "left_only", 1.0 - fraction, alpha)
    alpha = np.where(merged["_merge"] == "right_only", fraction, alpha)
    out[ALPHA_COLUMN] = alpha
    return out[out[ALPHA_COLUMN] > 1e-9].reset_index(drop=True)


def _with_layer(df: pd.DataFrame, layer: str, alpha: Optional[float] = None) -> pd.DataFrame:
    out = df.copy()
    out[LAYER_COLUMN] = layer
    if alpha is not None:
        out[ALPHA_COLUMN] = alpha
    elif ALPHA_COLUMN not in out.columns:
        out[ALPHA_COLUMN] = 1.0
    return out


def plan_state_frames(
    df: pd.DataFrame,
    config: ChartConfig,
    transition: StateTransition,
) -> List[Frame]:
    """
    Plan hold and transition frames for each state in order.

    Hold frames show exactly the rows of one state. Transition frames
    interpolate the numeric fields of rows matched on the group (or, when
    the group is the state field itself, on x) with the eased fraction;
    unmatched rows fade out/in. With `wrap`, the last state transitions
    back to the first. With `shadow`, states already shown stay on the
    chart at `shadow_alpha`.
    """
    field = transition.field
    if field not in df.columns:
        raise KeyError(f"State field {field!r} not found in table columns {list(df.columns)}")

    columns = [c for c in dict.fromkeys(config.fields + [field]) if c in df.columns]
    data = df[columns].dropna(subset=[field]).copy()
    data[field] = data[field].astype(str)
    states = _state_order(data, transition)
    if not states:
        return []

    key = _match_key(config, transition)
    numeric, _ = _split_fields(data, [c for c in columns if c not in (key, field)])
    by_state = {s: data[data[field] == s].reset_index(drop=True) for s in states}
    hold, moving = frame_budget(len(states), transition)
    ease = get_easing(transition.easing)

    def shadow_rows(upto: int) -> List[pd.DataFrame]:
        if not transition.shadow:
            return []
        return [
            _with_layer(by_state[s], f"shadow:{s}", transition.shadow_alpha)
            for s in states[:upto]
        ]

    frames: List[Frame] = []

    def emit(label: str, state: str, layers: List[pd.DataFrame]) -> None:
        data_frame = pd.concat(layers, ignore_index=True) if layers else data.iloc[0:0]
        frames.append(Frame(index=len(frames), label=label, data=data_frame, state=state))

    for i, state in enumerate(states):
        for _ in range(hold):
            emit(state, state, shadow_rows(i) + [_with_layer(by_state[state], "current")])

        if i == len(states) - 1 and not transition.wrap:
            break
        if len(states) == 1:
            break
        target = states[(i + 1) % len(states)]
        for j in range(1, moving + 1):
            fraction = float(ease(j / (moving + 1)))
            closest = state if fraction < 0.5 else target
            moved = _tween_states(by_state[state], by_state[target], key=key, numeric=numeric, fraction=fraction)
            emit(closest, closest, shadow_rows(i + 1) + [_with_layer(moved, "current")])

    return frames


__all__ = ["Frame", "frame_budget", "plan_time_frames", "plan_state_frames"]

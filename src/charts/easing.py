"""
Easing curves for animated transitions.

Names follow the "<curve>-<mode>" convention used by animation tools:
"linear", "cubic-in", "sine-in-out", ... Every curve maps progress
t in [0, 1] to eased progress with f(0) = 0 and f(1) = 1.
"""

from __future__ import annotations

from typing import Callable, Dict, List

import numpy as np

EasingFunction = Callable[[np.ndarray], np.ndarray]

_BACK_OVERSHOOT = 1.70158


def _exponential_in(t: np.ndarray) -> np.ndarray:
    return np.where(t <= 0, 0.0, np.power(2.0, 10.0 * (t - 1.0)))


def _back_in(t: np.ndarray) -> np.ndarray:
    s = _BACK_OVERSHOOT
    return t * t * ((s + 1.0) * t - s)


# "-in" versions; "-out" and "-in-out" are derived from them.
_IN_CURVES: Dict[str, EasingFunction] = {
    "quadratic": lambda t: t ** 2,
    "cubic": lambda t: t ** 3,
    "quartic": lambda t: t ** 4,
    "quintic": lambda t: t ** 5,
    "sine": lambda t: 1.0 - np.cos(t * np.pi / 2.0),
    "circular": lambda t: 1.0 - np.sqrt(1.0 - t * t),
    "exponential": _exponential_in,
    "back": _back_in,
}


def _out(curve: EasingFunction) -> EasingFunction:
    return lambda t: 1.0 - curve(1.0 - t)


def _in_out(curve: EasingFunction) -> EasingFunction:
    def eased(t: np.ndarray) -> np.ndarray:
        # each half only sees its own [0, 1] range
        first = curve(np.clip(2.0 * t, 0.0, 1.0)) / 2.0
        second = 1.0 - curve(np.clip(2.0 * (1.0 - t), 0.0, 1.0)) / 2.0
        return np.where(t < 0.5, first, second)

    return eased


def _linear(t: np.ndarray) -> np.ndarray:
    return t


def _build_registry() -> Dict[str, EasingFunction]:
    registry: Dict[str, EasingFunction] = {"linear": _linear}
    for name, curve in _IN_CURVES.items():
        registry[f"{name}-in"] = curve
        registry[f"{name}-out"] = _out(curve)
        registry[f"{name}-in-out"] = _in_out(curve)
    return registry


_REGISTRY = _build_registry()

EASINGS: List[str] = sorted(_REGISTRY)


def get_easing(name: str) -> EasingFunction:
    """
    Return the vectorised easing function registered under `name`.

    The returned callable clips its input to [0, 1] and pins both
    endpoints exactly, so interpolated frames never drift past the
    observed values at the start/end of a transition.
    """
    try:
        curve = _REGISTRY[name]
    except KeyError:
        raise ValueError(f"Unknown easing {name!r}; expected one of {EASINGS}") from None

    def eased(t) -> np.ndarray:
        arr = np.clip(np.asarray(t, dtype=float), 0.0, 1.0)
        out = np.asarray(curve(arr), dtype=float)
        out = np.where(arr <= 0.0, 0.0, out)
        return np.where(arr >= 1.0, 1.0, out)

    return eased


__all__ = ["EASINGS", "EasingFunction", "get_easing"]

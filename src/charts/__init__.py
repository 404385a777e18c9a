"""
Charts layer
------------

Declarative chart configuration plus the rendering helpers built on
matplotlib (static images, animated GIFs) and Pillow (GIF assembly):

- config:  ChartConfig / TimeTransition / StateTransition
- scales:  fixed axis/colour/size scales shared by all frames
- render:  static images
- tween:   frame plans for time and state transitions
- animate: frame plan -> GIF
- frames:  cumulative per-step export loop
- gif:     image files -> GIF
"""

from .config import ChartConfig, StateTransition, TimeTransition  # noqa: F401
from .easing import EASINGS, get_easing  # noqa: F401
from .scales import Scales, build_scales  # noqa: F401
from .render import render_figure, render_static  # noqa: F401
from .tween import Frame, plan_state_frames, plan_time_frames  # noqa: F401
from .animate import animate_states, animate_time, render_animation  # noqa: F401
from .frames import FrameRecord, export_cumulative_frames  # noqa: F401
from .gif import assemble_gif, frames_to_gif  # noqa: F401

__all__ = [
    "ChartConfig",
    "TimeTransition",
    "StateTransition",
    "EASINGS",
    "get_easing",
    "Scales",
    "build_scales",
    "render_figure",
    "render_static",
    "Frame",
    "plan_time_frames",
    "plan_state_frames",
    "render_animation",
    "animate_time",
    "animate_states",
    "FrameRecord",
    "export_cumulative_frames",
    "assemble_gif",
    "frames_to_gif",
]

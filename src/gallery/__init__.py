"""
Gallery layer
-------------

The charts produced from the input tables:

- nations_2016.png, nations.gif
- warming.png, warming/<year>.png, warming.gif
- simulations.gif
"""

from .nations import (  # noqa: F401
    OUTPUT_DIR,
    NATIONS_GIF_NAME,
    NATIONS_STATIC_YEAR,
    build_nations_animation,
    build_nations_static,
    nations_static_name,
)
from .warming import (  # noqa: F401
    WARMING_GIF_NAME,
    WARMING_PNG_NAME,
    build_warming_frames,
    build_warming_static,
)
from .simulations import SIMULATIONS_GIF_NAME, build_simulations_animation  # noqa: F401

__all__ = [
    "OUTPUT_DIR",
    "NATIONS_STATIC_YEAR",
    "NATIONS_GIF_NAME",
    "WARMING_PNG_NAME",
    "WARMING_GIF_NAME",
    "SIMULATIONS_GIF_NAME",
    "nations_static_name",
    "build_nations_static",
    "build_nations_animation",
    "build_warming_static",
    "build_warming_frames",
    "build_simulations_animation",
]

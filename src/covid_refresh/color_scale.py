"""
Color utilities for choropleth mapping.

Gradient: light blue -> yellow -> dark red, relative to a batch maximum.
"""

import math
from typing import Dict, Optional, Tuple

from .config.constants import DEFAULT_GREY_HEX, HIGH_COLOR, LOW_COLOR, MID_COLOR

RGB = Tuple[float, float, float]


def _clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))


def _lerp_color(c1: RGB, c2: RGB, t: float) -> RGB:
    return tuple(a + (b - a) * t for a, b in zip(c1, c2))


def rgb_to_hex(color: RGB) -> str:
    # round half up, matching the frontend's Math.round
    return "#" + "".join(f"{int(math.floor(channel + 0.5)):02X}" for channel in color)


def value_to_color_hex(value: Optional[float], max_value: Optional[float]) -> str:
    """
    Compute the gradient color for a value relative to ``max_value``.

    Returns the default grey when the value is missing or not finite, or when
    ``max_value`` is missing or not positive.
    """
    if value is None or max_value is None:
        return DEFAULT_GREY_HEX
    try:
        value = float(value)
        max_value = float(max_value)
    except (TypeError, ValueError):
        return DEFAULT_GREY_HEX
    if not math.isfinite(value) or not math.isfinite(max_value) or max_value <= 0:
        return DEFAULT_GREY_HEX

    t = _clamp01(value / max_value)
    # Piecewise: [0, 0.5] LOW -> MID, (0.5, 1] MID -> HIGH
    if t <= 0.5:
        color = _lerp_color(LOW_COLOR, MID_COLOR, t / 0.5)
    else:
        color = _lerp_color(MID_COLOR, HIGH_COLOR, (t - 0.5) / 0.5)
    return rgb_to_hex(color)


def get_legend(max_value: Optional[float] = None) -> Dict:
    """Legend information for the map: the three gradient stops and the default color."""
    return {
        "defaultColor": DEFAULT_GREY_HEX,
        "stops": [
            {"position": 0, "color": rgb_to_hex(LOW_COLOR), "label": "Low"},
            {"position": 0.5, "color": rgb_to_hex(MID_COLOR), "label": "Medium"},
            {"position": 1, "color": rgb_to_hex(HIGH_COLOR), "label": "High"},
        ],
        "maxValue": max_value,
    }

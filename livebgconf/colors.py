"""Conversions between RGB and HSV, all components in [0, 1]."""

from __future__ import annotations

import math


def rgb_to_hsv(r: float, g: float, b: float) -> tuple[float, float, float]:
    """Convert RGB to HSV. Black gives a hue of -1."""
    lo = min(r, g, b)
    hi = max(r, g, b)
    v = hi
    delta = hi - lo

    if hi == 0:
        return -1.0, 0.0, v
    s = delta / hi

    if not delta:
        delta = 1.0

    if r == hi:
        h = (g - b) / delta
    elif g == hi:
        h = 2 + (b - r) / delta
    else:
        h = 4 + (r - g) / delta

    h *= 60
    if h < 0:
        h += 360
    return h / 360, s, v


def hsv_to_rgb(h: float, s: float, v: float) -> tuple[float, float, float]:
    """Convert HSV to RGB. Hues outside [0, 1) fall into the first sector."""
    if s == 0.0:
        return v, v, v

    scaled = h * 6.0
    sector = math.floor(scaled)
    frac = scaled - sector

    o = v * (1.0 - s)
    p = v * (1.0 - s * frac)
    q = v * (1.0 - s * (1.0 - frac))

    sectors = {
        1: (p, v, o),
        2: (o, v, q),
        3: (o, p, v),
        4: (q, o, v),
        5: (v, o, p),
    }
    return sectors.get(int(sector), (v, q, o))
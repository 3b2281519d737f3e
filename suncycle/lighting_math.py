"""
Mathematical helpers for the sun's color and intensity transitions.
"""

RGB = tuple[float, float, float]


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation."""
    return a + (b - a) * t


def lerp_color(a: RGB, b: RGB, t: float) -> RGB:
    """Component-wise linear interpolation of two RGB triples."""
    return (
        lerp(a[0], b[0], t),
        lerp(a[1], b[1], t),
        lerp(a[2], b[2], t),
    )


def to_rgb255(color: RGB, scale: float = 1.0) -> tuple[int, int, int]:
    """
    Convert a 0.0-1.0 RGB triple to 8-bit channels.

    Args:
        color: Channels in 0.0-1.0
        scale: Brightness factor applied before conversion (clamped to 0.0-1.0)

    Returns:
        (r, g, b) ints in 0-255
    """
    scale = clamp(scale)
    return tuple(int(round(clamp(c) * scale * 255)) for c in color)


def build_gamma_table(gamma: float):
    """Generate gamma correction lookup table."""
    return [int(pow(i / 255.0, gamma) * 255.0 + 0.5) for i in range(256)]

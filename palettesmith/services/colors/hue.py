"""
Hue arithmetic on the circular [0, 360) degree scale.

Every palette and token routine goes through these helpers so that hue is never
compared or interpolated with plain linear subtraction.
"""


def wrap_hue(h: float) -> float:
    """
    Normalize a hue angle into [0, 360).

    Args:
        h: Hue in degrees, any real value

    Returns:
        Equivalent hue in [0, 360)
    """
    wrapped = h % 360.0
    # -1e-18 % 360 is 360.0 in floating point
    if wrapped >= 360.0:
        wrapped -= 360.0
    return wrapped


def rotate_hue(h: float, degrees: float) -> float:
    """Rotate a hue by the given number of degrees with wraparound."""
    return wrap_hue(h + degrees)


def hue_delta(from_h: float, to_h: float) -> float:
    """
    Signed shortest-arc difference between two hues.

    Args:
        from_h: Starting hue in degrees
        to_h: Target hue in degrees

    Returns:
        Delta in [-180, 180) such that wrap_hue(from_h + delta) == wrap_hue(to_h)
    """
    return ((to_h - from_h + 540.0) % 360.0) - 180.0


def hue_distance(h1: float, h2: float) -> float:
    """Unsigned angular separation between two hues, in [0, 180]."""
    return abs(hue_delta(h1, h2))


def interpolate_hue(from_h: float, to_h: float, t: float) -> float:
    """
    Interpolate along the shortest arc between two hues.

    Args:
        from_h: Hue at t = 0
        to_h: Hue at t = 1
        t: Interpolation factor (not clamped)

    Returns:
        Interpolated hue in [0, 360)
    """
    return wrap_hue(from_h + hue_delta(from_h, to_h) * t)


def blend_hue(base: float, shift: float, weight: float = 0.0) -> float:
    """
    Move a hue part of the way towards base + shift.

    Args:
        base: Base hue in degrees
        shift: Full rotation in degrees
        weight: Fraction of the rotation to apply

    Returns:
        Blended hue in [0, 360)
    """
    origin = wrap_hue(base)
    target = wrap_hue(base + shift)
    return interpolate_hue(origin, target, weight)

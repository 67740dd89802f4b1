# core/utils.py
from typing import Tuple
from core.vector import Vector3

INFINITY = float("inf")
# Lower bound for secondary rays so they don't re-hit the surface they leave.
EPSILON = 1e-4

def reflect(v: Vector3, n: Vector3) -> Vector3:
    """
    Reflects vector v about the axis n: 2 * (v . n) * n - v.
    n is used as given; callers normalize it when a unit axis is needed.
    """
    return n * (2 * v.dot(n)) - v

def clamp_color(color: Vector3) -> Vector3:
    """
    Clamps each channel of a color to the displayable [0, 255] range.
    """
    return Vector3(min(255, max(0, color.x)),
                   min(255, max(0, color.y)),
                   min(255, max(0, color.z)))

def to_rgb_bytes(color: Vector3) -> Tuple[int, int, int]:
    """
    Clamps a color and rounds it to integer byte values (half to even).
    """
    c = clamp_color(color)
    return (int(round(c.x)), int(round(c.y)), int(round(c.z)))

# core/ray.py
from core.vector import Vector3

class Ray:
    """
    A ray with an origin and an unnormalized direction. The t parameter is
    measured in units of the direction's own length.
    """
    def __init__(self, origin: Vector3, direction: Vector3):
        self.origin = origin
        self.direction = direction

    def at(self, t: float) -> Vector3:
        """
        Returns the point along the ray at parameter t.
        """
        return self.origin + self.direction * t

    def __repr__(self) -> str:
        return f"Ray({self.origin!r}, {self.direction!r})"

# geometry/sphere.py
import math
from typing import Tuple
from core.vector import Vector3
from core.utils import INFINITY
from materials.material import Material

class Sphere:
    """
    Represents a sphere defined by its center, radius, and material.
    The center may be replaced between frames by scene commands.
    """
    def __init__(self, center: Vector3, radius: float, material: Material):
        self.center = center
        self.radius = radius
        self.material = material

    @property
    def color(self) -> Vector3:
        return self.material.color

    @property
    def specular(self) -> float:
        return self.material.specular

    @property
    def reflective(self) -> float:
        return self.material.reflective

    def intersect(self, origin: Vector3, direction: Vector3) -> Tuple[float, float]:
        """
        Solves |origin + t * direction - center|^2 = radius^2 for t.
        Returns both roots, or (inf, inf) when the line misses the sphere.
        """
        oc = origin - self.center
        k1 = direction.dot(direction)
        k2 = 2 * oc.dot(direction)
        k3 = oc.dot(oc) - self.radius * self.radius

        discriminant = k2 * k2 - 4 * k1 * k3
        if discriminant < 0:
            return INFINITY, INFINITY

        sqrt_disc = math.sqrt(discriminant)
        t1 = (-k2 + sqrt_disc) / (2 * k1)
        t2 = (-k2 - sqrt_disc) / (2 * k1)
        return t1, t2

    def normal_at(self, point: Vector3) -> Vector3:
        """Unit outward normal at a point on the surface."""
        return (point - self.center).normalize()

    def __repr__(self) -> str:
        return f"Sphere(center={self.center!r}, radius={self.radius}, material={self.material!r})"

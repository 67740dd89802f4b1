# materials/material.py
from core.vector import Vector3

# Specular exponent value meaning "no highlight".
NO_SPECULAR = -1

class Material:
    """
    Surface properties of a sphere under the local illumination model.

    color:      base RGB color on a 0-255 scale.
    specular:   Phong exponent, or NO_SPECULAR to disable the highlight.
    reflective: fraction of the final color taken from the reflected ray.
    """
    def __init__(self, color: Vector3, specular: float = NO_SPECULAR, reflective: float = 0.0):
        self.color = color
        self.specular = specular
        self.reflective = reflective

    @property
    def is_reflective(self) -> bool:
        return self.reflective > 0

    def __repr__(self) -> str:
        return (f"Material(color={self.color!r}, specular={self.specular}, "
                f"reflective={self.reflective})")

# lighting/lights.py
from typing import Tuple
from core.vector import Vector3
from core.utils import INFINITY

# Integer tags used when the lights are packed into arrays for the JIT backend.
AMBIENT = 0
POINT = 1
DIRECTIONAL = 2

class Light:
    """
    Abstract light. Each concrete kind carries only the fields it needs.
    """
    kind = None

    def __init__(self, intensity: float):
        self.intensity = intensity

    def light_vector(self, point: Vector3) -> Tuple[Vector3, float]:
        """
        Returns the (unnormalized) vector from point towards the light and the
        t bound for the shadow search along it.
        """
        raise NotImplementedError("light_vector() must be implemented by subclasses.")

class AmbientLight(Light):
    """Uniform light that reaches every point, ignoring geometry."""
    kind = AMBIENT

    def light_vector(self, point: Vector3) -> Tuple[Vector3, float]:
        raise TypeError("Ambient light has no direction.")

    def __repr__(self) -> str:
        return f"AmbientLight({self.intensity})"

class PointLight(Light):
    kind = POINT

    def __init__(self, intensity: float, position: Vector3):
        super().__init__(intensity)
        self.position = position

    def light_vector(self, point: Vector3) -> Tuple[Vector3, float]:
        # t = 1 lands exactly on the light, so blockers past it don't count.
        return self.position - point, 1.0

    def __repr__(self) -> str:
        return f"PointLight({self.intensity}, position={self.position!r})"

class DirectionalLight(Light):
    kind = DIRECTIONAL

    def __init__(self, intensity: float, direction: Vector3):
        super().__init__(intensity)
        self.direction = direction

    def light_vector(self, point: Vector3) -> Tuple[Vector3, float]:
        return self.direction, INFINITY

    def __repr__(self) -> str:
        return f"DirectionalLight({self.intensity}, direction={self.direction!r})"

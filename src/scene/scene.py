# scene/scene.py
from typing import List, Optional, Tuple
from core.vector import Vector3
from geometry.sphere import Sphere
from lighting.lights import Light

class Scene:
    """
    Everything a render reads: the spheres and lights (in a stable order),
    plus the camera and viewport constants.

    The sphere order only matters to break ties between hits at exactly the
    same t: the first sphere in the list wins.
    """
    def __init__(self,
                 spheres: List[Sphere] = None,
                 lights: List[Light] = None,
                 camera_position: Vector3 = None,
                 background_color: Vector3 = None,
                 viewport_size: float = 1.0,
                 projection_plane_z: float = 1.0):
        self.spheres: List[Sphere] = list(spheres) if spheres else []
        self.lights: List[Light] = list(lights) if lights else []
        self.camera_position = camera_position if camera_position is not None else Vector3(0, 0, 0)
        self.background_color = background_color if background_color is not None else Vector3(0, 0, 0)
        self.viewport_size = viewport_size
        self.projection_plane_z = projection_plane_z

    def add(self, obj):
        if isinstance(obj, Sphere):
            self.spheres.append(obj)
        elif isinstance(obj, Light):
            self.lights.append(obj)
        else:
            raise TypeError(f"Cannot add {type(obj).__name__} to a scene")

    def closest_intersection(self, origin: Vector3, direction: Vector3,
                             t_min: float, t_max: float) -> Optional[Tuple[Sphere, float]]:
        """
        Finds the nearest sphere hit with t strictly inside (t_min, t_max).
        Returns (sphere, t) or None.
        """
        closest_t = float("inf")
        closest_sphere = None

        for sphere in self.spheres:
            t1, t2 = sphere.intersect(origin, direction)
            if t_min < t1 < t_max and t1 < closest_t:
                closest_t = t1
                closest_sphere = sphere
            if t_min < t2 < t_max and t2 < closest_t:
                closest_t = t2
                closest_sphere = sphere

        if closest_sphere is None:
            return None
        return closest_sphere, closest_t

    def __repr__(self) -> str:
        return (f"Scene({len(self.spheres)} spheres, {len(self.lights)} lights, "
                f"camera={self.camera_position!r})")

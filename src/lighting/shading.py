# lighting/shading.py
from core.vector import Vector3
from core.utils import EPSILON, reflect
from lighting.lights import AMBIENT
from materials.material import NO_SPECULAR

def compute_lighting(scene, point: Vector3, normal: Vector3, view: Vector3, specular: float) -> float:
    """
    Total light intensity arriving at a surface point.

    Sums the ambient lights, plus the diffuse and specular terms of every
    point/directional light that is not blocked by a sphere. A blocked light
    contributes nothing at all (hard shadows). The result is not clamped.

    Args:
        scene: Scene providing the lights and the shadow-test geometry.
        point: Surface point being shaded.
        normal: Surface normal at the point.
        view: Vector from the point back towards the viewer.
        specular: Phong exponent of the surface, or -1 for none.
    """
    intensity = 0.0
    # Should both be 1.0, but they're not assumed to be.
    length_n = normal.length()
    length_v = view.length()

    for light in scene.lights:
        if light.kind == AMBIENT:
            intensity += light.intensity
            continue

        vec_l, t_max = light.light_vector(point)

        # Shadow check.
        if scene.closest_intersection(point, vec_l, EPSILON, t_max) is not None:
            continue

        # Diffuse.
        n_dot_l = normal.dot(vec_l)
        if n_dot_l > 0:
            intensity += light.intensity * n_dot_l / (length_n * vec_l.length())

        # Specular.
        if specular != NO_SPECULAR:
            vec_r = reflect(vec_l, normal)
            r_dot_v = vec_r.dot(view)
            if r_dot_v > 0:
                intensity += light.intensity * (r_dot_v / (vec_r.length() * length_v)) ** specular

    return intensity

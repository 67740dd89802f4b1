# renderer/jit_kernels.py

import math
import numpy as np
from numba import njit

from lighting.lights import AMBIENT, DIRECTIONAL, POINT

INFINITY = np.inf
EPSILON = 1e-4
NO_SPECULAR = -1.0

# -------------------------------------------------------------------------
# Vector helpers on 3-tuples of float64.

@njit(cache=True)
def dot(a, b):
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]

@njit(cache=True)
def add(a, b):
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])

@njit(cache=True)
def subtract(a, b):
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])

@njit(cache=True)
def scale(k, a):
    return (k * a[0], k * a[1], k * a[2])

@njit(cache=True)
def length(a):
    return math.sqrt(dot(a, a))

@njit(cache=True)
def reflect(v, n):
    return subtract(scale(2.0 * dot(v, n), n), v)

@njit(cache=True)
def row(array, i):
    return (array[i, 0], array[i, 1], array[i, 2])

# -------------------------------------------------------------------------
# Intersection.

@njit(cache=True)
def intersect_ray_sphere(origin, direction, center, radius):
    """Both roots of the ray-sphere quadratic, or (inf, inf) on a miss."""
    oc = subtract(origin, center)
    k1 = dot(direction, direction)
    k2 = 2.0 * dot(oc, direction)
    k3 = dot(oc, oc) - radius * radius

    discriminant = k2 * k2 - 4.0 * k1 * k3
    if discriminant < 0.0:
        return INFINITY, INFINITY

    sqrtd = math.sqrt(discriminant)
    return (-k2 + sqrtd) / (2.0 * k1), (-k2 - sqrtd) / (2.0 * k1)

@njit(cache=True)
def closest_intersection(origin, direction, t_min, t_max, centers, radii):
    """Index of the nearest sphere hit in (t_min, t_max) and its t; index -1 on a miss."""
    closest_t = INFINITY
    closest = -1
    for i in range(radii.shape[0]):
        t1, t2 = intersect_ray_sphere(origin, direction, row(centers, i), radii[i])
        if t_min < t1 and t1 < t_max and t1 < closest_t:
            closest_t = t1
            closest = i
        if t_min < t2 and t2 < t_max and t2 < closest_t:
            closest_t = t2
            closest = i
    return closest, closest_t

# -------------------------------------------------------------------------
# Shading.

@njit(cache=True)
def compute_lighting(point, normal, view, specular, centers, radii,
                     light_kinds, light_intensities, light_vectors):
    intensity = 0.0
    length_n = length(normal)
    length_v = length(view)

    for i in range(light_kinds.shape[0]):
        if light_kinds[i] == AMBIENT:
            intensity += light_intensities[i]
            continue

        if light_kinds[i] == POINT:
            vec_l = subtract(row(light_vectors, i), point)
            t_max = 1.0
        else:
            vec_l = row(light_vectors, i)
            t_max = INFINITY

        blocker, _ = closest_intersection(point, vec_l, EPSILON, t_max, centers, radii)
        if blocker >= 0:
            continue

        n_dot_l = dot(normal, vec_l)
        if n_dot_l > 0.0:
            intensity += light_intensities[i] * n_dot_l / (length_n * length(vec_l))

        if specular != NO_SPECULAR:
            vec_r = reflect(vec_l, normal)
            r_dot_v = dot(vec_r, view)
            if r_dot_v > 0.0:
                intensity += light_intensities[i] * (r_dot_v / (length(vec_r) * length_v)) ** specular

    return intensity

@njit(cache=True)
def trace_ray(origin, direction, t_min, t_max, depth,
              centers, radii, colors, speculars, reflectives,
              light_kinds, light_intensities, light_vectors, background):
    """
    Iterative form of the recursive tracer. Each reflective bounce keeps
    (1 - r) of its local color and passes the weight r on to the next hit.
    """
    color = (0.0, 0.0, 0.0)
    weight = 1.0

    while True:
        idx, t = closest_intersection(origin, direction, t_min, t_max, centers, radii)
        if idx < 0:
            color = add(color, scale(weight, background))
            break

        point = add(origin, scale(t, direction))
        normal = subtract(point, row(centers, idx))
        normal = scale(1.0 / length(normal), normal)
        view = scale(-1.0, direction)

        lighting = compute_lighting(point, normal, view, speculars[idx], centers, radii,
                                    light_kinds, light_intensities, light_vectors)
        local_color = scale(lighting, row(colors, idx))

        r = reflectives[idx]
        if r <= 0.0 or depth <= 0:
            color = add(color, scale(weight, local_color))
            break

        color = add(color, scale(weight * (1.0 - r), local_color))
        weight = weight * r

        origin = point
        direction = reflect(view, normal)
        t_min = EPSILON
        t_max = INFINITY
        depth -= 1

    return color

@njit(cache=True)
def render_kernel(output, camera, viewport_size, projection_plane_z, depth,
                  centers, radii, colors, speculars, reflectives,
                  light_kinds, light_intensities, light_vectors, background):
    """
    Fills output (height x width x 3, float64) with clamped colors.
    Row 0 is the top of the image (y-up canvas coordinates are flipped).
    """
    height = output.shape[0]
    width = output.shape[1]
    half_w = width // 2
    half_h = height // 2

    for col in range(width):
        x = col - half_w
        for r in range(height):
            y = half_h - r - 1
            direction = (x * viewport_size / width,
                         y * viewport_size / height,
                         projection_plane_z)
            color = trace_ray(camera, direction, 1.0, INFINITY, depth,
                              centers, radii, colors, speculars, reflectives,
                              light_kinds, light_intensities, light_vectors, background)
            for c in range(3):
                output[r, col, c] = min(255.0, max(0.0, color[c]))

def pack_scene(scene):
    """
    Flattens a Scene into the numpy arrays the kernels take.

    Returns a dict keyed by kernel argument name.
    """
    n_spheres = len(scene.spheres)
    centers = np.zeros((n_spheres, 3), dtype=np.float64)
    radii = np.zeros(n_spheres, dtype=np.float64)
    colors = np.zeros((n_spheres, 3), dtype=np.float64)
    speculars = np.zeros(n_spheres, dtype=np.float64)
    reflectives = np.zeros(n_spheres, dtype=np.float64)

    for i, sphere in enumerate(scene.spheres):
        centers[i] = sphere.center.to_tuple()
        radii[i] = sphere.radius
        colors[i] = sphere.color.to_tuple()
        speculars[i] = sphere.specular
        reflectives[i] = sphere.reflective

    n_lights = len(scene.lights)
    light_kinds = np.zeros(n_lights, dtype=np.int64)
    light_intensities = np.zeros(n_lights, dtype=np.float64)
    light_vectors = np.zeros((n_lights, 3), dtype=np.float64)

    for i, light in enumerate(scene.lights):
        light_kinds[i] = light.kind
        light_intensities[i] = light.intensity
        if light.kind == POINT:
            light_vectors[i] = light.position.to_tuple()
        elif light.kind == DIRECTIONAL:
            light_vectors[i] = light.direction.to_tuple()

    return {
        "centers": centers,
        "radii": radii,
        "colors": colors,
        "speculars": speculars,
        "reflectives": reflectives,
        "light_kinds": light_kinds,
        "light_intensities": light_intensities,
        "light_vectors": light_vectors,
        "background": scene.background_color.to_tuple(),
    }

def render_array(scene, width: int, height: int, depth: int) -> np.ndarray:
    """Renders the full frame and returns clamped float colors, shape (height, width, 3)."""
    packed = pack_scene(scene)
    output = np.zeros((height, width, 3), dtype=np.float64)
    render_kernel(output,
                  scene.camera_position.to_tuple(),
                  float(scene.viewport_size),
                  float(scene.projection_plane_z),
                  int(depth),
                  packed["centers"], packed["radii"], packed["colors"],
                  packed["speculars"], packed["reflectives"],
                  packed["light_kinds"], packed["light_intensities"],
                  packed["light_vectors"], packed["background"])
    return output

# renderer/raytracer.py
import logging
import time

from core.vector import Vector3
from core.ray import Ray
from core.utils import EPSILON, INFINITY, reflect, to_rgb_bytes
from lighting.shading import compute_lighting
from renderer.framebuffer import FrameBuffer, canvas_coordinates

logger = logging.getLogger(__name__)

MAX_RECURSION_DEPTH = 5
BACKENDS = ("python", "numba")

def clamp_recursion_depth(value) -> int:
    """Coerces a user-supplied depth to an int in [0, MAX_RECURSION_DEPTH]."""
    depth = int(value)
    return max(0, min(depth, MAX_RECURSION_DEPTH))

class RenderConfig:
    """
    Per-session render settings. recursion_depth is clamped on assignment.
    """
    def __init__(self, width: int, height: int, recursion_depth: int = 3, backend: str = "python"):
        if backend not in BACKENDS:
            raise ValueError(f"Unknown backend {backend!r}, expected one of {BACKENDS}")
        self.width = width
        self.height = height
        self.recursion_depth = recursion_depth
        self.backend = backend

    @property
    def recursion_depth(self) -> int:
        return self._recursion_depth

    @recursion_depth.setter
    def recursion_depth(self, value) -> None:
        self._recursion_depth = clamp_recursion_depth(value)

    def __repr__(self) -> str:
        return (f"RenderConfig({self.width}x{self.height}, depth={self.recursion_depth}, "
                f"backend={self.backend!r})")

def trace_ray(scene, origin: Vector3, direction: Vector3, t_min: float, t_max: float, depth: int) -> Vector3:
    """
    Color seen along a ray.

    Shades the closest hit with the local lighting model and, for reflective
    surfaces with depth left, blends in the color of the mirrored ray.
    Each bounce makes at most one recursive call and uses one unit of depth.
    """
    hit = scene.closest_intersection(origin, direction, t_min, t_max)
    if hit is None:
        return scene.background_color

    sphere, t = hit
    ray = Ray(origin, direction)
    point = ray.at(t)
    normal = sphere.normal_at(point)
    view = -direction

    lighting = compute_lighting(scene, point, normal, view, sphere.specular)
    local_color = sphere.color * lighting

    if not sphere.material.is_reflective or depth <= 0:
        return local_color

    reflected_dir = reflect(view, normal)
    reflected_color = trace_ray(scene, point, reflected_dir, EPSILON, INFINITY, depth - 1)

    r = sphere.reflective
    return local_color * (1 - r) + reflected_color * r

class Renderer:
    """
    Frame driver: casts one ray per pixel from the scene camera and forwards
    the clamped colors to a pixel sink.

    A sink needs put_pixel(x, y, color) and flush(). When the numba backend
    is selected and the sink also has write_array(), the frame is handed
    over in one piece instead of pixel by pixel.
    """
    def __init__(self, config: RenderConfig):
        self.config = config
        self.frame_number = 0

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    def canvas_to_viewport(self, scene, x: int, y: int) -> Vector3:
        """Maps a canvas-centered pixel to a direction through the viewport."""
        return Vector3(x * scene.viewport_size / self.width,
                       y * scene.viewport_size / self.height,
                       scene.projection_plane_z)

    def render(self, scene, sink=None):
        """
        Renders one complete frame into sink (a new FrameBuffer if None)
        and returns the sink. A sink with clear() is cleared first; the sink is
        flushed only after every pixel has been written.
        """
        if sink is None:
            sink = FrameBuffer(self.width, self.height)

        if hasattr(sink, 'clear'):
            sink.clear()

        start = time.perf_counter()
        logger.debug("Rendering frame %d: %r, %r", self.frame_number, self.config, scene)

        if self.config.backend == "numba":
            self._render_numba(scene, sink)
        else:
            self._render_python(scene, sink)

        sink.flush()
        self.frame_number += 1
        logger.info("Frame %d rendered in %.3fs (%dx%d, depth %d, %s backend)",
                    self.frame_number, time.perf_counter() - start,
                    self.width, self.height, self.config.recursion_depth, self.config.backend)
        return sink

    def _render_python(self, scene, sink) -> None:
        depth = self.config.recursion_depth
        camera = scene.camera_position
        xs, ys = canvas_coordinates(self.width, self.height)
        for x in xs:
            for y in ys:
                direction = self.canvas_to_viewport(scene, x, y)
                color = trace_ray(scene, camera, direction, 1.0, INFINITY, depth)
                sink.put_pixel(x, y, to_rgb_bytes(color))

    def _render_numba(self, scene, sink) -> None:
        # Deferred so the pure-Python path never pays for JIT compilation.
        from renderer.jit_kernels import render_array

        frame = render_array(scene, self.width, self.height, self.config.recursion_depth)
        if hasattr(sink, 'write_array'):
            sink.write_array(frame)
            return

        half_w = self.width // 2
        half_h = self.height // 2
        for row in range(self.height):
            for col in range(self.width):
                r, g, b = frame[row, col]
                sink.put_pixel(col - half_w, half_h - row - 1,
                               (int(round(r)), int(round(g)), int(round(b))))

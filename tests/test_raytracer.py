import math

import pytest

from core.vector import Vector3
from geometry.sphere import Sphere
from lighting.lights import AmbientLight, PointLight
from materials.material import Material
from renderer.framebuffer import FrameBuffer
from renderer.raytracer import RenderConfig, Renderer, clamp_recursion_depth, trace_ray
from scene.loader import default_scene
from scene.scene import Scene

ORIGIN = Vector3(0, 0, 0)
FORWARD = Vector3(0, 0, 1)


class RecordingSink:
    def __init__(self):
        self.pixels = []
        self.flushed_after = None

    def put_pixel(self, x, y, color):
        self.pixels.append((x, y, color))

    def flush(self):
        self.flushed_after = len(self.pixels)


def test_empty_scene_returns_background():
    scene = Scene(background_color=Vector3(10, 20, 30))
    assert trace_ray(scene, ORIGIN, FORWARD, 1, math.inf, 3) == Vector3(10, 20, 30)


def test_ray_away_from_spheres_returns_background(red_sphere_scene):
    color = trace_ray(red_sphere_scene, ORIGIN, Vector3(0, 0, -1), 1, math.inf, 3)
    assert color == red_sphere_scene.background_color


def test_red_sphere_under_full_ambient(red_sphere_scene):
    renderer = Renderer(RenderConfig(64, 64, recursion_depth=3))
    direction = renderer.canvas_to_viewport(red_sphere_scene, 0, 0)
    assert direction == Vector3(0, 0, 1)
    color = trace_ray(red_sphere_scene, ORIGIN, direction, 1, math.inf, 3)
    assert color == Vector3(255, 0, 0)


def test_canvas_to_viewport_scales_by_canvas_size():
    scene = Scene(viewport_size=2, projection_plane_z=3)
    renderer = Renderer(RenderConfig(100, 50))
    assert renderer.canvas_to_viewport(scene, 25, -10) == Vector3(0.5, -0.4, 3)


def reflective_scene(reflective):
    return Scene(
        spheres=[Sphere(Vector3(0, 0, 4), 1, Material(Vector3(255, 0, 0), reflective=reflective))],
        lights=[AmbientLight(1.0)],
        background_color=Vector3(0, 0, 200),
    )


def test_depth_zero_returns_local_color():
    scene = reflective_scene(0.3)
    # A second sphere behind the camera would show up in the reflection.
    scene.add(Sphere(Vector3(0, 0, -4), 1, Material(Vector3(0, 255, 0))))
    assert trace_ray(scene, ORIGIN, FORWARD, 1, math.inf, 0) == Vector3(255, 0, 0)


def test_reflection_blends_local_and_reflected_color():
    # The mirrored ray heads back past the camera into the background.
    color = trace_ray(reflective_scene(0.5), ORIGIN, FORWARD, 1, math.inf, 1)
    assert color.x == pytest.approx(127.5)
    assert color.y == pytest.approx(0)
    assert color.z == pytest.approx(100)


def test_non_reflective_surface_ignores_depth():
    scene = reflective_scene(0.0)
    assert trace_ray(scene, ORIGIN, FORWARD, 1, math.inf, 5) == Vector3(255, 0, 0)


def test_each_bounce_uses_one_level_of_depth():
    # Two facing mirrors: every extra level adds another term to the blend.
    mirror = Material(Vector3(100, 100, 100), reflective=0.5)
    scene = Scene(
        spheres=[Sphere(Vector3(0, 0, 4), 1, mirror), Sphere(Vector3(0, 0, -4), 1, mirror)],
        lights=[AmbientLight(1.0)],
        background_color=Vector3(0, 0, 0),
    )
    colors = [trace_ray(scene, ORIGIN, FORWARD, 1, math.inf, d).x for d in range(6)]
    assert colors[0] == pytest.approx(100)
    # Both mirrors are grey, so 0.5 * 100 + 0.5 * 100 keeps it at 100 forever.
    assert all(c == pytest.approx(100) for c in colors)


def test_reflected_color_comes_from_the_other_sphere():
    scene = Scene(
        spheres=[Sphere(Vector3(0, 0, 4), 1, Material(Vector3(255, 0, 0), reflective=0.5)),
                 Sphere(Vector3(0, 0, -4), 1, Material(Vector3(0, 255, 0)))],
        lights=[AmbientLight(1.0)],
    )
    color = trace_ray(scene, ORIGIN, FORWARD, 1, math.inf, 1)
    assert (color.x, color.y, color.z) == (pytest.approx(127.5), pytest.approx(127.5), pytest.approx(0))


def test_render_visits_every_pixel_once_then_flushes(red_sphere_scene):
    sink = RecordingSink()
    Renderer(RenderConfig(4, 6)).render(red_sphere_scene, sink)

    coords = [(x, y) for x, y, _ in sink.pixels]
    assert len(coords) == 24
    assert set(coords) == {(x, y) for x in range(-2, 2) for y in range(-3, 3)}
    assert sink.flushed_after == 24


def test_render_clamps_colors_before_the_sink():
    scene = Scene(
        spheres=[Sphere(Vector3(0, 0, 4), 1, Material(Vector3(300, -10, 255)))],
        lights=[AmbientLight(1.0)],
    )
    sink = RecordingSink()
    Renderer(RenderConfig(2, 2)).render(scene, sink)
    center = {(x, y): c for x, y, c in sink.pixels}[(0, 0)]
    assert center == (255, 0, 255)


def test_render_into_framebuffer(red_sphere_scene):
    framebuffer = Renderer(RenderConfig(16, 16)).render(red_sphere_scene)
    assert isinstance(framebuffer, FrameBuffer)
    assert framebuffer.frames_completed == 1
    assert framebuffer.get_pixel(0, 0) == (255, 0, 0)
    # Corner rays pass beside the sphere.
    assert framebuffer.get_pixel(-8, 7) == (200, 200, 200)


def test_default_scene_renders_lit_spheres():
    framebuffer = Renderer(RenderConfig(20, 20, recursion_depth=2)).render(default_scene())
    r, g, b = framebuffer.get_pixel(0, -4)
    # Red sphere sits just below the center of the view.
    assert r > g and r > b


def test_point_light_shading_exceeds_ambient():
    scene = Scene(
        spheres=[Sphere(Vector3(0, 0, 4), 1, Material(Vector3(100, 100, 100)))],
        lights=[AmbientLight(0.2), PointLight(0.6, Vector3(0, 0, 0))],
    )
    color = trace_ray(scene, ORIGIN, FORWARD, 1, math.inf, 0)
    assert color.x == pytest.approx(80)


@pytest.mark.parametrize("value, expected", [(-3, 0), (0, 0), (3, 3), (5, 5), (42, 5), ("4", 4)])
def test_clamp_recursion_depth(value, expected):
    assert clamp_recursion_depth(value) == expected


def test_render_config_clamps_depth_and_checks_backend():
    config = RenderConfig(10, 10, recursion_depth=9)
    assert config.recursion_depth == 5
    config.recursion_depth = -1
    assert config.recursion_depth == 0
    with pytest.raises(ValueError):
        RenderConfig(10, 10, backend="cuda")


class ClearingSink(RecordingSink):
    def __init__(self):
        super().__init__()
        self.events = []

    def clear(self):
        self.events.append("clear")

    def put_pixel(self, x, y, color):
        if not self.events or self.events[-1] != "pixel":
            self.events.append("pixel")
        super().put_pixel(x, y, color)

    def flush(self):
        self.events.append("flush")
        super().flush()


def test_render_clears_sink_before_each_frame(red_sphere_scene):
    sink = ClearingSink()
    renderer = Renderer(RenderConfig(4, 4))
    renderer.render(red_sphere_scene, sink)
    renderer.render(red_sphere_scene, sink)
    assert sink.events == ["clear", "pixel", "flush", "clear", "pixel", "flush"]


def test_framebuffer_clear_drops_stale_pixels():
    fb = FrameBuffer(4, 4)
    fb.put_pixel(1, 1, (9, 9, 9))
    fb.clear()
    assert not fb.pixels.any()

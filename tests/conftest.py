import os
import sys

import pytest

# Modules under src/ import each other as top-level packages (core, geometry, ...).
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from core.vector import Vector3
from geometry.sphere import Sphere
from lighting.lights import AmbientLight
from materials.material import Material
from scene.scene import Scene


@pytest.fixture
def red_sphere_scene():
    """One matte red sphere straight ahead of the camera, lit only by ambient light."""
    return Scene(
        spheres=[Sphere(Vector3(0, 0, 4), 1, Material(Vector3(255, 0, 0), specular=-1, reflective=0))],
        lights=[AmbientLight(1.0)],
        camera_position=Vector3(0, 0, 0),
        background_color=Vector3(200, 200, 200),
        viewport_size=1,
        projection_plane_z=1,
    )

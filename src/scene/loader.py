# scene/loader.py
import json
import logging
import os
from typing import Any, Dict

from core.vector import Vector3
from geometry.sphere import Sphere
from lighting.lights import AmbientLight, PointLight, DirectionalLight
from materials.material import Material, NO_SPECULAR
from materials.presets import ColorPresets, MaterialPresets
from scene.scene import Scene

logger = logging.getLogger(__name__)

class SceneConfigError(ValueError):
    """Raised when a scene description is malformed or breaks an invariant."""

def default_scene() -> Scene:
    """
    Four spheres (red, green, blue, and a huge yellow one acting as the
    ground) lit by ambient, point and directional lights.
    """
    scene = Scene(camera_position=Vector3(0, 0, 0),
                  background_color=ColorPresets.LIGHT_GRAY,
                  viewport_size=1.0,
                  projection_plane_z=1.0)

    scene.add(Sphere(Vector3(0, -1, 3), 1, MaterialPresets.shiny(ColorPresets.RED, specular=50, reflective=0.2)))
    scene.add(Sphere(Vector3(-2, 0, 4), 1, MaterialPresets.shiny(ColorPresets.GREEN, specular=10, reflective=0.4)))
    scene.add(Sphere(Vector3(2, 0, 4), 1, MaterialPresets.shiny(ColorPresets.BLUE, specular=500, reflective=0.3)))
    scene.add(Sphere(Vector3(0, -5001, 0), 5000, MaterialPresets.shiny(ColorPresets.YELLOW, specular=700, reflective=0.1)))

    scene.add(AmbientLight(0.2))
    scene.add(PointLight(0.6, Vector3(2, 1, 0)))
    scene.add(DirectionalLight(0.2, Vector3(1, 4, 4)))
    return scene

def _vector(value, what: str) -> Vector3:
    try:
        return Vector3.from_sequence(value)
    except (TypeError, ValueError):
        raise SceneConfigError(f"{what} must be a list of three numbers, got {value!r}")

def _number(value, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SceneConfigError(f"{what} must be a number, got {value!r}")
    return float(value)

def _sphere_from_dict(index: int, data: Dict[str, Any]) -> Sphere:
    what = f"sphere {index}"
    try:
        center = _vector(data["center"], f"{what} center")
        radius = _number(data["radius"], f"{what} radius")
        color = _vector(data["color"], f"{what} color")
    except KeyError as e:
        raise SceneConfigError(f"{what} is missing field {e.args[0]!r}")
    specular = _number(data.get("specular", NO_SPECULAR), f"{what} specular")
    reflective = _number(data.get("reflective", 0.0), f"{what} reflective")

    if radius <= 0:
        raise SceneConfigError(f"{what} radius must be positive, got {radius}")
    if specular != NO_SPECULAR and specular < 0:
        raise SceneConfigError(f"{what} specular must be -1 or non-negative, got {specular}")
    if not 0 <= reflective <= 1:
        raise SceneConfigError(f"{what} reflective must be in [0, 1], got {reflective}")

    return Sphere(center, radius, Material(color, specular=specular, reflective=reflective))

def _light_from_dict(index: int, data: Dict[str, Any]):
    what = f"light {index}"
    kind = data.get("type")
    if "intensity" not in data:
        raise SceneConfigError(f"{what} is missing field 'intensity'")
    intensity = _number(data["intensity"], f"{what} intensity")

    if kind == "ambient":
        return AmbientLight(intensity)
    if kind == "point":
        if "position" not in data:
            raise SceneConfigError(f"{what} (point) is missing field 'position'")
        return PointLight(intensity, _vector(data["position"], f"{what} position"))
    if kind == "directional":
        if "direction" not in data:
            raise SceneConfigError(f"{what} (directional) is missing field 'direction'")
        return DirectionalLight(intensity, _vector(data["direction"], f"{what} direction"))
    raise SceneConfigError(f"{what} has unknown type {kind!r}")

def scene_from_dict(data: Dict[str, Any]) -> Scene:
    """
    Builds a validated Scene from a plain dict, e.g.

        {
          "camera_position": [0, 0, 0],
          "background_color": [200, 200, 200],
          "viewport_size": 1,
          "projection_plane_z": 1,
          "spheres": [{"center": [0, -1, 3], "radius": 1, "color": [255, 0, 0],
                       "specular": 50, "reflective": 0.2}],
          "lights": [{"type": "ambient", "intensity": 0.2},
                     {"type": "point", "intensity": 0.6, "position": [2, 1, 0]}]
        }

    Raises:
        SceneConfigError: if any record is missing a field or has an
            out-of-range value.
    """
    if not isinstance(data, dict):
        raise SceneConfigError(f"Scene description must be an object, got {type(data).__name__}")

    scene = Scene(
        camera_position=_vector(data.get("camera_position", [0, 0, 0]), "camera_position"),
        background_color=_vector(data.get("background_color", [0, 0, 0]), "background_color"),
        viewport_size=_number(data.get("viewport_size", 1), "viewport_size"),
        projection_plane_z=_number(data.get("projection_plane_z", 1), "projection_plane_z"),
    )
    if scene.viewport_size <= 0:
        raise SceneConfigError(f"viewport_size must be positive, got {scene.viewport_size}")

    for i, sphere_data in enumerate(data.get("spheres", [])):
        scene.add(_sphere_from_dict(i, sphere_data))
    for i, light_data in enumerate(data.get("lights", [])):
        scene.add(_light_from_dict(i, light_data))

    return scene

def load_scene(path: str) -> Scene:
    """
    Loads a scene from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        SceneConfigError: If the JSON is invalid or describes a bad scene
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Scene file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SceneConfigError(f"Invalid JSON in {path}: {e}") from e

    scene = scene_from_dict(data)
    logger.info("Loaded %d spheres and %d lights from %s", len(scene.spheres), len(scene.lights), path)
    return scene

# scene/commands.py
import logging
from typing import Dict, Tuple

from core.vector import Vector3
from renderer.raytracer import MAX_RECURSION_DEPTH, RenderConfig, clamp_recursion_depth
from scene.scene import Scene

logger = logging.getLogger(__name__)

MOVE_STEP = 0.2
AXES = {"x": Vector3(1, 0, 0), "y": Vector3(0, 1, 0), "z": Vector3(0, 0, 1)}

class MoveSphere:
    """Translate one sphere's center by delta along an axis."""
    def __init__(self, index: int, axis: str, delta: float):
        if axis not in AXES:
            raise ValueError(f"Unknown axis {axis!r}, expected one of {sorted(AXES)}")
        self.index = index
        self.axis = axis
        self.delta = delta

    def __eq__(self, other) -> bool:
        return (isinstance(other, MoveSphere) and self.index == other.index
                and self.axis == other.axis and self.delta == other.delta)

    def __repr__(self) -> str:
        return f"MoveSphere({self.index}, {self.axis!r}, {self.delta})"

class SetRecursionDepth:
    def __init__(self, depth: int):
        self.depth = depth

    def __eq__(self, other) -> bool:
        return isinstance(other, SetRecursionDepth) and self.depth == other.depth

    def __repr__(self) -> str:
        return f"SetRecursionDepth({self.depth})"

# Key names as reported by pygame.key.name().
KEY_BINDINGS: Dict[str, object] = {
    "w": MoveSphere(0, "y", MOVE_STEP),
    "s": MoveSphere(0, "y", -MOVE_STEP),
    "a": MoveSphere(0, "x", -MOVE_STEP),
    "d": MoveSphere(0, "x", MOVE_STEP),
    "page up": MoveSphere(0, "z", MOVE_STEP),
    "page down": MoveSphere(0, "z", -MOVE_STEP),
}
KEY_BINDINGS.update({str(d): SetRecursionDepth(d) for d in range(MAX_RECURSION_DEPTH + 1)})

def command_for_key(key_name: str):
    """The command bound to a key name, or None."""
    return KEY_BINDINGS.get(key_name)

def apply_command(scene: Scene, config: RenderConfig, command) -> Tuple[Scene, RenderConfig, bool]:
    """
    Applies a command to the scene or render settings.

    Must only be called between frames. Returns (scene, config, changed);
    changed is True when the next frame would differ, so the caller should
    re-render.
    """
    if isinstance(command, MoveSphere):
        if not 0 <= command.index < len(scene.spheres):
            logger.warning("Ignoring %r: scene has %d spheres", command, len(scene.spheres))
            return scene, config, False
        sphere = scene.spheres[command.index]
        sphere.center = sphere.center + AXES[command.axis] * command.delta
        logger.debug("Sphere %d moved to %r", command.index, sphere.center)
        return scene, config, True

    if isinstance(command, SetRecursionDepth):
        depth = clamp_recursion_depth(command.depth)
        if depth == config.recursion_depth:
            return scene, config, False
        config.recursion_depth = depth
        logger.debug("Recursion depth set to %d", depth)
        return scene, config, True

    raise TypeError(f"Unknown command {command!r}")

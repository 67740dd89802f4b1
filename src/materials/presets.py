# materials/presets.py
from core.vector import Vector3
from materials.material import Material, NO_SPECULAR

class ColorPresets:
    """Common colors on a 0-255 scale."""

    RED = Vector3(255, 0, 0)
    GREEN = Vector3(0, 255, 0)
    BLUE = Vector3(0, 0, 255)
    YELLOW = Vector3(255, 255, 0)

    WHITE = Vector3(255, 255, 255)
    LIGHT_GRAY = Vector3(200, 200, 200)
    BLACK = Vector3(0, 0, 0)

class MaterialPresets:
    """Predefined surfaces with typical specular/reflective settings."""

    @staticmethod
    def matte(color: Vector3) -> Material:
        """No highlight, no reflection."""
        return Material(color, specular=NO_SPECULAR, reflective=0.0)

    @staticmethod
    def shiny(color: Vector3, specular: float = 500, reflective: float = 0.3) -> Material:
        return Material(color, specular=specular, reflective=reflective)

    @staticmethod
    def mirror(tint: Vector3 = None) -> Material:
        if tint is None:
            tint = ColorPresets.WHITE
        return Material(tint, specular=1000, reflective=0.9)

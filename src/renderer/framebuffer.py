# renderer/framebuffer.py
import logging
import os
from typing import Callable, List, Tuple

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

class FrameBuffer:
    """
    Pixel sink holding an 8-bit RGB image.

    Pixels are addressed in canvas coordinates: the origin is the image
    center and y grows upwards. Writes that fall outside the image are
    dropped silently. Listeners registered with add_listener() are called
    once per completed frame, from flush().
    """
    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 3), dtype=np.uint8)
        self.frames_completed = 0
        self._listeners: List[Callable[["FrameBuffer"], None]] = []

    def put_pixel(self, x: int, y: int, color: Tuple[int, int, int]) -> None:
        col = self.width // 2 + x
        row = self.height // 2 - y - 1

        if col < 0 or col >= self.width or row < 0 or row >= self.height:
            return

        self.pixels[row, col] = color

    def write_array(self, pixels: np.ndarray) -> None:
        """
        Copies a whole frame at once. Expects shape (height, width, 3) in
        row-major image order with values already in [0, 255].
        """
        if pixels.shape != self.pixels.shape:
            raise ValueError(f"Frame shape {pixels.shape} does not match buffer {self.pixels.shape}")
        # Round half to even, like the per-pixel path.
        self.pixels[...] = np.rint(pixels).astype(np.uint8)

    def get_pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        """Reads back a pixel by canvas coordinates."""
        col = self.width // 2 + x
        row = self.height // 2 - y - 1
        r, g, b = self.pixels[row, col]
        return int(r), int(g), int(b)

    def clear(self) -> None:
        self.pixels[...] = 0

    def add_listener(self, callback: Callable[["FrameBuffer"], None]) -> None:
        self._listeners.append(callback)

    def flush(self) -> None:
        """Marks the current frame as complete and hands it to the listeners."""
        self.frames_completed += 1
        for callback in self._listeners:
            callback(self)

    def to_surface_array(self) -> np.ndarray:
        """
        The image as a (width, height, 3) array, the axis order
        pygame.surfarray.make_surface expects.
        """
        return self.pixels.transpose(1, 0, 2)

    def save(self, path: str) -> None:
        """Writes the image to disk; the format follows the file extension."""
        directory = os.path.dirname(os.path.abspath(path))
        if not os.path.isdir(directory):
            raise FileNotFoundError(f"Output directory not found: {directory}")
        Image.fromarray(self.pixels).save(path)
        logger.info("Saved %dx%d frame to %s", self.width, self.height, path)

def canvas_coordinates(width: int, height: int):
    """
    Canvas-centered x and y ranges that cover every pixel of a
    width x height buffer: x in [-w/2, w/2), y in [-h/2, h/2) for even sizes.
    """
    xs = range(-(width // 2), width - width // 2)
    ys = range(height // 2 - height, height // 2)
    return xs, ys

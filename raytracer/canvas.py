from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from raytracer.tuples import Color


class Canvas:
    """
    Float RGB framebuffer.

    Storage is a numpy array of shape (height, width, 3), row-major like a
    PIL image, so to_array() can be handed straight to Image.fromarray.
    Colors are kept unclamped (HDR) until conversion to 8-bit.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 3), dtype=np.float64)

    def write_pixel(self, x: int, y: int, color: Color):
        self.pixels[y, x] = (color.red, color.green, color.blue)

    def pixel_at(self, x: int, y: int) -> Color:
        r, g, b = self.pixels[y, x]
        return Color(float(r), float(g), float(b))

    def fill(self, color: Color):
        self.pixels[:, :] = (color.red, color.green, color.blue)

    def downsample(self, factor: int) -> "Canvas":
        """
        New canvas with every factor x factor block averaged into one pixel.

        Width and height must both be multiples of factor.
        """
        if factor < 1 or self.width % factor or self.height % factor:
            raise ValueError(f"cannot downsample {self.width}x{self.height} by {factor}")
        out = Canvas(self.width // factor, self.height // factor)
        blocks = self.pixels.reshape(out.height, factor, out.width, factor, 3)
        out.pixels = blocks.mean(axis=(1, 3))
        return out

    def to_array(self) -> np.ndarray:
        """8-bit image (height, width, 3): channels scaled by 255, rounded and clamped."""
        return np.clip(np.rint(self.pixels * 255.0), 0, 255).astype(np.uint8)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.to_array())

    def save(self, path: Union[str, Path]) -> Path:
        """
        Write the canvas to `path`; the format follows the file extension
        (.png, .ppm, .bmp, ...). Missing parent directories are created.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.to_image().save(path)
        return path

    def __repr__(self) -> str:
        return f"Canvas({self.width}x{self.height})"

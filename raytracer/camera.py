import logging
import math
import time
from typing import Optional

from raytracer.canvas import Canvas
from raytracer.config import FIELD_OF_VIEW, MAX_DEPTH
from raytracer.matrix import IDENTITY, Matrix
from raytracer.rays import Ray
from raytracer.tuples import ORIGIN, point

logger = logging.getLogger(__name__)


class Camera:
    """
    Pinhole camera looking down -z from the origin of its own space.

    The canvas sits one unit in front of the eye. `transform` is the view
    transform (world -> camera space), usually built with view_transform().

    Derived sizes:
      - half_width / half_height: half extent of the canvas at z = -1
      - pixel_size: world-space size of one (square) pixel
    """

    def __init__(self, hsize: int, vsize: int, field_of_view: float = FIELD_OF_VIEW,
                 transform: Optional[Matrix] = None):
        if hsize < 1 or vsize < 1:
            raise ValueError("camera needs at least one pixel in each direction")
        self.hsize = hsize
        self.vsize = vsize
        self.field_of_view = field_of_view
        self.transform = transform if transform is not None else IDENTITY

        half_view = math.tan(field_of_view / 2.0)
        aspect = hsize / vsize
        if aspect >= 1.0:
            self.half_width = half_view
            self.half_height = half_view / aspect
        else:
            self.half_width = half_view * aspect
            self.half_height = half_view
        self.pixel_size = self.half_width * 2.0 / hsize

    @property
    def transform(self) -> Matrix:
        return self._transform

    @transform.setter
    def transform(self, m: Matrix):
        self._transform = m
        self._inverse = m.inverse_or_identity()

    def ray_for_pixel(self, px: float, py: float) -> Ray:
        """Ray from the eye through the centre of pixel (px, py)."""
        x_offset = (px + 0.5) * self.pixel_size
        y_offset = (py + 0.5) * self.pixel_size

        # the camera looks toward -z, so +x is to the left
        world_x = self.half_width - x_offset
        world_y = self.half_height - y_offset

        pixel = self._inverse @ point(world_x, world_y, -1.0)
        origin = self._inverse @ ORIGIN
        direction = (pixel - origin).normalize()
        return Ray(origin, direction)

    def render(self, world, antialias: bool = False, depth: int = MAX_DEPTH) -> Canvas:
        """
        Render `world` into a new canvas of hsize x vsize.

        With antialias=True the image is rendered at twice the resolution and
        each 2x2 block is averaged into one pixel (4x the rays). depth bounds
        the reflection / refraction recursion.
        """
        if antialias:
            high_res = Camera(self.hsize * 2, self.vsize * 2, self.field_of_view, self._transform)
            return high_res.render(world, depth=depth).downsample(2)

        started = time.perf_counter()
        image = Canvas(self.hsize, self.vsize)
        for y in range(self.vsize):
            for x in range(self.hsize):
                image.write_pixel(x, y, world.color_at(self.ray_for_pixel(x, y), depth))
            logger.debug("Row %d/%d done", y + 1, self.vsize)

        logger.info("Rendered %dx%d in %.2fs", self.hsize, self.vsize,
                    time.perf_counter() - started)
        return image

    def __repr__(self) -> str:
        return f"Camera({self.hsize}x{self.vsize}, fov={self.field_of_view:.4f})"

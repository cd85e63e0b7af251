import math
from typing import TYPE_CHECKING, Optional

from raytracer.matrix import IDENTITY, Matrix
from raytracer.tuples import Color, Vec4

if TYPE_CHECKING:
    from raytracer.shapes import Shape


class Pattern:
    """
    A color as a function of a point in pattern space.

    Pattern space is reached from world space in two steps:
      world -> object space (through the shape and all its parent groups)
      object -> pattern space (through this pattern's own inverse transform)
    """

    def __init__(self, a: Color, b: Color, transform: Optional[Matrix] = None):
        self.a = a
        self.b = b
        self.transform = transform if transform is not None else IDENTITY

    @property
    def transform(self) -> Matrix:
        return self._transform

    @transform.setter
    def transform(self, m: Matrix):
        self._transform = m
        self._inverse = m.inverse_or_identity()

    def pattern_at(self, p: Vec4) -> Color:
        raise NotImplementedError

    def at_object(self, shape: "Shape", world_point: Vec4) -> Color:
        object_point = shape.world_to_object(world_point)
        pattern_point = self._inverse @ object_point
        return self.pattern_at(pattern_point)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.a!r}, {self.b!r})"


class Stripe(Pattern):
    """Alternates a / b every unit along x."""

    def pattern_at(self, p: Vec4) -> Color:
        return self.a if math.floor(p.x) % 2 == 0 else self.b


class Gradient(Pattern):
    """Linear blend from a to b over each unit of x."""

    def pattern_at(self, p: Vec4) -> Color:
        fraction = p.x - math.floor(p.x)
        return self.a + (self.b - self.a) * fraction


class Ring(Pattern):
    """Concentric rings around the y axis."""

    def pattern_at(self, p: Vec4) -> Color:
        return self.a if math.floor(math.sqrt(p.x * p.x + p.z * p.z)) % 2 == 0 else self.b


class Checkers(Pattern):
    """3D checkerboard: parity of the unit cube containing the point."""

    def pattern_at(self, p: Vec4) -> Color:
        parity = math.floor(p.x) + math.floor(p.y) + math.floor(p.z)
        return self.a if parity % 2 == 0 else self.b


class TestPattern(Pattern):
    """Diagnostic pattern: the pattern-space point itself, as a color."""
    __test__ = False

    def __init__(self, transform: Optional[Matrix] = None):
        super().__init__(Color(0.0, 0.0, 0.0), Color(1.0, 1.0, 1.0), transform)

    def pattern_at(self, p: Vec4) -> Color:
        return Color(p.x, p.y, p.z)

import math
from dataclasses import dataclass

from raytracer.config import EPSILON


# ============================================================
#  Scalar helpers
# ============================================================

def approx_equal(a: float, b: float) -> bool:
    """
    Compare two reals within EPSILON.

    NaN is never equal to anything (including NaN): a NaN component means a
    degenerate computation upstream and must not be hidden by equality.
    """
    if a == b:
        # covers matching infinities
        return True
    return abs(a - b) < EPSILON


# ============================================================
#  Homogeneous tuples
# ============================================================

@dataclass(frozen=True, eq=False)
class Vec4:
    """
    4D homogeneous tuple.

    w == 1 marks a point, w == 0 marks a vector. Arithmetic keeps the w
    bookkeeping honest:
      - point - point  => vector
      - point + vector => point
      - vector + vector => vector

    Use point() and vector() to build them.
    """
    x: float
    y: float
    z: float
    w: float

    def __add__(self, o): return Vec4(self.x + o.x, self.y + o.y, self.z + o.z, self.w + o.w)
    def __sub__(self, o): return Vec4(self.x - o.x, self.y - o.y, self.z - o.z, self.w - o.w)
    def __neg__(self): return Vec4(-self.x, -self.y, -self.z, -self.w)
    def __mul__(self, k: float): return Vec4(self.x * k, self.y * k, self.z * k, self.w * k)
    def __rmul__(self, k: float): return self * k
    def __truediv__(self, k: float): return Vec4(self.x / k, self.y / k, self.z / k, self.w / k)

    def __eq__(self, o) -> bool:
        if not isinstance(o, Vec4):
            return NotImplemented
        return (approx_equal(self.x, o.x) and approx_equal(self.y, o.y)
                and approx_equal(self.z, o.z) and approx_equal(self.w, o.w))

    def __iter__(self):
        return iter((self.x, self.y, self.z, self.w))

    @property
    def is_point(self) -> bool:
        return self.w == 1.0

    @property
    def is_vector(self) -> bool:
        return self.w == 0.0

    def dot(self, o) -> float:
        """Dot product over all four components."""
        return self.x * o.x + self.y * o.y + self.z * o.z + self.w * o.w

    def cross(self, o):
        """Cross product (vectors only, result is a vector)."""
        return vector(
            self.y * o.z - self.z * o.y,
            self.z * o.x - self.x * o.z,
            self.x * o.y - self.y * o.x,
        )

    def magnitude(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.dot(self))

    def normalize(self):
        """
        Return the tuple scaled to length 1.

        Raises ValueError for a zero-length tuple: there is no direction to
        keep, so callers must not ask for one.
        """
        n = self.magnitude()
        if n == 0.0:
            raise ValueError("cannot normalize a zero-length vector")
        return self / n

    def reflect(self, normal):
        """Reflect this vector around normal."""
        return self - normal * (2.0 * self.dot(normal))

    def to_vector(self):
        """Drop the w component (w = 0)."""
        return vector(self.x, self.y, self.z)

    def rounded(self, places: int = 5):
        return Vec4(round(self.x, places), round(self.y, places),
                    round(self.z, places), round(self.w, places))


def point(x: float, y: float, z: float) -> Vec4:
    """Build a point (w = 1)."""
    return Vec4(float(x), float(y), float(z), 1.0)


def vector(x: float, y: float, z: float) -> Vec4:
    """Build a vector (w = 0)."""
    return Vec4(float(x), float(y), float(z), 0.0)


ORIGIN = point(0.0, 0.0, 0.0)


# ============================================================
#  Colors
# ============================================================

@dataclass(frozen=True, eq=False)
class Color:
    """
    RGB color, channels nominally in [0, 1] (values above 1 are allowed
    during shading and clamped when written to an image).

    Color * Color is the component-wise (Hadamard) product.
    """
    red: float
    green: float
    blue: float

    def __add__(self, o): return Color(self.red + o.red, self.green + o.green, self.blue + o.blue)
    def __sub__(self, o): return Color(self.red - o.red, self.green - o.green, self.blue - o.blue)
    def __rmul__(self, k: float): return self * k
    def __truediv__(self, k: float): return Color(self.red / k, self.green / k, self.blue / k)

    def __mul__(self, o):
        if isinstance(o, Color):
            return Color(self.red * o.red, self.green * o.green, self.blue * o.blue)
        return Color(self.red * o, self.green * o, self.blue * o)

    def __eq__(self, o) -> bool:
        if not isinstance(o, Color):
            return NotImplemented
        return (approx_equal(self.red, o.red) and approx_equal(self.green, o.green)
                and approx_equal(self.blue, o.blue))

    def __iter__(self):
        return iter((self.red, self.green, self.blue))

    def rounded(self, places: int = 5):
        return Color(round(self.red, places), round(self.green, places), round(self.blue, places))


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)

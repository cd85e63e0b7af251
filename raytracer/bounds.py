import math
from dataclasses import dataclass

from raytracer.config import EPSILON
from raytracer.kernels import check_axis
from raytracer.matrix import Matrix
from raytracer.rays import Ray
from raytracer.tuples import Vec4, point


@dataclass(frozen=True)
class Bounds:
    """
    Axis-aligned bounding box.

    The empty box has minimum at +inf and maximum at -inf, so adding any
    point to it yields a box around that point.
    """
    minimum: Vec4
    maximum: Vec4

    @staticmethod
    def empty() -> "Bounds":
        inf = math.inf
        return Bounds(point(inf, inf, inf), point(-inf, -inf, -inf))

    @staticmethod
    def infinite() -> "Bounds":
        inf = math.inf
        return Bounds(point(-inf, -inf, -inf), point(inf, inf, inf))

    def __add__(self, o) -> "Bounds":
        """Grow to include a point (Vec4) or another box."""
        if isinstance(o, Bounds):
            if o.is_empty():
                return self
            return self + o.minimum + o.maximum
        lo, hi = self.minimum, self.maximum
        return Bounds(
            point(min(lo.x, o.x), min(lo.y, o.y), min(lo.z, o.z)),
            point(max(hi.x, o.x), max(hi.y, o.y), max(hi.z, o.z)),
        )

    def is_empty(self) -> bool:
        """True when the box holds no point (minimum above maximum on some axis)."""
        lo, hi = self.minimum, self.maximum
        return lo.x > hi.x or lo.y > hi.y or lo.z > hi.z

    def is_finite(self) -> bool:
        return all(math.isfinite(c) for c in (*self.minimum, *self.maximum))

    def contains_point(self, p: Vec4) -> bool:
        lo, hi = self.minimum, self.maximum
        return (lo.x <= p.x <= hi.x
                and lo.y <= p.y <= hi.y
                and lo.z <= p.z <= hi.z)

    def contains_box(self, other: "Bounds") -> bool:
        return self.contains_point(other.minimum) and self.contains_point(other.maximum)

    def transform(self, m: Matrix) -> "Bounds":
        """
        Box around the 8 transformed corners.

        An unbounded box stays unbounded: transforming infinite corners
        would mix inf * 0 into NaN.
        """
        if not self.is_finite():
            if self.is_empty():
                return self
            return Bounds.infinite()

        lo, hi = self.minimum, self.maximum
        corners = [
            point(lo.x, lo.y, lo.z),
            point(hi.x, lo.y, lo.z),
            point(lo.x, lo.y, hi.z),
            point(hi.x, lo.y, hi.z),
            point(lo.x, hi.y, lo.z),
            point(hi.x, hi.y, lo.z),
            point(lo.x, hi.y, hi.z),
            point(hi.x, hi.y, hi.z),
        ]
        result = Bounds.empty()
        for corner in corners:
            result = result + (m @ corner)
        return result

    def intersects(self, ray: Ray) -> bool:
        """Slab test of the ray (both directions) against this box."""
        o, d = ray.origin, ray.direction
        lo, hi = self.minimum, self.maximum
        if self.is_empty():
            return False
        xtmin, xtmax = check_axis(o.x, d.x, lo.x, hi.x, EPSILON)
        ytmin, ytmax = check_axis(o.y, d.y, lo.y, hi.y, EPSILON)
        ztmin, ztmax = check_axis(o.z, d.z, lo.z, hi.z, EPSILON)
        return max(xtmin, ytmin, ztmin) <= min(xtmax, ytmax, ztmax)

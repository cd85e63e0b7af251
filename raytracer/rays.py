from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence

from raytracer.config import EPSILON
from raytracer.kernels import schlick_reflectance
from raytracer.matrix import Matrix
from raytracer.tuples import Vec4

if TYPE_CHECKING:
    from raytracer.shapes import Shape


# ============================================================
#  Rays
# ============================================================

@dataclass(frozen=True)
class Ray:
    """
    Half-line origin + t * direction.

    Rays are values: transform() returns a new ray and never touches this one.
    """
    origin: Vec4
    direction: Vec4

    def position(self, t: float) -> Vec4:
        """Point at distance t along the ray."""
        return self.origin + self.direction * t

    def transform(self, m: Matrix) -> "Ray":
        """Apply m to origin and direction (w = 0 keeps translation off the direction)."""
        return Ray(m @ self.origin, m @ self.direction)


# ============================================================
#  Intersections
# ============================================================

@dataclass(frozen=True, eq=False)
class Intersection:
    """
    One ray/surface crossing: distance t along the ray and the shape hit.

    Compared by identity: two crossings of the same shape at the same t are
    still two entries in the refractive-index walk.
    """
    t: float
    object: "Shape"
    u: Optional[float] = None
    v: Optional[float] = None


def intersections(*xs: Intersection) -> List[Intersection]:
    """Collect intersections sorted ascending by t (stable)."""
    return sorted(xs, key=lambda i: i.t)


def hit(xs: Sequence[Intersection]) -> Optional[Intersection]:
    """Nearest intersection with t >= 0, or None. Ties keep the first one."""
    best = None
    for i in xs:
        if i.t >= 0.0 and (best is None or i.t < best.t):
            best = i
    return best


# ============================================================
#  Precomputed shading state
# ============================================================

@dataclass(frozen=True)
class Comps:
    """
    Everything shading needs about one hit, computed once.

    over_point sits just above the surface (shadow and reflection rays start
    there); under_point just below it (refraction rays start there).
    n1 / n2 are the refractive indices on the incoming / outgoing side.
    """
    t: float
    object: "Shape"
    point: Vec4
    over_point: Vec4
    under_point: Vec4
    eye_vec: Vec4
    normal_vec: Vec4
    reflect_vec: Vec4
    inside: bool
    n1: float
    n2: float


def _refractive_indices(target: Intersection, xs: Sequence[Intersection]):
    """
    Walk the sorted intersections keeping a stack of the shapes the ray is
    currently inside. n1 is the index of the innermost shape before the
    target, n2 after entering/leaving the target's shape. Empty => 1.0 (vacuum).
    """
    containers: List["Shape"] = []
    n1 = n2 = 1.0
    for i in xs:
        if i is target:
            n1 = containers[-1].material.refractive_index if containers else 1.0

        for index, shape in enumerate(containers):
            if shape is i.object:
                del containers[index]
                break
        else:
            containers.append(i.object)

        if i is target:
            n2 = containers[-1].material.refractive_index if containers else 1.0
            break
    return n1, n2


def prepare_computations(intersection: Intersection, ray: Ray,
                         xs: Optional[Sequence[Intersection]] = None) -> Comps:
    """
    Build the Comps for `intersection` along `ray`.

    `xs` must be the full sorted intersection list of the ray (not only the
    hit) for n1/n2 to be right with overlapping transparent shapes; it
    defaults to the single intersection.
    """
    if xs is None:
        xs = [intersection]

    shape = intersection.object
    point = ray.position(intersection.t)
    eye_vec = -ray.direction
    normal_vec = shape.normal_at(point, intersection)

    inside = normal_vec.dot(eye_vec) < 0.0
    if inside:
        normal_vec = -normal_vec

    n1, n2 = _refractive_indices(intersection, xs)

    return Comps(
        t=intersection.t,
        object=shape,
        point=point,
        over_point=point + normal_vec * EPSILON,
        under_point=point - normal_vec * EPSILON,
        eye_vec=eye_vec,
        normal_vec=normal_vec,
        reflect_vec=ray.direction.reflect(normal_vec),
        inside=inside,
        n1=n1,
        n2=n2,
    )


def schlick(comps: Comps) -> float:
    """Fraction of light reflected at the hit (1.0 under total internal reflection)."""
    cos_i = comps.eye_vec.dot(comps.normal_vec)
    return float(schlick_reflectance(cos_i, comps.n1, comps.n2))

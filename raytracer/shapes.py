import copy
import math
import weakref
from typing import Iterable, Iterator, List, Optional

from raytracer.bounds import Bounds
from raytracer.config import EPSILON
from raytracer.kernels import check_axis, quadratic_roots, triangle_hit
from raytracer.materials import GLASS, Material
from raytracer.matrix import IDENTITY, Matrix
from raytracer.rays import Intersection, Ray
from raytracer.tuples import ORIGIN, Vec4, point, vector


class InvalidGeometryError(RuntimeError):
    """A geometric query that has no answer for this kind of shape."""


# ============================================================
#  Base shape
# ============================================================

class Shape:
    """
    A node of the scene graph: transform + material + geometry.

    Every shape works in its own object space:
      - intersect() moves the ray into object space, then calls local_intersect()
      - normal_at() moves the point into object space, asks local_normal_at(),
        then brings the normal back to world space

    A shape inside a Group keeps a weak reference to it (parent). It is only
    followed bottom-up for coordinate conversions; intersection always runs
    top-down from the group.
    """

    def __init__(self, transform: Optional[Matrix] = None,
                 material: Optional[Material] = None,
                 casts_shadow: bool = True):
        self._parent: Optional[weakref.ref] = None
        self.transform = transform if transform is not None else IDENTITY
        self.material = material if material is not None else Material()
        self.casts_shadow = casts_shadow

    # ---------------- Transform ----------------

    @property
    def transform(self) -> Matrix:
        return self._transform

    @transform.setter
    def transform(self, m: Matrix):
        self._transform = m
        self._inverse = m.inverse_or_identity()
        self._inverse_transpose = self._inverse.transpose()
        parent = self.parent
        if parent is not None:
            parent._invalidate_bounds()

    @property
    def inverse(self) -> Matrix:
        return self._inverse

    @property
    def parent(self) -> Optional["Group"]:
        return self._parent() if self._parent is not None else None

    def with_material(self, material: Material) -> "Shape":
        """Copy of this shape with another material, detached from any group."""
        clone = copy.copy(self)
        clone._parent = None
        clone.material = material
        return clone

    # ---------------- Space conversions ----------------

    def world_to_object(self, p: Vec4) -> Vec4:
        """World space -> this shape's object space, through every ancestor."""
        parent = self.parent
        if parent is not None:
            p = parent.world_to_object(p)
        return self._inverse @ p

    def object_to_world(self, p: Vec4) -> Vec4:
        """This shape's object space -> world space."""
        p = self._transform @ p
        parent = self.parent
        if parent is not None:
            p = parent.object_to_world(p)
        return p

    def normal_to_world(self, normal: Vec4) -> Vec4:
        """
        Object-space normal -> world space.

        Normals go through the inverse-transpose (the plain transform would
        skew them under non-uniform scaling). w is forced back to 0 and the
        vector renormalised at every level.
        """
        normal = (self._inverse_transpose @ normal).to_vector().normalize()
        parent = self.parent
        if parent is not None:
            normal = parent.normal_to_world(normal)
        return normal

    # ---------------- Geometry ----------------

    def intersect(self, ray: Ray) -> List[Intersection]:
        return self.local_intersect(ray.transform(self._inverse))

    def normal_at(self, world_point: Vec4, hit: Optional[Intersection] = None) -> Vec4:
        local_point = self.world_to_object(world_point)
        local_normal = self.local_normal_at(local_point, hit)
        return self.normal_to_world(local_normal)

    def local_intersect(self, ray: Ray) -> List[Intersection]:
        raise NotImplementedError

    def local_normal_at(self, p: Vec4, hit: Optional[Intersection] = None) -> Vec4:
        raise NotImplementedError

    def bounds(self) -> Bounds:
        """Bounding box in object space."""
        raise NotImplementedError

    def parent_space_bounds(self) -> Bounds:
        """Bounding box in the parent's space."""
        return self.bounds().transform(self._transform)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(transform={self._transform!r})"


# ============================================================
#  Primitives
# ============================================================

class Sphere(Shape):
    """Unit sphere centred at the object-space origin."""

    def local_intersect(self, ray: Ray) -> List[Intersection]:
        sphere_to_ray = ray.origin - ORIGIN
        d = ray.direction
        a = d.dot(d)
        b = 2.0 * d.dot(sphere_to_ray)
        c = sphere_to_ray.dot(sphere_to_ray) - 1.0
        ok, t0, t1 = quadratic_roots(a, b, c)
        if not ok:
            return []
        return [Intersection(t0, self), Intersection(t1, self)]

    def local_normal_at(self, p: Vec4, hit: Optional[Intersection] = None) -> Vec4:
        return p - ORIGIN

    def bounds(self) -> Bounds:
        return Bounds(point(-1, -1, -1), point(1, 1, 1))


def glass_sphere(**kwargs) -> Sphere:
    """Sphere made of clear glass (transparency 1, refractive index 1.5)."""
    kwargs.setdefault("material", Material(transparency=1.0, refractive_index=GLASS))
    return Sphere(**kwargs)


class Plane(Shape):
    """The xz plane (y = 0), infinite in x and z."""

    def local_intersect(self, ray: Ray) -> List[Intersection]:
        if abs(ray.direction.y) < EPSILON:
            # parallel (or coplanar): nothing to see
            return []
        t = -ray.origin.y / ray.direction.y
        return [Intersection(t, self)]

    def local_normal_at(self, p: Vec4, hit: Optional[Intersection] = None) -> Vec4:
        return vector(0, 1, 0)

    def bounds(self) -> Bounds:
        return Bounds(point(-math.inf, 0, -math.inf), point(math.inf, 0, math.inf))


class Cube(Shape):
    """Axis-aligned cube spanning [-1, 1] on every axis."""

    def local_intersect(self, ray: Ray) -> List[Intersection]:
        o, d = ray.origin, ray.direction
        xtmin, xtmax = check_axis(o.x, d.x, -1.0, 1.0, EPSILON)
        ytmin, ytmax = check_axis(o.y, d.y, -1.0, 1.0, EPSILON)
        ztmin, ztmax = check_axis(o.z, d.z, -1.0, 1.0, EPSILON)

        tmin = max(xtmin, ytmin, ztmin)
        tmax = min(xtmax, ytmax, ztmax)
        if tmin > tmax:
            return []
        return [Intersection(tmin, self), Intersection(tmax, self)]

    def local_normal_at(self, p: Vec4, hit: Optional[Intersection] = None) -> Vec4:
        # the largest component picks the face; ties go to x, then y
        ax, ay, az = abs(p.x), abs(p.y), abs(p.z)
        maxc = max(ax, ay, az)
        if maxc == ax:
            return vector(p.x, 0, 0)
        if maxc == ay:
            return vector(0, p.y, 0)
        return vector(0, 0, p.z)

    def bounds(self) -> Bounds:
        return Bounds(point(-1, -1, -1), point(1, 1, 1))


class Cylinder(Shape):
    """
    Cylinder (radius 1) or double cone around the y axis.

    Parameters:
      minimum, maximum - y range of the body (exclusive), infinite by default
      closed           - add end caps at minimum / maximum
      cone             - double-napped cone x^2 + z^2 = y^2 instead of a cylinder

    A cone's cap at height y has radius |y|.
    """

    def __init__(self, minimum: float = -math.inf, maximum: float = math.inf,
                 closed: bool = False, cone: bool = False, **kwargs):
        super().__init__(**kwargs)
        self.minimum = float(minimum)
        self.maximum = float(maximum)
        self.closed = closed
        self.cone = cone

    def _radius(self, y: float) -> float:
        return abs(y) if self.cone else 1.0

    def local_intersect(self, ray: Ray) -> List[Intersection]:
        o, d = ray.origin, ray.direction

        if self.cone:
            a = d.x * d.x - d.y * d.y + d.z * d.z
            b = 2.0 * (o.x * d.x - o.y * d.y + o.z * d.z)
            c = o.x * o.x - o.y * o.y + o.z * o.z
        else:
            a = d.x * d.x + d.z * d.z
            b = 2.0 * (o.x * d.x + o.z * d.z)
            c = o.x * o.x + o.z * o.z - 1.0

        xs: List[Intersection] = []

        def add_if_within(t: float):
            y = o.y + t * d.y
            if self.minimum < y < self.maximum:
                xs.append(Intersection(t, self))

        if abs(a) < EPSILON:
            # cylinder: ray parallel to the axis, only the caps can be hit
            # cone: ray parallel to one half of the cone, at most one body hit
            if self.cone and abs(b) >= EPSILON:
                add_if_within(-c / (2.0 * b))
        else:
            ok, t0, t1 = quadratic_roots(a, b, c)
            if ok:
                add_if_within(t0)
                add_if_within(t1)

        xs.extend(self._intersect_caps(ray))
        xs.sort(key=lambda i: i.t)
        return xs

    def _intersect_caps(self, ray: Ray) -> List[Intersection]:
        o, d = ray.origin, ray.direction
        if not self.closed or abs(d.y) < EPSILON:
            return []
        xs = []
        for limit in (self.minimum, self.maximum):
            if not math.isfinite(limit):
                continue
            t = (limit - o.y) / d.y
            x = o.x + t * d.x
            z = o.z + t * d.z
            radius = self._radius(limit)
            if x * x + z * z <= radius * radius:
                xs.append(Intersection(t, self))
        return xs

    def local_normal_at(self, p: Vec4, hit: Optional[Intersection] = None) -> Vec4:
        # square of the distance from the y axis
        dist = p.x * p.x + p.z * p.z

        top = self._radius(self.maximum)
        bottom = self._radius(self.minimum)
        if dist < top * top and p.y >= self.maximum - EPSILON:
            return vector(0, 1, 0)
        if dist < bottom * bottom and p.y <= self.minimum + EPSILON:
            return vector(0, -1, 0)

        y = 0.0
        if self.cone:
            if dist == 0.0:
                # apex: the two nappes meet, fall back to the axis
                return vector(0, 1 if p.y <= 0.0 else -1, 0)
            y = math.sqrt(dist)
            if p.y > 0.0:
                y = -y
        return vector(p.x, y, p.z)

    def bounds(self) -> Bounds:
        if self.cone:
            limit = max(abs(self.minimum), abs(self.maximum))
            return Bounds(point(-limit, self.minimum, -limit), point(limit, self.maximum, limit))
        return Bounds(point(-1, self.minimum, -1), point(1, self.maximum, 1))


class Cone(Cylinder):
    """Double cone; see Cylinder."""

    def __init__(self, minimum: float = -math.inf, maximum: float = math.inf,
                 closed: bool = False, **kwargs):
        super().__init__(minimum, maximum, closed, cone=True, **kwargs)


class Triangle(Shape):
    """
    Flat triangle p1, p2, p3.

    Edges and the face normal are computed once; the normal is the same at
    every point of the face.
    """

    def __init__(self, p1: Vec4, p2: Vec4, p3: Vec4, **kwargs):
        super().__init__(**kwargs)
        self.p1, self.p2, self.p3 = p1, p2, p3
        self.e1 = p2 - p1
        self.e2 = p3 - p1
        # ValueError for a degenerate (zero-area) triangle
        self.normal = self.e2.cross(self.e1).normalize()

    def _hit(self, ray: Ray):
        o, d, p1, e1, e2 = ray.origin, ray.direction, self.p1, self.e1, self.e2
        return triangle_hit(o.x, o.y, o.z, d.x, d.y, d.z,
                            p1.x, p1.y, p1.z,
                            e1.x, e1.y, e1.z,
                            e2.x, e2.y, e2.z,
                            EPSILON)

    def local_intersect(self, ray: Ray) -> List[Intersection]:
        ok, t, u, v = self._hit(ray)
        if not ok:
            return []
        return [Intersection(t, self, u, v)]

    def local_normal_at(self, p: Vec4, hit: Optional[Intersection] = None) -> Vec4:
        return self.normal

    def bounds(self) -> Bounds:
        return Bounds.empty() + self.p1 + self.p2 + self.p3


class SmoothTriangle(Triangle):
    """
    Triangle with a normal per vertex (from OBJ `vn` data).

    The normal at a hit is interpolated from the intersection's (u, v), so
    normal queries need the intersection.
    """

    def __init__(self, p1: Vec4, p2: Vec4, p3: Vec4,
                 n1: Vec4, n2: Vec4, n3: Vec4, **kwargs):
        super().__init__(p1, p2, p3, **kwargs)
        self.n1, self.n2, self.n3 = n1, n2, n3

    def local_normal_at(self, p: Vec4, hit: Optional[Intersection] = None) -> Vec4:
        if hit is None or hit.u is None or hit.v is None:
            raise InvalidGeometryError("smooth triangle normals need the intersection (u, v)")
        return self.n2 * hit.u + self.n3 * hit.v + self.n1 * (1.0 - hit.u - hit.v)


# ============================================================
#  Groups
# ============================================================

class Group(Shape):
    """
    Interior node of the scene graph.

    Children are intersected in the group's space (the group's transform is
    applied once, before any child's). The group's bounding box, the union
    of its children's boxes, lets a ray that misses the box skip the whole
    subtree.
    """

    def __init__(self, children: Iterable[Shape] = (), **kwargs):
        self.children: List[Shape] = []
        self._bounds: Optional[Bounds] = None
        super().__init__(**kwargs)
        for child in children:
            self.add_child(child)

    def add_child(self, shape: Shape) -> Shape:
        """
        Append `shape` and make this group its parent.

        A shape belongs to at most one group, and a group cannot contain
        itself or one of its ancestors.
        """
        if shape.parent is not None:
            raise ValueError(f"{shape!r} already belongs to a group")
        ancestor: Optional[Shape] = self
        while ancestor is not None:
            if ancestor is shape:
                raise ValueError("a group cannot contain itself or its ancestors")
            ancestor = ancestor.parent
        shape._parent = weakref.ref(self)
        self.children.append(shape)
        self._invalidate_bounds()
        return shape

    def __contains__(self, shape: Shape) -> bool:
        return any(child is shape for child in self.children)

    def __len__(self) -> int:
        return len(self.children)

    def __iter__(self) -> Iterator[Shape]:
        return iter(self.children)

    def with_material(self, material: Material) -> "Shape":
        raise TypeError("groups have no surface; set the material on the children")

    def _invalidate_bounds(self):
        self._bounds = None
        parent = self.parent
        if parent is not None:
            parent._invalidate_bounds()

    def local_intersect(self, ray: Ray) -> List[Intersection]:
        if not self.children or not self.bounds().intersects(ray):
            return []
        xs: List[Intersection] = []
        for child in self.children:
            xs.extend(child.intersect(ray))
        xs.sort(key=lambda i: i.t)
        return xs

    def local_normal_at(self, p: Vec4, hit: Optional[Intersection] = None) -> Vec4:
        raise InvalidGeometryError("a group has no surface, ask one of its children")

    def bounds(self) -> Bounds:
        if self._bounds is None:
            result = Bounds.empty()
            for child in self.children:
                result = result + child.parent_space_bounds()
            self._bounds = result
        return self._bounds


# ============================================================
#  Diagnostics
# ============================================================

class RayRecorder:
    """Collects the object-space rays a TestShape was asked to intersect."""

    def __init__(self):
        self.rays: List[Ray] = []

    def record(self, ray: Ray):
        self.rays.append(ray)

    @property
    def last(self) -> Optional[Ray]:
        return self.rays[-1] if self.rays else None


class TestShape(Shape):
    """
    Shape with no surface of its own, for checking the base-class plumbing.

    local_intersect() hands the object-space ray to the recorder and reports
    no hits; local_normal_at() returns the object-space point as a vector.
    """
    __test__ = False

    def __init__(self, recorder: Optional[RayRecorder] = None, **kwargs):
        super().__init__(**kwargs)
        self.recorder = recorder

    def local_intersect(self, ray: Ray) -> List[Intersection]:
        if self.recorder is not None:
            self.recorder.record(ray)
        return []

    def local_normal_at(self, p: Vec4, hit: Optional[Intersection] = None) -> Vec4:
        return vector(p.x, p.y, p.z)

    def bounds(self) -> Bounds:
        return Bounds(point(-1, -1, -1), point(1, 1, 1))

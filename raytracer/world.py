import math
from typing import Callable, Iterable, List, Optional

from raytracer.config import EPSILON, MAX_DEPTH
from raytracer.lights import Light, PointLight
from raytracer.materials import Material, lighting
from raytracer.matrix import scale
from raytracer.rays import Comps, Intersection, Ray, hit, prepare_computations, schlick
from raytracer.shapes import Shape, Sphere
from raytracer.tuples import BLACK, WHITE, Color, Vec4, point


class World:
    """
    A scene: top-level shapes and (at most) one light.

    The world is read-only while rendering. To change a shape, build a new
    one and swap it in with update_object().
    """

    def __init__(self, objects: Optional[Iterable[Shape]] = None,
                 light: Optional[Light] = None):
        self.objects: List[Shape] = []
        self.light = light
        if objects is not None:
            self.add_objects(objects)

    # ============================================================
    #  Scene editing
    # ============================================================

    def add_object(self, shape: Shape) -> Shape:
        if shape.parent is not None:
            raise ValueError(f"{shape!r} belongs to a group; add the group instead")
        self.objects.append(shape)
        return shape

    def add_objects(self, shapes: Iterable[Shape]):
        for shape in shapes:
            self.add_object(shape)

    def contains(self, shape: Shape) -> bool:
        """True if `shape` itself (not an equal copy) is a top-level object."""
        return any(obj is shape for obj in self.objects)

    __contains__ = contains

    def update_object(self, index: int, fn: Callable[[Shape], Shape]) -> Shape:
        """Replace objects[index] with fn(objects[index]) and return the new shape."""
        replacement = fn(self.objects[index])
        self.objects[index] = replacement
        return replacement

    # ============================================================
    #  Ray queries
    # ============================================================

    def intersect(self, ray: Ray) -> List[Intersection]:
        """Intersections of `ray` with every object, sorted by t."""
        xs: List[Intersection] = []
        for obj in self.objects:
            xs.extend(obj.intersect(ray))
        xs.sort(key=lambda i: i.t)
        return xs

    def is_shadowed(self, p: Vec4, light_position: Optional[Vec4] = None) -> bool:
        """
        Is something between p and the light?

        light_position defaults to the world light's position (area lights
        pass each of their sample points). Shapes with casts_shadow=False are
        ignored. Without a light nothing illuminates p => shadowed.
        """
        if light_position is None:
            if self.light is None:
                return True
            light_position = self.light.position

        to_light = light_position - p
        distance = to_light.magnitude()
        if distance < EPSILON:
            return False

        ray = Ray(p, to_light / distance)
        for i in self.intersect(ray):
            if i.t > 0.0 and i.object.casts_shadow:
                return i.t < distance
        return False

    # ============================================================
    #  Shading
    # ============================================================

    def shade_hit(self, comps: Comps, remaining: int = MAX_DEPTH) -> Color:
        """
        Color at a prepared hit: surface lighting plus reflection and refraction.

        A material that both reflects and transmits mixes the two with the
        Schlick reflectance instead of adding them at full strength.
        """
        material = comps.object.material

        if self.light is None:
            surface = BLACK
        else:
            intensity = self.light.intensity_at(comps.over_point, self)
            surface = lighting(material, comps.object, self.light, comps.over_point,
                               comps.eye_vec, comps.normal_vec, intensity)

        reflected = self.reflected_color(comps, remaining)
        refracted = self.refracted_color(comps, remaining)

        if material.reflective > 0.0 and material.transparency > 0.0:
            reflectance = schlick(comps)
            return surface + reflected * reflectance + refracted * (1.0 - reflectance)
        return surface + reflected + refracted

    def reflected_color(self, comps: Comps, remaining: int = MAX_DEPTH) -> Color:
        reflective = comps.object.material.reflective
        if remaining <= 0 or reflective == 0.0:
            return BLACK
        reflect_ray = Ray(comps.over_point, comps.reflect_vec)
        return self.color_at(reflect_ray, remaining - 1) * reflective

    def refracted_color(self, comps: Comps, remaining: int = MAX_DEPTH) -> Color:
        """
        Color seen through a transparent surface (Snell's law).

        Notes:
          - Total internal reflection => black (the light is all reflected,
            reflected_color accounts for it)
          - The refracted ray starts at under_point, just inside the surface
        """
        transparency = comps.object.material.transparency
        if remaining <= 0 or transparency == 0.0:
            return BLACK

        n_ratio = comps.n1 / comps.n2
        cos_i = comps.eye_vec.dot(comps.normal_vec)
        sin2_t = n_ratio * n_ratio * (1.0 - cos_i * cos_i)
        if sin2_t > 1.0:
            return BLACK

        cos_t = math.sqrt(1.0 - sin2_t)
        direction = comps.normal_vec * (n_ratio * cos_i - cos_t) - comps.eye_vec * n_ratio
        refract_ray = Ray(comps.under_point, direction)
        return self.color_at(refract_ray, remaining - 1) * transparency

    def color_at(self, ray: Ray, remaining: int = MAX_DEPTH) -> Color:
        """Color seen along `ray`; black when it hits nothing."""
        xs = self.intersect(ray)
        h = hit(xs)
        if h is None:
            return BLACK
        comps = prepare_computations(h, ray, xs)
        return self.shade_hit(comps, remaining)

    def __repr__(self) -> str:
        return f"World({len(self.objects)} objects, light={self.light!r})"


def default_world() -> World:
    """
    Two concentric spheres lit from (-10, 10, -10):
      - outer: unit sphere, color (0.8, 1.0, 0.6), diffuse 0.7, specular 0.2
      - inner: default material, scaled by 0.5
    """
    outer = Sphere(material=Material(color=Color(0.8, 1.0, 0.6), diffuse=0.7, specular=0.2))
    inner = Sphere(transform=scale(0.5, 0.5, 0.5))
    light = PointLight(point(-10, 10, -10), WHITE)
    return World([outer, inner], light)

"""Offline ray tracer: shapes, groups, Phong shading, reflection and refraction."""

from raytracer.camera import Camera
from raytracer.canvas import Canvas
from raytracer.lights import AreaLight, PointLight
from raytracer.materials import Material, lighting
from raytracer.matrix import (
    IDENTITY,
    Matrix,
    rotate_x,
    rotate_y,
    rotate_z,
    scale,
    shear,
    translate,
    view_transform,
)
from raytracer.obj_parser import ObjParser, load_obj, parse_obj
from raytracer.patterns import Checkers, Gradient, Ring, Stripe
from raytracer.rays import Intersection, Ray, hit, intersections, prepare_computations, schlick
from raytracer.shapes import (
    Cone,
    Cube,
    Cylinder,
    Group,
    InvalidGeometryError,
    Plane,
    Shape,
    SmoothTriangle,
    Sphere,
    Triangle,
    glass_sphere,
)
from raytracer.tuples import BLACK, WHITE, Color, Vec4, point, vector
from raytracer.world import World, default_world

__version__ = "0.1.0"

__all__ = [
    "AreaLight",
    "BLACK",
    "Camera",
    "Canvas",
    "Checkers",
    "Color",
    "Cone",
    "Cube",
    "Cylinder",
    "Gradient",
    "Group",
    "IDENTITY",
    "Intersection",
    "InvalidGeometryError",
    "Material",
    "Matrix",
    "ObjParser",
    "Plane",
    "PointLight",
    "Ray",
    "Ring",
    "Shape",
    "SmoothTriangle",
    "Sphere",
    "Stripe",
    "Triangle",
    "Vec4",
    "WHITE",
    "World",
    "default_world",
    "glass_sphere",
    "hit",
    "intersections",
    "lighting",
    "load_obj",
    "parse_obj",
    "point",
    "prepare_computations",
    "rotate_x",
    "rotate_y",
    "rotate_z",
    "scale",
    "schlick",
    "shear",
    "translate",
    "vector",
    "view_transform",
]

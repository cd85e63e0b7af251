"""
Demo scenes. Every builder returns (world, camera).
"""

import math
from pathlib import Path
from typing import Callable, Dict, Tuple, Union

from raytracer.camera import Camera
from raytracer.config import FIELD_OF_VIEW, RENDER_HEIGHT, RENDER_WIDTH
from raytracer.lights import AreaLight, PointLight
from raytracer.materials import DIAMOND, GLASS, Material
from raytracer.matrix import rotate_x, rotate_y, scale, translate, view_transform
from raytracer.obj_parser import load_obj
from raytracer.patterns import Checkers, Ring, Stripe
from raytracer.shapes import Cone, Cube, Cylinder, Group, Plane, Sphere, glass_sphere
from raytracer.tuples import WHITE, Color, point, vector
from raytracer.world import World

Scene = Tuple[World, Camera]


def _camera(width: int, height: int, frm, to) -> Camera:
    return Camera(width, height, FIELD_OF_VIEW,
                  view_transform(frm, to, vector(0, 1, 0)))


def three_spheres(width: int = RENDER_WIDTH, height: int = RENDER_HEIGHT) -> Scene:
    """Three matte spheres on a striped floor, one point light."""
    floor = Plane(material=Material(
        specular=0.0,
        pattern=Stripe(Color(1.0, 0.9, 0.9), Color(0.85, 0.75, 0.75), rotate_y(math.pi / 4)),
    ))

    middle = Sphere(transform=translate(-0.5, 1, 0.5),
                    material=Material(color=Color(0.1, 1, 0.5), diffuse=0.7, specular=0.3))
    right = Sphere(transform=translate(1.5, 0.5, -0.5) @ scale(0.5, 0.5, 0.5),
                   material=Material(color=Color(0.5, 1, 0.1), diffuse=0.7, specular=0.3))
    left = Sphere(transform=translate(-1.5, 0.33, -0.75) @ scale(0.33, 0.33, 0.33),
                  material=Material(color=Color(1, 0.8, 0.1), diffuse=0.7, specular=0.3))

    world = World([floor, middle, right, left], PointLight(point(-10, 10, -10), WHITE))
    return world, _camera(width, height, point(0, 1.5, -5), point(0, 1, 0))


def glass_showcase(width: int = RENDER_WIDTH, height: int = RENDER_HEIGHT) -> Scene:
    """
    Reflection / refraction demo under a soft area light:
      - checkered reflective floor
      - hollow glass sphere (air bubble inside)
      - mirror cube, capped cylinder and a diamond cone on a ring-pattern base
    """
    floor = Plane(material=Material(
        pattern=Checkers(Color(0.35, 0.35, 0.35), Color(0.65, 0.65, 0.65)),
        specular=0.0,
        reflective=0.3,
    ))

    glass = Material(color=Color(0.1, 0.1, 0.1), diffuse=0.1, specular=1.0, shininess=300.0,
                     reflective=0.9, transparency=0.9, refractive_index=GLASS)
    outer = glass_sphere(transform=translate(0, 1, 0), material=glass)
    # the bubble is a non-shadowing sphere filled with air
    bubble = Sphere(transform=translate(0, 1, 0) @ scale(0.5, 0.5, 0.5),
                    material=Material(color=WHITE, diffuse=0.0, specular=1.0, shininess=300.0,
                                      reflective=0.9, transparency=0.9, refractive_index=1.0000034),
                    casts_shadow=False)

    mirror = Cube(transform=translate(2.5, 0.75, 1.5) @ rotate_y(math.pi / 5) @ scale(0.75, 0.75, 0.75),
                  material=Material(color=Color(0.05, 0.05, 0.1), diffuse=0.2, reflective=0.8))

    pedestal = Group(transform=translate(-2.2, 0, 1))
    pedestal.add_child(Cylinder(0, 0.4, closed=True, material=Material(
        pattern=Ring(Color(0.8, 0.3, 0.2), Color(0.9, 0.8, 0.6), scale(0.2, 0.2, 0.2)),
    )))
    pedestal.add_child(Cone(-1, 0, closed=True,
                            transform=translate(0, 1.4, 0) @ scale(0.6, 1, 0.6),
                            material=Material(color=Color(0.2, 0.2, 0.3), diffuse=0.1,
                                              reflective=0.8, transparency=0.8,
                                              refractive_index=DIAMOND)))

    backdrop = Plane(transform=translate(0, 0, 8) @ rotate_x(math.pi / 2),
                     material=Material(color=Color(0.6, 0.7, 0.9), specular=0.0))

    light = AreaLight(point(-6, 8, -6), vector(2, 0, 0), 4, vector(0, 2, 0), 4, WHITE)
    world = World([floor, backdrop, outer, bubble, mirror, pedestal], light)
    return world, _camera(width, height, point(0, 2.5, -6), point(0, 0.9, 0))


def obj_scene(path: Union[str, Path], width: int = RENDER_WIDTH,
              height: int = RENDER_HEIGHT) -> Scene:
    """
    An OBJ model standing on a floor.

    The model is scaled to fit a 2-unit box and lifted so that it rests on
    y = 0.
    """
    parser = load_obj(path)
    model = parser.to_group()

    box = model.bounds()
    if box.is_finite():
        extent = max(box.maximum.x - box.minimum.x,
                     box.maximum.y - box.minimum.y,
                     box.maximum.z - box.minimum.z)
        k = 2.0 / extent if extent > 0 else 1.0
        cx = (box.minimum.x + box.maximum.x) / 2.0
        cz = (box.minimum.z + box.maximum.z) / 2.0
        model.transform = (scale(k, k, k)
                           @ translate(-cx, -box.minimum.y, -cz))

    floor = Plane(material=Material(
        pattern=Checkers(Color(0.9, 0.9, 0.9), Color(0.6, 0.6, 0.6)),
        specular=0.0,
    ))
    world = World([floor, model], PointLight(point(-6, 10, -10), WHITE))
    return world, _camera(width, height, point(0, 2.5, -5.5), point(0, 1, 0))


SCENES: Dict[str, Callable[..., Scene]] = {
    "three-spheres": three_spheres,
    "glass": glass_showcase,
}

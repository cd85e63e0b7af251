"""Tests for the world: intersection, shadows, reflection and refraction."""

import math
from dataclasses import replace

import pytest

from raytracer.lights import PointLight
from raytracer.materials import Material
from raytracer.matrix import scale, translate
from raytracer.patterns import TestPattern
from raytracer.rays import Intersection, Ray, intersections, prepare_computations
from raytracer.shapes import Cone, Group, Plane, Sphere
from raytracer.tuples import BLACK, WHITE, Color, point, vector
from raytracer.world import World


def approx_color(c: Color, expected):
    return list(c) == pytest.approx(list(expected), abs=1e-4)


class TestWorldBasics:

    def test_empty_world(self):
        w = World()
        assert w.objects == []
        assert w.light is None

    def test_default_world(self, default_world):
        w = default_world
        assert w.light == PointLight(point(-10, 10, -10), WHITE)
        outer, inner = w.objects
        assert outer.material.color == Color(0.8, 1.0, 0.6)
        assert outer.material.diffuse == 0.7
        assert outer.material.specular == 0.2
        assert inner.transform == scale(0.5, 0.5, 0.5)
        assert w.contains(outer) and inner in w

    def test_contains_is_identity(self, default_world):
        assert not default_world.contains(Sphere())

    def test_update_object_replaces(self, default_world):
        old = default_world.objects[0]
        new = default_world.update_object(0, lambda s: s.with_material(Material(ambient=1.0)))
        assert default_world.objects[0] is new
        assert new is not old
        assert new.material.ambient == 1.0
        assert old.material.ambient == 0.1

    def test_group_children_are_not_top_level(self):
        s = Sphere()
        g = Group([s])
        w = World([g])
        with pytest.raises(ValueError):
            w.add_object(s)

    def test_intersect(self, default_world):
        xs = default_world.intersect(Ray(point(0, 0, -5), vector(0, 0, 1)))
        assert [i.t for i in xs] == pytest.approx([4, 4.5, 5.5, 6])


class TestShading:

    def test_shading_an_intersection(self, default_world):
        r = Ray(point(0, 0, -5), vector(0, 0, 1))
        shape = default_world.objects[0]
        comps = prepare_computations(Intersection(4, shape), r)
        assert approx_color(default_world.shade_hit(comps), (0.38066, 0.47583, 0.28550))

    def test_shading_from_inside(self, default_world):
        default_world.light = PointLight(point(0, 0.25, 0), WHITE)
        r = Ray(point(0, 0, 0), vector(0, 0, 1))
        shape = default_world.objects[1]
        comps = prepare_computations(Intersection(0.5, shape), r)
        assert approx_color(default_world.shade_hit(comps), (0.90498, 0.90498, 0.90498))

    def test_ray_misses(self, default_world):
        assert default_world.color_at(Ray(point(0, 0, -5), vector(0, 1, 0))) == BLACK

    def test_ray_hits(self, default_world):
        c = default_world.color_at(Ray(point(0, 0, -5), vector(0, 0, 1)))
        assert approx_color(c, (0.38066, 0.47583, 0.28550))

    def test_intersection_behind_ray(self, default_world):
        default_world.update_object(0, lambda s: s.with_material(replace(s.material, ambient=1.0)))
        inner = default_world.update_object(
            1, lambda s: s.with_material(replace(s.material, ambient=1.0)))
        c = default_world.color_at(Ray(point(0, 0, 0.75), vector(0, 0, -1)))
        assert c == inner.material.color

    def test_ray_through_cone_apex(self):
        w = World([Cone()], PointLight(point(-10, 10, -10), WHITE))
        c = w.color_at(Ray(point(0, 0, -5), vector(0, 0, 1)))
        assert isinstance(c, Color)
        assert not any(math.isnan(channel) for channel in c)

    def test_rendering_is_repeatable(self, default_world):
        r = Ray(point(0, 0, -5), vector(0, 0, 1))
        assert default_world.color_at(r) == default_world.color_at(r)

    def test_no_light_means_black_surface(self):
        s = Sphere()
        w = World([s])
        comps = prepare_computations(Intersection(4, s), Ray(point(0, 0, -5), vector(0, 0, 1)))
        assert w.shade_hit(comps) == BLACK
        assert w.is_shadowed(point(0, 0, -5))


class TestShadows:

    @pytest.mark.parametrize("p, expected", [
        (point(0, 10, 0), False),
        (point(10, -10, 10), True),
        (point(-20, 20, -20), False),
        (point(-2, 2, -2), False),
    ])
    def test_is_shadowed(self, default_world, p, expected):
        assert default_world.is_shadowed(p) is expected

    @pytest.mark.parametrize("p, expected", [
        (point(-10, -10, 10), False),
        (point(10, 10, 10), True),
        (point(-20, -20, -20), False),
        (point(-5, -5, -5), False),
    ])
    def test_occlusion_between_two_points(self, default_world, p, expected):
        assert default_world.is_shadowed(p, point(-10, -10, -10)) is expected

    def test_surface_at_the_point_does_not_occlude(self):
        w = World([Plane()], PointLight(point(0, 10, 0), WHITE))
        assert not w.is_shadowed(point(0, 0, 0))
        assert w.is_shadowed(point(0, -1, 0))

    def test_shapes_can_opt_out_of_shadows(self, default_world):
        for shape in default_world.objects:
            shape.casts_shadow = False
        assert not default_world.is_shadowed(point(10, -10, 10))

    def test_shade_hit_in_shadow(self):
        s1 = Sphere()
        s2 = Sphere(transform=translate(0, 0, 10))
        w = World([s1, s2], PointLight(point(0, 0, -10), WHITE))
        r = Ray(point(0, 0, 5), vector(0, 0, 1))
        comps = prepare_computations(Intersection(4, s2), r)
        assert approx_color(w.shade_hit(comps), (0.1, 0.1, 0.1))


class TestReflection:

    def test_non_reflective_material(self, default_world):
        r = Ray(point(0, 0, 0), vector(0, 0, 1))
        shape = default_world.update_object(
            1, lambda s: s.with_material(replace(s.material, ambient=1.0)))
        comps = prepare_computations(Intersection(1, shape), r)
        assert default_world.reflected_color(comps) == BLACK

    def test_reflective_material(self, default_world, sqrt2_2):
        shape = Plane(transform=translate(0, -1, 0), material=Material(reflective=0.5))
        default_world.add_object(shape)
        r = Ray(point(0, 0, -3), vector(0, -sqrt2_2, sqrt2_2))
        comps = prepare_computations(Intersection(math.sqrt(2), shape), r)
        assert approx_color(default_world.reflected_color(comps), (0.19033, 0.23791, 0.14275))

    def test_shade_hit_with_reflective_material(self, default_world, sqrt2_2):
        shape = Plane(transform=translate(0, -1, 0), material=Material(reflective=0.5))
        default_world.add_object(shape)
        r = Ray(point(0, 0, -3), vector(0, -sqrt2_2, sqrt2_2))
        comps = prepare_computations(Intersection(math.sqrt(2), shape), r)
        assert approx_color(default_world.shade_hit(comps), (0.87676, 0.92434, 0.82917))

    def test_mutually_reflective_surfaces_terminate(self):
        lower = Plane(transform=translate(0, -1, 0), material=Material(reflective=1.0))
        upper = Plane(transform=translate(0, 1, 0), material=Material(reflective=1.0))
        w = World([lower, upper], PointLight(point(0, 0, 0), WHITE))
        c = w.color_at(Ray(point(0, 0, 0), vector(0, 1, 0)))
        assert isinstance(c, Color)

    def test_reflection_at_max_depth(self, default_world, sqrt2_2):
        shape = Plane(transform=translate(0, -1, 0), material=Material(reflective=0.5))
        default_world.add_object(shape)
        r = Ray(point(0, 0, -3), vector(0, -sqrt2_2, sqrt2_2))
        comps = prepare_computations(Intersection(math.sqrt(2), shape), r)
        assert default_world.reflected_color(comps, 0) == BLACK


class TestRefraction:

    def test_opaque_surface(self, default_world):
        shape = default_world.objects[0]
        r = Ray(point(0, 0, -5), vector(0, 0, 1))
        xs = intersections(Intersection(4, shape), Intersection(6, shape))
        comps = prepare_computations(xs[0], r, xs)
        assert default_world.refracted_color(comps, 5) == BLACK

    def test_at_max_depth(self, default_world, glass):
        shape = default_world.update_object(0, lambda s: s.with_material(glass))
        r = Ray(point(0, 0, -5), vector(0, 0, 1))
        xs = intersections(Intersection(4, shape), Intersection(6, shape))
        comps = prepare_computations(xs[0], r, xs)
        assert default_world.refracted_color(comps, 0) == BLACK

    def test_total_internal_reflection(self, default_world, glass, sqrt2_2):
        shape = default_world.update_object(0, lambda s: s.with_material(glass))
        r = Ray(point(0, 0, sqrt2_2), vector(0, 1, 0))
        xs = intersections(Intersection(-sqrt2_2, shape), Intersection(sqrt2_2, shape))
        comps = prepare_computations(xs[1], r, xs)
        assert default_world.refracted_color(comps, 5) == BLACK

    def test_refracted_ray(self, default_world):
        a = default_world.update_object(
            0, lambda s: s.with_material(replace(s.material, ambient=1.0, pattern=TestPattern())))
        b = default_world.update_object(
            1, lambda s: s.with_material(replace(s.material, transparency=1.0, refractive_index=1.5)))
        r = Ray(point(0, 0, 0.1), vector(0, 1, 0))
        xs = intersections(Intersection(-0.9899, a), Intersection(-0.4899, b),
                           Intersection(0.4899, b), Intersection(0.9899, a))
        comps = prepare_computations(xs[2], r, xs)
        assert approx_color(default_world.refracted_color(comps, 5), (0, 0.99888, 0.04722))

    def test_shade_hit_with_transparent_material(self, default_world, sqrt2_2):
        floor = Plane(transform=translate(0, -1, 0),
                      material=Material(transparency=0.5, refractive_index=1.5))
        ball = Sphere(transform=translate(0, -3.5, -0.5),
                      material=Material(color=Color(1, 0, 0), ambient=0.5))
        default_world.add_objects([floor, ball])
        r = Ray(point(0, 0, -3), vector(0, -sqrt2_2, sqrt2_2))
        xs = intersections(Intersection(math.sqrt(2), floor))
        comps = prepare_computations(xs[0], r, xs)
        assert approx_color(default_world.shade_hit(comps, 5), (0.93643, 0.68643, 0.68643))

    def test_shade_hit_blends_with_schlick(self, default_world, sqrt2_2):
        floor = Plane(transform=translate(0, -1, 0),
                      material=Material(reflective=0.5, transparency=0.5, refractive_index=1.5))
        ball = Sphere(transform=translate(0, -3.5, -0.5),
                      material=Material(color=Color(1, 0, 0), ambient=0.5))
        default_world.add_objects([floor, ball])
        r = Ray(point(0, 0, -3), vector(0, -sqrt2_2, sqrt2_2))
        xs = intersections(Intersection(math.sqrt(2), floor))
        comps = prepare_computations(xs[0], r, xs)
        assert approx_color(default_world.shade_hit(comps, 5), (0.93391, 0.69643, 0.69243))

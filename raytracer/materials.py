from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from raytracer.patterns import Pattern
from raytracer.tuples import BLACK, WHITE, Color, Vec4

if TYPE_CHECKING:
    from raytracer.lights import Light
    from raytracer.shapes import Shape


@dataclass(frozen=True)
class Material:
    """
    Surface properties of a shape (Phong coefficients + reflection/refraction).

    Materials are values: derive variants with dataclasses.replace().
    """
    color: Color = field(default_factory=lambda: WHITE)
    ambient: float = 0.1
    diffuse: float = 0.9
    specular: float = 0.9
    shininess: float = 200.0
    reflective: float = 0.0
    transparency: float = 0.0
    refractive_index: float = 1.0
    pattern: Optional[Pattern] = None


VACUUM = 1.0
AIR = 1.00029
WATER = 1.333
GLASS = 1.5
DIAMOND = 2.417


def lighting(material: Material, shape: "Shape", light: "Light", point: Vec4,
             eye_vec: Vec4, normal_vec: Vec4, intensity: float = 1.0) -> Color:
    """
    Phong shading of one point under one light.

    intensity is the fraction of the light that reaches the point (0 fully
    shadowed, 1 fully lit; area lights give values in between). It scales
    the diffuse and specular terms; ambient is always added.

    For an area light, diffuse and specular are averaged over its sample
    points, which softens highlights as well as shadows.
    """
    if material.pattern is not None:
        color = material.pattern.at_object(shape, point)
    else:
        color = material.color

    # combine the surface color with the light's color
    effective_color = color * light.intensity
    ambient = effective_color * material.ambient

    total = BLACK
    samples = 0
    for sample in light.samples():
        samples += 1
        light_vec = (sample - point).normalize()

        # cosine between light and normal; negative => light is behind the surface
        light_dot_normal = light_vec.dot(normal_vec)
        if light_dot_normal < 0.0:
            continue

        total = total + effective_color * (material.diffuse * light_dot_normal)

        # cosine between reflection and eye; non-positive => reflects away from the eye
        reflect_dot_eye = (-light_vec).reflect(normal_vec).dot(eye_vec)
        if reflect_dot_eye > 0.0:
            factor = reflect_dot_eye ** material.shininess
            total = total + light.intensity * (material.specular * factor)

    if samples == 0:
        return ambient
    return ambient + total * (intensity / samples)

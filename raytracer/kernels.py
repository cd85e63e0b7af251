"""
Scalar numeric kernels compiled with numba.

Everything here takes and returns plain floats (or small tuples of them) so
the shape classes can call straight in without building arrays.
"""

import math

from numba import njit


@njit(cache=True)
def quadratic_roots(a, b, c):
    """
    Solve a*t^2 + b*t + c = 0.

    Returns (hit, t0, t1) with t0 <= t1. A tangent ray gives t0 == t1.
    If the discriminant is negative => (False, 0.0, 0.0).
    Caller guarantees a != 0.
    """
    disc = b * b - 4.0 * a * c
    if disc < 0.0:
        return False, 0.0, 0.0
    root = math.sqrt(disc)
    t0 = (-b - root) / (2.0 * a)
    t1 = (-b + root) / (2.0 * a)
    if t0 > t1:
        return True, t1, t0
    return True, t0, t1


@njit(cache=True)
def _signed_inf(numerator, fallback):
    if numerator > 0.0:
        return math.inf
    if numerator < 0.0:
        return -math.inf
    return fallback


@njit(cache=True)
def check_axis(origin, direction, lo, hi, eps):
    """
    Slab test for one axis: entry/exit t of the ray against lo <= p <= hi.

    A direction component within eps of zero means the ray is parallel to
    the slab; the distances become +/- infinity (a ray lying exactly on a
    face plane is left unconstrained on that axis).
    """
    tmin_numerator = lo - origin
    tmax_numerator = hi - origin

    if abs(direction) >= eps:
        tmin = tmin_numerator / direction
        tmax = tmax_numerator / direction
    else:
        tmin = _signed_inf(tmin_numerator, -math.inf)
        tmax = _signed_inf(tmax_numerator, math.inf)

    if tmin > tmax:
        return tmax, tmin
    return tmin, tmax


@njit(cache=True)
def triangle_hit(ox, oy, oz, dx, dy, dz,
                 p1x, p1y, p1z,
                 e1x, e1y, e1z,
                 e2x, e2y, e2z,
                 eps):
    """
    Moller-Trumbore ray/triangle intersection.

    Returns (hit, t, u, v). (u, v) are the barycentric weights of p2 and p3.
    A ray parallel to the triangle plane (|det| < eps) misses.
    """
    # dir x e2
    cx = dy * e2z - dz * e2y
    cy = dz * e2x - dx * e2z
    cz = dx * e2y - dy * e2x
    det = e1x * cx + e1y * cy + e1z * cz
    if abs(det) < eps:
        return False, 0.0, 0.0, 0.0

    f = 1.0 / det
    sx, sy, sz = ox - p1x, oy - p1y, oz - p1z
    u = f * (sx * cx + sy * cy + sz * cz)
    if u < 0.0 or u > 1.0:
        return False, 0.0, 0.0, 0.0

    # (origin - p1) x e1
    qx = sy * e1z - sz * e1y
    qy = sz * e1x - sx * e1z
    qz = sx * e1y - sy * e1x
    v = f * (dx * qx + dy * qy + dz * qz)
    if v < 0.0 or u + v > 1.0:
        return False, 0.0, 0.0, 0.0

    t = f * (e2x * qx + e2y * qy + e2z * qz)
    return True, t, u, v


@njit(cache=True)
def schlick_reflectance(cos_i, n1, n2):
    """
    Schlick approximation of the Fresnel reflectance.

    cos_i is the cosine between eye and normal vectors. Under total internal
    reflection (n1 > n2 and sin^2(theta_t) > 1) everything is reflected => 1.0.
    """
    cos = cos_i
    if n1 > n2:
        n = n1 / n2
        sin2_t = n * n * (1.0 - cos * cos)
        if sin2_t > 1.0:
            return 1.0
        cos = math.sqrt(1.0 - sin2_t)
    r0 = ((n1 - n2) / (n1 + n2)) ** 2
    return r0 + (1.0 - r0) * (1.0 - cos) ** 5

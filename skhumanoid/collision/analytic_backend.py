"""Closed-form distance routines for primitive shapes.

Every routine returns the signed distance together with the closest
point on each shape in world frame. Positive distance means separation,
negative means penetration.

Example
-------
>>> import numpy as np
>>> from skhumanoid.collision import Sphere
>>> from skhumanoid.collision.analytic_backend import closest_points
>>> s1 = Sphere(center=np.array([0.0, 0.0, 0.0]), radius=0.5)
>>> s2 = Sphere(center=np.array([2.0, 0.0, 0.0]), radius=0.5)
>>> dist, p1, p2 = closest_points(s1, s2)  # dist is 1.0
"""

import numpy as np

from skhumanoid.collision.backend import NarrowPhaseBackend
from skhumanoid.collision.geometry import Box
from skhumanoid.collision.geometry import Capsule
from skhumanoid.collision.geometry import Sphere


_EPS = 1e-10


def _direction(diff, fallback=(1.0, 0.0, 0.0)):
    norm = np.linalg.norm(diff)
    if norm < _EPS:
        return np.array(fallback, dtype=np.float64), 0.0
    return diff / norm, norm


def closest_point_on_segment(p, q, target):
    """Closest point on segment pq to target."""
    segment = q - p
    seg_len_sq = np.dot(segment, segment)
    if seg_len_sq < _EPS:
        return p.copy()
    t = np.clip(np.dot(target - p, segment) / seg_len_sq, 0.0, 1.0)
    return p + t * segment


def closest_points_segment_segment(p1, q1, p2, q2):
    """Closest points between segments p1q1 and p2q2.

    Degenerate segments (points) are handled.

    Returns
    -------
    c1 : numpy.ndarray (3,)
        Point on the first segment.
    c2 : numpy.ndarray (3,)
        Point on the second segment.
    """
    d1 = q1 - p1
    d2 = q2 - p2
    r = p1 - p2
    a = np.dot(d1, d1)
    e = np.dot(d2, d2)
    f = np.dot(d2, r)

    if a < _EPS and e < _EPS:
        return p1.copy(), p2.copy()
    if a < _EPS:
        s = 0.0
        t = np.clip(f / e, 0.0, 1.0)
    else:
        c = np.dot(d1, r)
        if e < _EPS:
            t = 0.0
            s = np.clip(-c / a, 0.0, 1.0)
        else:
            b = np.dot(d1, d2)
            denom = a * e - b * b
            if denom > _EPS:
                s = np.clip((b * f - c * e) / denom, 0.0, 1.0)
            else:
                # parallel segments
                s = 0.0
            t = (b * s + f) / e
            if t < 0.0:
                t = 0.0
                s = np.clip(-c / a, 0.0, 1.0)
            elif t > 1.0:
                t = 1.0
                s = np.clip((b - c) / a, 0.0, 1.0)
    return p1 + s * d1, p2 + t * d2


def _point_radius_pair(c1, r1, c2, r2):
    u, dist = _direction(c2 - c1)
    return dist - r1 - r2, c1 + r1 * u, c2 - r2 * u


def sphere_sphere_closest_points(s1, s2):
    """Signed distance and witness points between two spheres.

    Parameters
    ----------
    s1 : Sphere
        First sphere.
    s2 : Sphere
        Second sphere.

    Returns
    -------
    tuple(float, numpy.ndarray, numpy.ndarray)
        Signed distance, point on s1, point on s2.
    """
    return _point_radius_pair(s1.center, s1.radius, s2.center, s2.radius)


def capsule_capsule_closest_points(c1, c2):
    """Signed distance and witness points between two capsules.

    A capsule is defined by a line segment (p1 to p2) and a radius.
    """
    closest1, closest2 = closest_points_segment_segment(
        c1.p1, c1.p2, c2.p1, c2.p2)
    return _point_radius_pair(closest1, c1.radius, closest2, c2.radius)


def sphere_capsule_closest_points(sphere, capsule):
    closest = closest_point_on_segment(capsule.p1, capsule.p2, sphere.center)
    return _point_radius_pair(sphere.center, sphere.radius,
                              closest, capsule.radius)


def _box_frame(box):
    if box.rotation is None:
        return np.eye(3)
    return np.asarray(box.rotation)


def _point_box_closest(point, box):
    """Signed distance from a point to a box and the closest box point.

    Returns
    -------
    dist : float
        Positive outside, negative inside.
    closest : numpy.ndarray (3,)
        Closest point on the box surface in world frame.
    normal : numpy.ndarray (3,)
        Unit vector from the box surface towards the point.
    """
    rotation = _box_frame(box)
    local = np.matmul(rotation.T, point - box.center)
    clamped = np.clip(local, -box.half_extents, box.half_extents)
    diff = local - clamped
    dist = np.linalg.norm(diff)
    if dist > _EPS:
        normal_local = diff / dist
    else:
        # Inside: push out through the nearest face.
        face_dists = box.half_extents - np.abs(local)
        axis = int(np.argmin(face_dists))
        sign = 1.0 if local[axis] >= 0 else -1.0
        clamped = local.copy()
        clamped[axis] = sign * box.half_extents[axis]
        normal_local = np.zeros(3)
        normal_local[axis] = sign
        dist = -face_dists[axis]
    closest = box.center + np.matmul(rotation, clamped)
    normal = np.matmul(rotation, normal_local)
    return dist, closest, normal


def sphere_box_closest_points(sphere, box):
    """Signed distance and witness points between a sphere and a box.

    Returns
    -------
    tuple(float, numpy.ndarray, numpy.ndarray)
        Signed distance, point on sphere, point on box.
    """
    dist, closest, normal = _point_box_closest(sphere.center, box)
    return (dist - sphere.radius,
            sphere.center - sphere.radius * normal,
            closest)


def capsule_box_closest_points(capsule, box):
    """Signed distance and witness points between a capsule and a box.

    Uses iterative closest point refinement.
    """
    rotation = _box_frame(box)
    pt_seg = closest_point_on_segment(capsule.p1, capsule.p2, box.center)
    for _ in range(2):
        local = np.matmul(rotation.T, pt_seg - box.center)
        pt_box = box.center + np.matmul(
            rotation, np.clip(local, -box.half_extents, box.half_extents))
        pt_seg = closest_point_on_segment(capsule.p1, capsule.p2, pt_box)
    return sphere_box_closest_points(
        Sphere(center=pt_seg, radius=capsule.radius), box)


def _swap(result):
    dist, point_a, point_b = result
    return dist, point_b, point_a


def closest_points(geom1, geom2):
    """Compute signed distance and witness points of two geometries.

    Automatically dispatches to the appropriate routine based on
    geometry types.

    Raises
    ------
    NotImplementedError
        If the geometry pair is not supported.
    """
    type1, type2 = type(geom1).__name__, type(geom2).__name__

    if isinstance(geom1, Sphere) and isinstance(geom2, Sphere):
        return sphere_sphere_closest_points(geom1, geom2)

    if isinstance(geom1, Capsule) and isinstance(geom2, Capsule):
        return capsule_capsule_closest_points(geom1, geom2)

    if isinstance(geom1, Sphere) and isinstance(geom2, Capsule):
        return sphere_capsule_closest_points(geom1, geom2)
    if isinstance(geom1, Capsule) and isinstance(geom2, Sphere):
        return _swap(sphere_capsule_closest_points(geom2, geom1))

    if isinstance(geom1, Sphere) and isinstance(geom2, Box):
        return sphere_box_closest_points(geom1, geom2)
    if isinstance(geom1, Box) and isinstance(geom2, Sphere):
        return _swap(sphere_box_closest_points(geom2, geom1))

    if isinstance(geom1, Capsule) and isinstance(geom2, Box):
        return capsule_box_closest_points(geom1, geom2)
    if isinstance(geom1, Box) and isinstance(geom2, Capsule):
        return _swap(capsule_box_closest_points(geom2, geom1))

    raise NotImplementedError(
        f"Distance computation not implemented for {type1}-{type2} pair"
    )


class _AnalyticObject(object):

    __slots__ = ('geometry', 'world_geometry')

    def __init__(self, geometry):
        self.geometry = geometry
        self.world_geometry = geometry


class AnalyticBackend(NarrowPhaseBackend):
    """Pure NumPy backend for sphere, capsule and box shapes.

    Box-box and mesh pairs are not supported and raise
    NotImplementedError from :meth:`distance`.
    """

    name = 'analytic'

    def create_object(self, geometry):
        return _AnalyticObject(geometry)

    def set_transform(self, obj, coords):
        obj.world_geometry = obj.geometry.transform(
            coords.worldpos(), coords.worldrot())

    def distance(self, obj_a, obj_b):
        dist, point_a, point_b = closest_points(
            obj_a.world_geometry, obj_b.world_geometry)
        return float(dist), point_a, point_b

import unittest

import numpy as np
from numpy import testing

from skhumanoid.collision import AnalyticBackend
from skhumanoid.collision import Box
from skhumanoid.collision import Capsule
from skhumanoid.collision import closest_points
from skhumanoid.collision import Mesh
from skhumanoid.collision import Sphere
from skhumanoid.collision.analytic_backend import \
    closest_points_segment_segment
from skhumanoid.coordinates import Coordinates
from skhumanoid.coordinates import rotation_matrix


def _sphere(center, radius):
    return Sphere(center=np.array(center, dtype=np.float64), radius=radius)


def _capsule(p1, p2, radius):
    return Capsule(p1=np.array(p1, dtype=np.float64),
                   p2=np.array(p2, dtype=np.float64), radius=radius)


class TestClosestPoints(unittest.TestCase):

    def test_sphere_sphere(self):
        dist, p1, p2 = closest_points(_sphere([0, 0, 0], 0.1),
                                      _sphere([0.5, 0, 0], 0.1))
        self.assertAlmostEqual(dist, 0.3)
        testing.assert_almost_equal(p1, [0.1, 0, 0])
        testing.assert_almost_equal(p2, [0.4, 0, 0])

        dist, _, _ = closest_points(_sphere([0, 0, 0], 0.5),
                                    _sphere([0.5, 0, 0], 0.5))
        self.assertAlmostEqual(dist, -0.5)

    def test_segment_segment(self):
        c1, c2 = closest_points_segment_segment(
            np.array([-1.0, 0, 0]), np.array([1.0, 0, 0]),
            np.array([0.5, -1.0, 1.0]), np.array([0.5, 1.0, 1.0]))
        testing.assert_almost_equal(c1, [0.5, 0, 0])
        testing.assert_almost_equal(c2, [0.5, 0, 1])

        c1, c2 = closest_points_segment_segment(
            np.zeros(3), np.zeros(3), np.ones(3), np.ones(3))
        testing.assert_array_equal(c1, [0, 0, 0])
        testing.assert_array_equal(c2, [1, 1, 1])

        c1, c2 = closest_points_segment_segment(
            np.array([0.0, 0, 0]), np.array([0.0, 0, 0]),
            np.array([-1.0, 1.0, 0]), np.array([1.0, 1.0, 0]))
        testing.assert_almost_equal(c2, [0, 1, 0])

    def test_capsule_capsule(self):
        dist, p1, p2 = closest_points(
            _capsule([-1, 0, 0], [1, 0, 0], 0.1),
            _capsule([0, -1, 1], [0, 1, 1], 0.1))
        self.assertAlmostEqual(dist, 0.8)
        testing.assert_almost_equal(p1, [0, 0, 0.1])
        testing.assert_almost_equal(p2, [0, 0, 0.9])

        dist, p1, p2 = closest_points(
            _capsule([0, 0, -1], [0, 0, 1], 0.1),
            _capsule([1, 0, -1], [1, 0, 1], 0.2))
        self.assertAlmostEqual(dist, 0.7)
        self.assertAlmostEqual(p1[0], 0.1)
        self.assertAlmostEqual(p2[0], 0.8)
        self.assertAlmostEqual(p1[2], p2[2])

    def test_sphere_capsule(self):
        sphere = _sphere([0, 0, 2], 0.5)
        capsule = _capsule([0, 0, -1], [0, 0, 1], 0.1)
        dist, p1, p2 = closest_points(sphere, capsule)
        self.assertAlmostEqual(dist, 0.4)
        testing.assert_almost_equal(p1, [0, 0, 1.5])
        testing.assert_almost_equal(p2, [0, 0, 1.1])

        dist, p1, p2 = closest_points(capsule, sphere)
        self.assertAlmostEqual(dist, 0.4)
        testing.assert_almost_equal(p1, [0, 0, 1.1])
        testing.assert_almost_equal(p2, [0, 0, 1.5])

    def test_sphere_box(self):
        box = Box.from_extents([1.0, 1.0, 1.0])
        dist, p1, p2 = closest_points(_sphere([1, 0, 0], 0.1), box)
        self.assertAlmostEqual(dist, 0.4)
        testing.assert_almost_equal(p1, [0.9, 0, 0])
        testing.assert_almost_equal(p2, [0.5, 0, 0])

        dist, p1, p2 = closest_points(box, _sphere([1, 0, 0], 0.1))
        testing.assert_almost_equal(p1, [0.5, 0, 0])
        testing.assert_almost_equal(p2, [0.9, 0, 0])

        dist, _, p2 = closest_points(_sphere([0.4, 0, 0], 0.05), box)
        self.assertAlmostEqual(dist, -0.15)
        testing.assert_almost_equal(p2, [0.5, 0, 0])

    def test_sphere_rotated_box(self):
        box = Box(center=np.zeros(3), half_extents=np.array([0.5, 0.5, 0.5]),
                  rotation=rotation_matrix(np.pi / 4.0, 'z'))
        dist, _, p2 = closest_points(_sphere([1, 0, 0], 0.0), box)
        self.assertAlmostEqual(dist, 1.0 - np.sqrt(0.5))
        testing.assert_almost_equal(p2, [np.sqrt(0.5), 0, 0])

    def test_capsule_box(self):
        box = Box.from_extents([1.0, 1.0, 1.0])
        capsule = _capsule([1, 0, -1], [1, 0, 1], 0.1)
        dist, p1, p2 = closest_points(capsule, box)
        self.assertAlmostEqual(dist, 0.4)
        self.assertAlmostEqual(p1[0], 0.9)
        self.assertAlmostEqual(p2[0], 0.5)

        dist, p1, p2 = closest_points(
            box, _capsule([-1, 0, 2], [1, 0, 2], 0.2))
        self.assertAlmostEqual(dist, 1.3)
        self.assertAlmostEqual(p1[2], 0.5)
        self.assertAlmostEqual(p2[2], 1.8)

    def test_unsupported_pairs(self):
        box = Box.from_extents([1.0, 1.0, 1.0])
        mesh = Mesh(vertices=np.eye(3), triangles=np.array([[0, 1, 2]]))
        with self.assertRaises(NotImplementedError):
            closest_points(box, box)
        with self.assertRaises(NotImplementedError):
            closest_points(mesh, _sphere([0, 0, 0], 0.1))


class TestAnalyticBackend(unittest.TestCase):

    def test_distance(self):
        backend = AnalyticBackend()
        a = backend.create_object(Sphere.from_radius(0.1))
        b = backend.create_object(
            Capsule.from_radius_and_length(0.1, 0.4))
        backend.set_transform(a, Coordinates(pos=[0.5, 0, 0]))
        backend.set_transform(b, Coordinates().rotate(np.pi / 2.0, 'y'))
        dist, p1, p2 = backend.distance(a, b)
        self.assertAlmostEqual(dist, 0.1)
        testing.assert_almost_equal(p1, [0.4, 0, 0])
        testing.assert_almost_equal(p2, [0.3, 0, 0])

        backend.set_transform(a, Coordinates(pos=[1.0, 0, 0]))
        dist, _, _ = backend.distance(a, b)
        self.assertAlmostEqual(dist, 0.6)

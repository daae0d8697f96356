import unittest

import numpy as np
from numpy import testing
import pytest
import trimesh

from skhumanoid.collision import AnalyticBackend
from skhumanoid.collision import Box
from skhumanoid.collision import Capsule
from skhumanoid.collision import FclBackend
from skhumanoid.collision import Mesh
from skhumanoid.collision import Sphere
from skhumanoid.coordinates import Coordinates


pytest.importorskip('fcl')


class TestFclBackend(unittest.TestCase):

    @classmethod
    def setup_class(cls):
        cls.backend = FclBackend()

    def test_invalid_solver(self):
        with self.assertRaises(ValueError):
            FclBackend(gjk_solver='epa')

    def test_sphere_sphere(self):
        a = self.backend.create_object(Sphere.from_radius(0.1))
        b = self.backend.create_object(Sphere.from_radius(0.1))
        self.backend.set_transform(b, Coordinates(pos=[0.5, 0, 0]))
        dist, p1, p2 = self.backend.distance(a, b)
        self.assertAlmostEqual(dist, 0.3, places=5)
        testing.assert_almost_equal(p1, [0.1, 0, 0], decimal=4)
        testing.assert_almost_equal(p2, [0.4, 0, 0], decimal=4)

    def test_capsule_axis(self):
        capsule = self.backend.create_object(Capsule(
            p1=np.array([-1.0, 0, 0]), p2=np.array([1.0, 0, 0]),
            radius=0.1))
        sphere = self.backend.create_object(Sphere.from_radius(0.1))
        self.backend.set_transform(capsule, Coordinates())

        self.backend.set_transform(sphere, Coordinates(pos=[1.5, 0, 0]))
        dist, _, _ = self.backend.distance(capsule, sphere)
        self.assertAlmostEqual(dist, 0.3, places=4)

        self.backend.set_transform(sphere, Coordinates(pos=[0, 0, 1.0]))
        dist, p1, p2 = self.backend.distance(capsule, sphere)
        self.assertAlmostEqual(dist, 0.8, places=4)
        testing.assert_almost_equal(p1, [0, 0, 0.1], decimal=3)
        testing.assert_almost_equal(p2, [0, 0, 0.9], decimal=3)

    def test_offset_sphere(self):
        a = self.backend.create_object(
            Sphere(center=np.array([0.2, 0, 0]), radius=0.1))
        b = self.backend.create_object(Sphere.from_radius(0.1))
        self.backend.set_transform(a, Coordinates())
        self.backend.set_transform(b, Coordinates(pos=[0.5, 0, 0]))
        dist, _, _ = self.backend.distance(a, b)
        self.assertAlmostEqual(dist, 0.1, places=5)

    def test_mesh(self):
        box = trimesh.creation.box(extents=[1.0, 1.0, 1.0])
        mesh = self.backend.create_object(
            Mesh(vertices=np.array(box.vertices),
                 triangles=np.array(box.faces)))
        sphere = self.backend.create_object(Sphere.from_radius(0.1))
        self.backend.set_transform(mesh, Coordinates(pos=[0, 0, 1.0]))
        self.backend.set_transform(sphere, Coordinates(pos=[0, 0, 2.0]))
        dist, _, _ = self.backend.distance(mesh, sphere)
        self.assertAlmostEqual(dist, 0.4, places=3)

    def test_agrees_with_analytic(self):
        analytic = AnalyticBackend()
        geometries = [
            Sphere.from_radius(0.1),
            Capsule.from_radius_and_length(0.05, 0.3),
            Box.from_extents([0.2, 0.3, 0.4]),
        ]
        poses = [
            Coordinates(pos=[0, 0, 0]),
            Coordinates(pos=[0.6, 0.1, 0]),
            Coordinates(pos=[0, 0.1, 1.2]),
        ]
        for i, geometry_a in enumerate(geometries):
            for j, geometry_b in enumerate(geometries):
                if isinstance(geometry_a, Box) \
                   and isinstance(geometry_b, Box):
                    continue
                results = []
                for backend in (self.backend, analytic):
                    a = backend.create_object(geometry_a)
                    b = backend.create_object(geometry_b)
                    backend.set_transform(a, poses[i])
                    backend.set_transform(b, poses[(i + 1 + j % 2) % 3])
                    results.append(backend.distance(a, b)[0])
                self.assertAlmostEqual(results[0], results[1], places=3)

    def test_overlap_is_negative(self):
        a = self.backend.create_object(Sphere.from_radius(0.1))
        b = self.backend.create_object(Sphere.from_radius(0.1))
        self.backend.set_transform(b, Coordinates(pos=[0.15, 0, 0]))
        dist, _, _ = self.backend.distance(a, b)
        self.assertLess(dist, 0)

import unittest

import numpy as np
from numpy import testing

from skhumanoid.collision import AnalyticBackend
from skhumanoid.collision import LinkDistanceComputer
from skhumanoid.collision import use_backend
from skhumanoid.collision.analytic_backend import closest_point_on_segment
from skhumanoid.coordinates import Coordinates
from skhumanoid.model import CollisionDescriptor
from skhumanoid.model import LinkDescription
from skhumanoid.model import PoseTableModel


def sphere_model(positions, disabled_pairs=None, radius=0.1,
                 extra_links=()):
    links = [LinkDescription(name, CollisionDescriptor.sphere(radius))
             for name in positions]
    model = PoseTableModel(list(links) + list(extra_links),
                           disabled_pairs=disabled_pairs)
    for name, pos in positions.items():
        model.set_link_pose(name, Coordinates(pos=pos))
    return model


class TestLinkDistanceComputer(unittest.TestCase):

    def test_two_spheres(self):
        model = sphere_model({'B': [0.5, 0, 0], 'A': [0, 0, 0]})
        computer = LinkDistanceComputer(model, backend='analytic')
        result = computer.get_link_distances()
        self.assertEqual(len(result), 1)
        self.assertEqual(result[0].link_names, ('A', 'B'))
        self.assertAlmostEqual(result[0].distance, 0.3)
        link_a_T_p, link_b_T_p = result[0].transforms
        testing.assert_almost_equal(link_a_T_p.translation, [0.1, 0, 0])
        testing.assert_almost_equal(link_b_T_p.translation, [-0.1, 0, 0])

    def test_determinism(self):
        model = sphere_model({'A': [0, 0, 0], 'B': [0.5, 0, 0],
                              'C': [0, 0.7, 0]})
        computer = LinkDistanceComputer(model, backend=AnalyticBackend())
        first = computer.get_link_distances()
        second = computer.get_link_distances()
        self.assertEqual([(d.link_names, d.distance) for d in first],
                         [(d.link_names, d.distance) for d in second])
        for d1, d2 in zip(first, second):
            for c1, c2 in zip(d1.transforms, d2.transforms):
                testing.assert_array_equal(c1.translation, c2.translation)

    def test_threshold(self):
        model = sphere_model({'A': [0, 0, 0], 'B': [0.5, 0, 0],
                              'C': [2.0, 0, 0]})
        computer = LinkDistanceComputer(model, backend='analytic')

        result = computer.get_link_distances()
        self.assertEqual([d.link_names for d in result],
                         [('A', 'B'), ('B', 'C'), ('A', 'C')])
        testing.assert_almost_equal([d.distance for d in result],
                                    [0.3, 1.3, 1.8])

        result = computer.get_link_distances(threshold=1.0)
        self.assertEqual([d.link_names for d in result], [('A', 'B')])

        result = computer.get_link_distances(threshold=0.3 - 1e-9)
        self.assertEqual(result, [])

    def test_tie_break(self):
        model = sphere_model({'C': [-0.5, 0, 0], 'B': [0.5, 0, 0],
                              'A': [0, 0, 0]})
        computer = LinkDistanceComputer(model, backend='analytic')
        result = computer.get_link_distances()
        self.assertEqual([d.link_names for d in result],
                         [('A', 'B'), ('A', 'C'), ('B', 'C')])

    def test_default_blacklist(self):
        model = sphere_model(
            {'A': [0, 0, 0], 'B': [0.5, 0, 0], 'C': [2.0, 0, 0]},
            extra_links=[LinkDescription('base')])
        computer = LinkDistanceComputer(model, backend='analytic')
        self.assertEqual(computer.pairs_to_check(),
                         [('A', 'B'), ('A', 'C'), ('B', 'C')])
        self.assertEqual(
            computer.allowed_collision_matrix.entry_names(),
            ['A', 'B', 'C', 'base'])

    def test_whitelist_and_blacklist_replace_state(self):
        model = sphere_model(
            {'A': [0, 0, 0], 'B': [0.5, 0, 0], 'C': [2.0, 0, 0]},
            extra_links=[LinkDescription('base')])
        computer = LinkDistanceComputer(model, backend='analytic')

        computer.set_collision_whitelist([('C', 'A'), ('A', 'base'),
                                          ('A', 'unknown'), ('B', 'B')])
        self.assertEqual(computer.pairs_to_check(), [('A', 'C')])
        result = computer.get_link_distances()
        self.assertEqual([d.link_names for d in result], [('A', 'C')])

        computer.set_collision_blacklist([('B', 'A')])
        self.assertEqual(computer.pairs_to_check(),
                         [('A', 'C'), ('B', 'C')])

        computer.set_collision_whitelist([('A', 'B')])
        self.assertEqual(computer.pairs_to_check(), [('A', 'B')])

        computer.set_collision_whitelist([])
        self.assertEqual(computer.get_link_distances(), [])

        computer.set_collision_blacklist([])
        self.assertEqual(len(computer.get_link_distances()), 3)

    def test_disabled_pairs(self):
        model = sphere_model(
            {'A': [0, 0, 0], 'B': [0.5, 0, 0], 'C': [2.0, 0, 0]},
            disabled_pairs=[('B', 'A')])
        computer = LinkDistanceComputer(model, backend='analytic')
        self.assertEqual(computer.pairs_to_check(),
                         [('A', 'C'), ('B', 'C')])

        computer.set_collision_whitelist([('A', 'B'), ('B', 'C')])
        self.assertEqual(computer.pairs_to_check(), [('B', 'C')])

        computer.set_collision_blacklist([('A', 'C')])
        self.assertEqual(computer.pairs_to_check(), [('B', 'C')])

    def test_poses_are_updated(self):
        model = sphere_model({'A': [0, 0, 0], 'B': [0.5, 0, 0]})
        computer = LinkDistanceComputer(model, backend='analytic')
        self.assertAlmostEqual(computer.get_link_distances()[0].distance,
                               0.3)
        model.set_link_pose('B', Coordinates(pos=[0, 0, 1.0]))
        result = computer.get_link_distances()
        self.assertAlmostEqual(result[0].distance, 0.8)
        testing.assert_almost_equal(result[0].transforms[0].translation,
                                    [0, 0, 0.1])

    def test_witness_in_link_frame(self):
        links = [
            LinkDescription('A', CollisionDescriptor.sphere(0.1),
                            Coordinates(pos=[0, 0, 0.2])),
            LinkDescription('B', CollisionDescriptor.sphere(0.1)),
        ]
        model = PoseTableModel(links)
        model.set_link_pose(
            'B', Coordinates(pos=[0.5, 0, 0.2]).rotate(np.pi / 2.0, 'z'))
        computer = LinkDistanceComputer(model, backend='analytic')
        result = computer.get_link_distances()
        self.assertAlmostEqual(result[0].distance, 0.3)
        link_a_T_p, link_b_T_p = result[0].transforms
        testing.assert_almost_equal(link_a_T_p.translation, [0.1, 0, 0.2])
        testing.assert_almost_equal(link_b_T_p.translation, [0, 0.1, 0])

        world_p = model.link_pose('B').transform_vector(
            link_b_T_p.translation)
        testing.assert_almost_equal(world_p, [0.4, 0, 0.2])
        link_b_T_q = computer.global_to_link_coordinates('B', world_p)
        testing.assert_almost_equal(link_b_T_q.translation, [0, 0.1, 0])

    def test_capsule_witness_on_surface(self):
        links = [
            LinkDescription(
                'LSoftHand',
                CollisionDescriptor.cylinder(radius=0.05, length=0.2),
                Coordinates(pos=[0, 0, -0.1])),
            LinkDescription(
                'RSoftHand',
                CollisionDescriptor.cylinder(radius=0.04, length=0.3),
                Coordinates(pos=[0, 0, -0.15])),
        ]
        model = PoseTableModel(links)
        model.set_link_pose('LSoftHand', Coordinates(pos=[0, 0.2, 0]))
        model.set_link_pose(
            'RSoftHand',
            Coordinates(pos=[0.1, -0.2, 0.1]).rotate(np.pi / 3.0, 'x'))
        computer = LinkDistanceComputer(model, backend='analytic')
        result = computer.get_link_distances()
        self.assertEqual(len(result), 1)
        distance = result[0]
        self.assertGreater(distance.distance, 0)

        for name, link_T_p in zip(distance.link_names, distance.transforms):
            p1, p2, radius = computer.shapes.capsule_end_points(name)
            point = link_T_p.translation
            axis_point = closest_point_on_segment(p1, p2, point)
            self.assertAlmostEqual(np.linalg.norm(point - axis_point),
                                   radius)

        world_points = [
            model.link_pose(name).transform_vector(link_T_p.translation)
            for name, link_T_p in zip(distance.link_names,
                                      distance.transforms)]
        self.assertAlmostEqual(
            np.linalg.norm(world_points[0] - world_points[1]),
            distance.distance)

    def test_compute_pair_distance_missing_shape(self):
        model = sphere_model({'A': [0, 0, 0]},
                             extra_links=[LinkDescription('base')])
        computer = LinkDistanceComputer(model, backend='analytic')
        with self.assertRaises(KeyError):
            computer.compute_pair_distance('A', 'base')

    def test_skipped_mesh(self):
        def failing_loader(filename, scale):
            raise IOError('cannot open {}'.format(filename))

        model = sphere_model(
            {'A': [0, 0, 0], 'B': [0.5, 0, 0]},
            extra_links=[LinkDescription(
                'hand', CollisionDescriptor.mesh('hand.stl'))])
        computer = LinkDistanceComputer(model, backend='analytic',
                                        mesh_loader=failing_loader)
        self.assertFalse(computer.shapes.has_shape('hand'))
        self.assertEqual(computer.pairs_to_check(), [('A', 'B')])

    def test_mesh_without_filename(self):
        model = sphere_model(
            {'A': [0, 0, 0], 'B': [0.5, 0, 0]},
            extra_links=[LinkDescription('M', CollisionDescriptor('mesh'))])
        computer = LinkDistanceComputer(model, backend='analytic')
        self.assertFalse(computer.shapes.has_shape('M'))
        self.assertEqual(computer.pairs_to_check(), [('A', 'B')])

    def test_default_backend(self):
        model = sphere_model({'A': [0, 0, 0], 'B': [0.5, 0, 0]})
        with use_backend('analytic') as backend:
            computer = LinkDistanceComputer(model)
        self.assertIs(computer.backend, backend)

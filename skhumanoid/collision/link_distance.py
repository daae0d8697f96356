"""Pairwise minimum distances between robot links.

Example
-------
>>> from skhumanoid.coordinates import Coordinates
>>> from skhumanoid.model import CollisionDescriptor
>>> from skhumanoid.model import LinkDescription, PoseTableModel
>>> from skhumanoid.collision import LinkDistanceComputer
>>> model = PoseTableModel([
...     LinkDescription('A', CollisionDescriptor.sphere(0.1)),
...     LinkDescription('B', CollisionDescriptor.sphere(0.1))])
>>> model.set_link_pose('B', Coordinates(pos=[0.5, 0, 0]))
>>> computer = LinkDistanceComputer(model)
>>> result = computer.get_link_distances()
>>> result[0].link_names
('A', 'B')
"""

from logging import getLogger

from skhumanoid.collision.acm import ALWAYS_ALLOWED
from skhumanoid.collision.acm import AllowedCollisionMatrix
from skhumanoid.collision.acm import MUST_CHECK
from skhumanoid.collision.backend import get_backend
from skhumanoid.collision.backend import NarrowPhaseBackend
from skhumanoid.collision.link_pair_distance import LinkPairDistance
from skhumanoid.collision.mesh import load_mesh_resource
from skhumanoid.collision.shape_registry import ShapeRegistry
from skhumanoid.coordinates import Coordinates


logger = getLogger(__name__)


class LinkDistanceComputer(object):
    """Compute minimum distances between pairs of robot links.

    The set of pairs is controlled by an allowed-collision matrix. At
    construction every pair of links with a collision shape is checked,
    except the pairs the model disables by default.

    The model must already hold the joint configuration of interest when
    :meth:`get_link_distances` is called. Stale link poses are not
    detected. Instances are not thread safe.

    Parameters
    ----------
    model : skhumanoid.model.KinematicModel
        Kinematic model provider.
    backend : str or NarrowPhaseBackend or None
        Narrow-phase backend or its registered name. If None, the
        default backend is used.
    mesh_loader : callable
        ``mesh_loader(filename, scale) -> (vertices, triangles)``.
    """

    def __init__(self, model, backend=None, mesh_loader=load_mesh_resource):
        self._model = model
        if not isinstance(backend, NarrowPhaseBackend):
            backend = get_backend(backend)
        self._backend = backend
        self._shapes = ShapeRegistry(model.links, backend,
                                     mesh_loader=mesh_loader)
        self._acm = AllowedCollisionMatrix(model.link_names())
        self.set_collision_blacklist([])

    @property
    def model(self):
        return self._model

    @property
    def backend(self):
        return self._backend

    @property
    def shapes(self):
        """:class:`ShapeRegistry` of this computer."""
        return self._shapes

    @property
    def allowed_collision_matrix(self):
        return self._acm

    def _apply_default_disabled_pairs(self, acm):
        for link_a, link_b in self._model.disabled_collision_pairs():
            if link_a == link_b:
                continue
            acm.set_entry(link_a, link_b, ALWAYS_ALLOWED)

    def _filter_pairs(self, pairs):
        for link_a, link_b in pairs:
            if link_a == link_b:
                logger.debug('ignoring self pair %s', link_a)
                continue
            if not (self._shapes.has_shape(link_a)
                    and self._shapes.has_shape(link_b)):
                logger.debug('ignoring pair (%s, %s): no collision shape',
                             link_a, link_b)
                continue
            yield link_a, link_b

    def set_collision_whitelist(self, pairs):
        """Check exactly the given pairs.

        Replaces any previous whitelist or blacklist. Pairs naming a link
        without collision shape are ignored, and pairs disabled by the
        model are never checked.

        Parameters
        ----------
        pairs : list of tuple(str, str)
            Link pairs to check.
        """
        acm = AllowedCollisionMatrix(self._model.link_names(),
                                     default=ALWAYS_ALLOWED)
        for link_a, link_b in self._filter_pairs(pairs):
            acm.set_entry(link_a, link_b, MUST_CHECK)
        self._apply_default_disabled_pairs(acm)
        self._acm = acm
        logger.info('collision whitelist set, %d pairs to check',
                    len(acm.must_check_pairs()))

    def set_collision_blacklist(self, pairs):
        """Check every pair of shaped links except the given pairs.

        Replaces any previous whitelist or blacklist.

        Parameters
        ----------
        pairs : list of tuple(str, str)
            Link pairs never to check.
        """
        acm = AllowedCollisionMatrix(self._model.link_names(),
                                     default=ALWAYS_ALLOWED)
        names = sorted(self._shapes.names)
        for i, link_a in enumerate(names):
            for link_b in names[i + 1:]:
                acm.set_entry(link_a, link_b, MUST_CHECK)
        for link_a, link_b in self._filter_pairs(pairs):
            acm.set_entry(link_a, link_b, ALWAYS_ALLOWED)
        self._apply_default_disabled_pairs(acm)
        self._acm = acm
        logger.info('collision blacklist set, %d pairs to check',
                    len(acm.must_check_pairs()))

    def pairs_to_check(self):
        """Link pairs evaluated by :meth:`get_link_distances`.

        Returns
        -------
        list of tuple(str, str)
            Pairs in lexicographic order, smaller name first.
        """
        return self._acm.must_check_pairs()

    def _witness_in_link_frame(self, record, world_point):
        world_T_p = Coordinates(pos=world_point)
        shape_T_p = record.world_T_shape.inverse_transformation() * world_T_p
        return record.link_T_shape * shape_T_p

    def compute_pair_distance(self, link_a, link_b):
        """Distance between two links at their current shape poses.

        Poses are not updated; call :meth:`update_poses` first or use
        :meth:`get_link_distances`.

        Raises
        ------
        KeyError
            If one of the links has no collision shape.
        """
        record_a = self._shapes.record(link_a)
        record_b = self._shapes.record(link_b)
        distance, point_a, point_b = self._backend.distance(
            record_a.backend_object, record_b.backend_object)
        return LinkPairDistance(
            link_a, link_b,
            self._witness_in_link_frame(record_a, point_a),
            self._witness_in_link_frame(record_b, point_b),
            distance)

    def update_poses(self):
        self._shapes.update_poses(self._model)

    def get_link_distances(self, threshold=float('inf')):
        """Minimum distances of all checked link pairs.

        Parameters
        ----------
        threshold : float
            Only pairs with distance strictly below this value are
            returned.

        Returns
        -------
        list of LinkPairDistance
            Sorted by ascending distance, ties broken by link names.
        """
        self.update_poses()
        results = []
        for link_a, link_b in self.pairs_to_check():
            pair_distance = self.compute_pair_distance(link_a, link_b)
            if pair_distance.distance < threshold:
                results.append(pair_distance)
        results.sort(key=LinkPairDistance.sort_key)
        return results

    def global_to_link_coordinates(self, link_name, world_point):
        """Express a world frame point in a link frame.

        Parameters
        ----------
        link_name : str
            Target link.
        world_point : array-like (3,) or Coordinates
            Point (or frame) in world coordinates.

        Returns
        -------
        link_T_p : skhumanoid.coordinates.Coordinates
            The point expressed in the link frame.
        """
        if not isinstance(world_point, Coordinates):
            world_point = Coordinates(pos=world_point)
        world_T_link = self._model.link_pose(link_name)
        return world_T_link.inverse_transformation() * world_point

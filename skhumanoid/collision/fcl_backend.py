from logging import getLogger

import numpy as np

from skhumanoid._lazy_imports import _lazy_fcl
from skhumanoid.collision.backend import NarrowPhaseBackend
from skhumanoid.collision.geometry import Box
from skhumanoid.collision.geometry import Capsule
from skhumanoid.collision.geometry import Mesh
from skhumanoid.collision.geometry import Sphere
from skhumanoid.coordinates import Coordinates
from skhumanoid.coordinates.math import normalize_vector


logger = getLogger(__name__)


def _rotation_from_z(direction):
    """Rotation matrix that maps the z axis onto direction."""
    z_axis = np.array([0.0, 0.0, 1.0])
    direction = normalize_vector(direction)
    v = np.cross(z_axis, direction)
    c = np.dot(z_axis, direction)
    if np.linalg.norm(v) < 1e-10:
        if c > 0:
            return np.eye(3)
        return np.diag([1.0, -1.0, -1.0])
    vx = np.array([[0, -v[2], v[1]],
                   [v[2], 0, -v[0]],
                   [-v[1], v[0], 0]])
    return np.eye(3) + vx + np.matmul(vx, vx) / (1 + c)


class _FclObject(object):

    __slots__ = ('geometry', 'collision_object', 'shape_T_fcl')

    def __init__(self, geometry, collision_object, shape_T_fcl):
        self.geometry = geometry
        self.collision_object = collision_object
        self.shape_T_fcl = shape_T_fcl


class FclBackend(NarrowPhaseBackend):
    """Narrow-phase backend based on python-fcl.

    fcl primitives are centered at their frame origin and capsules lie on
    the z axis, so geometries with an offset center or an arbitrary
    capsule axis are wrapped with a fixed local transform.

    Parameters
    ----------
    gjk_solver : str
        'indep' (default) or 'libccd'.

    Examples
    --------
    >>> from skhumanoid.collision import FclBackend, Sphere
    >>> from skhumanoid.coordinates import Coordinates
    >>> backend = FclBackend()
    >>> a = backend.create_object(Sphere.from_radius(0.1))
    >>> b = backend.create_object(Sphere.from_radius(0.1))
    >>> backend.set_transform(b, Coordinates(pos=[0.5, 0, 0]))
    >>> round(backend.distance(a, b)[0], 6)
    0.3
    """

    name = 'fcl'

    def __init__(self, gjk_solver='indep'):
        self._fcl = _lazy_fcl()
        solvers = {
            'indep': self._fcl.GJKSolverType.GST_INDEP,
            'libccd': self._fcl.GJKSolverType.GST_LIBCCD,
        }
        if gjk_solver not in solvers:
            raise ValueError('gjk_solver should be one of {}, get {}'.format(
                list(solvers.keys()), gjk_solver))
        self._gjk_solver = solvers[gjk_solver]

    def _create_fcl_geometry(self, geometry):
        fcl = self._fcl
        if isinstance(geometry, Sphere):
            return (fcl.Sphere(geometry.radius),
                    Coordinates(pos=geometry.center))
        if isinstance(geometry, Capsule):
            rotation = _rotation_from_z(geometry.p2 - geometry.p1) \
                if geometry.length > 0 else np.eye(3)
            return (fcl.Capsule(geometry.radius, geometry.length),
                    Coordinates(pos=geometry.center, rot=rotation))
        if isinstance(geometry, Box):
            extents = geometry.extents
            rotation = geometry.rotation if geometry.rotation is not None \
                else np.eye(3)
            return (fcl.Box(extents[0], extents[1], extents[2]),
                    Coordinates(pos=geometry.center, rot=rotation))
        if isinstance(geometry, Mesh):
            vertices = np.asarray(geometry.vertices, dtype=np.float64)
            triangles = np.asarray(geometry.triangles, dtype=np.int64)
            model = fcl.BVHModel()
            model.beginModel(len(vertices), len(triangles))
            model.addSubModel(vertices, triangles)
            model.endModel()
            logger.debug("created BVH model with %d triangles",
                         len(triangles))
            return model, Coordinates()
        raise NotImplementedError(
            'fcl backend does not support {}'.format(
                type(geometry).__name__))

    def create_object(self, geometry):
        fcl_geometry, shape_T_fcl = self._create_fcl_geometry(geometry)
        tf = self._fcl.Transform(shape_T_fcl.rotation,
                                 shape_T_fcl.translation)
        collision_object = self._fcl.CollisionObject(fcl_geometry, tf)
        return _FclObject(geometry, collision_object, shape_T_fcl)

    def set_transform(self, obj, coords):
        world_T_fcl = coords.copy_worldcoords().transform(obj.shape_T_fcl)
        obj.collision_object.setTransform(
            self._fcl.Transform(world_T_fcl.rotation,
                                world_T_fcl.translation))

    def distance(self, obj_a, obj_b):
        """Minimum distance and world frame witness points.

        For overlapping shapes fcl reports ``-1.0`` instead of a
        penetration depth, and the witness points carry no meaning.
        Only the sign of a negative result should be relied on.
        """
        request = self._fcl.DistanceRequest(
            enable_nearest_points=True,
            gjk_solver_type=self._gjk_solver)
        result = self._fcl.DistanceResult()
        self._fcl.distance(obj_a.collision_object, obj_b.collision_object,
                           request, result)
        point_a = np.array(result.nearest_points[0], dtype=np.float64)
        point_b = np.array(result.nearest_points[1], dtype=np.float64)
        return float(result.min_distance), point_a, point_b

"""Link distance queries.

Geometry Primitives
-------------------
- Sphere, Capsule, Box, Mesh: collision geometries in their own frame

Narrow-phase Backends
---------------------
- FclBackend: python-fcl based, primitives and triangle meshes
- AnalyticBackend: closed-form sphere, capsule and box distances
- get_backend, set_default_backend, list_backends, use_backend

Link Distances
--------------
- LinkDistanceComputer: pairwise link distances with whitelist/blacklist
- LinkPairDistance: distance record of one link pair
- ShapeRegistry: per-link collision shapes
- AllowedCollisionMatrix: pairs to check

Example
-------
>>> from skhumanoid.collision import LinkDistanceComputer
>>> computer = LinkDistanceComputer(model)  # doctest: +SKIP
>>> for d in computer.get_link_distances(threshold=0.05):  # doctest: +SKIP
...     print(d.link_names, d.distance)
"""

from skhumanoid.collision.acm import ALWAYS_ALLOWED
from skhumanoid.collision.acm import AllowedCollisionMatrix
from skhumanoid.collision.acm import MUST_CHECK
from skhumanoid.collision.analytic_backend import AnalyticBackend
from skhumanoid.collision.analytic_backend import closest_points
from skhumanoid.collision.backend import BackendRegistry
from skhumanoid.collision.backend import get_backend
from skhumanoid.collision.backend import list_backends
from skhumanoid.collision.backend import NarrowPhaseBackend
from skhumanoid.collision.backend import set_default_backend
from skhumanoid.collision.backend import use_backend
from skhumanoid.collision.fcl_backend import FclBackend
from skhumanoid.collision.geometry import Box
from skhumanoid.collision.geometry import Capsule
from skhumanoid.collision.geometry import CollisionGeometry
from skhumanoid.collision.geometry import Mesh
from skhumanoid.collision.geometry import Sphere
from skhumanoid.collision.link_distance import LinkDistanceComputer
from skhumanoid.collision.link_pair_distance import LinkPairDistance
from skhumanoid.collision.mesh import load_mesh_resource
from skhumanoid.collision.shape_registry import ShapeRecord
from skhumanoid.collision.shape_registry import ShapeRegistry


BackendRegistry.register('fcl', FclBackend)
BackendRegistry.register('analytic', AnalyticBackend)


__all__ = [
    # Geometry primitives
    'CollisionGeometry',
    'Sphere',
    'Capsule',
    'Box',
    'Mesh',
    'load_mesh_resource',
    # Backends
    'NarrowPhaseBackend',
    'FclBackend',
    'AnalyticBackend',
    'BackendRegistry',
    'closest_points',
    'get_backend',
    'set_default_backend',
    'list_backends',
    'use_backend',
    # Link distances
    'ALWAYS_ALLOWED',
    'MUST_CHECK',
    'AllowedCollisionMatrix',
    'ShapeRecord',
    'ShapeRegistry',
    'LinkPairDistance',
    'LinkDistanceComputer',
]

from logging import getLogger

import numpy as np

from skhumanoid.collision.geometry import Box
from skhumanoid.collision.geometry import Capsule
from skhumanoid.collision.geometry import Mesh
from skhumanoid.collision.geometry import Sphere
from skhumanoid.collision.mesh import load_mesh_resource
from skhumanoid.coordinates import Coordinates
from skhumanoid.model.link import BOX
from skhumanoid.model.link import CYLINDER
from skhumanoid.model.link import MESH
from skhumanoid.model.link import SPHERE


logger = getLogger(__name__)


_EXPECTED_SIZE = {BOX: 3, SPHERE: 1, CYLINDER: 2}


class ShapeRecord(object):
    """Collision shape of one link.

    Parameters
    ----------
    link_id : int
        Index of this record in the registry arena.
    link_name : str
        Owning link.
    geometry : skhumanoid.collision.geometry.CollisionGeometry
        Geometry in the shape frame.
    link_T_shape : skhumanoid.coordinates.Coordinates
        Fixed offset from the link frame to the shape frame.
    backend_object : object
        Handle created by the narrow-phase backend.
    """

    __slots__ = ('link_id', 'link_name', 'geometry', 'link_T_shape',
                 'world_T_shape', 'backend_object')

    def __init__(self, link_id, link_name, geometry, link_T_shape,
                 backend_object):
        self.link_id = link_id
        self.link_name = link_name
        self.geometry = geometry
        self.link_T_shape = link_T_shape
        self.world_T_shape = link_T_shape.copy_worldcoords()
        self.backend_object = backend_object

    def __repr__(self):
        return '<ShapeRecord {}:{} {}>'.format(
            self.link_id, self.link_name, type(self.geometry).__name__)


class ShapeRegistry(object):
    """Per-link collision shapes built once from link descriptions.

    Shapes are stored in an arena indexed by a link id assigned at build
    time. Links without collision geometry, with an unsupported geometry
    type or whose mesh cannot be loaded are skipped and never take part
    in distance queries.

    Parameters
    ----------
    links : list of skhumanoid.model.LinkDescription
        Link descriptions, usually ``model.links``.
    backend : skhumanoid.collision.backend.NarrowPhaseBackend
        Backend creating the narrow-phase objects.
    mesh_loader : callable
        ``mesh_loader(filename, scale) -> (vertices, triangles)``.
    """

    def __init__(self, links, backend, mesh_loader=load_mesh_resource):
        self._backend = backend
        self._mesh_loader = mesh_loader
        self._records = []
        self._name_to_id = {}
        for link in links:
            geometry = self._build_geometry(link)
            if geometry is None:
                continue
            if link.name in self._name_to_id:
                raise ValueError('duplicated link name {}'.format(link.name))
            link_id = len(self._records)
            record = ShapeRecord(link_id, link.name, geometry,
                                 link.link_T_shape.copy_worldcoords(),
                                 backend.create_object(geometry))
            backend.set_transform(record.backend_object,
                                  record.world_T_shape)
            self._records.append(record)
            self._name_to_id[link.name] = link_id
        logger.info('registered %d collision shapes', len(self._records))

    def _build_geometry(self, link):
        collision = link.collision
        if collision is None:
            logger.info('link %s has no collision geometry', link.name)
            return None
        if not collision.is_supported:
            logger.warning(
                'collision geometry %s of link %s is not supported, '
                'ignoring it', collision.geometry_type, link.name)
            return None
        geometry_type = collision.geometry_type
        if geometry_type in _EXPECTED_SIZE \
           and len(collision.size) != _EXPECTED_SIZE[geometry_type]:
            logger.warning(
                '%s geometry of link %s expects %d dimensions, get %d',
                geometry_type, link.name, _EXPECTED_SIZE[geometry_type],
                len(collision.size))
            return None
        if geometry_type == BOX:
            return Box.from_extents(collision.size)
        if geometry_type == SPHERE:
            return Sphere.from_radius(collision.size[0])
        if geometry_type == CYLINDER:
            radius, length = collision.size
            return Capsule.from_radius_and_length(radius, length)
        if geometry_type == MESH:
            if collision.filename is None:
                logger.warning('mesh geometry of link %s has no filename',
                               link.name)
                return None
            try:
                vertices, triangles = self._mesh_loader(
                    collision.filename, collision.scale)
            except (IOError, OSError, ValueError) as e:
                logger.warning('failed to load mesh %s of link %s: %s',
                               collision.filename, link.name, e)
                return None
            return Mesh(vertices=np.asarray(vertices, dtype=np.float64),
                        triangles=np.asarray(triangles, dtype=np.int64))
        raise ValueError(
            'unknown geometry type {}'.format(geometry_type))

    def __len__(self):
        return len(self._records)

    def __contains__(self, link_name):
        return link_name in self._name_to_id

    def __iter__(self):
        return iter(self._records)

    @property
    def names(self):
        """Names of links with a registered shape in link id order."""
        return [record.link_name for record in self._records]

    @property
    def backend(self):
        return self._backend

    def link_id(self, link_name):
        return self._name_to_id[link_name]

    def has_shape(self, link_name):
        return link_name in self._name_to_id

    def record(self, link_name):
        """Return the :class:`ShapeRecord` of a link.

        Raises
        ------
        KeyError
            If the link has no registered shape.
        """
        if link_name not in self._name_to_id:
            raise KeyError('link {} has no collision shape'.format(link_name))
        return self._records[self._name_to_id[link_name]]

    def geometry(self, link_name):
        return self.record(link_name).geometry

    def link_T_shape(self, link_name):
        return self.record(link_name).link_T_shape.copy_worldcoords()

    def world_T_shape(self, link_name):
        return self.record(link_name).world_T_shape.copy_worldcoords()

    def capsule_end_points(self, link_name):
        """Capsule segment endpoints expressed in the link frame.

        Parameters
        ----------
        link_name : str
            Link whose geometry is a capsule.

        Returns
        -------
        p1 : numpy.ndarray (3,)
            First endpoint in the link frame.
        p2 : numpy.ndarray (3,)
            Second endpoint in the link frame.
        radius : float
            Capsule radius.
        """
        record = self.record(link_name)
        if not isinstance(record.geometry, Capsule):
            raise ValueError('link {} is not a capsule, but {}'.format(
                link_name, type(record.geometry).__name__))
        p1 = record.link_T_shape.transform_vector(record.geometry.p1)
        p2 = record.link_T_shape.transform_vector(record.geometry.p2)
        return p1, p2, record.geometry.radius

    def update_poses(self, model):
        """Propagate link poses of the model to the collision shapes.

        world_T_shape = world_T_link * link_T_shape.

        Parameters
        ----------
        model : skhumanoid.model.KinematicModel
            Provider already set to the current joint configuration.
        """
        for record in self._records:
            world_T_link = model.link_pose(record.link_name)
            if not isinstance(world_T_link, Coordinates):
                world_T_link = Coordinates(pos=world_T_link)
            record.world_T_shape = world_T_link.copy_worldcoords().transform(
                record.link_T_shape)
            self._backend.set_transform(record.backend_object,
                                        record.world_T_shape)

import abc
from logging import getLogger

from skhumanoid.coordinates import Coordinates
from skhumanoid.model.link import LinkDescription


logger = getLogger(__name__)


class KinematicModel(abc.ABC):
    """Kinematic model provider consumed by the collision subsystem.

    Implementations wrap a rigid-body model (URDF/SRDF based, simulator
    based, ...). The collision subsystem only reads from it:

    - ``links``: static link descriptions with collision geometry
    - ``link_names()``: link name enumeration used to seed the
      allowed-collision matrix
    - ``link_pose(name)``: world pose of a link for the latest joint
      configuration
    - ``disabled_collision_pairs()``: pairs whose collisions are disabled
      by default (e.g. SRDF ``disable_collisions``)

    The caller is responsible for updating the joint configuration before
    querying distances; stale poses are not detected.
    """

    @property
    @abc.abstractmethod
    def links(self):
        """Sequence of :class:`LinkDescription`."""

    def link_names(self):
        return [link.name for link in self.links]

    @abc.abstractmethod
    def link_pose(self, link_name):
        """Return world_T_link as :class:`Coordinates`."""

    def disabled_collision_pairs(self):
        return []


class PoseTableModel(KinematicModel):
    """Kinematic model whose link poses are set explicitly.

    Useful when the forward kinematics is computed elsewhere (a simulator,
    a robot state publisher, ...) and only link poses are fed in.

    Parameters
    ----------
    links : list of LinkDescription
        Link descriptions. Names must be unique.
    disabled_pairs : list of tuple(str, str)
        Pairs whose collisions are disabled by default.

    Examples
    --------
    >>> from skhumanoid.coordinates import Coordinates
    >>> from skhumanoid.model import CollisionDescriptor
    >>> from skhumanoid.model import LinkDescription, PoseTableModel
    >>> model = PoseTableModel([
    ...     LinkDescription('A', CollisionDescriptor.sphere(0.1)),
    ...     LinkDescription('B', CollisionDescriptor.sphere(0.1))])
    >>> model.set_link_pose('B', Coordinates(pos=[0.5, 0, 0]))
    """

    def __init__(self, links, disabled_pairs=None):
        self._links = []
        self._poses = {}
        for link in links:
            if not isinstance(link, LinkDescription):
                raise TypeError(
                    'links should be LinkDescription, get {}'.format(
                        type(link)))
            if link.name in self._poses:
                raise ValueError(
                    'duplicated link name {}'.format(link.name))
            self._links.append(link)
            self._poses[link.name] = Coordinates()
        self._disabled_pairs = []
        for name_a, name_b in (disabled_pairs or []):
            if name_a not in self._poses or name_b not in self._poses:
                logger.warning(
                    'ignoring disabled pair (%s, %s): unknown link',
                    name_a, name_b)
                continue
            self._disabled_pairs.append((name_a, name_b))

    @property
    def links(self):
        return list(self._links)

    def link_pose(self, link_name):
        return self._poses[link_name]

    def set_link_pose(self, link_name, coords):
        """Set world_T_link of a link.

        Parameters
        ----------
        link_name : str
            link name
        coords : skhumanoid.coordinates.Coordinates or numpy.ndarray
            world pose, or a 4x4 homogeneous matrix.
        """
        if link_name not in self._poses:
            raise KeyError('unknown link {}'.format(link_name))
        if not isinstance(coords, Coordinates):
            coords = Coordinates(pos=coords)
        self._poses[link_name] = coords.copy_worldcoords()

    def set_link_poses(self, poses):
        for link_name, coords in poses.items():
            self.set_link_pose(link_name, coords)

    def disabled_collision_pairs(self):
        return list(self._disabled_pairs)

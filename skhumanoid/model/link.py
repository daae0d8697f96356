"""Link and collision geometry descriptions.

A kinematic model provider describes each link by a
:class:`LinkDescription`. Links that take part in distance queries carry
a :class:`CollisionDescriptor` and the fixed offset from the link frame
to the collision geometry frame (``link_T_shape``).

Example
-------
>>> from skhumanoid.coordinates import Coordinates
>>> from skhumanoid.model import CollisionDescriptor, LinkDescription
>>> hand = LinkDescription(
...     'LSoftHandLink',
...     collision=CollisionDescriptor.cylinder(radius=0.05, length=0.2),
...     link_T_shape=Coordinates(pos=[0, 0, -0.1]))
"""

from dataclasses import dataclass
from dataclasses import field
from typing import Optional
from typing import Tuple

import numpy as np

from skhumanoid.coordinates import Coordinates


BOX = 'box'
SPHERE = 'sphere'
CYLINDER = 'cylinder'
MESH = 'mesh'

SUPPORTED_GEOMETRY_TYPES = (BOX, SPHERE, CYLINDER, MESH)


@dataclass(frozen=True)
class CollisionDescriptor:
    """Collision geometry declared by a link.

    Parameters
    ----------
    geometry_type : str
        One of 'box', 'sphere', 'cylinder', 'mesh'. Any other value is
        kept as is and treated as unsupported by the shape registry.
    size : tuple of float
        (x, y, z) for box, (radius,) for sphere,
        (radius, length) for cylinder, empty for mesh.
    filename : str or None
        Mesh resource for 'mesh' geometry.
    scale : tuple of float
        Per-axis scale applied to mesh vertices.
    """
    geometry_type: str
    size: Tuple[float, ...] = ()
    filename: Optional[str] = None
    scale: Tuple[float, float, float] = (1.0, 1.0, 1.0)

    @classmethod
    def box(cls, x, y, z):
        return cls(BOX, (float(x), float(y), float(z)))

    @classmethod
    def sphere(cls, radius):
        return cls(SPHERE, (float(radius),))

    @classmethod
    def cylinder(cls, radius, length):
        return cls(CYLINDER, (float(radius), float(length)))

    @classmethod
    def mesh(cls, filename, scale=(1.0, 1.0, 1.0)):
        scale = np.broadcast_to(np.asarray(scale, dtype=np.float64), (3,))
        return cls(MESH, (), filename, tuple(float(s) for s in scale))

    @property
    def is_supported(self):
        return self.geometry_type in SUPPORTED_GEOMETRY_TYPES


@dataclass(frozen=True)
class LinkDescription:
    """Static description of a robot link.

    Parameters
    ----------
    name : str
        Unique link name.
    collision : CollisionDescriptor or None
        Collision geometry of the link, if any.
    link_T_shape : skhumanoid.coordinates.Coordinates
        Fixed transform from the link frame to the collision geometry
        frame.
    """
    name: str
    collision: Optional[CollisionDescriptor] = None
    link_T_shape: Coordinates = field(default_factory=Coordinates)

    def __post_init__(self):
        if not isinstance(self.name, str) or len(self.name) == 0:
            raise ValueError(
                'link name should be a non empty string, get {!r}'.format(
                    self.name))
        if not isinstance(self.link_T_shape, Coordinates):
            raise TypeError(
                'link_T_shape should be Coordinates, get {}'.format(
                    type(self.link_T_shape)))
        # Callers must not be able to move the offset after construction.
        object.__setattr__(self, 'link_T_shape',
                           self.link_T_shape.copy_worldcoords())

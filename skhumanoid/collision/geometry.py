"""Collision geometry primitives.

Shapes are expressed in their own geometry frame. Cylinders declared by
a link are represented as capsules along the local z axis.

Example
-------
>>> import numpy as np
>>> from skhumanoid.collision import Capsule
>>> c = Capsule.from_radius_and_length(0.05, 0.2)
>>> c.p1, c.p2
(array([ 0. ,  0. , -0.1]), array([0. , 0. , 0.1]))
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass
class CollisionGeometry:
    """Base class for collision geometries."""

    def transform(self, position, rotation):
        """Transform geometry to world frame.

        Parameters
        ----------
        position : array (3,)
            Translation vector.
        rotation : array (3, 3)
            Rotation matrix.

        Returns
        -------
        CollisionGeometry
            Transformed geometry in world frame.
        """
        raise NotImplementedError


@dataclass
class Sphere(CollisionGeometry):
    """Sphere collision geometry.

    Parameters
    ----------
    center : array (3,)
        Center position.
    radius : float
        Radius.
    """
    center: np.ndarray
    radius: float

    def transform(self, position, rotation):
        new_center = position + np.matmul(rotation, self.center)
        return Sphere(center=new_center, radius=self.radius)

    @classmethod
    def from_radius(cls, radius):
        return cls(center=np.zeros(3), radius=float(radius))


@dataclass
class Capsule(CollisionGeometry):
    """Capsule collision geometry (line segment + radius).

    Parameters
    ----------
    p1 : array (3,)
        First endpoint.
    p2 : array (3,)
        Second endpoint.
    radius : float
        Capsule radius.
    """
    p1: np.ndarray
    p2: np.ndarray
    radius: float

    def transform(self, position, rotation):
        new_p1 = position + np.matmul(rotation, self.p1)
        new_p2 = position + np.matmul(rotation, self.p2)
        return Capsule(p1=new_p1, p2=new_p2, radius=self.radius)

    @property
    def length(self):
        """Distance between endpoints."""
        return float(np.linalg.norm(self.p2 - self.p1))

    @property
    def center(self):
        return (self.p1 + self.p2) / 2

    @classmethod
    def from_radius_and_length(cls, radius, length):
        """Create a capsule centered at the origin along the z axis.

        Parameters
        ----------
        radius : float
            Capsule radius.
        length : float
            Length of the segment (cylinder part) of the capsule.

        Returns
        -------
        Capsule
            Capsule instance.
        """
        half_length = float(length) / 2
        return cls(p1=np.array([0.0, 0.0, -half_length]),
                   p2=np.array([0.0, 0.0, half_length]),
                   radius=float(radius))


@dataclass
class Box(CollisionGeometry):
    """Oriented box collision geometry.

    Parameters
    ----------
    center : array (3,)
        Box center.
    half_extents : array (3,)
        Half-extents (half width, half height, half depth).
    rotation : array (3, 3), optional
        Rotation matrix. If None, box is axis-aligned.
    """
    center: np.ndarray
    half_extents: np.ndarray
    rotation: Optional[np.ndarray] = None

    def transform(self, position, rot):
        new_center = position + np.matmul(rot, self.center)
        if self.rotation is not None:
            new_rotation = np.matmul(rot, self.rotation)
        else:
            new_rotation = rot
        return Box(center=new_center, half_extents=self.half_extents,
                   rotation=new_rotation)

    @property
    def extents(self):
        return self.half_extents * 2

    @classmethod
    def from_extents(cls, extents):
        """Create an axis-aligned box centered at the origin.

        Parameters
        ----------
        extents : array-like (3,)
            Full extents (width, height, depth).
        """
        return cls(center=np.zeros(3),
                   half_extents=np.asarray(extents, dtype=np.float64) / 2)


@dataclass
class Mesh(CollisionGeometry):
    """Triangle mesh collision geometry.

    Parameters
    ----------
    vertices : array (N, 3)
        Vertex coordinates, scale already applied.
    triangles : array (M, 3)
        Vertex indices of each triangle.
    """
    vertices: np.ndarray
    triangles: np.ndarray

    def transform(self, position, rotation):
        new_vertices = np.matmul(self.vertices, np.asarray(rotation).T) \
            + position
        return Mesh(vertices=new_vertices, triangles=self.triangles)

    @property
    def n_vertices(self):
        return len(self.vertices)

    @property
    def n_triangles(self):
        return len(self.triangles)

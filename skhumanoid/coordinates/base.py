import numpy as np

from skhumanoid.coordinates.math import check_rotation
from skhumanoid.coordinates.math import check_translation
from skhumanoid.coordinates.math import rotation_matrix


class Coordinates(object):
    """Rigid transform made of a rotation and a translation.

    Link poses, shape offsets and witness frames are all Coordinates.
    ``a_T_b * b_T_c`` gives ``a_T_c``.

    Parameters
    ----------
    pos : array-like (3,) or (4, 4) or None
        Translation [m], or a homogeneous matrix which then also sets
        the rotation. Zero if None.
    rot : array-like (3, 3) or None
        Rotation matrix. Identity if None.

    Examples
    --------
    >>> import numpy as np
    >>> from skhumanoid.coordinates import Coordinates
    >>> world_T_link = Coordinates(pos=[1, 0, 0]).rotate(np.pi / 2, 'z')
    >>> np.round(world_T_link.transform_vector([1, 0, 0]), 6)
    array([1., 1., 0.])
    """

    def __init__(self, pos=None, rot=None):
        if pos is not None and np.shape(pos) == (4, 4):
            matrix = np.asarray(pos, dtype=np.float64)
            pos, rot = matrix[:3, 3], matrix[:3, :3]
        self._translation = np.zeros(3) if pos is None \
            else check_translation(pos)
        self._rotation = np.eye(3) if rot is None else check_rotation(rot)

    @classmethod
    def _from_arrays(cls, translation, rotation):
        coords = cls.__new__(cls)
        coords._translation = translation
        coords._rotation = rotation
        return coords

    @property
    def rotation(self):
        """(3, 3) rotation matrix."""
        return self._rotation

    @rotation.setter
    def rotation(self, rotation):
        self._rotation = check_rotation(rotation)

    @property
    def translation(self):
        """(3,) translation vector [m]."""
        return self._translation

    @translation.setter
    def translation(self, translation):
        self._translation = check_translation(translation)

    def worldpos(self):
        return self._translation

    def worldrot(self):
        return self._rotation

    def translate(self, vec, wrt='local'):
        """Move this coordinates in place and return self.

        Parameters
        ----------
        vec : array-like (3,)
            Displacement [m].
        wrt : str
            'local' to express vec in this frame, 'world' otherwise.
        """
        vec = np.asarray(vec, dtype=np.float64)
        if wrt == 'local':
            vec = self._rotation.dot(vec)
        elif wrt != 'world':
            raise ValueError('wrt {} not supported'.format(wrt))
        self._translation = self._translation + vec
        return self

    def rotate(self, theta, axis, wrt='local'):
        """Rotate in place about an axis through the origin of this frame.

        The translation is left untouched.
        """
        mat = rotation_matrix(theta, axis)
        if wrt == 'local':
            self._rotation = self._rotation.dot(mat)
        elif wrt == 'world':
            self._rotation = mat.dot(self._rotation)
        else:
            raise ValueError('wrt {} not supported'.format(wrt))
        return self

    def transform(self, c, wrt='local'):
        """Compose with c in place and return self.

        'local' gives ``self * c``, 'world' gives ``c * self``.
        """
        if wrt == 'local':
            result = self * c
        elif wrt == 'world':
            result = c * self
        else:
            raise ValueError('wrt {} not supported'.format(wrt))
        self._translation = result._translation
        self._rotation = result._rotation
        return self

    def transform_vector(self, v):
        """Map points given in this frame to the parent frame.

        Parameters
        ----------
        v : array-like (3,) or (n, 3)

        Returns
        -------
        numpy.ndarray with the shape of v
        """
        v = np.asarray(v, dtype=np.float64)
        if v.ndim == 2:
            return v.dot(self._rotation.T) + self._translation
        return self._rotation.dot(v) + self._translation

    def inverse_transformation(self):
        rotation = self._rotation.T
        return Coordinates._from_arrays(-rotation.dot(self._translation),
                                        rotation)

    def copy_worldcoords(self):
        return Coordinates._from_arrays(self._translation.copy(),
                                        self._rotation.copy())

    def __mul__(self, other):
        return Coordinates._from_arrays(
            self._translation + self._rotation.dot(other._translation),
            self._rotation.dot(other._rotation))

    def __repr__(self):
        return '#<{} {:.3f} {:.3f} {:.3f}>'.format(
            self.__class__.__name__, *self._translation)

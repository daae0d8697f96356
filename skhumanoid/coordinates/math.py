import numpy as np


_AXES = {
    'x': (1.0, 0.0, 0.0),
    'y': (0.0, 1.0, 0.0),
    'z': (0.0, 0.0, 1.0),
    '-x': (-1.0, 0.0, 0.0),
    '-y': (0.0, -1.0, 0.0),
    '-z': (0.0, 0.0, -1.0),
}


def axis_vector(axis):
    """Return a rotation axis as a float 3-vector.

    Parameters
    ----------
    axis : str or array-like (3,)
        One of 'x', 'y', 'z', '-x', '-y', '-z' or an explicit vector.

    Examples
    --------
    >>> from skhumanoid.coordinates.math import axis_vector
    >>> axis_vector('-y')
    array([ 0., -1.,  0.])
    """
    if isinstance(axis, str):
        if axis not in _AXES:
            raise ValueError('unknown axis {}'.format(axis))
        return np.array(_AXES[axis])
    axis = np.asarray(axis, dtype=np.float64)
    if axis.shape != (3,):
        raise ValueError('axis should be shape (3,), get {}'.format(
            axis.shape))
    return axis


def normalize_vector(v):
    """Return v scaled to unit length. A zero vector is returned as is.

    Examples
    --------
    >>> from skhumanoid.coordinates.math import normalize_vector
    >>> normalize_vector([0, 3, 4])
    array([0. , 0.6, 0.8])
    """
    v = np.array(v, dtype=np.float64)
    norm = np.linalg.norm(v)
    if norm == 0:
        return v
    return v / norm


def rotation_matrix(theta, axis):
    """Rotation of theta radians around axis (right hand rule).

    Parameters
    ----------
    theta : float
        Angle in radian.
    axis : str or array-like (3,)
        See :func:`axis_vector`.

    Returns
    -------
    rot : numpy.ndarray (3, 3)
    """
    k = normalize_vector(axis_vector(axis))
    if not k.any():
        raise ValueError('rotation axis should not be zero')
    skew = np.array([[0.0, -k[2], k[1]],
                     [k[2], 0.0, -k[0]],
                     [-k[1], k[0], 0.0]])
    return (np.eye(3) + np.sin(theta) * skew
            + (1.0 - np.cos(theta)) * skew.dot(skew))


def check_rotation(rotation):
    """Return rotation as a float (3, 3) array or raise ValueError."""
    rotation = np.array(rotation, dtype=np.float64)
    if rotation.shape != (3, 3):
        raise ValueError('rotation should be a 3x3 matrix, get shape {}'
                         .format(rotation.shape))
    det = np.linalg.det(rotation)
    if abs(det - 1.0) > 1e-3:
        raise ValueError(
            'rotation should have determinant 1.0, get {}'.format(det))
    return rotation


def check_translation(translation):
    """Return translation as a float (3,) array or raise ValueError."""
    translation = np.array(translation, dtype=np.float64).reshape(-1)
    if translation.shape != (3,):
        raise ValueError('translation should be a 3-vector, get {}'
                         .format(translation.shape))
    return translation

from logging import getLogger
import os

import numpy as np

from skhumanoid._lazy_imports import _lazy_trimesh


logger = getLogger(__name__)


def _strip_file_scheme(filename):
    if filename.startswith('file://'):
        return filename[len('file://'):]
    return filename


def load_mesh_resource(filename, scale=(1.0, 1.0, 1.0)):
    """Load a mesh resource and bake the scale into its vertices.

    Scenes are flattened into one mesh.

    Parameters
    ----------
    filename : str
        Path (or file:// url) of a mesh file readable by trimesh.
    scale : array-like (3,) or float
        Per-axis scale factor.

    Returns
    -------
    vertices : numpy.ndarray (N, 3)
        Scaled vertex coordinates.
    triangles : numpy.ndarray (M, 3)
        Triangle vertex indices.
    """
    trimesh = _lazy_trimesh()
    path = _strip_file_scheme(filename)
    if not os.path.exists(path):
        raise IOError('mesh resource {} not found'.format(filename))
    loaded = trimesh.load(path)
    if isinstance(loaded, trimesh.Scene):
        meshes = [g for g in loaded.dump()
                  if isinstance(g, trimesh.Trimesh)]
        if len(meshes) == 0:
            raise ValueError('mesh resource {} has no triangle mesh'.format(
                filename))
        loaded = trimesh.util.concatenate(meshes)
    if loaded.is_empty:
        raise ValueError('mesh resource {} is empty'.format(filename))
    return scale_mesh(loaded.vertices, loaded.faces, scale)


def scale_mesh(vertices, triangles, scale=(1.0, 1.0, 1.0)):
    """Return vertices with a per-axis scale applied.

    Examples
    --------
    >>> import numpy as np
    >>> from skhumanoid.collision.mesh import scale_mesh
    >>> v, t = scale_mesh([[1, 1, 1]], [[0, 0, 0]], scale=[1, 2, 3])
    >>> v
    array([[1., 2., 3.]])
    """
    scale = np.broadcast_to(np.asarray(scale, dtype=np.float64), (3,))
    vertices = np.asarray(vertices, dtype=np.float64) * scale[None, :]
    triangles = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    logger.debug('loaded mesh with %d vertices and %d triangles',
                 len(vertices), len(triangles))
    return vertices, triangles

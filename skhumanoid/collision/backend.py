"""Narrow-phase backend registry.

A narrow-phase backend owns the library-side collision objects and
answers exact distance queries between two world-posed shapes. Backends
are registered by name and one of them is the process-wide default.

Examples
--------
>>> from skhumanoid.collision import get_backend, use_backend
>>> backend = get_backend('analytic')
>>> with use_backend('fcl') as backend:
...     pass
"""

import abc
from contextlib import contextmanager
from typing import Dict
from typing import List
from typing import Optional
from typing import Type


class NarrowPhaseBackend(abc.ABC):
    """Interface of a narrow-phase distance routine."""

    name = None

    @abc.abstractmethod
    def create_object(self, geometry):
        """Create a backend object from a geometry in its own frame.

        Parameters
        ----------
        geometry : skhumanoid.collision.geometry.CollisionGeometry
            Sphere, Capsule, Box or Mesh.

        Returns
        -------
        object
            Backend specific handle.
        """

    @abc.abstractmethod
    def set_transform(self, obj, coords):
        """Set world_T_shape of a backend object.

        Parameters
        ----------
        obj : object
            Handle returned by :meth:`create_object`.
        coords : skhumanoid.coordinates.Coordinates
            World pose of the geometry frame.
        """

    @abc.abstractmethod
    def distance(self, obj_a, obj_b):
        """Compute minimum distance and witness points.

        Returns
        -------
        distance : float
            Minimum distance between the two shapes.
        point_a : numpy.ndarray (3,)
            Closest point on obj_a in world frame.
        point_b : numpy.ndarray (3,)
            Closest point on obj_b in world frame.
        """


class BackendRegistry:
    """Registry for managing narrow-phase backends.

    Examples
    --------
    >>> from skhumanoid.collision.backend import BackendRegistry
    >>> backend = BackendRegistry.get('fcl')
    >>> BackendRegistry.set_default('analytic')
    """

    _backends: Dict[str, Type] = {}
    _default: Optional[str] = None
    _instance_cache: Dict[str, object] = {}
    _fallback_order = ('fcl', 'analytic')

    @classmethod
    def register(cls, name: str, backend_class: Type) -> None:
        """Register a backend implementation.

        Parameters
        ----------
        name : str
            Name of the backend (e.g., 'fcl', 'analytic').
        backend_class : type
            Subclass of :class:`NarrowPhaseBackend`.
        """
        cls._backends[name] = backend_class
        cls._instance_cache.pop(name, None)

    @classmethod
    def get(cls, name: Optional[str] = None, **kwargs) -> object:
        """Get a backend instance.

        Parameters
        ----------
        name : str, optional
            Name of the backend. If None, returns the default backend.
        **kwargs
            Additional arguments passed to the backend constructor.

        Raises
        ------
        ValueError
            If the backend is not found.
        ImportError
            If the backend library is not installed.
        """
        if name is None:
            name = cls._default or cls._auto_select()

        if name not in cls._backends:
            available = list(cls._backends.keys())
            raise ValueError(
                f"Unknown backend: '{name}'. "
                f"Available backends: {available}"
            )

        if not kwargs and name in cls._instance_cache:
            return cls._instance_cache[name]

        try:
            instance = cls._backends[name](**kwargs)
        except (ImportError, AttributeError) as e:
            raise ImportError(
                f"Backend '{name}' is registered but its dependencies "
                f"are not available: {e}"
            )
        if not kwargs:
            cls._instance_cache[name] = instance
        return instance

    @classmethod
    def set_default(cls, name: Optional[str]) -> None:
        """Set the default backend. None restores automatic selection."""
        if name is not None and name not in cls._backends:
            available = list(cls._backends.keys())
            raise ValueError(
                f"Unknown backend: '{name}'. "
                f"Available backends: {available}"
            )
        cls._default = name

    @classmethod
    def available(cls) -> List[str]:
        """Names of registered backends whose dependencies import."""
        available = []
        for name in cls._backends:
            try:
                cls.get(name)
                available.append(name)
            except ImportError:
                pass
        return available

    @classmethod
    def _auto_select(cls) -> str:
        for name in cls._fallback_order:
            if name not in cls._backends:
                continue
            try:
                cls.get(name)
                return name
            except ImportError:
                pass
        raise ImportError('No narrow-phase backend is available. '
                          'Please install python-fcl.\n\n'
                          '  $ pip install python-fcl\n')

    @classmethod
    def clear_cache(cls) -> None:
        cls._instance_cache.clear()


def get_backend(name: Optional[str] = None, **kwargs):
    """Get a narrow-phase backend instance.

    Parameters
    ----------
    name : str, optional
        Name of the backend ('fcl', 'analytic').
        If None, returns the default backend.
    **kwargs
        Additional arguments passed to the backend constructor,
        e.g. ``gjk_solver='libccd'`` for the fcl backend.
    """
    return BackendRegistry.get(name, **kwargs)


def set_default_backend(name: Optional[str]) -> None:
    BackendRegistry.set_default(name)


def list_backends() -> List[str]:
    return BackendRegistry.available()


@contextmanager
def use_backend(name: str, **kwargs):
    """Context manager for temporarily using a different backend.

    Yields
    ------
    NarrowPhaseBackend
        Backend instance.
    """
    old_default = BackendRegistry._default
    backend = BackendRegistry.get(name, **kwargs)
    BackendRegistry._default = name
    try:
        yield backend
    finally:
        BackendRegistry._default = old_default

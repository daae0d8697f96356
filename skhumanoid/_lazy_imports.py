_trimesh = None


def _lazy_trimesh():
    global _trimesh
    if _trimesh is None:
        try:
            import trimesh
        except ImportError:
            raise ImportError(
                'trimesh is required to load collision meshes.\n\n'
                '  $ pip install trimesh\n')
        _trimesh = trimesh
    return _trimesh


_fcl = None


def _lazy_fcl():
    global _fcl
    if _fcl is None:
        try:
            import fcl
        except ImportError:
            raise ImportError(
                'python-fcl is required for the fcl distance backend.\n\n'
                '  $ pip install python-fcl\n')
        _fcl = fcl
    return _fcl

class LinkPairDistance(object):
    """Minimum distance between two links and their closest points.

    The pair is stored in canonical order: the lexicographically smaller
    link name first, with the closest point frames permuted the same way.

    Parameters
    ----------
    link_a : str
        First link name.
    link_b : str
        Second link name.
    link_a_T_p_a : skhumanoid.coordinates.Coordinates
        Closest point on link_a expressed in link_a frame.
    link_b_T_p_b : skhumanoid.coordinates.Coordinates
        Closest point on link_b expressed in link_b frame.
    distance : float
        Minimum distance between the two links.

    Examples
    --------
    >>> from skhumanoid.coordinates import Coordinates
    >>> from skhumanoid.collision import LinkPairDistance
    >>> d = LinkPairDistance('b', 'a', Coordinates(pos=[0, 0, 1]),
    ...                      Coordinates(), 0.1)
    >>> d.link_names
    ('a', 'b')
    >>> d.transforms[1].translation
    array([0., 0., 1.])
    """

    __slots__ = ('_link_names', '_transforms', '_distance')

    def __init__(self, link_a, link_b, link_a_T_p_a, link_b_T_p_b,
                 distance):
        if link_a == link_b:
            raise ValueError(
                'link pair should be two different links, get {}'.format(
                    link_a))
        link_a_T_p_a = link_a_T_p_a.copy_worldcoords()
        link_b_T_p_b = link_b_T_p_b.copy_worldcoords()
        if link_b < link_a:
            link_a, link_b = link_b, link_a
            link_a_T_p_a, link_b_T_p_b = link_b_T_p_b, link_a_T_p_a
        self._link_names = (link_a, link_b)
        self._transforms = (link_a_T_p_a, link_b_T_p_b)
        self._distance = float(distance)

    @property
    def link_names(self):
        return self._link_names

    @property
    def transforms(self):
        """Closest point frames, each expressed in its own link frame."""
        return tuple(c.copy_worldcoords() for c in self._transforms)

    @property
    def distance(self):
        return self._distance

    def get_link_names(self):
        return self.link_names

    def get_transforms(self):
        return self.transforms

    def get_distance(self):
        return self.distance

    def sort_key(self):
        return (self._distance,) + self._link_names

    def __lt__(self, other):
        return self.sort_key() < other.sort_key()

    def __repr__(self):
        return '<LinkPairDistance {} {} {:.6f}>'.format(
            self._link_names[0], self._link_names[1], self._distance)

from logging import getLogger


logger = getLogger(__name__)


ALWAYS_ALLOWED = True
MUST_CHECK = False


def _pair_key(link_a, link_b):
    if link_a <= link_b:
        return (link_a, link_b)
    return (link_b, link_a)


class AllowedCollisionMatrix(object):
    """Symmetric allow/deny matrix over link name pairs.

    An entry is ``ALWAYS_ALLOWED`` (``True``) when the pair never needs a
    distance check and ``MUST_CHECK`` (``False``) otherwise.

    Parameters
    ----------
    names : list of str
        Link names spanned by the matrix.
    default : bool
        Entry of every pair until it is set.

    Examples
    --------
    >>> from skhumanoid.collision.acm import AllowedCollisionMatrix
    >>> from skhumanoid.collision.acm import MUST_CHECK
    >>> acm = AllowedCollisionMatrix(['a', 'b', 'c'])
    >>> acm.set_entry('c', 'a', MUST_CHECK)
    >>> acm.must_check_pairs()
    [('a', 'c')]
    """

    def __init__(self, names=(), default=ALWAYS_ALLOWED):
        self._names = set(names)
        self._default = bool(default)
        self._entries = {}

    def entry_names(self):
        """Sorted list of link names spanned by the matrix."""
        return sorted(self._names)

    def has_name(self, name):
        return name in self._names

    def set_entry(self, link_a, link_b, allowed):
        """Set the entry of an unordered pair.

        Names not yet in the matrix are added.
        """
        if link_a == link_b:
            raise ValueError(
                'a link cannot be paired with itself: {}'.format(link_a))
        self._names.add(link_a)
        self._names.add(link_b)
        self._entries[_pair_key(link_a, link_b)] = bool(allowed)

    def get_entry(self, link_a, link_b):
        """Return the entry of an unordered pair.

        Raises
        ------
        KeyError
            If one of the names is not in the matrix.
        """
        for name in (link_a, link_b):
            if name not in self._names:
                raise KeyError('link {} is not in the matrix'.format(name))
        return self._entries.get(_pair_key(link_a, link_b), self._default)

    def must_check_pairs(self):
        """Pairs marked ``MUST_CHECK`` in lexicographic order.

        Each unordered pair appears once with the smaller name first.
        """
        names = self.entry_names()
        pairs = []
        for i, name_a in enumerate(names):
            for name_b in names[i + 1:]:
                if not self._entries.get((name_a, name_b), self._default):
                    pairs.append((name_a, name_b))
        return pairs

    def __len__(self):
        return len(self._names)

    def __repr__(self):
        return '<AllowedCollisionMatrix {} links, {} pairs to check>'.format(
            len(self._names), len(self.must_check_pairs()))

# flake8: noqa

from .base import Coordinates

from .math import axis_vector
from .math import normalize_vector
from .math import rotation_matrix

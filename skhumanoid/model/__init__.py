# flake8: noqa

from skhumanoid.model.kinematic_model import KinematicModel
from skhumanoid.model.kinematic_model import PoseTableModel
from skhumanoid.model.link import CollisionDescriptor
from skhumanoid.model.link import LinkDescription

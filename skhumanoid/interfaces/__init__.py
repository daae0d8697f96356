# flake8: noqa

from skhumanoid.interfaces.chain import ChainInterface
from skhumanoid.interfaces.chain import ControlType
from skhumanoid.interfaces.chain import control_type_from_modes
from skhumanoid.interfaces.chain import hardware_modes
from skhumanoid.interfaces.chain_backend import ChainBackend
from skhumanoid.interfaces.chain_backend import ControlMode
from skhumanoid.interfaces.chain_backend import InteractionMode
from skhumanoid.interfaces.chain_backend import Pid
from skhumanoid.interfaces.chain_backend import SimulatedChainBackend

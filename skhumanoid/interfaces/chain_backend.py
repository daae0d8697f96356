"""Hardware abstraction of one kinematic chain.

A chain backend exposes the joint-level control board of a chain:
control and interaction modes, encoders, position/direct position/torque
references, impedance, reference speeds, PID gains and output voltage.
Angles, velocities and impedance values are in the board's native
degree based units.
"""

import abc
from dataclasses import dataclass
import enum

import numpy as np


class ControlMode(enum.Enum):
    """Joint control mode reported by the control board."""

    IDLE = 'idle'
    POSITION = 'position'
    POSITION_DIRECT = 'position_direct'
    TORQUE = 'torque'


class InteractionMode(enum.Enum):
    """Joint interaction mode reported by the control board."""

    STIFF = 'stiff'
    COMPLIANT = 'compliant'


@dataclass
class Pid:
    """PID gains of a joint controller.

    Parameters
    ----------
    kp : float
        Proportional gain.
    kd : float
        Derivative gain.
    ki : float
        Integral gain.
    max_int : float
        Saturation of the integral term.
    scale : float
        Scale factor of the output.
    max_output : float
        Saturation of the output.
    offset : float
        Output offset.
    stiction_up : float
        Stiction compensation for positive motion.
    stiction_down : float
        Stiction compensation for negative motion.
    kff : float
        Feedforward gain.
    """
    kp: float = 0.0
    kd: float = 0.0
    ki: float = 0.0
    max_int: float = 0.0
    scale: float = 0.0
    max_output: float = 0.0
    offset: float = 0.0
    stiction_up: float = 0.0
    stiction_down: float = 0.0
    kff: float = 0.0


class ChainBackend(abc.ABC):
    """Control board of a kinematic chain.

    Setters return ``True`` on success and ``False`` when the board
    rejects the request.
    """

    @property
    @abc.abstractmethod
    def n_joints(self):
        """Number of joints of the chain."""

    @abc.abstractmethod
    def get_control_modes(self):
        """List of :class:`ControlMode`, one per joint."""

    @abc.abstractmethod
    def set_control_mode(self, joint, mode):
        pass

    @abc.abstractmethod
    def get_interaction_modes(self):
        """List of :class:`InteractionMode`, one per joint."""

    @abc.abstractmethod
    def set_interaction_mode(self, joint, mode):
        pass

    @abc.abstractmethod
    def get_encoders(self):
        """Joint positions [deg]."""

    @abc.abstractmethod
    def get_encoder_speeds(self):
        """Joint velocities [deg/s]."""

    @abc.abstractmethod
    def get_torques(self):
        """Joint torques [Nm]."""

    @abc.abstractmethod
    def position_move(self, positions):
        """Trajectory generated move to positions [deg]."""

    @abc.abstractmethod
    def set_positions(self, positions):
        """Direct position references [deg]."""

    @abc.abstractmethod
    def set_ref_torques(self, torques):
        """Torque references [Nm]."""

    @abc.abstractmethod
    def set_ref_speed(self, joint, speed):
        """Reference speed of the trajectory generator [deg/s]."""

    @abc.abstractmethod
    def set_impedance(self, joint, stiffness, damping):
        pass

    @abc.abstractmethod
    def get_impedance(self, joint):
        """Return ``(stiffness, damping)`` of a joint."""

    @abc.abstractmethod
    def get_pid(self, joint):
        """Return :class:`Pid` of a joint."""

    @abc.abstractmethod
    def set_pid(self, joint, pid):
        pass

    @abc.abstractmethod
    def get_output(self, joint):
        """Controller output (voltage) of a joint."""

    @abc.abstractmethod
    def set_offset(self, joint, offset):
        """Controller output offset (voltage) of a joint."""


class SimulatedChainBackend(ChainBackend):
    """In-memory control board.

    Position references are reached instantly. Useful for tests and for
    running a control loop without hardware.

    Parameters
    ----------
    n_joints : int
        Number of joints.
    positions : array-like or None
        Initial joint positions [deg].

    Examples
    --------
    >>> from skhumanoid.interfaces import SimulatedChainBackend
    >>> board = SimulatedChainBackend(3)
    >>> board.get_encoders()
    array([0., 0., 0.])
    """

    def __init__(self, n_joints, positions=None):
        if n_joints <= 0:
            raise ValueError('n_joints should be positive, get {}'.format(
                n_joints))
        self._n_joints = int(n_joints)
        if positions is None:
            positions = np.zeros(self._n_joints)
        self._positions = self._check_size(positions)
        self._velocities = np.zeros(self._n_joints)
        self._torques = np.zeros(self._n_joints)
        self._ref_speeds = np.zeros(self._n_joints)
        self._stiffness = np.zeros(self._n_joints)
        self._damping = np.zeros(self._n_joints)
        self._offsets = np.zeros(self._n_joints)
        self._control_modes = [ControlMode.IDLE] * self._n_joints
        self._interaction_modes = [InteractionMode.STIFF] * self._n_joints
        self._pids = [Pid() for _ in range(self._n_joints)]

    def _check_size(self, values):
        values = np.array(values, dtype=np.float64).reshape(-1)
        if len(values) != self._n_joints:
            raise ValueError('expected {} values, get {}'.format(
                self._n_joints, len(values)))
        return values

    def _check_joint(self, joint):
        if not 0 <= joint < self._n_joints:
            raise IndexError('joint index {} out of range'.format(joint))

    @property
    def n_joints(self):
        return self._n_joints

    @property
    def ref_speeds(self):
        return self._ref_speeds.copy()

    def set_state(self, positions=None, velocities=None, torques=None):
        """Overwrite the measured joint state."""
        if positions is not None:
            self._positions = self._check_size(positions)
        if velocities is not None:
            self._velocities = self._check_size(velocities)
        if torques is not None:
            self._torques = self._check_size(torques)

    def get_control_modes(self):
        return list(self._control_modes)

    def set_control_mode(self, joint, mode):
        self._check_joint(joint)
        self._control_modes[joint] = ControlMode(mode)
        return True

    def get_interaction_modes(self):
        return list(self._interaction_modes)

    def set_interaction_mode(self, joint, mode):
        self._check_joint(joint)
        self._interaction_modes[joint] = InteractionMode(mode)
        return True

    def get_encoders(self):
        return self._positions.copy()

    def get_encoder_speeds(self):
        return self._velocities.copy()

    def get_torques(self):
        return self._torques.copy()

    def position_move(self, positions):
        self._positions = self._check_size(positions)
        return True

    def set_positions(self, positions):
        self._positions = self._check_size(positions)
        return True

    def set_ref_torques(self, torques):
        self._torques = self._check_size(torques)
        return True

    def set_ref_speed(self, joint, speed):
        self._check_joint(joint)
        self._ref_speeds[joint] = speed
        return True

    def set_impedance(self, joint, stiffness, damping):
        self._check_joint(joint)
        self._stiffness[joint] = stiffness
        self._damping[joint] = damping
        return True

    def get_impedance(self, joint):
        self._check_joint(joint)
        return float(self._stiffness[joint]), float(self._damping[joint])

    def get_pid(self, joint):
        self._check_joint(joint)
        return Pid(**vars(self._pids[joint]))

    def set_pid(self, joint, pid):
        self._check_joint(joint)
        self._pids[joint] = Pid(**vars(pid))
        return True

    def get_output(self, joint):
        self._check_joint(joint)
        return float(self._offsets[joint])

    def set_offset(self, joint, offset):
        self._check_joint(joint)
        self._offsets[joint] = offset
        return True

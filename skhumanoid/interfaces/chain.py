import enum
from logging import getLogger

import numpy as np

from skhumanoid.interfaces.chain_backend import ControlMode
from skhumanoid.interfaces.chain_backend import InteractionMode


logger = getLogger(__name__)


class ControlType(enum.Enum):
    """Session level control type of a kinematic chain."""

    IDLE = 'idle'
    POSITION = 'position'
    POSITION_DIRECT = 'position_direct'
    TORQUE = 'torque'
    IMPEDANCE = 'impedance'


_HARDWARE_MODES = {
    ControlType.IDLE: (ControlMode.IDLE, InteractionMode.STIFF),
    ControlType.POSITION: (ControlMode.POSITION, InteractionMode.STIFF),
    ControlType.POSITION_DIRECT: (ControlMode.POSITION_DIRECT,
                                  InteractionMode.STIFF),
    ControlType.TORQUE: (ControlMode.TORQUE, InteractionMode.STIFF),
    ControlType.IMPEDANCE: (ControlMode.POSITION_DIRECT,
                            InteractionMode.COMPLIANT),
}


def control_type_from_modes(control_mode, interaction_mode):
    """Combine hardware modes into a :class:`ControlType`.

    Torque control wins over the interaction mode, a compliant
    interaction means impedance control, otherwise the control mode
    decides.

    Examples
    --------
    >>> from skhumanoid.interfaces import ControlMode, InteractionMode
    >>> from skhumanoid.interfaces import control_type_from_modes
    >>> control_type_from_modes(ControlMode.POSITION_DIRECT,
    ...                         InteractionMode.COMPLIANT)
    <ControlType.IMPEDANCE: 'impedance'>
    """
    control_mode = ControlMode(control_mode)
    interaction_mode = InteractionMode(interaction_mode)
    if control_mode == ControlMode.TORQUE:
        return ControlType.TORQUE
    if interaction_mode == InteractionMode.COMPLIANT:
        return ControlType.IMPEDANCE
    return ControlType(control_mode.value)


def hardware_modes(control_type):
    """Return ``(ControlMode, InteractionMode)`` set for a control type."""
    return _HARDWARE_MODES[ControlType(control_type)]


def _deg2rad(values):
    return np.deg2rad(values)


def _rad2deg(values):
    return np.rad2deg(values)


class ChainInterface(object):
    """Session on one kinematic chain of the robot.

    The session owns the current :class:`ControlType`. It only changes
    through :meth:`set_control_type` (and the ``set_*_mode`` wrappers),
    and :meth:`move` refuses to send a command when the control type
    reported by the hardware differs from it.

    Parameters
    ----------
    chain_name : str
        Name of the chain, e.g. 'left_arm'.
    backend : skhumanoid.interfaces.ChainBackend
        Control board of the chain.
    use_si : bool
        If True, positions, velocities, reference speeds and impedance
        are exchanged in radians, otherwise in degrees.
    control_type : ControlType or None
        Control type set at construction. If None, the control type
        reported by the hardware is adopted.

    Examples
    --------
    >>> from skhumanoid.interfaces import ChainInterface, ControlType
    >>> from skhumanoid.interfaces import SimulatedChainBackend
    >>> arm = ChainInterface('left_arm', SimulatedChainBackend(7),
    ...                      use_si=True, control_type=ControlType.POSITION)
    >>> arm.move([0.1] * 7)
    True
    """

    def __init__(self, chain_name, backend, use_si=False,
                 control_type=ControlType.IDLE):
        self._chain_name = chain_name
        self._backend = backend
        self._use_si = use_si
        self._control_type = self.hardware_control_type()
        if control_type is None:
            return
        logger.info('Initializing %s with %s', chain_name,
                    ControlType(control_type).name)
        if not self.set_control_type(control_type):
            logger.error('Problem initializing %s with %s', chain_name,
                         ControlType(control_type).name)

    @property
    def chain_name(self):
        return self._chain_name

    @property
    def backend(self):
        return self._backend

    @property
    def n_joints(self):
        return self._backend.n_joints

    @property
    def use_si(self):
        return self._use_si

    @property
    def control_type(self):
        """Current :class:`ControlType` of this session."""
        return self._control_type

    def _check_size(self, values, name='values'):
        values = np.array(values, dtype=np.float64).reshape(-1)
        if len(values) != self.n_joints:
            raise ValueError(
                '{} of chain {} should have {} elements, get {}'.format(
                    name, self._chain_name, self.n_joints, len(values)))
        return values

    def _to_hardware(self, values):
        if self._use_si:
            return _rad2deg(values)
        return values

    def _from_hardware(self, values):
        values = np.asarray(values, dtype=np.float64)
        if self._use_si:
            return _deg2rad(values)
        return values

    def hardware_control_type(self):
        """Control type computed from the first joint's hardware modes.

        All joints of a chain are assumed to be controlled the same way.
        """
        control_mode = self._backend.get_control_modes()[0]
        interaction_mode = self._backend.get_interaction_modes()[0]
        return control_type_from_modes(control_mode, interaction_mode)

    def set_control_type(self, control_type):
        """Switch every joint of the chain to a control type.

        Parameters
        ----------
        control_type : ControlType
            Target control type.

        Returns
        -------
        success : bool
            If False, the session control type is left unchanged.
        """
        control_type = ControlType(control_type)
        control_mode, interaction_mode = hardware_modes(control_type)
        success = True
        for joint in range(self.n_joints):
            success = success \
                and self._backend.set_control_mode(joint, control_mode) \
                and self._backend.set_interaction_mode(joint,
                                                       interaction_mode)
        if success:
            self._control_type = control_type
            logger.info('Setting %s to %s mode', self._chain_name,
                        control_type.name)
        else:
            logger.error('Error setting %s to %s mode', self._chain_name,
                         control_type.name)
        return success

    def set_idle_mode(self):
        return self.set_control_type(ControlType.IDLE)

    def set_position_mode(self):
        return self.set_control_type(ControlType.POSITION)

    def set_position_direct_mode(self):
        return self.set_control_type(ControlType.POSITION_DIRECT)

    def set_torque_mode(self):
        return self.set_control_type(ControlType.TORQUE)

    def set_impedance_mode(self):
        return self.set_control_type(ControlType.IMPEDANCE)

    def is_in_idle_mode(self):
        return self._control_type == ControlType.IDLE

    def is_in_position_mode(self):
        return self._control_type == ControlType.POSITION

    def is_in_position_direct_mode(self):
        return self._control_type == ControlType.POSITION_DIRECT

    def is_in_torque_mode(self):
        return self._control_type == ControlType.TORQUE

    def is_in_impedance_mode(self):
        return self._control_type == ControlType.IMPEDANCE

    def sense(self):
        """Joint positions, [rad] if ``use_si`` else [deg]."""
        return self._from_hardware(self._backend.get_encoders())

    def sense_position(self):
        return self.sense()

    def sense_velocity(self):
        """Joint velocities, [rad/s] if ``use_si`` else [deg/s]."""
        return self._from_hardware(self._backend.get_encoder_speeds())

    def sense_torque(self):
        """Joint torques [Nm]."""
        return np.asarray(self._backend.get_torques(), dtype=np.float64)

    def move(self, u):
        """Send a command according to the current control type.

        Parameters
        ----------
        u : array-like
            Positions in position, position direct and impedance control
            ([rad] if ``use_si`` else [deg]), torques [Nm] in torque
            control.

        Returns
        -------
        success : bool
            False if the command was not sent.

        Raises
        ------
        RuntimeError
            If the hardware is not in the control type of this session.
        ValueError
            If ``u`` does not have one element per joint.
        """
        u = self._check_size(u, 'command')
        hardware_type = self.hardware_control_type()
        if hardware_type != self._control_type:
            raise RuntimeError(
                'chain {} is in {} control on hardware but the session '
                'expects {}'.format(self._chain_name, hardware_type.name,
                                    self._control_type.name))

        if self._control_type in (ControlType.POSITION_DIRECT,
                                  ControlType.IMPEDANCE):
            success = self._backend.set_positions(self._to_hardware(u))
            if not success:
                logger.error('Cannot move %s using Direct Position Ctrl',
                             self._chain_name)
        elif self._control_type == ControlType.POSITION:
            success = self._backend.position_move(self._to_hardware(u))
            if not success:
                logger.error('Cannot move %s using Position Ctrl',
                             self._chain_name)
        elif self._control_type == ControlType.TORQUE:
            success = self._backend.set_ref_torques(u)
            if not success:
                logger.error('Cannot move %s using Torque Ctrl',
                             self._chain_name)
        else:
            logger.error('Cannot move %s using Idle Ctrl', self._chain_name)
            success = False
        return success

    def set_reference_speeds(self, maximum_velocity):
        """Set reference speeds of the trajectory generator.

        Only available in position control.

        Parameters
        ----------
        maximum_velocity : array-like
            One speed per joint, [rad/s] if ``use_si`` else [deg/s].
        """
        maximum_velocity = self._check_size(maximum_velocity,
                                            'maximum_velocity')
        if not self.is_in_position_mode():
            logger.error('Trying to set reference speed for chain %s '
                         'which is not in Position mode', self._chain_name)
            return False
        maximum_velocity = self._to_hardware(maximum_velocity)
        for joint in range(self.n_joints):
            if not self._backend.set_ref_speed(joint,
                                               maximum_velocity[joint]):
                return False
        return True

    def set_reference_speed(self, maximum_velocity):
        return self.set_reference_speeds(
            np.full(self.n_joints, maximum_velocity, dtype=np.float64))

    def set_impedance(self, stiffness, damping):
        """Set joint impedance. Only available in impedance control.

        Parameters
        ----------
        stiffness : array-like
            One stiffness per joint.
        damping : array-like
            One damping per joint.
        """
        stiffness = self._check_size(stiffness, 'stiffness')
        damping = self._check_size(damping, 'damping')
        if not self.is_in_impedance_mode():
            logger.error('Trying to set impedance for chain %s '
                         'which is not in Impedance mode', self._chain_name)
            return False
        stiffness = self._to_hardware(stiffness)
        damping = self._to_hardware(damping)
        success = True
        for joint in range(self.n_joints):
            success = success and self._backend.set_impedance(
                joint, stiffness[joint], damping[joint])
        return success

    def get_impedance(self):
        """Return ``(stiffness, damping)``.

        None is returned when the chain is not in impedance control.
        """
        if not self.is_in_impedance_mode():
            logger.error('Trying to get impedance for chain %s '
                         'which is not in Impedance mode', self._chain_name)
            return None
        stiffness = np.zeros(self.n_joints)
        damping = np.zeros(self.n_joints)
        for joint in range(self.n_joints):
            stiffness[joint], damping[joint] = \
                self._backend.get_impedance(joint)
        return self._from_hardware(stiffness), self._from_hardware(damping)

    def get_control_types(self):
        """Hardware modes of every joint.

        Returns
        -------
        list of tuple(ControlMode, InteractionMode)
        """
        return list(zip(self._backend.get_control_modes(),
                        self._backend.get_interaction_modes()))

    def set_control_types(self, control_types):
        """Set raw hardware modes joint by joint.

        The session control type is not changed. A later :meth:`move`
        fails if the hardware no longer matches it.

        Parameters
        ----------
        control_types : list of tuple(ControlMode, InteractionMode)
            One pair per joint.
        """
        control_types = list(control_types)
        if len(control_types) != self.n_joints:
            raise ValueError(
                'control_types of chain {} should have {} elements, '
                'get {}'.format(self._chain_name, self.n_joints,
                                len(control_types)))
        success = True
        for joint, (control_mode, interaction_mode) in enumerate(
                control_types):
            success = success \
                and self._backend.set_control_mode(joint, control_mode) \
                and self._backend.set_interaction_mode(joint,
                                                       interaction_mode)
        return success

    def get_voltage(self):
        """Controller outputs of every joint."""
        return np.array([self._backend.get_output(joint)
                         for joint in range(self.n_joints)],
                        dtype=np.float64)

    def set_voltage(self, voltage, joint=None):
        """Set controller output offsets.

        Parameters
        ----------
        voltage : float or array-like
            Offset of ``joint`` if given, else one offset per joint.
        joint : int or None
            Joint index.
        """
        if joint is not None:
            return self._backend.set_offset(joint, float(voltage))
        voltage = self._check_size(voltage, 'voltage')
        for i in range(self.n_joints):
            if not self._backend.set_offset(i, voltage[i]):
                return False
        return True

    def get_pid_gains(self):
        return [self._backend.get_pid(joint)
                for joint in range(self.n_joints)]

    def set_pid_gain(self, joint, pid):
        return self._backend.set_pid(joint, pid)

    def set_pid_gains(self, pids):
        pids = list(pids)
        if len(pids) != self.n_joints:
            raise ValueError(
                'pids of chain {} should have {} elements, get {}'.format(
                    self._chain_name, self.n_joints, len(pids)))
        for joint, pid in enumerate(pids):
            if not self.set_pid_gain(joint, pid):
                return False
        return True

    def __repr__(self):
        return '<ChainInterface {} {} joints {}>'.format(
            self._chain_name, self.n_joints, self._control_type.name)

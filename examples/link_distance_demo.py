#!/usr/bin/env python

import argparse
import logging

import numpy as np

from skhumanoid.collision import LinkDistanceComputer
from skhumanoid.coordinates import Coordinates
from skhumanoid.interfaces import ChainInterface
from skhumanoid.interfaces import ControlType
from skhumanoid.interfaces import SimulatedChainBackend
from skhumanoid.model import CollisionDescriptor
from skhumanoid.model import LinkDescription
from skhumanoid.model import PoseTableModel


parser = argparse.ArgumentParser(
    formatter_class=argparse.ArgumentDefaultsHelpFormatter,
)
parser.add_argument(
    '-n', type=int, default=10,
    help='number of arm configurations.')
parser.add_argument(
    '--backend', type=str,
    choices=['fcl', 'analytic'], default='fcl',
    help='narrow-phase distance backend.')
parser.add_argument(
    '--threshold', type=float, default=0.3,
    help='only report link pairs closer than this distance [m].')
parser.add_argument(
    '--verbose', action='store_true',
    help='print log messages.')
args = parser.parse_args()

if args.verbose:
    logging.basicConfig(level=logging.INFO)

# A torso and a one joint left arm swinging towards it.
links = [
    LinkDescription('Waist'),
    LinkDescription('Torso', CollisionDescriptor.box(0.2, 0.3, 0.5)),
    LinkDescription('LShoulder', CollisionDescriptor.sphere(0.06)),
    LinkDescription(
        'LForearm',
        CollisionDescriptor.cylinder(radius=0.04, length=0.3),
        Coordinates(pos=[0, 0, -0.15])),
    LinkDescription(
        'LSoftHand',
        CollisionDescriptor.cylinder(radius=0.05, length=0.1),
        Coordinates(pos=[0, 0, -0.05])),
]
model = PoseTableModel(
    links, disabled_pairs=[('Torso', 'LShoulder'),
                           ('LShoulder', 'LForearm'),
                           ('LForearm', 'LSoftHand')])
model.set_link_pose('Torso', Coordinates(pos=[0, 0, 0.25]))

shoulder_pos = np.array([0, 0.25, 0.45])
arm = ChainInterface('left_arm', SimulatedChainBackend(1), use_si=True,
                     control_type=ControlType.POSITION)
computer = LinkDistanceComputer(model, backend=args.backend)
computer.set_collision_whitelist([('Torso', 'LForearm'),
                                  ('Torso', 'LSoftHand'),
                                  ('LShoulder', 'LSoftHand')])

for roll in np.linspace(0.0, -np.pi / 2.0, args.n):
    arm.move([roll])
    q = arm.sense()[0]

    shoulder = Coordinates(pos=shoulder_pos).rotate(q, 'x')
    forearm = shoulder.copy_worldcoords().translate([0, 0, -0.05])
    hand = forearm.copy_worldcoords().translate([0, 0, -0.3])
    model.set_link_poses({'LShoulder': shoulder,
                          'LForearm': forearm,
                          'LSoftHand': hand})

    print('shoulder roll {:.3f} [rad]'.format(q))
    for d in computer.get_link_distances(threshold=args.threshold):
        print('  {:>10s} - {:<10s} {:.4f} [m]'.format(
            d.link_names[0], d.link_names[1], d.distance))

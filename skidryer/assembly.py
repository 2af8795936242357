"""
Static and kinematic assemblies of the rack.

Both assemblies return a labelled build123d Compound whose children are
the placed pieces. The static assembly is the resting open rack; the
mechanism assembly places every piece for a given opening angle.
"""

from typing import List, Optional
import logging

from build123d import Compound, Part, Pos, Rot

from . import pieces
from .dimensions import DesignParams
from .kinematics import MechanismPose, RotationAxis, solve_pose


logger = logging.getLogger(__name__)


def _leg_tilt(axis: RotationAxis, theta: float) -> Rot:
    """Rotation of a leg about its lower hinge edge, folding towards -u."""
    if axis is RotationAxis.Y:
        return Rot(0, -theta, 0)
    return Rot(theta, 0, 0)


def _compose(params: DesignParams, pose: MechanismPose, label: str) -> Compound:
    parts: List[Part] = [pieces.lower_base(params, pose.axis)]

    foot = pieces.foot(params)
    for i, position in enumerate(pieces.foot_positions(params)):
        placed = Pos(*position) * foot
        placed.label = f"foot_{i + 1}"
        parts.append(placed)

    leg = pieces.leg(params)
    tilt = _leg_tilt(pose.axis, pose.theta)
    for placement in pose.legs:
        placed = Pos(*placement.origin) * tilt * leg
        placed.label = placement.name
        parts.append(placed)

    # Both hinge kinds share the leaf angle
    lower_hinge = upper_hinge = None
    for placement in pose.hinges:
        if placement.upper:
            if upper_hinge is None:
                upper_hinge = pieces.hinge(params, placement.angle, True, pose.axis)
            shape = upper_hinge
        else:
            if lower_hinge is None:
                lower_hinge = pieces.hinge(params, placement.angle, False, pose.axis)
            shape = lower_hinge
        placed = Pos(*placement.position) * shape
        placed.label = placement.name
        parts.append(placed)

    offset = Pos(*pose.upper_offset)
    for piece in pieces.upper_pieces(params):
        placed = offset * piece
        placed.label = piece.label
        parts.append(placed)

    for rope in pose.ropes:
        parts.extend(pieces.rope_assembly(params, rope, pose.axis))

    logger.debug(f"{label}: {len(parts)} parts at theta={pose.theta}")
    return Compound(children=parts, label=label)


def build_mechanism_assembly(params: DesignParams, theta: float,
                             axis=None) -> Optional[Compound]:
    """
    Assemble the rack at opening angle theta.

    Returns None when theta is rejected; the diagnostic is logged by
    solve_pose.
    """
    pose = solve_pose(params, theta, axis)
    if pose is None:
        return None
    return _compose(params, pose, f"skidryer_{pose.axis.value}_{theta:g}")


def build_static_assembly(params: DesignParams, axis=None) -> Compound:
    """Assemble the rack in its open resting state."""
    pose = solve_pose(params, 0.0, axis)
    return _compose(params, pose, "skidryer")


def find_part(assembly: Compound, label: str) -> Optional[Part]:
    """Child of the assembly with the given label."""
    for child in assembly.children:
        if child.label == label:
            return child
    return None

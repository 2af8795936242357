"""
Closing-mechanism kinematics.

Every leg is a rigid segment between its lower hinge axis (on the lower
plane, at the leg's trailing edge) and its upper hinge axis (under the
upper plane, at the leading edge). At rest the segment spans the leg width
W horizontally and the leg length D vertically. Folding rotates all four
legs by the same angle about their lower axes; the planes stay parallel
and horizontal, so the upper plane follows the upper hinge axes.

Positions are computed in a linkage frame (u, w, z): u is the horizontal
direction the upper plane travels in, w the other horizontal direction.
The rotation axis only decides how (u, w) maps onto world (x, y).
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple
import logging
import math

import pandas as pd

from .dimensions import DesignParams


logger = logging.getLogger(__name__)


MIN_OPENING_ANGLE = 0.0
MAX_OPENING_ANGLE = 90.0

Vec3 = Tuple[float, float, float]


class RotationAxis(Enum):
    """Horizontal axis the legs rotate about."""
    X = "x"
    Y = "y"

    @classmethod
    def parse(cls, value) -> 'RotationAxis':
        """Axis from its lowercase name, as stored in DesignParams.rotation_axis."""
        if isinstance(value, cls):
            return value
        return cls(value)


@dataclass(frozen=True)
class Linkage:
    """Fixed leg segment between the two hinge axes."""
    length: float             # L
    phi: float                # rest elevation of the segment, radians
    horizontal_offset: float  # H, horizontal distance between the axes at rest
    hinge_thickness: float    # T

    @classmethod
    def from_params(cls, params: DesignParams) -> 'Linkage':
        h = params.leg_width
        v = params.leg_length
        return cls(
            length=math.hypot(h, v),
            phi=math.atan2(v, h),
            horizontal_offset=h,
            hinge_thickness=params.hinge_thickness,
        )

    @property
    def peak_angle(self) -> float:
        """Opening angle (degrees) at which the planes are farthest apart."""
        return MAX_OPENING_ANGLE - math.degrees(self.phi)


@dataclass
class LegPlacement:
    """Leg box origin (lower hinge edge) and tilt."""
    name: str
    origin: Vec3
    tilt: float  # degrees


@dataclass
class HingePlacement:
    """Hinge pin centre and leaf angle."""
    name: str
    position: Vec3
    angle: float  # degrees between the leaves
    upper: bool


@dataclass
class RopeState:
    """One holding rope, from the ring under the upper plane to its bolt."""
    name: str
    start: Vec3
    end: Vec3
    bolt: Vec3
    length: float
    angle: float  # degrees below horizontal
    taut: bool

    @property
    def direction(self) -> Vec3:
        return tuple(e - s for s, e in zip(self.start, self.end))


@dataclass
class MechanismPose:
    """Complete pose of the rack for one opening angle."""
    theta: float
    axis: RotationAxis
    vertical_separation: float
    horizontal_displacement: float
    upper_offset: Vec3
    legs: List[LegPlacement]
    hinges: List[HingePlacement]
    ropes: List[RopeState]

    def to_dict(self) -> dict:
        return {
            'theta': self.theta,
            'axis': self.axis.value,
            'vertical_separation': self.vertical_separation,
            'horizontal_displacement': self.horizontal_displacement,
            'upper_offset': list(self.upper_offset),
            'ropes_taut': all(r.taut for r in self.ropes),
        }


def validate_opening_angle(theta: float) -> Tuple[bool, List[str]]:
    """Check the opening angle lies in [0, 90] degrees."""
    errors = []
    if not (MIN_OPENING_ANGLE <= theta <= MAX_OPENING_ANGLE):
        errors.append(
            f"opening angle {theta} out of range "
            f"[{MIN_OPENING_ANGLE:g}, {MAX_OPENING_ANGLE:g}]"
        )
    return len(errors) == 0, errors


def vertical_separation(linkage: Linkage, theta: float) -> float:
    """Distance from the lower plane top face to the upper plane bottom face."""
    return (2 * linkage.hinge_thickness
            + linkage.length * math.sin(math.radians(theta) + linkage.phi))


def horizontal_displacement(linkage: Linkage, theta: float) -> float:
    """Travel of the upper plane along -u from its rest position."""
    return (linkage.horizontal_offset
            - linkage.length * math.cos(math.radians(theta) + linkage.phi))


def to_world(axis: RotationAxis, u: float, w: float, z: float) -> Vec3:
    """Map linkage-frame coordinates onto world coordinates."""
    if axis is RotationAxis.Y:
        return (u, w, z)
    return (w, u, z)


def plane_extent(params: DesignParams, axis: RotationAxis) -> Tuple[float, float]:
    """Plane size along (u, w)."""
    if axis is RotationAxis.Y:
        return params.base_width, params.base_depth
    return params.base_depth, params.base_width


def upper_base_offset(params: DesignParams, linkage: Linkage,
                      theta: float, axis: RotationAxis) -> Vec3:
    """Position of the upper plane origin corner relative to the lower one."""
    f = vertical_separation(linkage, theta)
    g = horizontal_displacement(linkage, theta)
    return to_world(axis, -g, 0.0, params.plane_thickness + f)


def leg_positions(params: DesignParams) -> List[Tuple[str, float, float]]:
    """Leg footprints (name, x_min, y_min) on the lower plane."""
    far_x = params.base_width - params.leg_inset - params.leg_width
    far_y = params.base_depth - params.leg_inset - params.leg_width
    near = params.leg_inset
    return [
        ('leg_front_left', near, near),
        ('leg_front_right', far_x, near),
        ('leg_rear_left', near, far_y),
        ('leg_rear_right', far_x, far_y),
    ]


def pivot_height(params: DesignParams) -> float:
    """Z of the lower hinge axes."""
    return params.plane_thickness + params.hinge_thickness


def leg_placements(params: DesignParams, theta: float) -> List[LegPlacement]:
    z = pivot_height(params)
    return [LegPlacement(name, (x, y, z), theta) for name, x, y in leg_positions(params)]


def hinge_placements(params: DesignParams, linkage: Linkage,
                     theta: float, axis: RotationAxis) -> List[HingePlacement]:
    """Lower and upper hinge of every leg; leaves open at 90 - theta."""
    angle = MAX_OPENING_ANGLE - theta
    elevation = math.radians(theta) + linkage.phi
    du = linkage.length * math.cos(elevation)
    dz = linkage.length * math.sin(elevation)
    z = pivot_height(params)
    half = params.leg_width / 2

    hinges = []
    for name, x, y in leg_positions(params):
        u, w = (x, y) if axis is RotationAxis.Y else (y, x)
        hinges.append(HingePlacement(
            f"{name}_hinge_lower", to_world(axis, u, w + half, z), angle, False))
        hinges.append(HingePlacement(
            f"{name}_hinge_upper", to_world(axis, u + du, w + half, z + dz), angle, True))
    return hinges


def rope_bolt_points(params: DesignParams, axis: RotationAxis) -> List[Vec3]:
    """Bolt axis foot points on the lower plane bottom face."""
    u_size, w_size = plane_extent(params, axis)
    u = u_size / 2 + params.rope_span / 2
    return [to_world(axis, u, w_size * k / 4, 0.0) for k in (1, 3)]


def _ring_anchor(params: DesignParams, axis: RotationAxis, offset: Vec3, k: int) -> Vec3:
    u_size, w_size = plane_extent(params, axis)
    u = u_size / 2 - params.rope_span / 2
    local = to_world(axis, u, w_size * k / 4, -params.ring_diameter)
    return tuple(a + b for a, b in zip(local, offset))


def rope_states(params: DesignParams, linkage: Linkage,
                theta: float, axis: RotationAxis) -> List[RopeState]:
    """
    Holding ropes.

    At theta == 0 each rope runs taut from its ring down to the bolt top.
    For any other angle the rope is stowed flat under the upper plane.
    The rope length is fixed by the rest pose.
    """
    rest = upper_base_offset(params, linkage, 0.0, axis)
    current = upper_base_offset(params, linkage, theta, axis)
    u_dir = to_world(axis, 1.0, 0.0, 0.0)

    ropes = []
    for i, (k, foot) in enumerate(zip((1, 3), rope_bolt_points(params, axis))):
        bolt = (foot[0], foot[1], params.bolt_length - params.rope_diameter / 2)
        rest_start = _ring_anchor(params, axis, rest, k)
        length = math.dist(rest_start, bolt)
        start = _ring_anchor(params, axis, current, k)

        if theta == MIN_OPENING_ANGLE:
            horizontal = math.hypot(bolt[0] - start[0], bolt[1] - start[1])
            angle = math.degrees(math.atan2(start[2] - bolt[2], horizontal))
            ropes.append(RopeState(f"rope_{i + 1}", start, bolt, bolt, length, angle, True))
        else:
            end = tuple(s + length * d for s, d in zip(start, u_dir))
            ropes.append(RopeState(f"rope_{i + 1}", start, end, bolt, length, 0.0, False))
    return ropes


def solve_pose(params: DesignParams, theta: float,
               axis=None) -> Optional[MechanismPose]:
    """
    Compute the full pose for one opening angle.

    Returns None (after logging the diagnostic) when theta is out of range.
    """
    is_valid, errors = validate_opening_angle(theta)
    if not is_valid:
        for error in errors:
            logger.error(error)
        return None

    axis = RotationAxis.parse(axis if axis is not None else params.rotation_axis)
    linkage = Linkage.from_params(params)

    return MechanismPose(
        theta=theta,
        axis=axis,
        vertical_separation=vertical_separation(linkage, theta),
        horizontal_displacement=horizontal_displacement(linkage, theta),
        upper_offset=upper_base_offset(params, linkage, theta, axis),
        legs=leg_placements(params, theta),
        hinges=hinge_placements(params, linkage, theta, axis),
        ropes=rope_states(params, linkage, theta, axis),
    )


def opening_angle_at(t: float, clamp: float = 0.1,
                     max_angle: float = MAX_OPENING_ANGLE) -> float:
    """
    Map animation time t in [0, 1] to an opening angle.

    Flat at 0 for the first `clamp` of the range and at `max_angle` for
    the last, linear in between.
    """
    if not (0.0 <= clamp < 0.5):
        raise ValueError(f"clamp must be in [0, 0.5), got {clamp}")
    t = min(1.0, max(0.0, t))
    if t <= clamp:
        return 0.0
    if t >= 1.0 - clamp:
        return max_angle
    return max_angle * (t - clamp) / (1.0 - 2.0 * clamp)


def frame_times(frames: int) -> List[float]:
    """Evenly spaced animation times covering [0, 1]."""
    if frames < 1:
        raise ValueError(f"frames must be >= 1, got {frames}")
    if frames == 1:
        return [0.0]
    return [i / (frames - 1) for i in range(frames)]


def pose_table(params: DesignParams, angles: Sequence[float],
               axis=None) -> pd.DataFrame:
    """Tabulate placement values; out-of-range angles are logged and left out."""
    rows = []
    for theta in angles:
        pose = solve_pose(params, theta, axis)
        if pose is None:
            continue
        ox, oy, oz = pose.upper_offset
        rows.append({
            'theta': pose.theta,
            'vertical_separation': pose.vertical_separation,
            'horizontal_displacement': pose.horizontal_displacement,
            'offset_x': ox,
            'offset_y': oy,
            'offset_z': oz,
            'hinge_angle': MAX_OPENING_ANGLE - pose.theta,
            'ropes_taut': all(r.taut for r in pose.ropes),
        })
    return pd.DataFrame(rows, columns=[
        'theta', 'vertical_separation', 'horizontal_displacement',
        'offset_x', 'offset_y', 'offset_z', 'hinge_angle', 'ropes_taut',
    ])

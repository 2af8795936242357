"""
Named pieces of the rack assembled from primitives.

Lower-plane pieces are returned in world coordinates. Upper-plane pieces
are returned in the upper-plane frame (origin at the corner of its bottom
face) and moved by the mechanism pose in the assembly module.
"""

from typing import List, Tuple

from build123d import Part, Plane, Pos, Rot

from .dimensions import DesignParams
from .kinematics import RopeState, RotationAxis, Vec3, leg_positions, rope_bolt_points
from .primitives import (
    make_bolt,
    make_foot,
    make_hinge,
    make_hook,
    make_leg,
    make_nut,
    make_plane,
    make_ring,
    make_rod,
    make_rope,
)


def _labelled(part: Part, label: str) -> Part:
    part.label = label
    return part


def _central_cutout(params: DesignParams) -> Tuple[float, float, float, float]:
    return (params.base_width / 2, params.base_depth / 2,
            params.cutout_width, params.cutout_depth)


def lower_base(params: DesignParams, axis: RotationAxis) -> Part:
    """Lower plane with central cutout, drain holes and rope bolt holes."""
    round_cutouts = []
    if params.drain_hole_diameter > 0:
        for k in (1, 3):
            round_cutouts.append(
                (params.base_width * k / 4, params.base_depth / 2, params.drain_hole_diameter)
            )
    for x, y, _ in rope_bolt_points(params, axis):
        round_cutouts.append((x, y, params.bolt_diameter))

    rect_cutouts = []
    if params.cutout_width > 0 and params.cutout_depth > 0:
        rect_cutouts.append(_central_cutout(params))

    plane = make_plane(params.base_width, params.base_depth, params.plane_thickness,
                       rect_cutouts=rect_cutouts, round_cutouts=round_cutouts)
    return _labelled(plane, "lower_base")


def upper_base(params: DesignParams) -> Part:
    """Upper plane with the central cutout."""
    rect_cutouts = []
    if params.cutout_width > 0 and params.cutout_depth > 0:
        rect_cutouts.append(_central_cutout(params))
    plane = make_plane(params.base_width, params.base_depth, params.plane_thickness,
                       rect_cutouts=rect_cutouts)
    return _labelled(plane, "upper_base")


def leg(params: DesignParams) -> Part:
    """Leg with its lower hinge edge on the origin."""
    return _labelled(
        make_leg(params.leg_width, params.leg_length,
                 params.groove_width, params.groove_depth),
        "leg",
    )


def hinge(params: DesignParams, angle: float, upper: bool, axis: RotationAxis) -> Part:
    """
    Hinge oriented for the linkage, pin at the origin.

    Lower hinges keep the fixed leaf on the lower plane, upper hinges are
    flipped so it sits under the upper plane.
    """
    part = make_hinge(params.hinge_length, params.hinge_leaf_width,
                      params.hinge_thickness, params.hinge_pin_diameter, angle)
    if upper:
        part = Rot(0, 180, 0) * part
    if axis is RotationAxis.X:
        part = Rot(0, 0, 90) * part
    return _labelled(part, "hinge")


def vertical_bar_positions(params: DesignParams) -> List[Tuple[float, float]]:
    """Bar axes in the upper-plane frame."""
    y = params.base_depth / 2
    return [(params.base_width / 4, y), (params.base_width * 3 / 4, y)]


def vertical_bar(params: DesignParams) -> Part:
    """Upright bar drilled at every horizontal bar level."""
    rod = make_rod(params.vertical_bar_height, params.bar_shape, params.bar_size,
                   params.bar_wall, holes=params.horizontal_bar_levels,
                   hole_diameter=params.bar_hole_diameter)
    return _labelled(rod, "vertical_bar")


def horizontal_bar(params: DesignParams) -> Part:
    """Bar along +X from the origin, drilled where it crosses the uprights."""
    holes = [x for x, _ in vertical_bar_positions(params)]
    rod = make_rod(params.base_width, params.bar_shape, params.bar_size,
                   params.bar_wall, holes=holes, hole_diameter=params.bar_hole_diameter)
    return _labelled(Rot(0, 90, 0) * rod, "horizontal_bar")


def ski_support(params: DesignParams) -> Part:
    return _labelled(
        make_hook(params.hook_length, params.hook_thickness, params.hook_width),
        "ski_support",
    )


def ski_support_positions(params: DesignParams, level: float) -> List[Vec3]:
    """Hook roots on the front face of a horizontal bar (upper-plane frame)."""
    count = params.ski_support_count
    if count == 0:
        return []
    y = params.base_depth / 2 + 1.5 * params.bar_size
    z = params.plane_thickness + level
    step = params.base_width / count
    return [((i + 0.5) * step, y, z) for i in range(count)]


def foot(params: DesignParams) -> Part:
    return _labelled(make_foot(params.foot_diameter, params.foot_height), "foot")


def foot_positions(params: DesignParams) -> List[Vec3]:
    """Feet under the leg centres."""
    half = params.leg_width / 2
    return [(x + half, y + half, -params.foot_height) for _, x, y in leg_positions(params)]


def upper_pieces(params: DesignParams) -> List[Part]:
    """Upper plane with its bars and ski supports, in the upper-plane frame."""
    parts = [upper_base(params)]
    top = params.plane_thickness

    upright = vertical_bar(params)
    for i, (x, y) in enumerate(vertical_bar_positions(params)):
        parts.append(_labelled(Pos(x, y, top) * upright, f"vertical_bar_{i + 1}"))

    crossbar = horizontal_bar(params)
    hook = ski_support(params)
    y = params.base_depth / 2 + params.bar_size
    for i, level in enumerate(params.horizontal_bar_levels):
        parts.append(_labelled(Pos(0, y, top + level) * crossbar, f"horizontal_bar_{i + 1}"))
        for j, position in enumerate(ski_support_positions(params, level)):
            parts.append(_labelled(Pos(*position) * hook, f"ski_support_{i + 1}_{j + 1}"))

    return parts


def rope_assembly(params: DesignParams, rope: RopeState, axis: RotationAxis) -> List[Part]:
    """Bolt and nut on the lower plane, ring under the upper plane, and the rope."""
    parts = []
    bx, by, _ = rope.bolt

    bolt = make_bolt(params.bolt_diameter, params.bolt_length)
    parts.append(_labelled(Pos(bx, by, 0) * bolt, f"{rope.name}_bolt"))

    nut = make_nut(params.bolt_diameter, params.nut_height)
    parts.append(_labelled(Pos(bx, by, params.plane_thickness) * nut, f"{rope.name}_nut"))

    # Ring hangs in the vertical plane containing the rope
    ring = make_ring(params.ring_diameter, params.rope_diameter)
    ring_turn = Rot(90, 0, 0) if axis is RotationAxis.Y else Rot(0, 90, 0)
    sx, sy, sz = rope.start
    ring_center = Pos(sx, sy, sz + params.ring_diameter / 2)
    parts.append(_labelled(ring_center * ring_turn * ring, f"{rope.name}_ring"))

    segment = make_rope(rope.length, params.rope_diameter)
    frame = Plane(origin=rope.start, z_dir=rope.direction)
    parts.append(_labelled(frame.location * segment, rope.name))

    return parts

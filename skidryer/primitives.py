"""
Primitive solids of the rack, built with build123d.

Every function returns a labelled Part in its own local frame; placement
is left to the piece and assembly modules.
"""

from typing import Iterable, Tuple
import math

from build123d import (
    Align,
    Axis,
    Box,
    BuildPart,
    BuildSketch,
    Circle,
    Cylinder,
    Location,
    Locations,
    Mode,
    Part,
    Plane,
    Pos,
    RegularPolygon,
    Rot,
    Torus,
    chamfer,
    extrude,
)


MIN_ALIGN = (Align.MIN, Align.MIN, Align.MIN)
BOTTOM_ALIGN = (Align.CENTER, Align.CENTER, Align.MIN)


def make_plane(
    width: float,
    depth: float,
    thickness: float,
    rect_cutouts: Iterable[Tuple[float, float, float, float]] = (),
    round_cutouts: Iterable[Tuple[float, float, float]] = (),
) -> Part:
    """
    Wooden plane with its corner at the origin.

    rect_cutouts: (center_x, center_y, width, depth)
    round_cutouts: (center_x, center_y, diameter)
    """
    with BuildPart() as plane:
        Box(width, depth, thickness, align=MIN_ALIGN)
        for cx, cy, w, d in rect_cutouts:
            with Locations((cx, cy, thickness / 2)):
                Box(w, d, thickness * 2, mode=Mode.SUBTRACT)
        for cx, cy, diameter in round_cutouts:
            with Locations((cx, cy, thickness / 2)):
                Cylinder(diameter / 2, thickness * 2, mode=Mode.SUBTRACT)

    part = plane.part
    part.label = "plane"
    return part


def make_leg(width: float, length: float,
             groove_width: float = 0.0, groove_depth: float = 0.0) -> Part:
    """Square leg standing on the origin, grooved along the two Y faces."""
    with BuildPart() as leg:
        Box(width, width, length, align=MIN_ALIGN)
        if groove_width > 0 and groove_depth > 0:
            for y in (0.0, width):
                with Locations((width / 2, y, length / 2)):
                    Box(groove_width, groove_depth * 2, length * 2, mode=Mode.SUBTRACT)

    part = leg.part
    part.label = "leg"
    return part


def make_rod(
    length: float,
    shape: str,
    size: float,
    wall: float = 0.0,
    holes: Iterable[float] = (),
    hole_diameter: float = 0.0,
) -> Part:
    """
    Aluminium rod along +Z from the origin.

    shape is 'round' (size = diameter) or 'square' (size = side). A wall of
    0 gives a filled rod. Holes are drilled along Y at the given heights.
    """
    if shape not in ('round', 'square'):
        raise ValueError(f"Unknown bar shape: {shape}")

    with BuildPart() as rod:
        if shape == 'round':
            Cylinder(size / 2, length, align=BOTTOM_ALIGN)
        else:
            Box(size, size, length, align=BOTTOM_ALIGN)

        if wall > 0:
            with Locations((0, 0, length / 2)):
                if shape == 'round':
                    Cylinder(size / 2 - wall, length + 2, mode=Mode.SUBTRACT)
                else:
                    inner = size - 2 * wall
                    Box(inner, inner, length + 2, mode=Mode.SUBTRACT)

        if hole_diameter > 0:
            for z in holes:
                with Locations(Location((0, 0, z), (90, 0, 0))):
                    Cylinder(hole_diameter / 2, size * 2, mode=Mode.SUBTRACT)

    part = rod.part
    part.label = "rod"
    return part


def make_hinge(length: float, leaf_width: float, thickness: float,
               pin_diameter: float, angle: float) -> Part:
    """
    Butt hinge with its pin along Y through the origin.

    The fixed leaf lies flat under the pin pointing -X; the moving leaf is
    the fixed one swung about the pin by `angle` degrees (0 = closed).
    """
    leaf_center = Pos(-leaf_width / 2, 0, -thickness / 2)

    with BuildPart() as hinge:
        with Locations(leaf_center):
            Box(leaf_width, length, thickness)
        with Locations(Rot(0, angle, 0) * leaf_center):
            Box(leaf_width, length, thickness)
        with Locations(Rot(90, 0, 0)):
            Cylinder(pin_diameter / 2 + thickness, length)

    part = hinge.part
    part.label = "hinge"
    return part


def make_hook(length: float, thickness: float, width: float) -> Part:
    """Ski support: arm along +Y with an upturned tip."""
    with BuildPart() as hook:
        Box(width, length, thickness, align=(Align.CENTER, Align.MIN, Align.CENTER))
        with Locations((0, length - thickness, 0)):
            Box(width, thickness, length / 4, align=(Align.CENTER, Align.MIN, Align.MIN))

    part = hook.part
    part.label = "hook"
    return part


def hex_circumradius(diameter: float) -> float:
    """Circumradius of a hexagon head/nut for a metric thread diameter."""
    across_flats = 1.6 * diameter
    return across_flats / math.sqrt(3)


def make_bolt(diameter: float, length: float) -> Part:
    """Hexagon bolt: head below Z=0, shank from Z=0 to Z=length."""
    head_height = 0.7 * diameter

    with BuildPart() as bolt:
        with BuildSketch(Plane.XY.offset(-head_height)):
            RegularPolygon(hex_circumradius(diameter), 6)
        extrude(amount=head_height)
        Cylinder(diameter / 2, length, align=BOTTOM_ALIGN)

    part = bolt.part
    part.label = "bolt"
    return part


def make_nut(diameter: float, height: float) -> Part:
    """Hexagon nut sitting on Z=0."""
    with BuildPart() as nut:
        with BuildSketch():
            RegularPolygon(hex_circumradius(diameter), 6)
            Circle(diameter / 2, mode=Mode.SUBTRACT)
        extrude(amount=height)

    part = nut.part
    part.label = "nut"
    return part


def make_rope(length: float, diameter: float) -> Part:
    """Straight rope segment along +Z from the origin."""
    with BuildPart() as rope:
        Cylinder(diameter / 2, length, align=BOTTOM_ALIGN)

    part = rope.part
    part.label = "rope"
    return part


def make_ring(diameter: float, wire_diameter: float) -> Part:
    """Ring in the XY plane; `diameter` is the outer diameter."""
    with BuildPart() as ring:
        Torus(diameter / 2 - wire_diameter / 2, wire_diameter / 2)

    part = ring.part
    part.label = "ring"
    return part


def make_foot(diameter: float, height: float) -> Part:
    """Round foot standing on Z=0 with a chamfered bottom edge."""
    with BuildPart() as foot:
        Cylinder(diameter / 2, height, align=BOTTOM_ALIGN)
        chamfer(foot.edges().sort_by(Axis.Z)[0], length=min(2.0, height / 4))

    part = foot.part
    part.label = "foot"
    return part

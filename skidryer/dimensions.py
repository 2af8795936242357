"""
Design constants of the ski-drying rack.

All lengths in mm. The rack stands on a lower wooden plane; four square
legs connect it to an upper plane through two hinges each. Aluminium bars
stand on the upper plane and carry the ski supports.
"""

from dataclasses import dataclass, asdict
from typing import Tuple, List


BAR_SHAPES = ('round', 'square')
ROTATION_AXES = ('x', 'y')


@dataclass(frozen=True)
class DesignParams:
    """
    Parameters defining the rack geometry.

    The lower plane spans X=[0, base_width], Y=[0, base_depth] with its
    bottom face at Z=0. The upper plane has the same footprint.
    """
    # Wooden planes
    base_width: float = 600.0       # X extent
    base_depth: float = 400.0       # Y extent
    plane_thickness: float = 18.0
    cutout_width: float = 200.0     # central rectangular cutout
    cutout_depth: float = 80.0
    drain_hole_diameter: float = 30.0

    # Legs (W x W section, length D = base separation)
    leg_width: float = 60.0
    leg_length: float = 300.0
    leg_inset: float = 40.0
    groove_width: float = 8.0
    groove_depth: float = 4.0

    # Hinges
    hinge_thickness: float = 2.0    # leaf thickness T
    hinge_length: float = 50.0
    hinge_leaf_width: float = 25.0
    hinge_pin_diameter: float = 5.0

    # Aluminium bars
    bar_shape: str = 'round'
    bar_size: float = 20.0          # outer diameter or side
    bar_wall: float = 1.5           # 0 = filled
    bar_hole_diameter: float = 8.5
    vertical_bar_height: float = 1100.0
    horizontal_bar_levels: Tuple[float, ...] = (450.0, 900.0)

    # Ski supports
    ski_support_count: int = 4
    hook_length: float = 120.0
    hook_thickness: float = 6.0
    hook_width: float = 30.0

    # Hardware
    bolt_diameter: float = 8.0
    bolt_length: float = 60.0
    nut_height: float = 6.5
    rope_diameter: float = 6.0
    rope_span: float = 200.0        # horizontal distance ring -> bolt at rest
    ring_diameter: float = 30.0
    foot_diameter: float = 40.0
    foot_height: float = 15.0

    # Mechanism
    rotation_axis: str = 'x'

    def validate(self) -> Tuple[bool, List[str]]:
        """Validate parameters are geometrically consistent."""
        errors = []

        for name in (
            'base_width', 'base_depth', 'plane_thickness', 'leg_width',
            'leg_length', 'hinge_thickness', 'hinge_length',
            'hinge_leaf_width', 'hinge_pin_diameter', 'bar_size',
            'bar_hole_diameter', 'vertical_bar_height', 'hook_length',
            'hook_thickness', 'hook_width', 'bolt_diameter', 'bolt_length',
            'nut_height', 'rope_diameter', 'rope_span', 'ring_diameter',
            'foot_diameter', 'foot_height',
        ):
            value = getattr(self, name)
            if value <= 0:
                errors.append(f"{name} must be positive, got {value}")

        for name in ('cutout_width', 'cutout_depth', 'drain_hole_diameter',
                     'leg_inset', 'groove_width', 'groove_depth', 'bar_wall'):
            value = getattr(self, name)
            if value < 0:
                errors.append(f"{name} must be >= 0, got {value}")

        if self.bar_shape not in BAR_SHAPES:
            errors.append(f"bar_shape must be one of {BAR_SHAPES}, got {self.bar_shape!r}")
        if self.rotation_axis not in ROTATION_AXES:
            errors.append(
                f"rotation_axis must be one of {ROTATION_AXES}, got {self.rotation_axis!r}"
            )
        if self.ski_support_count < 0:
            errors.append(f"ski_support_count must be >= 0, got {self.ski_support_count}")

        # Bars
        if self.bar_wall * 2 >= self.bar_size:
            errors.append(f"bar_wall={self.bar_wall} leaves no bore in bar_size={self.bar_size}")
        if self.bar_hole_diameter >= self.bar_size:
            errors.append(
                f"bar_hole_diameter={self.bar_hole_diameter} exceeds bar_size={self.bar_size}"
            )
        for level in self.horizontal_bar_levels:
            if not (self.bar_size <= level <= self.vertical_bar_height - self.bar_size):
                errors.append(
                    f"horizontal bar level {level} out of range "
                    f"[{self.bar_size}, {self.vertical_bar_height - self.bar_size}]"
                )

        # Planes and legs
        short_side = min(self.base_width, self.base_depth)
        if 2 * (self.leg_inset + self.leg_width) >= short_side:
            errors.append(
                f"legs (inset={self.leg_inset}, width={self.leg_width}) "
                f"do not fit on a {short_side} plane side"
            )
        if self.cutout_width >= self.base_width or self.cutout_depth >= self.base_depth:
            errors.append("central cutout larger than the plane")
        if self.groove_depth * 2 >= self.leg_width:
            errors.append(f"groove_depth={self.groove_depth} cuts through the leg")
        if self.hinge_length > self.leg_width:
            errors.append(
                f"hinge_length={self.hinge_length} exceeds leg_width={self.leg_width}"
            )

        # Rope and bolt must fit between the planes at rest
        if self.rope_span >= short_side:
            errors.append(f"rope_span={self.rope_span} exceeds plane side {short_side}")
        rest_gap = self.plane_thickness + self.leg_length + 2 * self.hinge_thickness
        if self.bolt_length + self.ring_diameter >= rest_gap:
            errors.append(
                f"bolt_length + ring_diameter = {self.bolt_length + self.ring_diameter} "
                f"does not clear the rest gap {rest_gap}"
            )

        return len(errors) == 0, errors

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        d = asdict(self)
        d['horizontal_bar_levels'] = list(self.horizontal_bar_levels)
        return d

    @classmethod
    def from_dict(cls, d: dict) -> 'DesignParams':
        """Create from dictionary."""
        values = {k: v for k, v in d.items() if k in cls.__dataclass_fields__}
        if 'horizontal_bar_levels' in values:
            values['horizontal_bar_levels'] = tuple(
                float(v) for v in values['horizontal_bar_levels']
            )
        if 'ski_support_count' in values:
            values['ski_support_count'] = int(values['ski_support_count'])
        return cls(**values)


# The rack as built
REFERENCE_PARAMS = DesignParams()

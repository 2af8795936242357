"""
Visualization module for the closing mechanism.

Plots the placement formulas over the full angle range and a side view
of the linkage at one opening angle using matplotlib.
"""

from pathlib import Path
import math

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.patches as patches

from .dimensions import DesignParams
from .kinematics import (
    Linkage,
    MAX_OPENING_ANGLE,
    MIN_OPENING_ANGLE,
    horizontal_displacement,
    pivot_height,
    plane_extent,
    RotationAxis,
    solve_pose,
    vertical_separation,
)


def plot_kinematics(params: DesignParams, output_path: Path, samples: int = 181) -> None:
    """Save f(theta) and g(theta) curves."""
    linkage = Linkage.from_params(params)
    thetas = np.linspace(MIN_OPENING_ANGLE, MAX_OPENING_ANGLE, samples)
    f = np.array([vertical_separation(linkage, t) for t in thetas])
    g = np.array([horizontal_displacement(linkage, t) for t in thetas])

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(thetas, f, 'b-', linewidth=2, label='vertical separation f')
    ax.plot(thetas, g, 'r-', linewidth=2, label='horizontal displacement g')
    ax.axvline(linkage.peak_angle, color='gray', linestyle=':', linewidth=1)
    ax.annotate(f"peak {f.max():.1f} mm", xy=(linkage.peak_angle, f.max()),
                xytext=(linkage.peak_angle + 5, f.max() + 10),
                arrowprops=dict(arrowstyle='->', color='gray'), color='gray')

    ax.set_xlabel('opening angle [deg]')
    ax.set_ylabel('mm')
    ax.set_xlim(MIN_OPENING_ANGLE, MAX_OPENING_ANGLE)
    ax.grid(True, alpha=0.3)
    ax.legend()
    ax.set_title(f"Closing mechanism (W={params.leg_width:g}, D={params.leg_length:g}, "
                 f"T={params.hinge_thickness:g})")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(output_path, dpi=150)
    plt.close(fig)


def plot_side_view(params: DesignParams, theta: float, output_path: Path,
                   axis=None) -> bool:
    """
    Save a side view (u horizontal, z vertical) of the rack at theta.

    Returns False without writing when theta is rejected.
    """
    pose = solve_pose(params, theta, axis)
    if pose is None:
        return False

    u_size, _ = plane_extent(params, pose.axis)
    t = params.plane_thickness
    w = params.leg_width
    du = -pose.horizontal_displacement
    upper_z = pose.upper_offset[2]

    fig, ax = plt.subplots(figsize=(10, 6))

    ax.add_patch(patches.Rectangle((0, 0), u_size, t, facecolor='burlywood',
                                   edgecolor='black', label='lower base'))
    ax.add_patch(patches.Rectangle((du, upper_z), u_size, t, facecolor='tan',
                                   edgecolor='black', label='upper base'))

    # Leg outline rotated about its lower hinge edge
    z0 = pivot_height(params)
    c, s = math.cos(math.radians(theta)), math.sin(math.radians(theta))
    corners = [(0, 0), (w, 0), (w, params.leg_length), (0, params.leg_length)]
    for leg in pose.legs:
        u0 = leg.origin[0] if pose.axis is RotationAxis.Y else leg.origin[1]
        outline = [(u0 + x * c - z * s, z0 + x * s + z * c) for x, z in corners]
        ax.add_patch(patches.Polygon(outline, closed=True, facecolor='peru',
                                     edgecolor='black', alpha=0.6))

    for hinge in pose.hinges:
        u = hinge.position[0] if pose.axis is RotationAxis.Y else hinge.position[1]
        ax.plot(u, hinge.position[2], 'ko', markersize=4)

    for rope in pose.ropes:
        start_u = rope.start[0] if pose.axis is RotationAxis.Y else rope.start[1]
        end_u = rope.end[0] if pose.axis is RotationAxis.Y else rope.end[1]
        style = 'g-' if rope.taut else 'g--'
        ax.plot([start_u, end_u], [rope.start[2], rope.end[2]], style, linewidth=1.5)

    ax.set_aspect('equal')
    ax.autoscale_view()
    ax.set_title(f"theta={theta:g} deg, f={pose.vertical_separation:.1f}, "
                 f"g={pose.horizontal_displacement:.1f}")
    ax.legend(loc='upper right')

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(output_path, dpi=150)
    plt.close(fig)
    return True

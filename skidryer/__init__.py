"""
SkiDryer - Parametric ski-drying rack with folding mechanism
"""

from .dimensions import DesignParams, REFERENCE_PARAMS
from .kinematics import (
    RotationAxis,
    Linkage,
    MechanismPose,
    validate_opening_angle,
    vertical_separation,
    horizontal_displacement,
    upper_base_offset,
    solve_pose,
    opening_angle_at,
    pose_table,
)
from .assembly import build_static_assembly, build_mechanism_assembly
from .generator import generate_model, generate_animation, GenerationStatus, GenerationResult
from .quality_gate import validate_assembly, ValidationResult
from .config import Config, PARAM_RANGES, create_default_config

__version__ = "0.1.0"

__all__ = [
    'DesignParams',
    'REFERENCE_PARAMS',
    'RotationAxis',
    'Linkage',
    'MechanismPose',
    'validate_opening_angle',
    'vertical_separation',
    'horizontal_displacement',
    'upper_base_offset',
    'solve_pose',
    'opening_angle_at',
    'pose_table',
    'build_static_assembly',
    'build_mechanism_assembly',
    'generate_model',
    'generate_animation',
    'GenerationStatus',
    'GenerationResult',
    'validate_assembly',
    'ValidationResult',
    'Config',
    'PARAM_RANGES',
    'create_default_config',
]

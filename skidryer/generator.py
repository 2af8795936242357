"""
Model generator module - main pipeline for STEP/STL output.

Integrates parameter checks, the opening-angle check, assembly
construction, quality validation and export.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, List
from enum import Enum
from datetime import datetime
import logging
import json
import time

from build123d import export_step, export_stl

from .assembly import build_mechanism_assembly, build_static_assembly
from .dimensions import DesignParams
from .kinematics import (
    RotationAxis,
    frame_times,
    opening_angle_at,
    pose_table,
    validate_opening_angle,
)
from .quality_gate import validate_assembly, ValidationResult


logger = logging.getLogger(__name__)


class GenerationStatus(Enum):
    """Status of model generation."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class GenerationResult:
    """Result of a model generation attempt."""
    status: GenerationStatus
    output_path: Optional[Path]
    params_used: DesignParams
    theta: Optional[float]
    axis: Optional[str]
    validation_result: Optional[ValidationResult]
    error_message: Optional[str]
    generation_time_ms: float

    def to_dict(self) -> dict:
        """Convert to dictionary for logging/serialization."""
        return {
            'status': self.status.value,
            'output_path': str(self.output_path) if self.output_path else None,
            'theta': self.theta,
            'axis': self.axis,
            'is_valid': (
                self.validation_result.is_valid
                if self.validation_result else False
            ),
            'warnings': (
                self.validation_result.warnings
                if self.validation_result else []
            ),
            'error': self.error_message,
            'generation_time_ms': self.generation_time_ms,
        }


def export_model(shape, output_path: Path) -> None:
    """Export by file suffix: .stl as mesh, anything else as STEP."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if output_path.suffix.lower() == '.stl':
        export_stl(shape, str(output_path))
    else:
        export_step(shape, str(output_path))


def generate_model(
    params: DesignParams,
    output_path: Path,
    theta: Optional[float] = None,
    axis=None,
) -> GenerationResult:
    """
    Generate a model file.

    Pipeline:
    1. Validate parameters
    2. Validate opening angle (mechanism mode only)
    3. Build assembly (static when theta is None)
    4. Validate shapes
    5. Export
    """
    start_time = time.perf_counter()
    axis_name = getattr(axis, 'value', axis) or params.rotation_axis

    def failed(message: str, validation: Optional[ValidationResult] = None) -> GenerationResult:
        return GenerationResult(
            status=GenerationStatus.FAILED,
            output_path=None,
            params_used=params,
            theta=theta,
            axis=axis_name,
            validation_result=validation,
            error_message=message,
            generation_time_ms=(time.perf_counter() - start_time) * 1000
        )

    # Stage 1: Parameter validation
    is_valid, errors = params.validate()
    if not is_valid:
        logger.error(f"Invalid parameters: {errors}")
        return failed(f"Invalid parameters: {errors}")
    if axis_name not in [a.value for a in RotationAxis]:
        logger.error(f"Invalid rotation axis: {axis_name!r}")
        return failed(f"Invalid rotation axis: {axis_name!r}")

    # Stage 2: Opening angle
    if theta is not None:
        is_valid, errors = validate_opening_angle(theta)
        if not is_valid:
            logger.error(f"Invalid opening angle: {errors}")
            return failed(f"Invalid opening angle: {errors}")

    # Stage 3: Build geometry
    try:
        if theta is None:
            assembly = build_static_assembly(params, axis_name)
        else:
            assembly = build_mechanism_assembly(params, theta, axis_name)
    except Exception as e:
        logger.error(f"Geometry construction failed: {e}")
        return failed(f"Geometry construction failed: {e}")

    # Stage 4: Validate shapes
    validation_result = validate_assembly(assembly)
    if not validation_result.is_valid:
        logger.warning(f"Shape validation failed: {validation_result.errors}")

    # Stage 5: Export
    try:
        output_path = Path(output_path)
        export_model(assembly, output_path)
        logger.info(f"Model exported to: {output_path}")
    except Exception as e:
        return failed(f"Export failed: {e}", validation_result)

    return GenerationResult(
        status=GenerationStatus.SUCCESS,
        output_path=output_path,
        params_used=params,
        theta=theta,
        axis=axis_name,
        validation_result=validation_result,
        error_message=None,
        generation_time_ms=(time.perf_counter() - start_time) * 1000
    )


def generate_animation(
    params: DesignParams,
    output_dir: Path,
    frames: int = 24,
    clamp: float = 0.1,
    axis=None,
    suffix: str = ".step",
    name_prefix: str = "frame",
) -> List[GenerationResult]:
    """Generate one model per animation frame plus a pose table CSV."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    angles = [opening_angle_at(t, clamp) for t in frame_times(frames)]

    results = []
    for i, theta in enumerate(angles):
        output_path = output_dir / f"{name_prefix}_{i:04d}{suffix}"
        result = generate_model(params, output_path, theta=theta, axis=axis)
        results.append(result)

        logger.info(
            f"[{i+1}/{len(angles)}] theta={theta:.2f} {result.status.value} "
            f"({result.generation_time_ms:.1f}ms)"
        )

    table = pose_table(params, angles, axis)
    table.insert(0, 'frame', range(len(table)))
    table_path = output_dir / f"{name_prefix}_poses.csv"
    table.to_csv(table_path, index=False)
    logger.info(f"Pose table saved to: {table_path}")

    success = sum(1 for r in results if r.status != GenerationStatus.FAILED)
    logger.info(f"Animation complete: {success}/{len(results)} frames")

    return results


def save_generation_log(
    results: List[GenerationResult],
    log_path: Path
) -> None:
    """Save generation results to JSON log."""
    log_data = {
        'timestamp': datetime.now().isoformat(),
        'total': len(results),
        'success': sum(1 for r in results if r.status != GenerationStatus.FAILED),
        'results': [r.to_dict() for r in results]
    }

    log_path = Path(log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with open(log_path, 'w', encoding='utf-8') as f:
        json.dump(log_data, f, indent=2, ensure_ascii=False)

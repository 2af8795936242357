"""
SkiDryer - parametric ski-drying rack

CLI entry point with four modes:
  --init-config : write the default config YAML
  --angle / --time : export the rack at one opening angle
  --animate : export every animation frame plus a pose table
  (none) : export the static open rack
"""

import argparse
import sys
from pathlib import Path
from typing import Optional
import logging

from .config import Config, create_default_config, get_config_path
from .dimensions import DesignParams
from .generator import (
    GenerationStatus,
    generate_animation,
    generate_model,
    save_generation_log,
)
from .kinematics import opening_angle_at


logger = logging.getLogger(__name__)


def load_config(config_path: Path) -> Optional[Config]:
    """
    Load the config file, or the reference rack when it does not exist.

    Parameter range problems are only warned about. Returns None when the
    animation section cannot drive a run.
    """
    if not config_path.exists():
        logger.warning(f"Config file not found: {config_path}, using reference parameters")
        return create_default_config()

    config = Config.load(config_path)
    logger.info(f"Loaded config from: {config_path}")
    _, errors = config.validate()
    for error in errors:
        logger.warning(f"  -> {error}")

    is_valid, errors = config.animation.validate()
    if not is_valid:
        for error in errors:
            logger.error(f"Invalid config: {error}")
        return None
    return config


def run_init_mode(config_path: Path) -> int:
    """Write the default config."""
    logger.info("=== Init Mode ===")
    config = create_default_config()
    config.save(config_path)
    logger.info(f"Config saved to: {config_path}")

    print(f"\n[Init Complete]")
    print(f"  Config file: {config_path}")
    print(f"\nEdit the config file to set desired parameter values,")
    print(f"then run with --angle, --animate or no option to export the rack.")
    return 0


def run_static_mode(params: DesignParams, output_dir: Path, fmt: str, axis) -> int:
    """Export the open rack."""
    logger.info("=== Static Mode ===")
    output_path = output_dir / f"skidryer.{fmt}"
    result = generate_model(params, output_path, axis=axis)

    if result.status == GenerationStatus.FAILED:
        logger.error(f"  -> FAILED: {result.error_message}")
        return 1

    logger.info(f"  -> {result.status.value} ({result.generation_time_ms:.1f}ms)")
    print(f"\n[Static Export Complete]")
    print(f"  Output: {result.output_path}")
    return 0


def run_angle_mode(params: DesignParams, theta: float, output_dir: Path, fmt: str, axis) -> int:
    """Export the rack at one opening angle."""
    logger.info(f"=== Angle Mode (theta={theta:g}) ===")
    output_path = output_dir / f"skidryer_{theta:g}deg.{fmt}"
    result = generate_model(params, output_path, theta=theta, axis=axis)

    if result.status == GenerationStatus.FAILED:
        logger.error(f"  -> FAILED: {result.error_message}")
        return 1

    logger.info(f"  -> {result.status.value} ({result.generation_time_ms:.1f}ms)")
    print(f"\n[Angle Export Complete]")
    print(f"  Output: {result.output_path}")
    return 0


def run_animation_mode(params: DesignParams, config: Config, output_dir: Path,
                       fmt: str, axis, frames: Optional[int] = None) -> int:
    """Export every animation frame."""
    logger.info("=== Animation Mode ===")
    if frames is None:
        frames = config.animation.frames
    if frames < 1:
        logger.error(f"frames must be >= 1, got {frames}")
        return 1
    if axis is None:
        axis = config.animation.axis

    try:
        results = generate_animation(params, output_dir, frames=frames,
                                     clamp=config.animation.clamp, axis=axis,
                                     suffix=f".{fmt}")
    except ValueError as e:
        logger.error(str(e))
        return 1
    save_generation_log(results, output_dir / "generation_log.json")

    success_count = sum(1 for r in results if r.status != GenerationStatus.FAILED)
    print(f"\n[Animation Complete]")
    print(f"  Success: {success_count}/{len(results)}")
    print(f"  Output: {output_dir}")

    return 0 if success_count == len(results) else 1


def run_plot_mode(params: DesignParams, theta: float, output_dir: Path, axis) -> int:
    """Save kinematics and side-view plots."""
    from .visualizer import plot_kinematics, plot_side_view

    output_dir.mkdir(parents=True, exist_ok=True)
    plot_kinematics(params, output_dir / "kinematics.png")
    if not plot_side_view(params, theta, output_dir / f"side_{theta:g}deg.png", axis):
        return 1
    print(f"\n[Plots saved to: {output_dir}]")
    return 0


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Parametric ski-drying rack',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  --init-config   Write config.yaml with the reference rack
  --angle DEG     Export the rack at opening angle DEG (0 open, 90 closed)
  --time T        Export the rack at animation time T in [0, 1]
  --animate       Export all animation frames + pose CSV
  (none)          Export the static open rack

Examples:
  python -m skidryer.main --init-config
  python -m skidryer.main --angle 45 --axis y
  python -m skidryer.main --animate --frames 12 --format stl
"""
    )

    parser.add_argument(
        '--init-config',
        action='store_true',
        help='Write the default config file and exit'
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        '--angle',
        type=float,
        help='Opening angle in degrees'
    )
    mode.add_argument(
        '--time',
        type=float,
        help='Animation time in [0, 1], mapped to an opening angle'
    )
    mode.add_argument(
        '--animate',
        action='store_true',
        help='Export all animation frames'
    )
    parser.add_argument(
        '--frames',
        type=int,
        default=None,
        help='Animation frame count (default: from config)'
    )
    parser.add_argument(
        '--axis',
        choices=['x', 'y'],
        default=None,
        help='Folding axis (default: from config)'
    )
    parser.add_argument(
        '--plot',
        action='store_true',
        help='Also save kinematics and side-view PNGs'
    )
    parser.add_argument(
        '--format',
        choices=['step', 'stl'],
        default='step',
        help='Export format (default: step)'
    )
    parser.add_argument(
        '--output-dir',
        type=Path,
        default=Path('output'),
        help='Output directory (default: output/)'
    )
    parser.add_argument(
        '--config',
        type=Path,
        default=get_config_path(),
        help='Config file path (default: config.yaml)'
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point."""
    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
    args = parse_args(argv)

    if args.init_config:
        return run_init_mode(args.config)

    config = load_config(args.config)
    if config is None:
        return 1
    params = config.get_design_params()

    if args.time is not None:
        try:
            theta = opening_angle_at(args.time, config.animation.clamp)
        except ValueError as e:
            logger.error(str(e))
            return 1
        logger.info(f"t={args.time:g} -> theta={theta:g}")
    else:
        theta = args.angle

    if args.animate:
        status = run_animation_mode(params, config, args.output_dir, args.format,
                                    args.axis, args.frames)
    elif theta is not None:
        status = run_angle_mode(params, theta, args.output_dir, args.format, args.axis)
    else:
        status = run_static_mode(params, args.output_dir, args.format, args.axis)

    if args.plot:
        plot_status = run_plot_mode(params, theta if theta is not None else 0.0,
                                    args.output_dir, args.axis)
        status = status or plot_status

    return status


if __name__ == '__main__':
    sys.exit(main())

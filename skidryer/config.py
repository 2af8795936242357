"""
Configuration module for YAML-based parameter management.

Handles reading/writing of config files with design parameter ranges
and animation settings.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Any, Tuple
import yaml

from .dimensions import DesignParams, REFERENCE_PARAMS, ROTATION_AXES


# Parameter range definitions
PARAM_RANGES: Dict[str, Dict[str, Any]] = {
    'base_width': {'min': 300.0, 'max': 1200.0, 'description': 'plane size along X'},
    'base_depth': {'min': 250.0, 'max': 800.0, 'description': 'plane size along Y'},
    'plane_thickness': {'min': 10.0, 'max': 40.0, 'description': 'wooden plane thickness'},
    'leg_width': {'min': 30.0, 'max': 100.0, 'description': 'square leg section'},
    'leg_length': {'min': 150.0, 'max': 600.0, 'description': 'base separation'},
    'leg_inset': {'min': 0.0, 'max': 150.0, 'description': 'leg distance from plane edges'},
    'hinge_thickness': {'min': 1.0, 'max': 5.0, 'description': 'hinge leaf thickness'},
    'bar_size': {'min': 10.0, 'max': 40.0, 'description': 'bar diameter or side'},
    'bar_wall': {'min': 0.0, 'max': 5.0, 'description': 'bar wall, 0 = filled'},
    'vertical_bar_height': {'min': 500.0, 'max': 2000.0, 'description': 'upright bar height'},
    'ski_support_count': {'min': 0, 'max': 12, 'description': 'hooks per horizontal bar'},
    'rope_span': {'min': 50.0, 'max': 500.0, 'description': 'ring to bolt distance at rest'},
}

OPTION_KEYS = ['bar_shape', 'rotation_axis', 'horizontal_bar_levels']


@dataclass
class ParameterConfig:
    """Single parameter configuration."""
    value: float
    min: float
    max: float
    description: str

    def to_dict(self) -> dict:
        return {
            'description': self.description,
            'value': self.value,
            'min': self.min,
            'max': self.max,
        }

    @classmethod
    def from_dict(cls, d: dict) -> 'ParameterConfig':
        return cls(
            value=d['value'],
            min=d['min'],
            max=d['max'],
            description=d.get('description', ''),
        )

    def in_range(self) -> bool:
        return self.min <= self.value <= self.max


@dataclass
class AnimationConfig:
    """Frame count, time-to-angle mapping and folding axis of the animation."""
    frames: int = 24
    clamp: float = 0.1
    axis: Optional[str] = None  # None = design option rotation_axis

    def to_dict(self) -> dict:
        return {'frames': self.frames, 'clamp': self.clamp, 'axis': self.axis}

    @classmethod
    def from_dict(cls, d: dict) -> 'AnimationConfig':
        return cls(
            frames=int(d.get('frames', 24)),
            clamp=float(d.get('clamp', 0.1)),
            axis=d.get('axis'),
        )

    def validate(self) -> Tuple[bool, List[str]]:
        """Check the animation settings can drive generate_animation."""
        errors = []
        if self.frames < 1:
            errors.append(f"animation.frames must be >= 1, got {self.frames}")
        if not (0.0 <= self.clamp < 0.5):
            errors.append(f"animation.clamp must be in [0, 0.5), got {self.clamp}")
        if self.axis is not None and self.axis not in ROTATION_AXES:
            errors.append(
                f"animation.axis must be one of {ROTATION_AXES}, got {self.axis!r}"
            )
        return len(errors) == 0, errors


@dataclass
class Config:
    """Main configuration container."""
    version: str = "1.0"
    parameters: Dict[str, ParameterConfig] = field(default_factory=dict)
    options: Dict[str, Any] = field(default_factory=dict)
    fixed: Dict[str, Any] = field(default_factory=dict)
    animation: AnimationConfig = field(default_factory=AnimationConfig)

    def to_dict(self) -> dict:
        return {
            'version': self.version,
            'design': {
                'parameters': {k: v.to_dict() for k, v in self.parameters.items()},
                'options': self.options,
                'fixed': self.fixed,
            },
            'animation': self.animation.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: dict) -> 'Config':
        design = d.get('design', {}) or {}
        params = {}
        for k, v in (design.get('parameters', {}) or {}).items():
            params[k] = ParameterConfig.from_dict(v)
        return cls(
            version=d.get('version', '1.0'),
            parameters=params,
            options=dict(design.get('options', {}) or {}),
            fixed=dict(design.get('fixed', {}) or {}),
            animation=AnimationConfig.from_dict(d.get('animation', {}) or {}),
        )

    def save(self, path: Path) -> None:
        """Save config to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, allow_unicode=True,
                      default_flow_style=False, sort_keys=False)

    @classmethod
    def load(cls, path: Path) -> 'Config':
        """Load config from YAML file."""
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    def validate(self) -> Tuple[bool, List[str]]:
        """Check every ranged parameter lies within its range."""
        errors = []
        for name, param in self.parameters.items():
            if name not in DesignParams.__dataclass_fields__:
                errors.append(f"unknown parameter: {name}")
            elif not param.in_range():
                errors.append(
                    f"{name}={param.value} out of range [{param.min}, {param.max}]"
                )
        for name in list(self.options) + list(self.fixed):
            if name not in DesignParams.__dataclass_fields__:
                errors.append(f"unknown parameter: {name}")
        return len(errors) == 0, errors

    def get_param_dict(self) -> dict:
        """Get parameter values as simple dict."""
        d = dict(self.fixed)
        d.update(self.options)
        d.update({k: v.value for k, v in self.parameters.items()})
        return d

    def get_design_params(self) -> DesignParams:
        """Design parameters, falling back to the reference rack for missing keys."""
        d = REFERENCE_PARAMS.to_dict()
        d.update(self.get_param_dict())
        return DesignParams.from_dict(d)


def create_config(params: DesignParams, animation: Optional[AnimationConfig] = None) -> Config:
    """Create Config with current values and ranges from PARAM_RANGES."""
    current = params.to_dict()
    parameters = {}
    for name, ranges in PARAM_RANGES.items():
        parameters[name] = ParameterConfig(
            value=current[name],
            min=ranges['min'],
            max=ranges['max'],
            description=ranges['description'],
        )

    options = {k: current[k] for k in OPTION_KEYS}
    fixed = {
        k: v for k, v in current.items()
        if k not in PARAM_RANGES and k not in OPTION_KEYS
    }
    return Config(
        parameters=parameters,
        options=options,
        fixed=fixed,
        animation=animation or AnimationConfig(),
    )


def create_default_config() -> Config:
    """Create default config for the reference rack."""
    return create_config(REFERENCE_PARAMS)


def get_config_path() -> Path:
    """Get default config file path."""
    return Path('config.yaml')

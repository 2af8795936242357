"""
Quality gate module for assembly validation.

Provides B-Rep validation of every placed piece before export.
"""

from dataclasses import dataclass, field
from typing import List
from enum import Enum


class ValidationStatus(Enum):
    """Validation result status."""
    VALID = "valid"
    INVALID = "invalid"


@dataclass
class ValidationResult:
    """Result of shape validation."""
    status: ValidationStatus
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def valid(cls) -> 'ValidationResult':
        return cls(ValidationStatus.VALID, True, [], [])

    @classmethod
    def invalid(cls, errors: List[str]) -> 'ValidationResult':
        return cls(ValidationStatus.INVALID, False, errors, [])


def validate_shape(shape, name: str = "shape") -> ValidationResult:
    """
    Validate one solid.

    Checks:
    - Shape is not null
    - B-Rep validity
    - Positive volume
    """
    errors = []
    warnings = []

    if shape is None or getattr(shape, 'wrapped', None) is None:
        errors.append(f"{name}: shape is null")
        return ValidationResult.invalid(errors)

    try:
        from OCP.BRepCheck import BRepCheck_Analyzer
        analyzer = BRepCheck_Analyzer(shape.wrapped)
        if not analyzer.IsValid():
            errors.append(f"{name}: B-Rep is invalid")
    except Exception as e:
        warnings.append(f"{name}: could not perform B-Rep check: {e}")

    try:
        if shape.volume <= 0:
            errors.append(f"{name}: volume is not positive ({shape.volume})")
    except Exception as e:
        warnings.append(f"{name}: could not compute volume: {e}")

    if errors:
        result = ValidationResult.invalid(errors)
        result.warnings = warnings
        return result

    result = ValidationResult.valid()
    result.warnings = warnings
    return result


def validate_assembly(assembly) -> ValidationResult:
    """Validate every labelled child of an assembly."""
    if assembly is None:
        return ValidationResult.invalid(["assembly is null"])

    children = list(getattr(assembly, 'children', ()))
    if not children:
        return ValidationResult.invalid(["assembly has no parts"])

    errors = []
    warnings = []
    seen = set()
    for child in children:
        label = child.label or "<unlabelled>"
        if label in seen:
            warnings.append(f"duplicate part label: {label}")
        seen.add(label)

        result = validate_shape(child, label)
        errors.extend(result.errors)
        warnings.extend(result.warnings)

    if errors:
        result = ValidationResult.invalid(errors)
        result.warnings = warnings
        return result

    result = ValidationResult.valid()
    result.warnings = warnings
    return result

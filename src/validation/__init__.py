"""Return validation module."""

from .federal_validation import (
    FindingCategory,
    ValidationFinding,
    ValidationSeverity,
    has_errors,
    has_warnings,
    validate_return,
)

__all__ = [
    'FindingCategory',
    'ValidationFinding',
    'ValidationSeverity',
    'has_errors',
    'has_warnings',
    'validate_return',
]

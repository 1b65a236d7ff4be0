"""Classification of string literals."""

from .pattern_classifier import (
    PatternClassifier,
    Classification,
    PATTERN_CATEGORIES,
    DEFAULT_EXCLUDE_PATTERNS,
    compile_pattern,
)

__all__ = [
    "PatternClassifier",
    "Classification",
    "PATTERN_CATEGORIES",
    "DEFAULT_EXCLUDE_PATTERNS",
    "compile_pattern",
]

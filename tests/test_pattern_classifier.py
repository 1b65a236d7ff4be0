"""Tests for the literal classifier and its exclude rules."""

import pytest

from intl_refactor.errors import InvalidPatternError
from intl_refactor.validation.pattern_classifier import (
    DEFAULT_EXCLUDE_PATTERNS,
    PATTERN_CATEGORIES,
    PatternClassifier,
    compile_pattern,
)


@pytest.fixture
def classifier() -> PatternClassifier:
    return PatternClassifier.from_patterns()


# =============================================================================
# Default Rules
# =============================================================================


class TestDefaultRules:
    """Values excluded or kept by the default rules."""

    @pytest.mark.parametrize(
        "value",
        [
            "https://a.b/c",
            "#FF00FF",
            "1.2.3",
            "550e8400-e29b-41d4-a716-446655440000",
            "@Override",
            "_privateVar",
        ],
    )
    def test_technical_values_excluded(self, classifier, value):
        """URLs, colors, versions, UUIDs, annotations and private names are noise."""
        assert classifier.is_excluded(value)

    def test_sentence_included(self, classifier):
        """Plain user-facing text is translatable."""
        assert classifier.is_translatable("Welcome to our app")

    def test_single_capitalized_word_included(self, classifier):
        """A single word is not mistaken for a path or identifier."""
        assert classifier.is_translatable("Hello")

    def test_asset_path_excluded(self, classifier):
        assert classifier.is_excluded("assets/images/logo.png")

    def test_categories_cover_default_patterns(self):
        flattened = [p for patterns in PATTERN_CATEGORIES.values() for p in patterns]
        assert flattened == DEFAULT_EXCLUDE_PATTERNS


# =============================================================================
# Heuristics
# =============================================================================


class TestHeuristics:
    """Content heuristics applied before the regex rules."""

    @pytest.mark.parametrize(
        "value,reason",
        [
            ("a", "too_short"),
            ("Hello $name", "interpolation"),
            ("Total: ${items.length}", "interpolation"),
            ("API_KEY", "constant"),
            ("userName", "identifier"),
            ("a == b", "code_expression"),
            ("package:flutter/material.dart", "import_reference"),
        ],
    )
    def test_heuristic_reason(self, classifier, value, reason):
        result = classifier.classify(value)
        assert result.excluded
        assert result.reason == reason

    def test_technical_context_line(self, classifier):
        """Literals on logging lines are never user-facing."""
        result = classifier.classify("Loading finished", "debugPrint('Loading finished');")
        assert result.excluded
        assert result.reason == "technical_context"

    def test_included_has_no_reason(self, classifier):
        result = classifier.classify("Welcome to our app")
        assert not result.excluded
        assert result.reason is None


# =============================================================================
# Custom Rules
# =============================================================================


class TestCustomRules:
    """User-supplied exclude rules."""

    def test_custom_rules_replace_defaults(self):
        classifier = PatternClassifier.from_patterns([r"^Beta"])
        assert classifier.patterns == [r"^Beta"]
        assert classifier.is_excluded("Beta feature")
        assert classifier.is_translatable("#FF00FF")

    def test_invalid_pattern_rejected_alone(self):
        """A bad pattern is dropped without losing the valid ones."""
        classifier = PatternClassifier.from_patterns(["(", r"^Beta"])
        assert classifier.patterns == [r"^Beta"]
        assert len(classifier.rejected) == 1
        assert classifier.rejected[0].pattern == "("

    def test_compile_pattern_raises(self):
        with pytest.raises(InvalidPatternError) as exc_info:
            compile_pattern("[unclosed")
        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.pattern == "[unclosed"

    def test_extend_skips_duplicates(self):
        classifier = PatternClassifier.from_patterns([r"^Beta"])
        classifier.extend([r"^Beta", r"^Alpha"])
        assert classifier.patterns == [r"^Beta", r"^Alpha"]
        assert classifier.matching_rule("Alpha build") == r"^Alpha"
